"""Analysis engines that receive the assembled property mapping.

The engine itself is an external collaborator. These adapters hand the
mapping over:
- CommandLineEngine: runs an external scanner command, passing properties as
  SONAR_SCANNER_JSON_PARAMS in the child environment
- ReportEngine: writes a masked copy of the mapping to a JSON report, for
  dry runs
"""

import json
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from reactorscan.environment import JSON_PARAMS
from reactorscan.properties import masked
from reactorscan.utils.logging import get_subprocess_env, logger


class AnalysisEngine(ABC):
    """Run one analysis with a final property mapping."""

    @abstractmethod
    def analyze(self, properties: Mapping[str, str], bootstrap: Mapping[str, str]) -> bool:
        """Run the analysis.

        Args:
            properties: Fully merged and decrypted analysis properties
            bootstrap: Facts about the invoking runtime (app, versions, ids)

        Returns:
            True on success, False when the engine reports failure
        """
        ...


class CommandLineEngine(AnalysisEngine):
    """Delegate to an external scanner executable."""

    def __init__(
        self,
        command: Sequence[str],
        base_environment: Mapping[str, str] | None = None,
        timeout: int | None = None,
    ):
        if not command:
            raise ValueError("CommandLineEngine requires a non-empty command")
        self.command = list(command)
        self.base_environment = dict(base_environment or {})
        self.timeout = timeout

    def analyze(self, properties: Mapping[str, str], bootstrap: Mapping[str, str]) -> bool:
        payload = dict(bootstrap)
        payload.update(properties)
        env = get_subprocess_env(self.base_environment)
        env[JSON_PARAMS] = json.dumps(payload)

        logger.info(f"Running analysis engine: {self.command[0]}")
        completed = subprocess.run(
            self.command,
            env=env,
            shell=False,
            timeout=self.timeout,
        )
        if completed.returncode != 0:
            logger.error(f"Analysis engine exited with code {completed.returncode}")
            return False
        return True


class ReportEngine(AnalysisEngine):
    """Write the mapping to a JSON file instead of analyzing."""

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)

    def analyze(self, properties: Mapping[str, str], bootstrap: Mapping[str, str]) -> bool:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        report = {
            "bootstrap": dict(bootstrap),
            "properties": masked(dict(sorted(properties.items()))),
        }
        with open(self.output_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)
        logger.info(f"Analysis properties written to {self.output_path}")
        return True
