"""Data contracts for the analysis bootstrap pipeline."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from reactorscan.engine import AnalysisEngine


class BootstrapOutcome(Enum):
    """Terminal state of one invocation."""

    DELAYED = "delayed"
    SKIPPED = "skipped"
    COMPLETED = "completed"


@dataclass
class EngineEntryPoint:
    """The object handed to the analysis engine.

    Binds an engine to the static facts of this invocation; the merged
    property mapping is supplied at analysis time.
    """

    engine: AnalysisEngine
    bootstrap: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.bootstrap = MappingProxyType(dict(self.bootstrap))

    def analyze(self, properties: Mapping[str, str]) -> bool:
        """Run the engine once with ``properties``."""
        return self.engine.analyze(MappingProxyType(dict(properties)), self.bootstrap)
