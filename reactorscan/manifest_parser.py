"""Parser for the structured files reactorscan reads (JSON, YAML, TOML).

Used for reactor description files and secret settings files. Unlike a
best-effort manifest scan, a file that was explicitly requested must parse:
failures raise ValueError (bad content) or OSError (unreadable file).
"""

import json
import tomllib
from pathlib import Path
from typing import Any

import yaml

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml", ".toml")


class ManifestParser:
    """Parser for structured configuration files."""

    def parse_toml(self, path: Path) -> dict:
        """Parse TOML using tomllib."""
        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Failed to parse TOML {path}: {e}") from e

    def parse_json(self, path: Path) -> dict:
        """Parse JSON, requiring an object at the top level."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON {path}: {e}") from e
        return self._require_mapping(path, data)

    def parse_yaml(self, path: Path) -> dict:
        """Parse YAML safely; an empty document is an empty mapping."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML {path}: {e}") from e
        return self._require_mapping(path, data)

    def parse(self, path: Path) -> dict:
        """Parse ``path`` according to its suffix."""
        suffix = path.suffix.lower()
        if suffix == ".json":
            return self.parse_json(path)
        if suffix in (".yaml", ".yml"):
            return self.parse_yaml(path)
        if suffix == ".toml":
            return self.parse_toml(path)
        raise ValueError(
            f"Unsupported file type '{suffix}' for {path}; expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )

    @staticmethod
    def _require_mapping(path: Path, data: Any) -> dict:
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping at the top level of {path}")
        return data
