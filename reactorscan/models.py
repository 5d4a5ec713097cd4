"""Shared data structures describing one build invocation.

These are read-only views of facts owned by the build tool:
- ModuleDescriptor: one module of the reactor
- PluginExecution: the analysis plugin as the build tool resolved it
- ExecutionContext: everything visible to a single module invocation

Nothing in this module performs I/O.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


class GateDecision(Enum):
    """Outcome of the reactor gate for one invocation."""

    RUN_NOW = "run-now"
    DELAY = "delay"


@dataclass(frozen=True)
class PluginDeclaration:
    """A plugin entry as written in a module's build configuration."""

    artifact_id: str
    group_id: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class PluginExecution:
    """The analysis plugin as resolved for the running goal.

    ``version`` is the effective version the build tool resolved, while
    ``configured_version`` is what the build configuration literally says
    (possibly ``LATEST``/``RELEASE`` or nothing at all).
    """

    group_id: str | None
    artifact_id: str | None
    version: str | None
    configured_version: str | None = None
    resolved: bool = True


@dataclass(frozen=True)
class CompilerSettings:
    """Compiler levels declared by a module, any of which may be absent."""

    source: str | None = None
    target: str | None = None
    release: str | None = None
    jdk_home: str | None = None


@dataclass(frozen=True)
class ProjectLinks:
    """Project links declared in module metadata."""

    homepage: str | None = None
    ci: str | None = None
    issue: str | None = None
    scm: str | None = None
    scm_dev: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Return only the links that are set."""
        values = {
            "homepage": self.homepage,
            "ci": self.ci,
            "issue": self.issue,
            "scm": self.scm,
            "scm_dev": self.scm_dev,
        }
        return {name: url for name, url in values.items() if url}


@dataclass(frozen=True)
class ModuleDescriptor:
    """Read-only view of one build module."""

    group_id: str
    artifact_id: str
    version: str
    base_dir: Path
    name: str | None = None
    description: str | None = None
    packaging: str = "jar"
    build_dir: Path | None = None
    build_file: Path | None = None
    output_dir: Path | None = None
    test_output_dir: Path | None = None
    source_roots: tuple[Path, ...] = ()
    test_roots: tuple[Path, ...] = ()
    dependencies: tuple[Path, ...] = ()
    test_dependencies: tuple[Path, ...] = ()
    compiler: CompilerSettings = field(default_factory=CompilerSettings)
    encoding: str | None = None
    properties: Mapping[str, str] = field(default_factory=dict)
    links: ProjectLinks = field(default_factory=ProjectLinks)
    parent: str | None = None
    build_plugins: tuple[PluginDeclaration, ...] = ()
    managed_plugins: tuple[PluginDeclaration, ...] | None = None

    @property
    def module_id(self) -> str:
        """Stable identifier used for equality checks and key prefixes."""
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def display_name(self) -> str:
        return self.name or self.artifact_id

    def resolve(self, path: Path | str) -> Path:
        """Resolve ``path`` against the module base directory."""
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.base_dir / candidate


@dataclass(frozen=True)
class ExecutionContext:
    """Facts visible to one module invocation; immutable for its lifetime.

    ``modules`` is the reactor in dependency order as computed by the build
    tool. ``environment`` is a snapshot taken once at invocation start.
    """

    execution_id: str
    plugin: PluginExecution
    modules: tuple[ModuleDescriptor, ...]
    current_module: ModuleDescriptor
    top_level_module: ModuleDescriptor | None = None
    goals: tuple[str, ...] | None = None
    user_properties: Mapping[str, str] = field(default_factory=dict)
    system_properties: Mapping[str, str] = field(default_factory=dict)
    environment: Mapping[str, str] = field(default_factory=dict)
    runtime_version: str | None = None
    skip: bool = False

    def __post_init__(self):
        for name in ("user_properties", "system_properties", "environment"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))
