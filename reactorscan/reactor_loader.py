"""Build an ExecutionContext from a reactor description file.

The description stands in for the build tool's session when reactorscan runs
from the command line. Relative module directories resolve against the
description file's directory. Example (YAML):

    execution_id: default-cli
    goals: ["sonar:sonar"]
    current_module: com.acme:app
    plugin:
      group_id: org.sonarsource.scanner.maven
      artifact_id: sonar-maven-plugin
      version: "5.1.0.4751"
    modules:              # dependency order
      - group_id: com.acme
        artifact_id: parent
        version: "1.0"
        base_dir: .
        packaging: pom
      - group_id: com.acme
        artifact_id: app
        version: "1.0"
        base_dir: app
        parent: com.acme:parent
        sources: [src/main/java]
        tests: [src/test/java]
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from reactorscan.errors import ReactorDescriptionError
from reactorscan.manifest_parser import ManifestParser
from reactorscan.models import (
    CompilerSettings,
    ExecutionContext,
    ModuleDescriptor,
    PluginDeclaration,
    PluginExecution,
    ProjectLinks,
)
from reactorscan.utils.constants import DEFAULT_PLUGIN_ARTIFACT_ID, DEFAULT_PLUGIN_GROUP_ID
from reactorscan.utils.logging import logger

DEFAULT_EXECUTION_ID = "default"


def _string_map(raw: Any, where: str) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ReactorDescriptionError(f"'{where}' must be a mapping")
    result = {}
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        result[str(key)] = str(value)
    return result


def _path_list(raw: Any, where: str) -> tuple[Path, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise ReactorDescriptionError(f"'{where}' must be a list of paths")
    return tuple(Path(str(p)) for p in raw)


def _optional_str(raw: Any) -> str | None:
    return None if raw is None else str(raw)


def _plugins(raw: Any, where: str) -> tuple[PluginDeclaration, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ReactorDescriptionError(f"'{where}' must be a list")
    declarations = []
    for entry in raw:
        if not isinstance(entry, dict) or "artifact_id" not in entry:
            raise ReactorDescriptionError(f"Each entry of '{where}' needs an artifact_id")
        declarations.append(
            PluginDeclaration(
                artifact_id=str(entry["artifact_id"]),
                group_id=_optional_str(entry.get("group_id")),
                version=_optional_str(entry.get("version")),
            )
        )
    return tuple(declarations)


def parse_module(raw: Mapping[str, Any], root: Path) -> ModuleDescriptor:
    """Turn one ``modules`` entry into a ModuleDescriptor."""
    missing = [k for k in ("group_id", "artifact_id", "version") if k not in raw]
    if missing:
        raise ReactorDescriptionError(f"Module entry is missing {', '.join(missing)}: {dict(raw)}")

    where = f"{raw['group_id']}:{raw['artifact_id']}"
    base_dir = Path(str(raw.get("base_dir", ".")))
    if not base_dir.is_absolute():
        base_dir = root / base_dir

    compiler = raw.get("compiler") or {}
    links = raw.get("links") or {}
    if not isinstance(compiler, dict) or not isinstance(links, dict):
        raise ReactorDescriptionError(f"'compiler' and 'links' of {where} must be mappings")

    managed = raw.get("plugin_management")

    return ModuleDescriptor(
        group_id=str(raw["group_id"]),
        artifact_id=str(raw["artifact_id"]),
        version=str(raw["version"]),
        base_dir=base_dir,
        name=_optional_str(raw.get("name")),
        description=_optional_str(raw.get("description")),
        packaging=str(raw.get("packaging", "jar")),
        build_dir=Path(str(raw["build_dir"])) if raw.get("build_dir") else None,
        build_file=Path(str(raw["build_file"])) if raw.get("build_file") else None,
        output_dir=Path(str(raw["output_dir"])) if raw.get("output_dir") else None,
        test_output_dir=Path(str(raw["test_output_dir"])) if raw.get("test_output_dir") else None,
        source_roots=_path_list(raw.get("sources"), f"{where}.sources"),
        test_roots=_path_list(raw.get("tests"), f"{where}.tests"),
        dependencies=_path_list(raw.get("dependencies"), f"{where}.dependencies"),
        test_dependencies=_path_list(raw.get("test_dependencies"), f"{where}.test_dependencies"),
        compiler=CompilerSettings(
            source=_optional_str(compiler.get("source")),
            target=_optional_str(compiler.get("target")),
            release=_optional_str(compiler.get("release")),
            jdk_home=_optional_str(compiler.get("jdk_home")),
        ),
        encoding=_optional_str(raw.get("encoding")),
        properties=_string_map(raw.get("properties"), f"{where}.properties"),
        links=ProjectLinks(
            **{k: _optional_str(links.get(k)) for k in ("homepage", "ci", "issue", "scm", "scm_dev")}
        ),
        parent=_optional_str(raw.get("parent")),
        build_plugins=_plugins(raw.get("plugins"), f"{where}.plugins"),
        managed_plugins=None if managed is None else _plugins(managed, f"{where}.plugin_management"),
    )


def load_reactor(
    path: Path,
    environment: Mapping[str, str] | None = None,
    current_module: str | None = None,
    execution_id: str | None = None,
    skip: bool | None = None,
    user_properties: Mapping[str, str] | None = None,
    parser: ManifestParser | None = None,
    plugin_group_id: str = DEFAULT_PLUGIN_GROUP_ID,
    plugin_artifact_id: str = DEFAULT_PLUGIN_ARTIFACT_ID,
) -> ExecutionContext:
    """Load a reactor description and build the invocation context.

    Args:
        path: JSON, YAML or TOML description file
        environment: Environment snapshot to embed in the context
        current_module: Overrides the file's ``current_module``
        execution_id: Overrides the file's ``execution_id``
        skip: Overrides the file's ``skip`` flag when not None
        user_properties: Added on top of the file's ``user_properties``
        plugin_group_id: Plugin coordinates assumed when the file omits them
        plugin_artifact_id: See plugin_group_id

    Raises:
        ReactorDescriptionError: The file is unreadable or inconsistent
    """
    path = Path(path)
    parser = parser or ManifestParser()
    try:
        data = parser.parse(path)
    except (OSError, ValueError) as e:
        raise ReactorDescriptionError(f"Cannot read reactor description {path}: {e}") from e

    root = path.resolve().parent
    raw_modules = data.get("modules") or []
    if not isinstance(raw_modules, list) or not raw_modules:
        raise ReactorDescriptionError(f"{path} must list at least one module under 'modules'")
    modules = tuple(parse_module(raw, root) for raw in raw_modules)
    by_id = {m.module_id: m for m in modules}
    if len(by_id) != len(modules):
        raise ReactorDescriptionError(f"{path} lists the same module more than once")

    current_id = current_module or data.get("current_module") or modules[-1].module_id
    if current_id not in by_id:
        raise ReactorDescriptionError(f"Current module '{current_id}' is not part of the reactor")

    top_id = data.get("top_level_module")
    if top_id is not None and top_id not in by_id:
        raise ReactorDescriptionError(f"Top-level module '{top_id}' is not part of the reactor")
    top_level = by_id[top_id] if top_id else next(
        (m for m in modules if m.parent is None or m.parent not in by_id), modules[0]
    )

    raw_plugin = data.get("plugin")
    if isinstance(raw_plugin, dict):
        plugin = PluginExecution(
            group_id=_optional_str(raw_plugin.get("group_id", plugin_group_id)),
            artifact_id=_optional_str(raw_plugin.get("artifact_id", plugin_artifact_id)),
            version=_optional_str(raw_plugin.get("version")),
            configured_version=_optional_str(raw_plugin.get("configured_version")),
        )
    else:
        logger.debug(f"No plugin section in {path}, version audit will be skipped")
        plugin = PluginExecution(
            group_id=plugin_group_id,
            artifact_id=plugin_artifact_id,
            version=None,
            resolved=False,
        )

    goals = data.get("goals")
    if goals is not None and not isinstance(goals, list):
        raise ReactorDescriptionError("'goals' must be a list")

    merged_user = _string_map(data.get("user_properties"), "user_properties")
    merged_user.update(user_properties or {})

    return ExecutionContext(
        execution_id=execution_id or str(data.get("execution_id", DEFAULT_EXECUTION_ID)),
        plugin=plugin,
        modules=modules,
        current_module=by_id[current_id],
        top_level_module=top_level,
        goals=None if goals is None else tuple(str(g) for g in goals),
        user_properties=merged_user,
        system_properties=_string_map(data.get("system_properties"), "system_properties"),
        environment=dict(environment or {}),
        runtime_version=_optional_str(data.get("runtime_version")),
        skip=bool(data.get("skip", False)) if skip is None else skip,
    )
