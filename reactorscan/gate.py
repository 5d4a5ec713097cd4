"""Decide whether this module invocation runs the analysis.

In a multi-module build the analysis goal fires once per module, but only
one invocation may run it: the last module of the reactor in dependency
order, or any invocation the user requested directly from the command line.
Everything here is a pure function of the ExecutionContext, so independent
module invocations agree without sharing state.

Also audits how the analysis plugin's version is pinned, warning when a
build could silently pick up a different plugin release.
"""

from collections.abc import Iterable, Sequence

from reactorscan.models import ExecutionContext, GateDecision, ModuleDescriptor
from reactorscan.utils.constants import (
    DEFAULT_GOAL_NAME,
    DEFAULT_GOAL_PREFIX,
    DETACHED_EXECUTION_ID,
    FLOATING_VERSIONS,
)
from reactorscan.utils.logging import logger


def is_detached_goal(
    context: ExecutionContext, detached_execution_id: str = DETACHED_EXECUTION_ID
) -> bool:
    """True when the goal was invoked from the command line (e.g. ``mvn sonar:sonar``)."""
    return context.execution_id == detached_execution_id


def is_last_module_in_reactor(context: ExecutionContext) -> bool:
    """True when the current module is the last one to build, or the only one."""
    last_module = context.modules[-1] if context.modules else context.current_module

    logger.debug(
        f"Current module: '{context.current_module.display_name}', "
        f"last module to execute based on dependency graph: '{last_module.display_name}'"
    )

    return context.current_module.module_id == last_module.module_id


def should_run(
    context: ExecutionContext, detached_execution_id: str = DETACHED_EXECUTION_ID
) -> GateDecision:
    """Compute the gate decision for this invocation.

    Returns:
        GateDecision.RUN_NOW for detached goals and for the last module of
        the reactor, GateDecision.DELAY otherwise.
    """
    if is_detached_goal(context, detached_execution_id):
        return GateDecision.RUN_NOW
    if is_last_module_in_reactor(context):
        return GateDecision.RUN_NOW
    return GateDecision.DELAY


def _ancestors(
    module: ModuleDescriptor, modules: Sequence[ModuleDescriptor]
) -> Iterable[ModuleDescriptor]:
    """Yield ``module`` then its parents, as far as the reactor knows them."""
    by_id = {m.module_id: m for m in modules}
    seen = set()
    current = module
    while current is not None and current.module_id not in seen:
        seen.add(current.module_id)
        yield current
        current = by_id.get(current.parent) if current.parent else None


def is_plugin_version_defined_in_project(
    module: ModuleDescriptor,
    group_id: str,
    artifact_id: str,
    modules: Sequence[ModuleDescriptor] = (),
) -> bool:
    """True if the module or a reactor ancestor pins a plugin version.

    Both build plugins and managed plugins count. A declaration without a
    group id matches any group, as the build tool defaults it.
    """
    for candidate in _ancestors(module, modules):
        declarations = list(candidate.build_plugins)
        if candidate.managed_plugins is not None:
            declarations.extend(candidate.managed_plugins)
        for plugin in declarations:
            if (
                (plugin.group_id is None or plugin.group_id == group_id)
                and plugin.artifact_id == artifact_id
                and plugin.version is not None
                and plugin.version.strip()
            ):
                return True
    return False


def is_version_missing_from_goal(
    goals: Iterable[str],
    group_id: str,
    artifact_id: str,
    goal_prefix: str = DEFAULT_GOAL_PREFIX,
    goal: str = DEFAULT_GOAL_NAME,
) -> bool:
    """True if a requested goal names the analysis goal without a version."""
    unversioned = {f"{goal_prefix}:{goal}", f"{group_id}:{artifact_id}:{goal}"}
    return any(requested in unversioned for requested in goals)


def audit_plugin_version(
    context: ExecutionContext,
    goal_prefix: str = DEFAULT_GOAL_PREFIX,
    goal: str = DEFAULT_GOAL_NAME,
) -> str | None:
    """Warn when the plugin version may float between builds.

    Returns:
        The warning message, or None when the version is pinned or when
        any fact needed for the audit is unavailable.
    """
    plugin = context.plugin
    project = context.top_level_module
    goals = context.goals
    required = (plugin.version, plugin.group_id, plugin.artifact_id, project, goals)
    if not plugin.resolved or any(fact is None for fact in required):
        return None

    invalid_version = None
    if plugin.configured_version in FLOATING_VERSIONS:
        invalid_version = plugin.configured_version
    elif not is_plugin_version_defined_in_project(
        project, plugin.group_id, plugin.artifact_id, context.modules
    ) and is_version_missing_from_goal(
        goals, plugin.group_id, plugin.artifact_id, goal_prefix, goal
    ):
        invalid_version = "an unspecified version"

    if invalid_version is None:
        return None

    message = (
        f"Using {invalid_version} instead of an explicit plugin version may introduce breaking "
        f"analysis changes at an unwanted time. It is highly recommended to use an explicit "
        f"version, e.g. '{plugin.group_id}:{plugin.artifact_id}:{plugin.version}'."
    )
    logger.warning(message)
    return message
