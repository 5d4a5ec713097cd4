"""Tests for the plugin version pinning audit."""

from dataclasses import replace

import pytest

from reactorscan.gate import (
    audit_plugin_version,
    is_plugin_version_defined_in_project,
    is_version_missing_from_goal,
    should_run,
)
from reactorscan.models import GateDecision, PluginDeclaration

GROUP = "org.sonarsource.scanner.maven"
ARTIFACT = "sonar-maven-plugin"


def _warnings(log_messages):
    return [msg for level, msg in log_messages if level == "WARNING"]


class TestFloatingVersions:

    @pytest.mark.parametrize("alias", ["LATEST", "RELEASE"])
    def test_floating_alias_warns(self, make_module, make_context, plugin, log_messages, alias):
        top = make_module("app")
        context = make_context(
            [top],
            top_level_module=top,
            goals=("verify",),
            plugin=replace(plugin, configured_version=alias),
        )

        message = audit_plugin_version(context)

        assert message is not None
        assert message.startswith(f"Using {alias} instead of an explicit plugin version")
        assert f"{GROUP}:{ARTIFACT}:5.1.0.4751" in message
        assert _warnings(log_messages) == [message]

    def test_pinned_version_does_not_warn(self, make_module, make_context, log_messages):
        top = make_module(
            "app", build_plugins=(PluginDeclaration(ARTIFACT, GROUP, "5.1.0.4751"),)
        )
        context = make_context([top], top_level_module=top, goals=("sonar:sonar",))

        assert audit_plugin_version(context) is None
        assert _warnings(log_messages) == []


class TestUnspecifiedVersion:

    def test_detached_bare_goal_without_declaration(self, make_module, make_context, plugin):
        """Single module, detached, bare goal, nothing declared: warn and still run."""
        top = make_module("app")
        context = make_context(
            [top],
            top_level_module=top,
            execution_id="default-cli",
            goals=("sonar:sonar",),
            plugin=replace(plugin, configured_version=None),
        )

        message = audit_plugin_version(context)

        assert message is not None
        assert "an unspecified version" in message
        assert should_run(context) is GateDecision.RUN_NOW

    def test_fully_qualified_goal_without_version_warns(self, make_module, make_context):
        top = make_module("app")
        context = make_context(
            [top], top_level_module=top, goals=(f"{GROUP}:{ARTIFACT}:sonar",)
        )
        assert audit_plugin_version(context) is not None

    def test_versioned_goal_does_not_warn(self, make_module, make_context):
        top = make_module("app")
        context = make_context(
            [top], top_level_module=top, goals=(f"{GROUP}:{ARTIFACT}:5.1.0.4751:sonar",)
        )
        assert audit_plugin_version(context) is None

    def test_managed_plugin_counts_as_declared(self, make_module, make_context):
        top = make_module(
            "app", managed_plugins=(PluginDeclaration(ARTIFACT, None, "5.1.0.4751"),)
        )
        context = make_context([top], top_level_module=top, goals=("sonar:sonar",))
        assert audit_plugin_version(context) is None

    def test_version_inherited_from_reactor_parent(self, make_module, make_context):
        parent = make_module(
            "parent",
            packaging="pom",
            managed_plugins=(PluginDeclaration(ARTIFACT, GROUP, "5.1.0.4751"),),
        )
        child = make_module("app", parent="com.acme:parent")
        context = make_context([parent, child], top_level_module=child, goals=("sonar:sonar",))
        assert audit_plugin_version(context) is None


class TestMissingFacts:
    """Any unavailable fact skips the audit silently."""

    def test_no_goals(self, make_module, make_context, plugin, log_messages):
        top = make_module("app")
        context = make_context(
            [top], top_level_module=top, goals=None, plugin=replace(plugin, configured_version="LATEST")
        )
        assert audit_plugin_version(context) is None
        assert _warnings(log_messages) == []

    def test_no_top_level_module(self, make_module, make_context, plugin):
        top = make_module("app")
        context = make_context(
            [top], goals=("sonar:sonar",), plugin=replace(plugin, configured_version="RELEASE")
        )
        assert audit_plugin_version(context) is None

    def test_unresolved_plugin(self, make_module, make_context, plugin):
        top = make_module("app")
        context = make_context(
            [top],
            top_level_module=top,
            goals=("sonar:sonar",),
            plugin=replace(plugin, configured_version="LATEST", resolved=False),
        )
        assert audit_plugin_version(context) is None

    def test_no_effective_version(self, make_module, make_context, plugin):
        top = make_module("app")
        context = make_context(
            [top], top_level_module=top, goals=("sonar:sonar",), plugin=replace(plugin, version=None)
        )
        assert audit_plugin_version(context) is None


class TestHelpers:

    def test_declaration_without_group_matches(self, make_module):
        module = make_module("app", build_plugins=(PluginDeclaration(ARTIFACT, None, "1.0"),))
        assert is_plugin_version_defined_in_project(module, GROUP, ARTIFACT)

    def test_blank_version_is_not_a_declaration(self, make_module):
        module = make_module("app", build_plugins=(PluginDeclaration(ARTIFACT, GROUP, "  "),))
        assert not is_plugin_version_defined_in_project(module, GROUP, ARTIFACT)

    def test_other_group_does_not_match(self, make_module):
        module = make_module("app", build_plugins=(PluginDeclaration(ARTIFACT, "org.other", "1.0"),))
        assert not is_plugin_version_defined_in_project(module, GROUP, ARTIFACT)

    def test_goal_matching(self):
        assert is_version_missing_from_goal(["clean", "sonar:sonar"], GROUP, ARTIFACT)
        assert is_version_missing_from_goal([f"{GROUP}:{ARTIFACT}:sonar"], GROUP, ARTIFACT)
        assert not is_version_missing_from_goal(["clean", "verify"], GROUP, ARTIFACT)
        assert not is_version_missing_from_goal([f"{GROUP}:{ARTIFACT}:5.0:sonar"], GROUP, ARTIFACT)
