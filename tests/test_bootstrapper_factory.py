"""Tests for global property creation and final assembly."""

import pytest

from reactorscan import properties as props
from reactorscan.decryptor import PropertyDecryptor
from reactorscan.engine import AnalysisEngine
from reactorscan.errors import SecretResolutionError
from reactorscan.pipeline.factory import BootstrapperFactory
from reactorscan.secure import MappingSecretStore


class NullEngine(AnalysisEngine):
    def analyze(self, properties, bootstrap):
        return True


@pytest.fixture
def decryptor():
    return PropertyDecryptor(MappingSecretStore({"db": "s3cr3t"}))


def _factory(context, env, decryptor):
    return BootstrapperFactory(context, env, decryptor, NullEngine(), app_version="9.9")


class TestGlobalProperties:

    def test_layer_order(self, make_module, make_context, decryptor):
        top = make_module("app", properties={"sonar.a": "build", "sonar.b": "build", "sonar.c": "build"})
        context = make_context(
            [top],
            top_level_module=top,
            system_properties={"sonar.b": "system", "sonar.c": "system"},
            user_properties={"sonar.c": "user"},
        )
        env = {"sonar.a": "env", "sonar.d": "env"}
        result = _factory(context, env, decryptor).create_global_properties()
        assert result == {"sonar.a": "build", "sonar.b": "system", "sonar.c": "user", "sonar.d": "env"}

    def test_secure_references_resolved(self, make_module, make_context, decryptor):
        top = make_module("app")
        context = make_context([top], user_properties={"sonar.password": "${secure:db}"})
        result = _factory(context, {}, decryptor).create_global_properties()
        assert result["sonar.password"] == "s3cr3t"

    def test_unresolvable_reference_raises(self, make_module, make_context, decryptor):
        top = make_module("app")
        context = make_context([top], system_properties={"sonar.token": "${secure:nope}"})
        with pytest.raises(SecretResolutionError):
            _factory(context, {}, decryptor).create_global_properties()


class TestAssemble:

    def test_module_wins_over_environment(self, make_module, make_context, decryptor):
        """A key set by both the environment and the module takes the module value."""
        top = make_module("app")
        context = make_context([top])
        env = {"sonar.host.url": "http://env", props.PROJECT_KEY: "env-key"}
        factory = _factory(context, env, decryptor)

        merged = factory.assemble(factory.create_global_properties(), {props.PROJECT_KEY: "com.acme:app"})

        assert merged[props.PROJECT_KEY] == "com.acme:app"
        assert merged["sonar.host.url"] == "http://env"

    def test_user_property_is_final(self, make_module, make_context, decryptor):
        top = make_module("app")
        context = make_context([top], user_properties={props.PROJECT_KEY: "custom"})
        factory = _factory(context, {}, decryptor)

        merged = factory.assemble(factory.create_global_properties(), {props.PROJECT_KEY: "com.acme:app"})

        assert merged[props.PROJECT_KEY] == "custom"

    def test_no_secure_reference_survives(self, make_module, make_context, decryptor):
        top = make_module("app")
        context = make_context([top])
        factory = _factory(context, {}, decryptor)

        merged = factory.assemble(factory.create_global_properties(), {"sonar.jdbc.password": "${secure:db}"})

        assert merged["sonar.jdbc.password"] == "s3cr3t"
        assert not any("${secure:" in value for value in merged.values())


def test_bootstrap_properties(make_module, make_context, decryptor):
    context = make_context([make_module("app")], runtime_version="3.9.6")
    entry_point = _factory(context, {}, decryptor).create()

    assert entry_point.bootstrap == {
        props.SCANNER_APP: "ScannerMaven",
        props.SCANNER_APP_VERSION: "9.9",
        props.SCANNER_EXECUTION_ID: "default",
        props.SCANNER_RUNTIME_VERSION: "3.9.6",
    }


def test_plaintext_holding_marker_is_passed_through(make_module, make_context):
    decryptor = PropertyDecryptor(MappingSecretStore({"pw": "x${secure:y", "db": "s3cr3t"}))
    context = make_context([make_module("app")], user_properties={"sonar.password": "${secure:pw}"})
    factory = _factory(context, {"sonar.jdbc.password": "${secure:db}"}, decryptor)

    merged = factory.assemble(factory.create_global_properties(), {})

    assert merged["sonar.password"] == "x${secure:y"
    assert merged["sonar.jdbc.password"] == "s3cr3t"
