"""Tests for the bootstrap orchestration of one invocation."""

import json

import pytest

from reactorscan import properties as props
from reactorscan.engine import AnalysisEngine, ReportEngine
from reactorscan.errors import AnalysisFailedError, ProjectStructureError, SecretResolutionError
from reactorscan.pipeline import Bootstrapper, BootstrapOutcome
from reactorscan.secure import MappingSecretStore


class RecordingEngine(AnalysisEngine):
    """Engine double that records every call."""

    def __init__(self, result=True):
        self.result = result
        self.calls = []

    def analyze(self, properties, bootstrap):
        self.calls.append((dict(properties), dict(bootstrap)))
        return self.result


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def store():
    return MappingSecretStore({"token": "t0k3n"})


@pytest.fixture
def reactor(make_module):
    parent = make_module("parent", packaging="pom", encoding="UTF-8")
    core = make_module("core", encoding="UTF-8", parent="com.acme:parent")
    app = make_module("app", encoding="UTF-8", parent="com.acme:parent")
    return [core, app, parent]


class TestGateAndSkip:

    def test_non_last_module_is_delayed(self, reactor, make_context, store, engine, log_messages):
        context = make_context(reactor, current=reactor[0])
        outcome = Bootstrapper(context, store, engine).execute()

        assert outcome is BootstrapOutcome.DELAYED
        assert engine.calls == []
        assert ("INFO", "Delaying analysis to the end of multi-module project") in log_messages

    def test_three_module_reactor_runs_once(self, reactor, make_context, store, engine):
        outcomes = [
            Bootstrapper(make_context(reactor, current=module), store, engine).execute()
            for module in reactor
        ]
        assert outcomes == [BootstrapOutcome.DELAYED, BootstrapOutcome.DELAYED, BootstrapOutcome.COMPLETED]
        assert len(engine.calls) == 1

    def test_explicit_skip_flag(self, reactor, make_context, store, engine, log_messages):
        context = make_context(reactor, skip=True)
        assert Bootstrapper(context, store, engine).execute() is BootstrapOutcome.SKIPPED
        assert engine.calls == []
        assert ("INFO", "sonar.skip = true: Skipping analysis") in log_messages

    @pytest.mark.parametrize("source", ["user_properties", "system_properties"])
    def test_skip_property(self, reactor, make_context, store, engine, log_messages, source):
        context = make_context(reactor, **{source: {props.SKIP: "true"}})
        assert Bootstrapper(context, store, engine).execute() is BootstrapOutcome.SKIPPED
        assert engine.calls == []
        assert ("INFO", "Analysis skipped") in log_messages

    def test_skip_from_environment_json(self, reactor, make_context, store, engine):
        context = make_context(reactor, environment={"SONAR_SCANNER_JSON_PARAMS": '{"sonar.skip": true}'})
        assert Bootstrapper(context, store, engine).execute() is BootstrapOutcome.SKIPPED

    def test_skip_false_runs(self, reactor, make_context, store, engine):
        context = make_context(reactor, user_properties={props.SKIP: "false"})
        assert Bootstrapper(context, store, engine).execute() is BootstrapOutcome.COMPLETED


class TestAnalysis:

    def test_engine_receives_tree_and_bootstrap(self, reactor, make_context, store, engine):
        context = make_context(reactor, environment={"SONAR_HOST_URL": "https://sonar.example.com"})
        bootstrapper = Bootstrapper(context, store, engine)

        assert bootstrapper.execute() is BootstrapOutcome.COMPLETED
        properties, bootstrap = engine.calls[0]
        assert properties[props.PROJECT_KEY] == "com.acme:parent"
        assert properties[props.MODULES] == "com.acme:core,com.acme:app"
        assert properties[props.HOST_URL] == "https://sonar.example.com"
        assert bootstrap[props.SCANNER_EXECUTION_ID] == "default"
        assert bootstrapper.last_properties == properties

    def test_secure_token_is_resolved(self, reactor, make_context, store, engine):
        context = make_context(reactor, environment={"SONAR_TOKEN": "${secure:token}"})
        Bootstrapper(context, store, engine).execute()
        assert engine.calls[0][0][props.TOKEN] == "t0k3n"

    def test_secret_failure_never_reaches_engine(self, reactor, make_context, store, engine):
        context = make_context(reactor, user_properties={"sonar.password": "${secure:unknown}"})
        with pytest.raises(SecretResolutionError):
            Bootstrapper(context, store, engine).execute()
        assert engine.calls == []

    def test_structure_error_never_reaches_engine(self, reactor, make_context, store, engine):
        context = make_context(reactor, user_properties={props.SOURCES: "does/not/exist"})
        with pytest.raises(ProjectStructureError):
            Bootstrapper(context, store, engine).execute()
        assert engine.calls == []

    def test_engine_failure(self, reactor, make_context, store):
        engine = RecordingEngine(result=False)
        with pytest.raises(AnalysisFailedError) as exc_info:
            Bootstrapper(make_context(reactor), store, engine).execute()
        assert exc_info.value.exit_code == 1
        assert len(engine.calls) == 1

    def test_version_audit_warns_but_runs(self, reactor, make_context, store, engine, plugin, log_messages):
        from dataclasses import replace

        context = make_context(
            reactor,
            execution_id="default-cli",
            top_level_module=reactor[-1],
            goals=("sonar:sonar",),
            plugin=replace(plugin, configured_version="LATEST"),
        )
        assert Bootstrapper(context, store, engine).execute() is BootstrapOutcome.COMPLETED
        assert any(level == "WARNING" and "Using LATEST" in msg for level, msg in log_messages)

    def test_report_engine_masks_secrets(self, reactor, make_context, store, tmp_path):
        report = tmp_path / "out" / "report.json"
        context = make_context(reactor, environment={"SONAR_TOKEN": "${secure:token}"})

        Bootstrapper(context, store, ReportEngine(report)).execute()

        data = json.loads(report.read_text())
        assert data["properties"][props.TOKEN] == "******"
        assert data["bootstrap"][props.SCANNER_APP] == "ScannerMaven"
        assert "t0k3n" not in report.read_text()
