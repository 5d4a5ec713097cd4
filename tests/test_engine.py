"""Tests for the analysis engine adapters."""

import json
import subprocess

import pytest

from reactorscan.engine import CommandLineEngine, ReportEngine
from reactorscan.utils.logging import get_request_id


@pytest.fixture
def fake_run(monkeypatch):
    calls = []
    returncode = {"value": 0}

    def _run(command, **kwargs):
        calls.append((command, kwargs))
        return subprocess.CompletedProcess(command, returncode["value"])

    monkeypatch.setattr("reactorscan.engine.subprocess.run", _run)
    _run.calls = calls
    _run.returncode = returncode
    return _run


def test_command_line_engine_passes_properties(fake_run):
    engine = CommandLineEngine(["sonar-scanner"], base_environment={"PATH": "/usr/bin"}, timeout=30)

    assert engine.analyze({"sonar.projectKey": "acme"}, {"sonar.scanner.app": "ScannerMaven"})

    command, kwargs = fake_run.calls[0]
    assert command == ["sonar-scanner"]
    assert kwargs["shell"] is False
    assert kwargs["timeout"] == 30
    env = kwargs["env"]
    assert env["PATH"] == "/usr/bin"
    assert env["REACTORSCAN_REQUEST_ID"] == get_request_id()
    assert json.loads(env["SONAR_SCANNER_JSON_PARAMS"]) == {
        "sonar.scanner.app": "ScannerMaven",
        "sonar.projectKey": "acme",
    }


def test_command_line_engine_reports_failure(fake_run, log_messages):
    fake_run.returncode["value"] = 2
    assert not CommandLineEngine(["sonar-scanner"]).analyze({}, {})
    assert any(level == "ERROR" and "code 2" in msg for level, msg in log_messages)


def test_command_line_engine_requires_command():
    with pytest.raises(ValueError):
        CommandLineEngine([])


def test_report_engine(tmp_path):
    path = tmp_path / "nested" / "report.json"
    assert ReportEngine(path).analyze({"sonar.b": "2", "sonar.password": "p", "sonar.a": "1"}, {"k": "v"})

    data = json.loads(path.read_text())
    assert list(data["properties"]) == ["sonar.a", "sonar.b", "sonar.password"]
    assert data["properties"]["sonar.password"] == "******"
    assert data["bootstrap"] == {"k": "v"}
