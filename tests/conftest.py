"""Pytest configuration and fixtures."""
from pathlib import Path

import pytest

from reactorscan.models import ExecutionContext, ModuleDescriptor, PluginExecution
from reactorscan.utils.logging import logger


@pytest.fixture
def log_messages():
    """Capture loguru output as (level, message) tuples.

    caplog does not see loguru records, so a list sink is attached for the
    duration of the test.
    """
    captured = []
    handler_id = logger.add(
        lambda message: captured.append((message.record["level"].name, message.record["message"])),
        level="DEBUG",
    )
    yield captured
    logger.remove(handler_id)


@pytest.fixture
def make_module(tmp_path):
    """Factory for ModuleDescriptor rooted under tmp_path."""

    def _make(artifact_id, group_id="com.acme", version="1.0", base_dir=None, **kwargs):
        base = Path(base_dir) if base_dir is not None else tmp_path / artifact_id
        return ModuleDescriptor(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            base_dir=base,
            **kwargs,
        )

    return _make


@pytest.fixture
def plugin():
    return PluginExecution(
        group_id="org.sonarsource.scanner.maven",
        artifact_id="sonar-maven-plugin",
        version="5.1.0.4751",
        configured_version="5.1.0.4751",
    )


@pytest.fixture
def make_context(plugin):
    """Factory for ExecutionContext; current module defaults to the last one."""

    def _make(modules, current=None, execution_id="default", **kwargs):
        modules = tuple(modules)
        kwargs.setdefault("plugin", plugin)
        return ExecutionContext(
            execution_id=execution_id,
            modules=modules,
            current_module=current or modules[-1],
            **kwargs,
        )

    return _make
