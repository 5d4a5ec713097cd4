"""Show the reactor gate decision without running anything."""

import os
from dataclasses import replace
from pathlib import Path

import click
from rich.table import Table

from reactorscan.config_runtime import load_runtime_config
from reactorscan.gate import audit_plugin_version, should_run
from reactorscan.models import GateDecision
from reactorscan.pipeline.ui import console, print_warning
from reactorscan.reactor_loader import load_reactor
from reactorscan.utils.error_handler import handle_exceptions


@click.command()
@click.option(
    "--reactor",
    "reactor_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Reactor description file (JSON, YAML or TOML)",
)
@click.option("--module", "module_id", default=None, help="Only evaluate this module (group:artifact)")
@click.option("--execution-id", default=None, help="Execution id assigned by the build tool")
@click.option("--root", default=".", help="Directory holding .rscan/config.json")
@handle_exceptions
def gate(reactor_file, module_id, execution_id, root):
    """Print which module invocation would run the analysis.

    Without --module every module of the reactor is evaluated, which shows
    that exactly one of them runs the analysis. The plugin version audit is
    reported once.

    \b
    Examples:
      rscan gate --reactor reactor.yml
      rscan gate --reactor reactor.yml --module com.acme:core
      rscan gate --reactor reactor.yml --execution-id default-cli
    """
    environment = dict(os.environ)
    config = load_runtime_config(root, environment)
    reactor_cfg = config["reactor"]

    base = load_reactor(
        reactor_file,
        environment=environment,
        current_module=module_id,
        execution_id=execution_id,
        plugin_group_id=config["plugin"]["group_id"],
        plugin_artifact_id=config["plugin"]["artifact_id"],
    )
    targets = [base.current_module] if module_id else list(base.modules)

    table = Table(title=f"Gate decisions (execution id: {base.execution_id})")
    table.add_column("Module", style="key")
    table.add_column("Decision")
    for module in targets:
        context = replace(base, current_module=module)
        decision = should_run(context, reactor_cfg["detached_execution_id"])
        style = "success" if decision is GateDecision.RUN_NOW else "dim"
        table.add_row(module.module_id, f"[{style}]{decision.value}[/{style}]")
    console.print(table)

    warning = audit_plugin_version(base, reactor_cfg["goal_prefix"], reactor_cfg["goal"])
    if warning:
        print_warning(warning)
