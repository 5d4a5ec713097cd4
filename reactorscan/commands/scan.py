"""Run one module invocation of the analysis goal."""

import os
import shlex
from pathlib import Path

import click

from reactorscan.config_runtime import load_runtime_config
from reactorscan.engine import CommandLineEngine, ReportEngine
from reactorscan.pipeline import Bootstrapper, BootstrapOutcome
from reactorscan.pipeline.ui import print_properties, print_status_panel
from reactorscan.reactor_loader import load_reactor
from reactorscan.secure import MappingSecretStore, SettingsFileSecretStore
from reactorscan.utils.error_handler import handle_exceptions


def parse_defines(values: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated ``-D key=value`` options into a mapping."""
    defines = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="-D")
        defines[key.strip()] = value
    return defines


@click.command()
@click.option(
    "--reactor",
    "reactor_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Reactor description file (JSON, YAML or TOML)",
)
@click.option("--module", "module_id", default=None, help="Current module as group:artifact")
@click.option("--execution-id", default=None, help="Execution id assigned by the build tool")
@click.option("--skip/--no-skip", default=None, help="Explicit skip flag")
@click.option("-D", "--define", "defines", multiple=True, help="User property KEY=VALUE (repeatable)")
@click.option(
    "--secrets",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Secret settings file resolving ${secure:name} references",
)
@click.option("--engine-command", default=None, help="External scanner command to run")
@click.option("--dry-run", is_flag=True, help="Write the assembled properties instead of analyzing")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Dry-run report file")
@click.option("--root", default=".", help="Directory holding .rscan/config.json")
@handle_exceptions
def scan(reactor_file, module_id, execution_id, skip, defines, secrets, engine_command, dry_run, out, root):
    """Gate, assemble and hand one analysis configuration to the engine.

    Called once per module by the build. Only the last module of the
    reactor (or a goal run directly from the command line) continues past
    the gate; every other invocation is delayed and exits successfully.

    \b
    Property precedence (lowest first):
      environment < build/system/user properties < module properties
      (-D user properties are never overridden)

    \b
    Examples:
      rscan scan --reactor reactor.yml --dry-run
      rscan scan --reactor reactor.yml --module com.acme:app --execution-id default
      rscan scan --reactor reactor.yml --secrets ~/.rscan/secrets.yml \\
                 --engine-command "sonar-scanner"

    \b
    Exit Codes:
      0 = Analysis completed, delayed or skipped
      1 = Analysis engine reported failure
      2 = Configuration could not be assembled
    """
    environment = dict(os.environ)
    config = load_runtime_config(root, environment)

    context = load_reactor(
        reactor_file,
        environment=environment,
        current_module=module_id,
        execution_id=execution_id,
        skip=skip,
        user_properties=parse_defines(defines),
        plugin_group_id=config["plugin"]["group_id"],
        plugin_artifact_id=config["plugin"]["artifact_id"],
    )

    secrets_path = secrets or (Path(config["paths"]["secrets"]) if config["paths"]["secrets"] else None)
    dispatcher = SettingsFileSecretStore(secrets_path) if secrets_path else MappingSecretStore({})

    command = shlex.split(engine_command) if engine_command else config["engine"]["command"]
    if dry_run:
        engine = ReportEngine(out or Path(config["paths"]["report"]))
    elif command:
        engine = CommandLineEngine(command, base_environment=environment, timeout=config["engine"]["timeout"])
    else:
        raise click.UsageError("No analysis engine configured: pass --engine-command or --dry-run")

    bootstrapper = Bootstrapper(context, dispatcher, engine, config=config)
    outcome = bootstrapper.execute()

    if outcome is BootstrapOutcome.DELAYED:
        print_status_panel("DELAYED", f"{context.current_module.module_id} is not the last module of the reactor")
    elif outcome is BootstrapOutcome.SKIPPED:
        print_status_panel("SKIPPED", "Analysis skipped", level="warning")
    else:
        if dry_run and bootstrapper.last_properties is not None:
            print_properties(bootstrapper.last_properties)
        print_status_panel("COMPLETED", "Analysis configuration handed to the engine", level="success")
