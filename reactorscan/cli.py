"""reactorscan CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click
from rich.table import Table

from reactorscan import __version__
from reactorscan.pipeline.ui import console


class VerboseGroup(click.Group):
    """Categorized help generated from the registered commands."""

    def format_commands(self, ctx, formatter):
        """Suppress the default listing, format_help prints categories instead."""
        pass

    COMMAND_CATEGORIES = {
        "ANALYSIS": {
            "title": "ANALYSIS",
            "description": "Run or inspect one module invocation of the analysis goal",
            "commands": ["scan", "gate"],
            "command_meta": {
                "scan": {"use_when": "Invoked by the build once per module"},
                "gate": {"use_when": "Check which module runs the analysis"},
            },
        },
    }

    def format_help(self, ctx, formatter):
        super().format_help(ctx, formatter)

        registered = {
            name: cmd
            for name, cmd in self.commands.items()
            if not name.startswith("_") and not getattr(cmd, "hidden", False)
        }

        console.print()
        console.rule("[bold]COMMANDS[/bold]")

        for category in self.COMMAND_CATEGORIES.values():
            console.print(f"\n[bold cyan]{category['title']}[/bold cyan]")
            console.print(f"[dim]{category['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=10)
            table.add_column("Description", style="white")
            table.add_column("When", style="dim", width=40)

            for cmd_name in category["commands"]:
                if cmd_name not in registered:
                    continue
                first_line = (registered[cmd_name].help or "").split("\n")[0].strip()
                meta = category.get("command_meta", {}).get(cmd_name, {})
                table.add_row(cmd_name, first_line.rstrip("."), meta.get("use_when", ""))

            console.print(table)

        console.print()
        console.rule()
        console.print("For detailed options: [cmd]rscan <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="rscan")
@click.help_option("-h", "--help")
def cli():
    """reactorscan - reactor-aware analysis gate and configuration assembly

    \b
    QUICK START:
      rscan gate --reactor reactor.yml            # Which module runs the analysis?
      rscan scan --reactor reactor.yml --dry-run  # Assemble properties, no engine

    \b
    For detailed options: rscan <command> --help"""
    pass


from reactorscan.commands.gate import gate
from reactorscan.commands.scan import scan

cli.add_command(scan)
cli.add_command(gate)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
