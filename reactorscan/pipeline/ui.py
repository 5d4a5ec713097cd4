"""Central UI handler for reactorscan.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from reactorscan.pipeline.ui import console, print_warning

    console.print("[success]Analysis completed[/success]")
    print_warning("Source encoding not set")
"""

import sys
from collections.abc import Mapping

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from reactorscan.properties import masked

SCAN_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "key": "cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=SCAN_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_warning(msg: str) -> None:
    console.print(f"[warning]WARNING:[/warning] {msg}")


def print_properties(properties: Mapping[str, str], title: str = "ANALYSIS PROPERTIES") -> None:
    """Print a property table with sensitive values masked."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Key", style="key")
    table.add_column("Value", overflow="fold")
    for key, value in sorted(masked(properties).items()):
        table.add_row(key, value)
    console.print(table)


def print_status_panel(status: str, message: str, level: str = "info") -> None:
    """Print a status panel with colored border.

    Args:
        status: Status label (e.g., "RUN-NOW", "DELAYED")
        message: Main message line
        level: One of "success", "warning", "error", "info"
    """
    style_map = {
        "success": ("bold green", "green"),
        "warning": ("bold yellow", "yellow"),
        "error": ("bold red", "red"),
        "info": ("bold cyan", "cyan"),
    }
    text_style, border_style = style_map.get(level, ("white", "white"))

    panel = Panel(
        Text.assemble(
            (f"STATUS: [{status}]\n", text_style),
            (message, border_style),
        ),
        border_style=border_style,
        expand=False
    )
    console.print(panel)
