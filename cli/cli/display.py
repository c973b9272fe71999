"""Rich output formatting for the sqlrouter CLI.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that command output on *stdout* is never polluted
with human-readable decoration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from router_engine.classifier import Command
    from router_engine.options import ConfigOption
    from router_engine.router import RouterResult


# ---------------------------------------------------------------------------
# Colour mapping
# ---------------------------------------------------------------------------

_STATUS_COLOURS: dict[str, str] = {
    "SUCCESS": "green",
    "FAIL": "red",
}

_CATEGORY_COLOURS: dict[str, str] = {
    "introspective": "cyan",
    "mutating": "magenta",
    "config": "yellow",
    "explain": "blue",
    "unsupported": "red",
}


def _coloured_status(status: str) -> str:
    """Return a Rich markup string with the status colour-coded."""
    colour = _STATUS_COLOURS.get(status, "white")
    return f"[{colour}]{status}[/{colour}]"


def _truncate(text: str, limit: int = 60) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[: limit - 3] + "..."


# ---------------------------------------------------------------------------
# Run summary
# ---------------------------------------------------------------------------


def display_run_summary(console: Console, result: RouterResult) -> None:
    """Render the outcome of a script run.

    Parameters
    ----------
    console:
        Rich console to write to (typically stderr).
    result:
        The router result to display.
    """
    header_lines = [
        f"[bold]Status:[/bold]    {_coloured_status(result.status.value)}",
        f"[bold]Commands:[/bold]  {len(result.completed)}/{result.commands_total} completed",
    ]
    if result.error is not None:
        header_lines.append(f"[bold]Error:[/bold]     {escape(str(result.error))}")
        if result.failed_index is not None:
            header_lines.append(f"[bold]Failed at:[/bold] statement {result.failed_index + 1}")
    console.print(
        Panel(
            "\n".join(header_lines),
            title="SQL Router",
            border_style="green" if result.ok else "red",
        )
    )

    if not result.completed:
        return

    table = Table(show_lines=False, pad_edge=True, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="bold")
    table.add_column("Statement")

    for outcome in result.completed:
        table.add_row(
            str(outcome.index + 1),
            outcome.kind.label,
            escape(_truncate(outcome.statement)),
        )

    console.print(table)


# ---------------------------------------------------------------------------
# Option list
# ---------------------------------------------------------------------------


def display_option_list(console: Console, options: list[ConfigOption]) -> None:
    """Render a table of registered configuration options."""
    if not options:
        console.print("[dim]No options found.[/dim]")
        return

    table = Table(
        title=f"Config options ({len(options)})",
        show_lines=False,
        pad_edge=True,
        expand=False,
    )
    table.add_column("Key", style="bold")
    table.add_column("Type")
    table.add_column("Default")
    table.add_column("Description")

    for option in options:
        default = "-" if option.default_value is None else str(option.default_value)
        table.add_row(option.key, option.type_name, escape(default), escape(option.description))

    console.print(table)


# ---------------------------------------------------------------------------
# Classified commands
# ---------------------------------------------------------------------------


def display_command_list(console: Console, commands: list[Command]) -> None:
    """Render the commands a script classifies into."""
    if not commands:
        console.print("[dim]No statements found.[/dim]")
        return

    table = Table(
        title=f"Statements ({len(commands)})",
        show_lines=False,
        pad_edge=True,
        expand=False,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="bold")
    table.add_column("Category")
    table.add_column("Operands")

    for i, command in enumerate(commands, start=1):
        category = command.kind.category.value
        colour = _CATEGORY_COLOURS.get(category, "white")
        operands = " | ".join(_truncate(op) for op in command.operands) or "-"
        table.add_row(
            str(i),
            command.kind.label,
            f"[{colour}]{category}[/{colour}]",
            escape(operands),
        )

    console.print(table)
