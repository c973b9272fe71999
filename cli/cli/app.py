"""sqlrouter CLI application -- Typer-based developer interface.

Provides commands to run SQL scripts through the router against a local
DuckDB table environment, list the configuration options ``SET`` accepts,
and show how a script is classified.  Human-readable output goes to
*stderr* via Rich; command output (``SHOW``/``DESC``/``EXPLAIN`` text, or
JSON with ``--json``) goes to *stdout* so that pipelines can compose cleanly.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from cli.display import display_command_list, display_option_list, display_run_summary
from router_engine.config import load_settings
from router_engine.logging_config import configure_logging

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="sqlrouter",
    help="sqlrouter - route SQL scripts to a table environment",
    no_args_is_help=True,
)
console = Console(stderr=True)

# Mutable global options populated by the Typer callback.
_json_output: bool = False
_debug: bool = False


# ---------------------------------------------------------------------------
# Callback -- global options
# ---------------------------------------------------------------------------


@app.callback()
def _global_options(
    json_mode: bool = typer.Option(
        False,
        "--json/--no-json",
        help="Emit structured JSON to stdout instead of human-readable output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log at DEBUG level, including the full script after a run.",
        envvar="ROUTER_DEBUG",
    ),
) -> None:
    """Global options applied to every command."""
    global _json_output, _debug  # noqa: PLW0603
    _json_output = json_mode
    _debug = debug


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _read_sql_file(sql_file: Path) -> str:
    try:
        return sql_file.read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[red]Failed to read {sql_file}: {exc}[/red]")
        raise typer.Exit(code=3) from exc


def _parse_params(raw: list[str]) -> dict[str, str]:
    """Turn ``key=value`` strings into a dict, exiting on malformed input."""
    parsed: dict[str, str] = {}
    for item in raw:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            console.print(f"[red]Invalid --param '{item}': expected key=value[/red]")
            raise typer.Exit(code=3)
        parsed[key.strip()] = value
    return parsed


def _emit_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, default=str) + "\n")


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@app.command()
def run(
    sql_file: Path = typer.Argument(
        ...,
        help="Path to a SQL script.",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    db: str | None = typer.Option(
        None,
        "--db",
        help="DuckDB database file (default: ROUTER_LOCAL_DB_PATH or in-memory).",
    ),
    param: list[str] = typer.Option(
        [],
        "--param",
        "-p",
        help="Extra job parameter as key=value.  May be repeated.",
    ),
) -> None:
    """Execute every statement of a SQL script against a local table environment."""
    from router_engine.context import LocalTableEnvironment
    from router_engine.params import ParameterSet
    from router_engine.router import SqlRouter

    overrides: dict[str, Any] = {}
    if db is not None:
        overrides["local_db_path"] = db
    if _debug:
        overrides["debug"] = True
    settings = load_settings(**overrides)
    configure_logging(settings)

    sql = _read_sql_file(sql_file)
    params = ParameterSet.from_mapping(_parse_params(param)).with_overrides({settings.sql_param_key: sql})

    outputs: list[str] = []

    def _on_output(text: str) -> None:
        outputs.append(text)
        if not _json_output:
            sys.stdout.write(text.rstrip("\n") + "\n")

    try:
        context = LocalTableEnvironment(settings.local_db_path)
    except Exception as exc:
        console.print(f"[red]Failed to open local table environment: {exc}[/red]")
        raise typer.Exit(code=3) from exc

    with context:
        result = SqlRouter(settings=settings).execute(None, params, context, _on_output)

    if _json_output:
        _emit_json(
            {
                "status": result.status.value,
                "commands_total": result.commands_total,
                "completed": [
                    {"index": c.index, "kind": c.kind.name, "statement": c.statement, "output": c.output}
                    for c in result.completed
                ],
                "outputs": outputs,
                "error": result.error.to_dict() if result.error is not None else None,
                "failed_index": result.failed_index,
            }
        )
    else:
        display_run_summary(console, result)

    if not result.ok:
        raise typer.Exit(code=3)


# ---------------------------------------------------------------------------
# options
# ---------------------------------------------------------------------------


@app.command()
def options(
    prefix: str | None = typer.Option(
        None,
        "--prefix",
        help="Only list keys starting with this prefix (e.g. table.exec.).",
    ),
) -> None:
    """List the configuration keys accepted by SET."""
    from router_engine.options import get_option_registry

    registry = get_option_registry()
    entries = [o for o in registry.options() if prefix is None or o.key.startswith(prefix)]

    if _json_output:
        _emit_json(
            [
                {
                    "key": o.key,
                    "type": o.type_name,
                    "default": o.default_value,
                    "description": o.description,
                }
                for o in entries
            ]
        )
    else:
        display_option_list(console, entries)


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


@app.command()
def classify(
    sql_file: Path = typer.Argument(
        ...,
        help="Path to a SQL script.",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
) -> None:
    """Show how each statement of a SQL script is classified, without running it."""
    from router_engine.classifier import ClassifierError, get_classifier

    sql = _read_sql_file(sql_file)
    try:
        commands = get_classifier(load_settings()).classify(sql)
    except ClassifierError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=3) from exc

    if _json_output:
        _emit_json(
            [
                {
                    "kind": c.kind.name,
                    "category": c.kind.category.value,
                    "operands": list(c.operands),
                    "statement": c.statement,
                }
                for c in commands
            ]
        )
    else:
        display_command_list(console, commands)
