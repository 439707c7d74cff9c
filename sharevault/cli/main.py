"""
sharevault - command-line tools for the share/asset vault engine.

Commands:
  simulate SCENARIO.json   Run a JSON scenario on a fresh in-memory vault
  version                  Print the package version

Global options:
  --log-level TEXT   Logging level (DEBUG, INFO, WARNING, ERROR)

Examples:
  sharevault --help
  sharevault simulate examples/deposit.json
  sharevault --log-level DEBUG simulate examples/deposit.json --json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer

from ..config import load_config
from ..errors import VaultError
from ..version import __version__
from .scenario import ScenarioResult, run_scenario

app = typer.Typer(
    name="sharevault",
    help="Share/asset vault accounting engine",
    no_args_is_help=True,
    add_completion=False,
)


def _pretty(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
        envvar="SHAREVAULT_LOG_LEVEL",
    ),
) -> None:
    """
    sharevault CLI: run vault scenarios locally.

    The log level is resolved from --log-level, then SHAREVAULT_LOG_LEVEL,
    then the built-in default (WARNING).
    """
    level = (log_level or load_config().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_human(result: ScenarioResult) -> None:
    for step in result.steps:
        out = "" if step["result"] is None else f" -> {step['result']}"
        typer.echo(f"[{step['index']}] {step['op']}{out}")
    if result.failed is not None:
        err = result.failed["error"]
        number = f" ({err['number']})" if "number" in err else ""
        typer.echo(f"[{result.failed['index']}] {result.failed['op']} FAILED: {err['code']}{number} {err['message']}")

    typer.echo("")
    typer.echo("Accounts:")
    typer.echo("-" * 60)
    for label, acct in result.accounts.items():
        typer.echo(f"{label:<16} shares={acct['shares']:<12} assets={acct['assets']}")
    typer.echo("-" * 60)
    typer.echo(f"Total supply:  {result.total_supply}")
    typer.echo(f"Total assets:  {result.total_assets}")
    typer.echo(f"Events:        {len(result.events)}")
    for ev in result.events:
        typer.echo(f"  {ev['name']:<9} {ev['data']}")


@app.command("simulate")
def simulate(
    scenario: Path = typer.Argument(..., help="Path to a JSON scenario file"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON instead of human-readable text"),
) -> None:
    """Run a JSON scenario against a fresh in-memory env, asset token and vault."""
    try:
        doc = json.loads(scenario.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        typer.echo(f"Error: cannot read scenario {scenario}: {e}", err=True)
        raise typer.Exit(2)

    try:
        result = run_scenario(doc)
    except VaultError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    if json_output:
        typer.echo(_pretty(result.to_dict()))
    else:
        _print_human(result)

    if not result.ok:
        raise typer.Exit(1)


@app.command("version")
def version() -> None:
    """Print the package version."""
    typer.echo(__version__)


def main() -> None:
    """Entry point for the sharevault CLI."""
    app()


if __name__ == "__main__":
    main()
