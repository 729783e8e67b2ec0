"""Typer CLI for hwreport."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .collector import collect
from .config import CommandSet, load_command_set
from .exceptions import ValidationError
from .metrics import Metrics
from .paths import config_file
from .utils import dump_json

app = typer.Typer(help="Collect hardware facts from diagnostic commands.")

console = Console()


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_commands(config: Optional[Path]) -> CommandSet:
    try:
        return load_command_set(config or config_file())
    except ValidationError as exc:
        raise typer.Exit(f"invalid configuration: {exc}") from exc


def _format_report(report: Dict[str, Any]) -> Table:
    table = Table(title=f"Hardware Report (hwreport {__version__})")
    table.add_column("Fact")
    table.add_column("Value")
    for key, value in report["cpu"].items():
        if value:
            table.add_row(f"cpu.{key}", value)
    for index, gpu in enumerate(report["gpu"]):
        table.add_row(f"gpu[{index}]", f"{gpu['vendor']}:{gpu['model']}")
    for index, screen in enumerate(report["screens"]):
        table.add_row(
            f"screen[{index}]",
            f"{screen['size']} {screen['resolution']} @ {screen['frequency']}",
        )
    for index, size in enumerate(report["partitions"]):
        table.add_row(f"partition[{index}]", f"{size:.2f} GB")
    table.add_row("arch", report["arch"] or "-")
    table.add_row("hwcap", report["hwcap"] or "n/a")
    return table


@app.command("collect")
def collect_command(
    config: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, resolve_path=True
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    out: Optional[Path] = typer.Option(None, "--out", dir_okay=False, help="Write JSON report"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity"),
) -> None:
    """Run every collector and print the report."""
    _configure_logging(verbose)
    report = collect(Metrics(_load_commands(config)))
    if out:
        dump_json(report, out)
        console.print(f"[green]Report written to {out}[/green]")
    if as_json:
        typer.echo(json.dumps(report, indent=2, sort_keys=True))
    elif not out:
        console.print(_format_report(report))


@app.command("commands")
def list_commands(
    config: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, resolve_path=True
    ),
) -> None:
    """Show the command run for each collector."""
    commands = _load_commands(config)
    table = Table(title="Collector Commands")
    table.add_column("Collector")
    table.add_column("Command")
    for name, command in commands.as_dict().items():
        table.add_row(name, " ".join(command) if command else "[dim]disabled[/dim]")
    console.print(table)


if __name__ == "__main__":
    app()
