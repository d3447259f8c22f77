"""Helpers shared by CLI commands: loading desired state and rendering outcomes."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from fileforge.backend.local import LocalDirectoryBackend
from fileforge.config import config
from fileforge.core.reconciler import Outcome, Reconciler
from fileforge.models.desired import DesiredFile
from fileforge.models.diagnostics import Severity

console = Console()


def setup_logging(level: str) -> None:
    """Route library logging through Rich at *level*."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def load_desired(path: Path) -> DesiredFile:
    """Read a desired-state JSON document, exiting on invalid input."""
    if not path.exists():
        console.print(f"[bold red]Desired state not found:[/bold red] {path}")
        raise typer.Exit(code=1)
    try:
        return DesiredFile.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        console.print(f"[bold red]Invalid desired state:[/bold red] {path}")
        console.print(str(exc))
        raise typer.Exit(code=1) from exc


def build_reconciler(root: Path | None) -> Reconciler:
    backend = LocalDirectoryBackend(root or config.local_backend_root)
    return Reconciler(backend, settings=config)


def render_outcome(outcome: Outcome, *, title: str, show_absent: bool = True) -> None:
    """Print observed state and diagnostics; exit 1 on errors."""
    if outcome.observed is not None:
        console.print_json(outcome.observed.model_dump_json())
    elif outcome.ok and show_absent:
        console.print(f"[dim]{title}: file is absent.[/dim]")

    if outcome.diagnostics:
        table = Table(title=f"{title} diagnostics")
        table.add_column("Severity")
        table.add_column("Summary")
        table.add_column("Detail", style="dim")
        for diag in outcome.diagnostics:
            style = "red" if diag.severity == Severity.ERROR else "yellow"
            table.add_row(f"[{style}]{diag.severity.value}[/{style}]", diag.summary, diag.detail)
        console.print(table)

    if not outcome.ok:
        raise typer.Exit(code=1)
