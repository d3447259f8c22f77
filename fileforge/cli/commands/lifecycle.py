"""``fileforge create|read|delete`` — drive one file through its lifecycle.

Each command takes a desired-state JSON document (the same fields the
host framework would supply) and operates on the local directory backend.
"""

from __future__ import annotations

from pathlib import Path

import typer

from fileforge.cli._common import build_reconciler, console, load_desired, render_outcome

_DESIRED_ARG = typer.Argument(..., help="Path to the desired-state JSON document.")
_ROOT_OPT = typer.Option(None, "--root", "-r", help="Root directory of the local backend.")


def create_cmd(
    desired_path: Path = _DESIRED_ARG,
    root: Path = _ROOT_OPT,
) -> None:
    """Upload the desired file and print its observed state."""
    desired = load_desired(desired_path)
    outcome = build_reconciler(root).create(desired)
    if outcome.volume_id:
        console.print(f"[bold]{outcome.volume_id}[/bold]")
    render_outcome(outcome, title="create")


def read_cmd(
    volume_id: str = typer.Argument(..., help="Volume ID (datastore:content_type/file_name)."),
    desired_path: Path = _DESIRED_ARG,
    root: Path = _ROOT_OPT,
) -> None:
    """Refresh the observed state of a file, including source drift."""
    desired = load_desired(desired_path)
    outcome = build_reconciler(root).read(volume_id, desired)
    render_outcome(outcome, title="read")


def delete_cmd(
    volume_id: str = typer.Argument(..., help="Volume ID (datastore:content_type/file_name)."),
    desired_path: Path = _DESIRED_ARG,
    root: Path = _ROOT_OPT,
) -> None:
    """Delete a file; deleting an absent file succeeds."""
    desired = load_desired(desired_path)
    outcome = build_reconciler(root).delete(volume_id, desired)
    render_outcome(outcome, title="delete", show_absent=False)
    console.print(f"[green]Deleted[/green] {volume_id}")
