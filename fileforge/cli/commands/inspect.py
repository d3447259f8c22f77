"""``fileforge import-id`` and ``fileforge classify`` — offline helpers."""

from __future__ import annotations

import typer
from rich.panel import Panel

from fileforge.cli._common import console
from fileforge.core.classifier import infer_content_type, validate_content_type
from fileforge.core.errors import ConfigurationError
from fileforge.core.reconciler import Reconciler


def import_id_cmd(
    import_id: str = typer.Argument(
        ..., help="Import ID (node/datastore_id:content_type/file_name)."
    ),
) -> None:
    """Parse an import ID and print the state it maps to."""
    try:
        volume_id, desired = Reconciler.import_state(import_id)
    except ConfigurationError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc

    console.print(
        Panel(
            "\n".join([
                f"[bold]Volume ID:[/bold]    {volume_id}",
                f"[bold]Node:[/bold]         {desired.node_name}",
                f"[bold]Datastore:[/bold]    {desired.datastore_id}",
                f"[bold]Content type:[/bold] {desired.content_type}",
            ]),
            title="[bold]Import[/bold]",
            border_style="green",
        )
    )


def classify_cmd(
    file_name: str = typer.Argument(..., help="File name to classify."),
    content_type: str = typer.Option("", "--content-type", "-t", help="Explicit content type."),
    supports_import: bool = typer.Option(
        True,
        "--import/--no-import",
        help="Whether the backend supports the 'import' content type.",
    ),
) -> None:
    """Show the content type a file would be uploaded as."""
    try:
        if content_type:
            result = validate_content_type(content_type)
        else:
            result = infer_content_type(file_name, supports_import=supports_import)
    except ConfigurationError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc
    console.print(result)
