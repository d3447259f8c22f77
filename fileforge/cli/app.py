"""Main Typer application — imports and registers all CLI commands.

Entry point: ``fileforge`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from fileforge.cli._common import setup_logging
from fileforge.cli.commands.inspect import classify_cmd, import_id_cmd
from fileforge.cli.commands.lifecycle import create_cmd, delete_cmd, read_cmd
from fileforge.config import config

app = typer.Typer(
    name="fileforge",
    help="Fileforge: reconcile files on cluster storage backends.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        config.log_level, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."
    ),
) -> None:
    """Configure logging before any command runs."""
    setup_logging("DEBUG" if config.debug else log_level)


# Register subcommands
app.command(name="create", help="Upload a file described by a desired-state document.")(create_cmd)
app.command(name="read", help="Refresh the observed state of a file.")(read_cmd)
app.command(name="delete", help="Delete a file (idempotent).")(delete_cmd)
app.command(name="import-id", help="Parse a node/volume import ID.")(import_id_cmd)
app.command(name="classify", help="Preview content type inference for a file name.")(classify_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
