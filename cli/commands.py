"""Typer CLI for inspecting and upgrading chat export bundles.

Both commands read an export file (a V1B bundle or a single exported chat),
run it through the migration core, and either report what was found or
write the re-exported, sanitized bundle.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from chatstore.config import settings
from chatstore.services.bundle_service import BundleImportResult, dump_bundle, load_bundle
from chatstore.services.live_files import LiveFileRegistry
from chatstore.utils.exceptions import BundleFormatError
from chatstore.utils.i18n import get_message
from chatstore.utils.logging import configure_logging

logger = logging.getLogger(__name__)

console = Console()

# --------------------------------------------------------------------------- #
# Typer app – entry-point is exposed in pyproject.toml as "chatstore"         #
# --------------------------------------------------------------------------- #
app = typer.Typer(help=get_message("help.cli"))


@app.callback(invoke_without_command=False)
def _root_options(
    log_level: str = typer.Option(
        settings.log_level,
        "--log-level",
        help=get_message("help.log_level"),
        show_default=True,
        case_sensitive=False,
    ),
):
    """Shared option processed before any sub-command executes."""
    configure_logging(log_level, log_to_file=settings.log_to_file, log_dir=settings.log_dir)


def _load(source: Path, live_file_ids: Iterable[str] = ()) -> BundleImportResult:
    """Read *source* and load it, turning failures into a clean exit."""
    if not source.is_file():
        typer.echo(get_message("file.not_found", path=source))
        raise typer.Exit(1)

    registry = LiveFileRegistry(live_file_ids)
    try:
        return load_bundle(source.read_bytes(), registry.valid_ids)
    except BundleFormatError as e:
        typer.echo(get_message("command.failure", error=str(e)))
        raise typer.Exit(1)


# --------------------------------------------------------------------------- #
# inspect                                                                     #
# --------------------------------------------------------------------------- #
@app.command("inspect", help=get_message("help.inspect"))
def _inspect(
        source: Path = typer.Argument(..., help=get_message("param.source")),
):
    result = _load(source)
    counts = result.shape_counts

    table = Table(title=get_message("inspect.title", path=source.name))
    table.add_column("", style="cyan")
    table.add_column("", justify="right", style="green")
    rows = [
        ("inspect.conversations", len(result.conversations)),
        ("inspect.skipped_conversations", result.skipped_conversations),
        ("inspect.current_messages", counts.current),
        ("inspect.legacy_messages", counts.legacy),
        ("inspect.unknown_messages", counts.unknown),
        ("inspect.folders", len(result.folders)),
        ("inspect.skipped_folders", result.skipped_folders),
        ("inspect.model_sources", len(result.model_sources)),
    ]
    for key, value in rows:
        table.add_row(get_message(key), str(value))
    console.print(table)


# --------------------------------------------------------------------------- #
# upgrade                                                                     #
# --------------------------------------------------------------------------- #
@app.command("upgrade", help=get_message("help.upgrade"))
def _upgrade(
        source: Path = typer.Argument(..., help=get_message("param.source")),
        output: Path = typer.Option(..., "--out", "-o", help=get_message("param.output")),
        live_file_id: Optional[List[str]] = typer.Option(
            None,
            "--live-file-id",
            help=get_message("param.live_file_id"),
        ),
):
    result = _load(source, live_file_id or ())
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_bundle(result.to_bundle()), encoding="utf-8")
    logger.info("Upgraded %s -> %s", source, output)
    typer.echo(get_message("file.written", output_path=output))
