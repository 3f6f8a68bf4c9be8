"""
CLI interface for spaces and their attachments.

Usage:
    smartspace create "Reading list"
    smartspace import "Reading list" essay.pdf notes.txt
    smartspace paste "Reading list" "Some English text"
    smartspace attachments "Reading list"
    smartspace delete "Reading list"
"""

import json
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Optional, TypeVar

import typer
from typing_extensions import Annotated

from .api import SmartSpace
from .config import STORE_PATH_ENV, language_display_name
from .errors import DuplicateSpaceName, IngestError
from .logging_config import configure_quiet_mode, enable_debug_mode
from .types import Attachment, Space, SpaceMode, SpaceType

E = TypeVar("E", bound=Enum)


# Configure quiet mode by default (suppress verbose library output)
# Set SMARTSPACE_VERBOSE=1 to enable debug mode via environment
if os.environ.get("SMARTSPACE_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False
_store_override: Optional[Path] = None


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


def _store_callback(value: Optional[Path]):
    global _store_override
    _store_override = value


def _get_store_override() -> Optional[Path]:
    return _store_override


app = typer.Typer(
    name="smartspace",
    help="Spaces with language-checked attachments.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
        callback=_json_callback,
        is_eager=True,
    )] = False,
    store: Annotated[Optional[Path], typer.Option(
        "--store", "-s",
        envvar=STORE_PATH_ENV,
        help="Path to the store directory (default: ~/.smartspace/)",
        callback=_store_callback,
        is_eager=True,
    )] = None,
):
    """Spaces with language-checked attachments."""


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _open() -> SmartSpace:
    """Open the store, reporting configuration problems cleanly."""
    import atexit

    try:
        ss = SmartSpace(_get_store_override())
    except (OSError, ValueError, RuntimeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    atexit.register(ss.close)
    return ss


def _require_space(ss: SmartSpace, name: str) -> Space:
    space = ss.get_space(name)
    if space is None:
        typer.echo(f"Error: No space named '{name}'", err=True)
        raise typer.Exit(1)
    return space


def _parse_choice(enum_type: type[E], value: str) -> E:
    """Match an enum by value or name, ignoring case, '-' and '_'."""
    def norm(s: str) -> str:
        return s.lower().replace("-", "").replace("_", "").replace(" ", "")

    for member in enum_type:
        if norm(value) in (norm(member.value), norm(member.name)):
            return member
    choices = ", ".join(m.value for m in enum_type)
    raise typer.BadParameter(f"'{value}' is not one of: {choices}")


def _attachment_to_dict(ss: SmartSpace, attachment: Attachment) -> dict:
    return {
        "id": attachment.id,
        "original_file_name": attachment.original_file_name,
        "stored_file_name": attachment.stored_file_name,
        "language_code": attachment.language_code,
        "added_at": attachment.added_at,
        "file_present": ss.has_file(attachment),
    }


def _space_to_dict(space: Space) -> dict:
    return {
        "id": space.id,
        "name": space.name,
        "type": space.type.value,
        "mode": space.mode.value,
        "created_at": space.created_at,
    }


def _format_attachment(ss: SmartSpace, attachment: Attachment) -> str:
    missing = "" if ss.has_file(attachment) else "  [file missing]"
    return (
        f"{attachment.stored_file_name}  {attachment.original_file_name}  "
        f"({language_display_name(attachment.language_code)}, "
        f"{attachment.added_at[:16].replace('T', ' ')}){missing}"
    )


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command()
def create(
    name: Annotated[str, typer.Argument(help="Space name (max 24 characters)")],
    type: Annotated[str, typer.Option(
        "--type", "-t",
        help="Space type: Learning, Work or Personal"
    )] = SpaceType.LEARNING.value,
    mode: Annotated[str, typer.Option(
        "--mode", "-m",
        help="Processing mode: private-cloud-compute or on-device"
    )] = SpaceMode.PRIVATE_CLOUD_COMPUTE.value,
):
    """Create a new space."""
    space_type = _parse_choice(SpaceType, type)
    space_mode = _parse_choice(SpaceMode, mode)
    ss = _open()
    try:
        space = ss.create_space(name, type=space_type, mode=space_mode)
    except (DuplicateSpaceName, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if _get_json_output():
        typer.echo(json.dumps(_space_to_dict(space)))
    else:
        typer.echo(f"Created space '{space.name}'")


@app.command("list")
def list_spaces():
    """List spaces, newest first."""
    ss = _open()
    spaces = ss.list_spaces()
    if _get_json_output():
        typer.echo(json.dumps([_space_to_dict(s) for s in spaces], indent=2))
        return
    if not spaces:
        typer.echo("No spaces yet.")
        return
    for space in spaces:
        typer.echo(f"{space.name}  [{space.type.value}, {space.mode.value}]  {space.created_at[:10]}")


@app.command()
def show(
    name: Annotated[str, typer.Argument(help="Space name")],
):
    """Show a space's details and blocks."""
    ss = _open()
    space = _require_space(ss, name)
    if _get_json_output():
        data = _space_to_dict(space)
        data["blocks"] = [
            {"title": b.title, "kind": b.kind.value, "details": b.details, "created_at": b.created_at}
            for b in space.blocks
        ]
        data["attachments"] = len(space.attachments)
        typer.echo(json.dumps(data, indent=2))
        return
    typer.echo(space.name)
    typer.echo(f"  Type: {space.type.value}")
    typer.echo(f"  Created: {space.created_at[:10]}")
    typer.echo(f"  Mode: {space.mode.value}")
    typer.echo(f"  Attachments: {len(space.attachments)}")
    typer.echo("Blocks:")
    if not space.blocks:
        typer.echo("  No blocks yet. They'll appear here when available.")
    for block in space.blocks:
        typer.echo(f"  {block.title} ({block.kind.value}, {block.created_at[:10]})")
        if block.details:
            typer.echo(f"    {block.details}")


@app.command("import")
def import_files(
    name: Annotated[str, typer.Argument(help="Space name")],
    files: Annotated[list[Path], typer.Argument(help="Files to import (PDF, text, DOCX)")],
):
    """Import files into a space. Only English content is admitted."""
    ss = _open()
    space = _require_space(ss, name)
    try:
        report = ss.import_files(files, space)
    except IngestError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)

    if _get_json_output():
        typer.echo(json.dumps([
            {
                "source": r.source,
                "admitted": r.admitted,
                "attachment": _attachment_to_dict(ss, r.attachment) if r.attachment else None,
                "error": r.error.message if r.error else None,
            }
            for r in report.results
        ], indent=2))
    else:
        for result in report.results:
            if result.attachment is not None:
                typer.echo(f"Imported {Path(result.source).name} as {result.attachment.stored_file_name}")
            else:
                typer.echo(f"Skipped {Path(result.source).name}: {result.error.message}", err=True)

    if report.failures:
        raise typer.Exit(1)


@app.command()
def paste(
    name: Annotated[str, typer.Argument(help="Space name")],
    text: Annotated[Optional[str], typer.Argument(
        help="Text to save, or '-' to read stdin"
    )] = None,
):
    """Save pasted text into a space."""
    if text is None or text == "-":
        text = sys.stdin.read()
    ss = _open()
    space = _require_space(ss, name)
    ss.paste_buffer.text = text
    try:
        attachment = ss.save_paste(space)
    except IngestError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)
    if _get_json_output():
        typer.echo(json.dumps(_attachment_to_dict(ss, attachment)))
    else:
        typer.echo(f"Saved pasted text as {attachment.stored_file_name}")


@app.command()
def attachments(
    name: Annotated[str, typer.Argument(help="Space name")],
):
    """List a space's attachments, newest first."""
    ss = _open()
    space = _require_space(ss, name)
    items = space.sorted_attachments()
    if _get_json_output():
        typer.echo(json.dumps([_attachment_to_dict(ss, a) for a in items], indent=2))
        return
    if not items:
        typer.echo("No attachments yet. Import files or paste text to see them listed here.")
        return
    for attachment in items:
        typer.echo(_format_attachment(ss, attachment))


@app.command()
def remove(
    name: Annotated[str, typer.Argument(help="Space name")],
    stored_names: Annotated[list[str], typer.Argument(help="Stored file names to remove")],
):
    """Remove attachments from a space."""
    ss = _open()
    space = _require_space(ss, name)
    by_name = {a.stored_file_name: a for a in space.attachments}
    unknown = [n for n in stored_names if n not in by_name]
    for n in unknown:
        typer.echo(f"No attachment {n} in '{space.name}'", err=True)

    report = ss.delete_attachments([by_name[n] for n in stored_names if n in by_name])
    for attachment in report.removed:
        typer.echo(f"Removed {attachment.stored_file_name}")
    for attachment, error in report.errors:
        typer.echo(f"Removal failed for {attachment.stored_file_name}: {error}", err=True)
    if unknown or report.errors:
        raise typer.Exit(1)


@app.command()
def delete(
    name: Annotated[str, typer.Argument(help="Space name")],
    yes: Annotated[bool, typer.Option(
        "--yes", "-y",
        help="Don't ask for confirmation"
    )] = False,
):
    """Delete a space with its blocks and attachments."""
    ss = _open()
    space = _require_space(ss, name)
    if not yes:
        typer.confirm(
            f"Delete '{space.name}'? This removes the space, its blocks and attachments.",
            abort=True,
        )
    report = ss.delete_space(space)
    for attachment, error in report.errors:
        typer.echo(f"Could not remove {attachment.stored_file_name}: {error}", err=True)
    typer.echo(f"Deleted space '{space.name}' ({len(report.removed)} attachment(s))")


# -----------------------------------------------------------------------------

def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="smartspace CLI", store_path=_get_store_override())
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
