"""dbd patch commands - write a position/size edit into a schema file."""

from pathlib import Path

import click

from dbdiagram.core.progress import status
from dbdiagram.patcher.document import FileDocument
from dbdiagram.patcher.edits import SchemaEdit
from dbdiagram.patcher.patcher import SourcePatcher

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _coerce(raw: str) -> int | float | bool | str:
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def _commit(file: Path, edit: SchemaEdit) -> None:
    if not SourcePatcher().apply(FileDocument(file), edit):
        raise click.ClickException(
            f"Edit dropped: no writable {edit.kind} '{edit.identity or ''}' in {file}"
        )
    status(f"Updated {edit.kind} {edit.identity or ''} in {file.name}", style="success")


@click.group()
def patch_group() -> None:
    """Apply one edit to a schema file."""


@patch_group.command("table")
@click.argument("file", type=_FILE)
@click.argument("name")
@click.option("--x", "x", type=float, required=True, help="Left edge")
@click.option("--y", "y", type=float, required=True, help="Top edge")
@click.option("--width", type=float, default=None, help="Table width")
def patch_table(file: Path, name: str, x: float, y: float, width: float | None) -> None:
    """Move table NAME in FILE (and optionally set its width)."""
    _commit(file, SchemaEdit.move_table(name, x, y, width))


@patch_group.command("note")
@click.argument("file", type=_FILE)
@click.argument("name")
@click.option("--x", "x", type=float, required=True, help="Left edge")
@click.option("--y", "y", type=float, required=True, help="Top edge")
@click.option("--width", type=float, required=True, help="Note width")
@click.option("--height", type=float, required=True, help="Note height")
def patch_note(file: Path, name: str, x: float, y: float, width: float, height: float) -> None:
    """Move and resize sticky note NAME in FILE."""
    _commit(file, SchemaEdit.move_note(name, x, y, width, height))


@patch_group.command("project")
@click.argument("file", type=_FILE)
@click.argument("assignments", nargs=-1, required=True)
@click.option("--name", default=None, help="Project name used if the file has no Project block")
def patch_project(file: Path, assignments: tuple[str, ...], name: str | None) -> None:
    """Set Project settings in FILE from KEY=VALUE pairs (e.g. zoom=1.5 showGrid=false)."""
    values: dict[str, int | float | bool | str] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="ASSIGNMENTS")
        values[key.strip()] = _coerce(raw.strip())
    _commit(file, SchemaEdit.set_project(values, name=name))
