"""CLI utilities."""

from pathlib import Path

import click

from dbdiagram.config.models import DiagramConfig, LineStyle
from dbdiagram.parser.registry import format_for_path


def get_config(ctx: click.Context) -> DiagramConfig:
    """Config loaded by the root group, or defaults when run standalone."""
    obj = ctx.find_root().obj or {}
    config = obj.get("config")
    return config if isinstance(config, DiagramConfig) else DiagramConfig()


def read_source(path: Path) -> tuple[str, str]:
    """Read a schema file. Returns (text, format key).

    Raises:
        click.ClickException: If the file cannot be read as UTF-8
    """
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            text = handle.read()
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Cannot read {path}: {e}") from e
    return text, format_for_path(path)


def parse_line_style(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> LineStyle | None:
    """Click callback accepting any spelling LineStyle.parse understands."""
    if value is None:
        return None
    style = LineStyle.parse(value)
    if style is None:
        choices = ", ".join(s.value for s in LineStyle)
        raise click.BadParameter(f"'{value}' is not one of {choices}")
    return style
