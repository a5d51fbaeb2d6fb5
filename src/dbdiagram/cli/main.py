"""dbdiagram CLI - dbd command."""

from pathlib import Path

import click

from dbdiagram.cli.parse import parse_command
from dbdiagram.cli.patch import patch_group
from dbdiagram.cli.render import render_command
from dbdiagram.cli.routes import routes_command
from dbdiagram.cli.watch import watch_command
from dbdiagram.config.loader import load_config
from dbdiagram.core.errors import ConfigError
from dbdiagram.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="dbd")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .dbdiagram/config.yaml (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_root: Path | None) -> None:
    """dbdiagram - Schema diagrams from DBML, with edits written back to source."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    if verbose:
        configure_logging(config.logging, level="DEBUG")
    else:
        configure_logging(config.logging)


cli.add_command(parse_command, name="parse")
cli.add_command(render_command, name="render")
cli.add_command(routes_command, name="routes")
cli.add_command(patch_group, name="patch")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
