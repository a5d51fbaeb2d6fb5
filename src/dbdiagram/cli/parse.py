"""dbd parse command - parse a schema file and summarize it."""

import json
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from dbdiagram.cli.utils import read_source
from dbdiagram.core.errors import ParseError
from dbdiagram.core.progress import get_console, pluralize
from dbdiagram.parser.registry import parse_schema
from dbdiagram.schema.models import Schema, Severity

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
    Severity.HINT: "dim",
}


def _summary_table(schema: Schema) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 2), pad_edge=False)
    table.add_column("Table", style="bold")
    table.add_column("Fields", justify="right")
    table.add_column("Position")
    table.add_column("Note", style="dim")
    for t in schema.tables:
        position = f"{t.x:g}, {t.y:g}" if t.x is not None and t.y is not None else "auto"
        note = (t.note or "").splitlines()[0] if t.note else ""
        table.add_row(escape(t.name), str(len(t.fields)), position, escape(note))
    return table


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output the parsed model as JSON")
def parse_command(file: Path, as_json: bool) -> None:
    """Parse FILE and list its tables, relationships and diagnostics."""
    text, fmt = read_source(file)
    try:
        schema = parse_schema(text, fmt)
    except ParseError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        click.echo(json.dumps(schema.to_dict(), indent=2))
        return

    console = get_console()
    console.print(
        f"[bold]{escape(file.name)}[/bold]: "
        f"{pluralize(len(schema.tables), 'table')}, "
        f"{pluralize(len(schema.relationships), 'relationship')}, "
        f"{pluralize(len(schema.notes), 'note')}",
        highlight=False,
    )
    if schema.tables:
        console.print()
        console.print(_summary_table(schema))

    if schema.relationships:
        console.print()
        for rel in schema.relationships:
            source = escape(f"{rel.from_table}.({', '.join(rel.from_columns)})")
            target = escape(f"{rel.to_table}.({', '.join(rel.to_columns)})")
            console.print(
                f"  {source} [cyan]{rel.cardinality.value}[/cyan] {target}", highlight=False
            )

    if schema.diagnostics:
        console.print()
        for diag in schema.diagnostics:
            style = _SEVERITY_STYLES.get(diag.severity, "")
            console.print(f"  [{style}]{escape(str(diag))}[/{style}]", highlight=False)
