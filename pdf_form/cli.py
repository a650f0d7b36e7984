"""
Command-line interface for PDF Form.
"""

import json
import logging
import os
import sys

import click
from rich.console import Console
from rich.table import Table

from pdf_form import __version__
from pdf_form.binary import BinaryCodec
from pdf_form.pipeline import PDFFormProcessor
from pdf_form.types import Operation
from pdf_form.utils import configure_logging, format_file_size

console = Console()


def _input_item(input_pdf, property_name, codec):
    with open(input_pdf, "rb") as handle:
        data = handle.read()
    return {
        "json": {},
        "binary": {
            property_name: {
                "data": codec.encode(data),
                "mimeType": "application/pdf",
                "fileName": os.path.basename(input_pdf),
            }
        },
    }


def _parse_assignment(_ctx, _param, values):
    rows = []
    for value in values:
        name, separator, field_value = value.partition("=")
        if not separator or not name:
            raise click.BadParameter(f"Expected NAME=VALUE, got '{value}'")
        rows.append({"fieldName": name, "fieldValue": field_value})
    return rows


def _format_value(value):
    if value is None:
        return "[dim](none)[/dim]"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return repr(value) if value == "" else str(value)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """
    PDF Form CLI - Inspect and fill PDF form fields.
    """
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="fields")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the extraction record as JSON")
def show_fields(input_pdf, as_json):
    """
    List the form fields of a PDF and their current values.

    Examples:

        pdf-form fields application.pdf

        pdf-form fields application.pdf --json
    """
    try:
        codec = BinaryCodec()
        processor = PDFFormProcessor({"operation": Operation.EXTRACT_FIELDS.value}, codec=codec)
        record = processor.execute([_input_item(input_pdf, "data", codec)])[0].json

        if as_json:
            click.echo(json.dumps(record, indent=2))
            return

        if not record["totalFields"]:
            console.print(f"[yellow]No form fields found in {os.path.basename(input_pdf)}[/yellow]")
            return

        table = Table(title=f"Form Fields: {os.path.basename(input_pdf)}")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Value", style="green")
        for info in record["fields"]:
            table.add_row(str(info["index"]), info["name"], info["type"], _format_value(info["value"]))

        console.print()
        console.print(table)
        console.print(f"[dim]{record['totalFields']} field(s)[/dim]\n")

    except Exception as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)


@cli.command(name="fill")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--field", "-f", "assignments",
    multiple=True,
    callback=_parse_assignment,
    help="Field assignment as NAME=VALUE (repeatable)",
)
@click.option(
    "--output", "-o",
    default=None,
    help="Output PDF path (defaults to <input>_filled.pdf)",
    type=click.Path(dir_okay=False),
)
@click.option(
    "--binary-property",
    default="data",
    show_default=True,
    help="Binary property name used for the pipeline item",
)
def fill(input_pdf, assignments, output, binary_property):
    """
    Fill form fields and flatten the PDF.

    Examples:

        pdf-form fill form.pdf -f Name=Alice -f City=Paris

        pdf-form fill form.pdf -f Name=Alice -o filled.pdf
    """
    try:
        if output is None:
            stem, _ = os.path.splitext(input_pdf)
            output = f"{stem}_filled.pdf"

        codec = BinaryCodec()
        processor = PDFFormProcessor(
            {
                "operation": Operation.MAP_FIELDS.value,
                "binaryPropertyName": binary_property,
                "outputFilename": os.path.basename(output),
                "fields": {"fieldValues": assignments},
            },
            codec=codec,
        )
        record = processor.execute([_input_item(input_pdf, binary_property, codec)])[0]

        entry = record.binary[binary_property]
        data = codec.decode(entry["data"])
        with open(output, "wb") as handle:
            handle.write(data)

        console.print(f"\n[bold green]✓ Flattened PDF written[/bold green] ({format_file_size(len(data))})")
        console.print(f"[dim]Output file: {os.path.abspath(output)}[/dim]")
        for mapped in record.json["mappedFields"]:
            console.print(f"  • {mapped['name']} = {mapped['value']}")
        console.print()

    except Exception as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    cli()
