"""Common CLI options for the CLI."""

import typer

from reveng.core.resources import SEARCH_PATH_ENV

FilesArg = typer.Argument(
    None,
    help="Override documents (YAML or JSON)",
    show_default=False,
)

ResourceOpt = typer.Option(
    [],
    "--resource",
    "-r",
    help="Named override resource, looked up on the search path. This is reusable.",
    show_default=False,
)

SearchPathOpt = typer.Option(
    None,
    "--search-path",
    "-s",
    envvar=SEARCH_PATH_ENV,
    help="Directories searched for --resource documents, separated like PATH.",
    show_default=False,
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log how overrides are loaded and resolved",
)

TableOpt = typer.Option(
    ...,
    "--table",
    "-t",
    help="Table to explain: name, schema.name or catalog.schema.name",
)

ColumnOpt = typer.Option(
    None,
    "--column",
    "-c",
    help="Column to explain as well",
)

SqlTypeOpt = typer.Option(
    "VARCHAR",
    "--sql-type",
    help="SQL type of the column (name or JDBC code)",
)

LengthOpt = typer.Option(None, "--length", help="Declared column length")

PrecisionOpt = typer.Option(None, "--precision", help="Numeric precision")

ScaleOpt = typer.Option(None, "--scale", help="Numeric scale")

NullableOpt = typer.Option(
    True,
    "--nullable/--not-null",
    help="Whether the column is nullable",
)
