"""Commands for checking and inspecting override documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import typer

from reveng.cli.common.context import (
    OverridesAppContext,
    build_overrides_context,
    load_documents,
)
from reveng.cli.common.exits import die
from reveng.cli.common.options import (
    ColumnOpt,
    FilesArg,
    LengthOpt,
    NullableOpt,
    PrecisionOpt,
    ResourceOpt,
    ScaleOpt,
    SearchPathOpt,
    SqlTypeOpt,
    TableOpt,
    VerboseOpt,
)
from reveng.cli.common.output import out
from reveng.core.errors import ConfigurationError, DelegationError
from reveng.core.keys import TableIdentifier
from reveng.core.typemap import SqlType

app = typer.Typer(
    help="Validate and inspect mapping override documents.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    search_path: str | None = SearchPathOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize the overrides context."""
    ctx.obj = build_overrides_context(search_path, verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def _require_documents(files: list[Path] | None, resources: list[str]) -> list[Path]:
    if not files and not resources:
        die("Provide at least one override document or --resource.", code=2)
    return list(files or [])


def _decide(fn: Callable[[], Any]) -> tuple[Any, bool]:
    """Run one strategy query; report fallthroughs instead of failing."""
    try:
        return fn(), True
    except DelegationError:
        return None, False


@app.command()
def validate(
    ctx: typer.Context,
    files: list[Path] | None = FilesArg,
    resource: list[str] = ResourceOpt,
):
    """
    Check that each override document loads.

    Every document is loaded into its own repository, so one broken
    document does not hide problems in the others.
    """
    appctx: OverridesAppContext = ctx.obj
    paths = _require_documents(files, resource)

    results: list[tuple[str, str | None]] = []
    for path in paths:
        try:
            appctx.new_repository().add_overrides_from_file(path)
            results.append((str(path), None))
        except ConfigurationError as exc:
            results.append((str(path), str(exc.cause)))
    for name in resource:
        try:
            appctx.new_repository().add_overrides_from_resource(name)
            results.append((name, None))
        except ConfigurationError as exc:
            results.append((name, str(exc.cause)))

    out.validation_results_table(results)
    failed = [r for r, error in results if error is not None]
    if failed:
        die(f"{len(failed)} of {len(results)} document(s) failed validation.", code=1)
    out.success(f"{len(results)} document(s) valid.")


@app.command()
def summary(
    ctx: typer.Context,
    files: list[Path] | None = FilesArg,
    resource: list[str] = ResourceOpt,
):
    """Load all documents into one repository and show what they override."""
    appctx: OverridesAppContext = ctx.obj
    paths = _require_documents(files, resource)

    with out.status("Loading overrides..."):
        repository = load_documents(appctx.new_repository(), paths, resource)

    store = repository.store
    counts = {
        "Table filters": len(repository.filters),
        "Type mappings": len(repository.types),
        "Class names": len(store.class_names),
        "Foreign keys": len(store.foreign_keys),
        "Schema selections": len(store.schema_selections),
    }
    out.header("Overrides")
    out.kv(counts)
    if not any(counts.values()):
        out.warn("No overrides found in the given documents.")

    if len(repository.filters):
        out.filters_table(repository.filters)
    if len(repository.types):
        out.type_mappings_table(repository.types)
    if len(store.class_names):
        out.class_names_table(store.class_names.items())
    if len(store.foreign_keys):
        out.foreign_keys_table(store.foreign_keys.items())


@app.command()
def explain(
    ctx: typer.Context,
    files: list[Path] | None = FilesArg,
    resource: list[str] = ResourceOpt,
    table: str = TableOpt,
    column: str | None = ColumnOpt,
    sql_type: str = SqlTypeOpt,
    length: int | None = LengthOpt,
    precision: int | None = PrecisionOpt,
    scale: int | None = ScaleOpt,
    nullable: bool = NullableOpt,
):
    """
    Show how the overrides answer the generator's questions for one table.

    No baseline strategy is involved: questions without an override are
    reported as falling through to the baseline.
    """
    appctx: OverridesAppContext = ctx.obj
    paths = _require_documents(files, resource)

    try:
        identifier = TableIdentifier.parse(table)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc

    code: int | None = None
    if column:
        try:
            code = SqlType.parse(sql_type)
        except ValueError as exc:
            out.error(str(exc))
            raise typer.Exit(2) from exc

    repository = load_documents(appctx.new_repository(), paths, resource)
    strategy = repository.build_strategy()

    questions: list[tuple[str, Callable[[], Any]]] = [
        ("Excluded", lambda: strategy.exclude_table(identifier)),
        ("Class name", lambda: strategy.table_to_class_name(identifier)),
        (
            "Identifier strategy",
            lambda: strategy.get_table_identifier_strategy_name(identifier),
        ),
        (
            "Identifier parameters",
            lambda: strategy.get_table_identifier_properties(identifier),
        ),
        ("Primary key columns", lambda: strategy.get_primary_key_column_names(identifier)),
        (
            "Identifier property",
            lambda: strategy.table_to_identifier_property_name(identifier),
        ),
        ("Composite id class", lambda: strategy.table_to_composite_id_name(identifier)),
        ("Meta attributes", lambda: strategy.table_to_meta_attributes(identifier)),
        (
            "Referencing foreign keys",
            lambda: [fk.name for fk in strategy.get_foreign_keys(identifier) or []],
        ),
    ]

    if column:
        questions += [
            (f"{column}: excluded", lambda: strategy.exclude_column(identifier, column)),
            (
                f"{column}: property",
                lambda: strategy.column_to_property_name(identifier, column),
            ),
            (
                f"{column}: type",
                lambda: strategy.column_to_type_name(
                    identifier, column, code, length, precision, scale, nullable, False
                ),
            ),
            (
                f"{column}: meta attributes",
                lambda: strategy.column_to_meta_attributes(identifier, column),
            ),
        ]

    decisions = []
    for question, fn in questions:
        answer, overridden = _decide(fn)
        decisions.append((question, answer, overridden))

    out.header(f"Table {identifier}")
    out.decisions_table(decisions)
