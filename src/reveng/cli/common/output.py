"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from reveng.core.typemap import SqlType

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, Mapping):
        return ", ".join(f"{k}={_text(v)}" for k, v in value.items())
    return str(value)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {_text(v)}")

    def validation_results_table(
        self, results: Iterable[tuple[str, str | None]], title: str = "Validation"
    ) -> None:
        """
        Render one row per override document.

        Expects tuples of (resource, error message or None).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Document", style="ok")
        t.add_column("Result")

        for resource, error in results:
            t.add_row(resource, "[ok]OK[/]" if error is None else f"[err]FAIL[/] {error}")

        console.print(t)

    def filters_table(self, filters: Iterable[Any], title: str = "Table filters") -> None:
        """
        Render the filter chain in evaluation order.

        Expects objects like reveng.core.filters.TableFilter.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("#", style="meta", no_wrap=True)
        t.add_column("Catalog")
        t.add_column("Schema")
        t.add_column("Name")
        t.add_column("Stance")
        t.add_column("Package", style="meta")

        for i, f in enumerate(filters, start=1):
            stance = "[err]exclude[/]" if f.exclude_flag else "[ok]include[/]"
            t.add_row(
                str(i),
                f.catalog_regex.pattern,
                f.schema_regex.pattern,
                f.name_regex.pattern,
                stance,
                _text(f.package_name),
            )

        console.print(t)

    def type_mappings_table(
        self, mappings: Iterable[Any], title: str = "Type mappings"
    ) -> None:
        """Expects objects like reveng.core.typemap.SQLTypeMapping."""
        t = Table(title=title, show_lines=False)
        t.add_column("SQL type", style="ok", no_wrap=True)
        t.add_column("Length")
        t.add_column("Precision")
        t.add_column("Scale")
        t.add_column("Nullable")
        t.add_column("Target")

        for m in mappings:
            t.add_row(
                SqlType.name_of(m.sql_type),
                _text(m.length),
                _text(m.precision),
                _text(m.scale),
                _text(m.nullable),
                m.target_type,
            )

        console.print(t)

    def class_names_table(
        self, entries: Iterable[tuple[Any, str]], title: str = "Class names"
    ) -> None:
        """Expects tuples of (TableIdentifier, class name)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Table", style="ok")
        t.add_column("Class")

        for table, class_name in entries:
            t.add_row(str(table), class_name)

        console.print(t)

    def foreign_keys_table(
        self, entries: Iterable[tuple[str, Any]], title: str = "Foreign keys"
    ) -> None:
        """Expects tuples of (constraint name, ForeignKeyInfo)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Constraint", style="ok")
        t.add_column("To-one")
        t.add_column("Exclude to-one")
        t.add_column("Inverse")
        t.add_column("Exclude inverse")

        for name, info in entries:
            t.add_row(
                name,
                _text(info.owning_name),
                _text(info.owning_exclude),
                _text(info.inverse_name),
                _text(info.inverse_exclude),
            )

        console.print(t)

    def decisions_table(
        self, decisions: Iterable[tuple[str, Any, bool]], title: str = "Decisions"
    ) -> None:
        """
        Render resolved strategy decisions.

        Expects tuples of (question, answer, overridden). Answers that fell
        through to the baseline are shown as such.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Question", style="meta")
        t.add_column("Answer")

        for question, answer, overridden in decisions:
            t.add_row(question, _text(answer) if overridden else "[meta]baseline[/]")

        console.print(t)


out = Out()
