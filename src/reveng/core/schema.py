"""Schema model boundary.

The tables and foreign keys the overrides talk about are produced by an
external schema reader. This module describes the small surface the
override repository relies on, plus lightweight declared equivalents that
the document binder creates for foreign keys declared only in an override
document.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Protocol

from reveng.core.keys import TableIdentifier


class SchemaForeignKey(Protocol):
    """Interface of a foreign key as seen by the override repository."""

    name: str
    referenced_table: Any


class SchemaTable(Protocol):
    """Interface of a table as seen by the override repository."""

    catalog: str | None
    schema: str | None
    name: str

    @property
    def foreign_keys(self) -> Iterable[SchemaForeignKey]:
        """Foreign keys owned by this table."""
        ...


@dataclass(frozen=True)
class DeclaredForeignKey:
    """A foreign key declared in an override document."""

    name: str
    referenced_table: TableIdentifier
    columns: tuple[str, ...] = ()
    referenced_columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeclaredTable:
    """A table declared in an override document, with its declared foreign keys."""

    catalog: str | None
    schema: str | None
    name: str
    foreign_keys: tuple[DeclaredForeignKey, ...] = ()

    @property
    def identifier(self) -> TableIdentifier:
        return TableIdentifier.create(self)
