"""Value keys used to index overrides.

The override repository stores every single-fact override in plain dicts.
The keys defined here are frozen dataclasses so that equality and hashing
are structural: two identifiers built independently for the same table
address the same override entry.

No field is optional in the equality sense. A ``None`` catalog is a value
of its own and does not match a concrete catalog name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

UNKNOWN_LENGTH: int | None = None
"""Sentinel length for type mappings that apply to any declared length."""


@dataclass(frozen=True)
class TableIdentifier:
    """
    Location of a table in the database.

    Attributes:
        catalog: Catalog the table lives in, if the database has catalogs.
        schema: Schema the table lives in, if the database has schemas.
        name: Table name as reported by the schema reader.
    """

    catalog: str | None
    schema: str | None
    name: str | None

    @classmethod
    def create(cls, table: Any) -> TableIdentifier:
        """
        Build an identifier from any table-like object.

        Accepts anything exposing ``catalog``, ``schema`` and ``name``
        attributes (schema reader tables, declared tables, identifiers).
        """
        if isinstance(table, TableIdentifier):
            return table
        return cls(
            catalog=getattr(table, "catalog", None),
            schema=getattr(table, "schema", None),
            name=getattr(table, "name", None),
        )

    @classmethod
    def parse(cls, qualified_name: str) -> TableIdentifier:
        """Split `name`, `schema.name` or `catalog.schema.name`."""
        parts = qualified_name.strip().split(".")
        if len(parts) > 3 or not all(parts):
            raise ValueError(
                "Table must be in the form `name`, `schema.name` or "
                "`catalog.schema.name`."
            )
        padded: list[str | None] = [None] * (3 - len(parts)) + list(parts)
        return cls(catalog=padded[0], schema=padded[1], name=padded[2])

    @property
    def qualified_name(self) -> str:
        """Dotted name built from the parts that are present."""
        return ".".join(p for p in (self.catalog, self.schema, self.name) if p)

    def __str__(self) -> str:
        return self.qualified_name


@dataclass(frozen=True)
class ColumnKey:
    """Location of a column: the owning table plus the column name."""

    table: TableIdentifier
    column: str | None

    def __str__(self) -> str:
        return f"{self.table.qualified_name}.{self.column}"


@dataclass(frozen=True)
class TypeMappingKey:
    """Bucket key for type mappings: source type code and declared length."""

    sql_type: int
    length: int | None = UNKNOWN_LENGTH
