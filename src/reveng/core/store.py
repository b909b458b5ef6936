"""Keyed storage for single-fact overrides.

Every override lives in an ``OverrideMap``: a dict with replace-on-write
semantics that ignores writes carrying an empty payload. Sparse,
incremental population therefore never clobbers a value an earlier call
already set.
"""

from __future__ import annotations

from collections.abc import Sized
from typing import Any, Generic, Iterable, Iterator, Mapping, TypeVar

from reveng.core.keys import ColumnKey, TableIdentifier
from reveng.core.models import AssociationInfo, ForeignKeyInfo, SchemaSelection
from reveng.core.schema import SchemaForeignKey, SchemaTable

K = TypeVar("K")
V = TypeVar("V")


def is_empty(value: Any) -> bool:
    """``None`` and empty strings/collections count as "no value"; False does not."""
    if value is None:
        return True
    if isinstance(value, Sized):
        return len(value) == 0
    return False


class OverrideMap(Generic[K, V]):
    """Dict of overrides where empty writes are no-ops."""

    def __init__(self, name: str):
        self.name = name
        self._values: dict[K, V] = {}

    def set(self, key: K, value: V | None) -> bool:
        """
        Store ``value`` under ``key`` unless the payload is empty.

        Returns:
            True if the value was stored, False if the write was ignored.
        """
        if is_empty(value):
            return False
        self._values[key] = value  # type: ignore[assignment]
        return True

    def get(self, key: K) -> V | None:
        return self._values.get(key)

    def discard(self, key: K) -> None:
        self._values.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[K]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def items(self) -> Iterable[tuple[K, V]]:
        return self._values.items()

    def __repr__(self) -> str:
        return f"OverrideMap({self.name!r}, {len(self._values)} entries)"


class OverrideStore:
    """
    All explicit overrides keyed by table, column or constraint name.

    The store is populated during the configuration phase and only read
    afterwards.
    """

    def __init__(self) -> None:
        self.class_names: OverrideMap[TableIdentifier, str] = OverrideMap("class name")
        self.column_types: OverrideMap[ColumnKey, str] = OverrideMap("column type")
        self.property_names: OverrideMap[ColumnKey, str] = OverrideMap("property name")
        self.excluded_columns: set[ColumnKey] = set()
        self.identifier_strategies: OverrideMap[TableIdentifier, str] = OverrideMap(
            "identifier strategy"
        )
        self.identifier_properties: OverrideMap[TableIdentifier, dict[str, str]] = (
            OverrideMap("identifier properties")
        )
        self.primary_key_columns: OverrideMap[TableIdentifier, list[str]] = (
            OverrideMap("primary key columns")
        )
        self.primary_key_properties: OverrideMap[TableIdentifier, str] = OverrideMap(
            "primary key property"
        )
        self.composite_id_names: OverrideMap[TableIdentifier, str] = OverrideMap(
            "composite id name"
        )
        self.foreign_keys: OverrideMap[str, ForeignKeyInfo] = OverrideMap("foreign key")
        self.table_meta: OverrideMap[TableIdentifier, dict[str, list[str]]] = (
            OverrideMap("table meta attributes")
        )
        self.column_meta: OverrideMap[ColumnKey, dict[str, list[str]]] = OverrideMap(
            "column meta attributes"
        )
        self.referencing_foreign_keys: dict[TableIdentifier, list[SchemaForeignKey]] = {}
        self.schema_selections: list[SchemaSelection] = []

    def record_foreign_key_info(
        self,
        constraint_name: str,
        *,
        owning_name: str | None = None,
        inverse_name: str | None = None,
        owning_exclude: bool | None = None,
        inverse_exclude: bool | None = None,
        owning_association: AssociationInfo | None = None,
        inverse_association: AssociationInfo | None = None,
    ) -> ForeignKeyInfo:
        """
        Merge the supplied fields into the overrides for a constraint.

        Fields left as None (and empty names) keep whatever an earlier call
        recorded for the same constraint.

        Returns:
            The merged ForeignKeyInfo now stored for the constraint.
        """
        update = ForeignKeyInfo(
            owning_name=owning_name or None,
            inverse_name=inverse_name or None,
            owning_exclude=owning_exclude,
            inverse_exclude=inverse_exclude,
            owning_association=owning_association,
            inverse_association=inverse_association,
        )
        merged = (self.foreign_keys.get(constraint_name) or ForeignKeyInfo()).merged(update)
        if merged != ForeignKeyInfo():
            self.foreign_keys.set(constraint_name, merged)
        return merged

    def register_table(self, table: SchemaTable, class_name: str | None = None) -> None:
        """
        Index the table's foreign keys by referenced table and record its class name.

        Args:
            table: Table-like object with catalog/schema/name and foreign_keys.
            class_name: Wanted class name for the table, ignored when empty.
        """
        for foreign_key in getattr(table, "foreign_keys", None) or ():
            referenced = TableIdentifier.create(foreign_key.referenced_table)
            self.referencing_foreign_keys.setdefault(referenced, []).append(foreign_key)
        self.class_names.set(TableIdentifier.create(table), class_name)

    def foreign_keys_referencing(
        self, referenced: TableIdentifier
    ) -> list[SchemaForeignKey] | None:
        return self.referencing_foreign_keys.get(referenced)

    def set_meta(
        self,
        target: OverrideMap[Any, dict[str, list[str]]],
        key: Any,
        attributes: Mapping[str, Iterable[str]] | None,
    ) -> bool:
        """Store a raw ``{name: [values]}`` attribute map, ignoring empty maps."""
        if not attributes:
            return False
        return target.set(key, {name: list(values) for name, values in attributes.items()})
