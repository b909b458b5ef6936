"""Baseline strategy interface and the overriding decorator.

A generator asks a reverse engineering strategy how to map each table,
column and foreign key. ``OverridingStrategy`` answers from the override
repository first and hands every query it has no override for to the
wrapped baseline strategy, unchanged. Table and column exclusion and meta
attributes are answered by the overrides alone.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from reveng.core.errors import DelegationError
from reveng.core.filters import FilterChain
from reveng.core.keys import ColumnKey, TableIdentifier
from reveng.core.meta import MetaAttributeResolver
from reveng.core.models import AssociationInfo, MetaAttribute, SchemaSelection
from reveng.core.schema import SchemaForeignKey
from reveng.core.store import OverrideStore
from reveng.core.typemap import SqlType, TypeMappingResolver

logger = logging.getLogger(__name__)


def qualify(package: str, name: str) -> str:
    return f"{package}.{name}"


def unqualify(name: str) -> str:
    return name.rsplit(".", 1)[-1]


class ReverseEngineeringStrategy(Protocol):
    """Capability set a mapping generator queries while reading a schema."""

    def exclude_table(self, table: TableIdentifier) -> bool: ...

    def exclude_column(self, table: TableIdentifier, column: str) -> bool: ...

    def table_to_class_name(self, table: TableIdentifier) -> str | None: ...

    def column_to_property_name(self, table: TableIdentifier, column: str) -> str: ...

    def column_to_type_name(
        self,
        table: TableIdentifier | None,
        column: str | None,
        sql_type: int,
        length: int | None,
        precision: int | None,
        scale: int | None,
        nullable: bool,
        generated_identifier: bool,
    ) -> str | None: ...

    def table_to_identifier_property_name(self, table: TableIdentifier) -> str | None: ...

    def table_to_composite_id_name(self, table: TableIdentifier) -> str | None: ...

    def get_table_identifier_strategy_name(self, table: TableIdentifier) -> str | None: ...

    def get_table_identifier_properties(
        self, table: TableIdentifier
    ) -> dict[str, str] | None: ...

    def get_primary_key_column_names(self, table: TableIdentifier) -> list[str] | None: ...

    def get_foreign_keys(self, referenced_table: TableIdentifier) -> list[Any] | None: ...

    def foreign_key_to_entity_name(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
        unique_reference: bool,
    ) -> str: ...

    def foreign_key_to_inverse_entity_name(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
        unique_reference: bool,
    ) -> str: ...

    def foreign_key_to_collection_name(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
        unique_reference: bool,
    ) -> str: ...

    def exclude_foreign_key_as_collection(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
    ) -> bool: ...

    def exclude_foreign_key_as_many_to_one(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
    ) -> bool: ...

    def foreign_key_to_association_info(
        self, foreign_key: SchemaForeignKey
    ) -> AssociationInfo | None: ...

    def foreign_key_to_inverse_association_info(
        self, foreign_key: SchemaForeignKey
    ) -> AssociationInfo | None: ...

    def get_schema_selections(self) -> list[SchemaSelection]: ...

    def table_to_meta_attributes(
        self, table: TableIdentifier
    ) -> dict[str, MetaAttribute] | None: ...

    def column_to_meta_attributes(
        self, table: TableIdentifier, column: str
    ) -> dict[str, MetaAttribute] | None: ...


class OverridingStrategy:
    """
    Strategy that answers from overrides and falls back to a baseline.

    The baseline may be None: queries covered by an override still answer,
    and a DelegationError is raised only when a query actually needs the
    baseline.
    """

    def __init__(
        self,
        store: OverrideStore,
        types: TypeMappingResolver,
        filters: FilterChain,
        meta: MetaAttributeResolver,
        baseline: ReverseEngineeringStrategy | None = None,
    ):
        self.store = store
        self.types = types
        self.filters = filters
        self.meta = meta
        self.baseline = baseline

    def _delegate(self, method: str) -> ReverseEngineeringStrategy:
        if self.baseline is None:
            raise DelegationError(method)
        return self.baseline

    def exclude_table(self, table: TableIdentifier) -> bool:
        return self.filters.is_excluded(table)

    def exclude_column(self, table: TableIdentifier, column: str) -> bool:
        return ColumnKey(table, column) in self.store.excluded_columns

    def table_to_class_name(self, table: TableIdentifier) -> str | None:
        """
        Class name for a table.

        A fully qualified override is returned as-is. A simple override, or
        the baseline's name, is placed in the package of the first filter
        matching the table when there is one.
        """
        package = self.filters.package_for(table)
        class_name = self.store.class_names.get(table)
        if class_name is not None:
            if "." in class_name or package is None:
                return class_name
            return qualify(package, class_name)

        name = self._delegate("table_to_class_name").table_to_class_name(table)
        if package is None or name is None:
            return name
        return qualify(package, unqualify(name))

    def column_to_property_name(self, table: TableIdentifier, column: str) -> str:
        result = self.store.property_names.get(ColumnKey(table, column))
        if result is not None:
            return result
        return self._delegate("column_to_property_name").column_to_property_name(
            table, column
        )

    def column_to_type_name(
        self,
        table: TableIdentifier | None,
        column: str | None,
        sql_type: int,
        length: int | None,
        precision: int | None,
        scale: int | None,
        nullable: bool,
        generated_identifier: bool,
    ) -> str | None:
        """
        Target type for a column.

        An explicit column type beats the type mappings, and both beat the
        baseline.
        """
        location = f"{table}.{column}" if table is not None else f"column {column}"
        if table is not None and column is not None:
            result = self.store.column_types.get(ColumnKey(table, column))
            if result is not None:
                logger.debug("explicit column mapping found for [%s] to [%s]", location, result)
                return result

        result = self.types.resolve(sql_type, length, precision, scale, nullable)
        if result is not None:
            logger.debug(
                "type mapping found for [%s t:%s l:%s p:%s s:%s n:%s id:%s] to [%s]",
                location,
                SqlType.name_of(sql_type),
                length,
                precision,
                scale,
                nullable,
                generated_identifier,
                result,
            )
            return result

        return self._delegate("column_to_type_name").column_to_type_name(
            table,
            column,
            sql_type,
            length,
            precision,
            scale,
            nullable,
            generated_identifier,
        )

    def table_to_identifier_property_name(self, table: TableIdentifier) -> str | None:
        result = self.store.primary_key_properties.get(table)
        if result is not None:
            return result
        return self._delegate(
            "table_to_identifier_property_name"
        ).table_to_identifier_property_name(table)

    def table_to_composite_id_name(self, table: TableIdentifier) -> str | None:
        result = self.store.composite_id_names.get(table)
        if result is not None:
            return result
        return self._delegate("table_to_composite_id_name").table_to_composite_id_name(
            table
        )

    def get_table_identifier_strategy_name(self, table: TableIdentifier) -> str | None:
        result = self.store.identifier_strategies.get(table)
        if result is not None:
            logger.debug("identifier strategy for %s -> '%s'", table, result)
            return result
        return self._delegate(
            "get_table_identifier_strategy_name"
        ).get_table_identifier_strategy_name(table)

    def get_table_identifier_properties(
        self, table: TableIdentifier
    ) -> dict[str, str] | None:
        result = self.store.identifier_properties.get(table)
        if result is not None:
            return result
        return self._delegate(
            "get_table_identifier_properties"
        ).get_table_identifier_properties(table)

    def get_primary_key_column_names(self, table: TableIdentifier) -> list[str] | None:
        result = self.store.primary_key_columns.get(table)
        if result is not None:
            return result
        return self._delegate(
            "get_primary_key_column_names"
        ).get_primary_key_column_names(table)

    def get_foreign_keys(self, referenced_table: TableIdentifier) -> list[Any] | None:
        result = self.store.foreign_keys_referencing(referenced_table)
        if result is not None:
            return result
        return self._delegate("get_foreign_keys").get_foreign_keys(referenced_table)

    def foreign_key_to_entity_name(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
        unique_reference: bool,
    ) -> str:
        info = self.store.foreign_keys.get(key_name)
        if info is not None and info.owning_name is not None:
            return info.owning_name
        return self._delegate("foreign_key_to_entity_name").foreign_key_to_entity_name(
            key_name,
            from_table,
            from_columns,
            referenced_table,
            referenced_columns,
            unique_reference,
        )

    def foreign_key_to_inverse_entity_name(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
        unique_reference: bool,
    ) -> str:
        info = self.store.foreign_keys.get(key_name)
        if info is not None and info.inverse_name is not None:
            return info.inverse_name
        return self._delegate(
            "foreign_key_to_inverse_entity_name"
        ).foreign_key_to_inverse_entity_name(
            key_name,
            from_table,
            from_columns,
            referenced_table,
            referenced_columns,
            unique_reference,
        )

    def foreign_key_to_collection_name(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
        unique_reference: bool,
    ) -> str:
        info = self.store.foreign_keys.get(key_name)
        if info is not None and info.inverse_name is not None:
            return info.inverse_name
        return self._delegate(
            "foreign_key_to_collection_name"
        ).foreign_key_to_collection_name(
            key_name,
            from_table,
            from_columns,
            referenced_table,
            referenced_columns,
            unique_reference,
        )

    def exclude_foreign_key_as_collection(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
    ) -> bool:
        info = self.store.foreign_keys.get(key_name)
        if info is not None and info.inverse_exclude is not None:
            return info.inverse_exclude
        return self._delegate(
            "exclude_foreign_key_as_collection"
        ).exclude_foreign_key_as_collection(
            key_name, from_table, from_columns, referenced_table, referenced_columns
        )

    def exclude_foreign_key_as_many_to_one(
        self,
        key_name: str,
        from_table: TableIdentifier,
        from_columns: Sequence[str],
        referenced_table: TableIdentifier,
        referenced_columns: Sequence[str],
    ) -> bool:
        info = self.store.foreign_keys.get(key_name)
        if info is not None and info.owning_exclude is not None:
            return info.owning_exclude
        return self._delegate(
            "exclude_foreign_key_as_many_to_one"
        ).exclude_foreign_key_as_many_to_one(
            key_name, from_table, from_columns, referenced_table, referenced_columns
        )

    def foreign_key_to_association_info(
        self, foreign_key: SchemaForeignKey
    ) -> AssociationInfo | None:
        info = self.store.foreign_keys.get(foreign_key.name)
        if info is not None and info.owning_association is not None:
            return info.owning_association
        return self._delegate(
            "foreign_key_to_association_info"
        ).foreign_key_to_association_info(foreign_key)

    def foreign_key_to_inverse_association_info(
        self, foreign_key: SchemaForeignKey
    ) -> AssociationInfo | None:
        info = self.store.foreign_keys.get(foreign_key.name)
        if info is not None and info.inverse_association is not None:
            return info.inverse_association
        return self._delegate(
            "foreign_key_to_inverse_association_info"
        ).foreign_key_to_inverse_association_info(foreign_key)

    def get_schema_selections(self) -> list[SchemaSelection]:
        if self.store.schema_selections:
            return list(self.store.schema_selections)
        return self._delegate("get_schema_selections").get_schema_selections()

    def table_to_meta_attributes(
        self, table: TableIdentifier
    ) -> dict[str, MetaAttribute] | None:
        return self.meta.for_table(table)

    def column_to_meta_attributes(
        self, table: TableIdentifier, column: str
    ) -> dict[str, MetaAttribute] | None:
        return self.meta.for_column(table, column)
