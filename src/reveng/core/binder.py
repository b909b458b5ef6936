"""Apply a validated override document to an override repository.

Binding goes through the repository's public mutation API only, in
document order: schema selections, type mappings, table filters, then
tables. It is not transactional; entries applied before a failure stay.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reveng.core.document import AssociationNode, OverrideDocument, TableNode
from reveng.core.filters import TableFilter
from reveng.core.keys import TableIdentifier
from reveng.core.models import AssociationInfo, SchemaSelection
from reveng.core.schema import DeclaredForeignKey, DeclaredTable
from reveng.core.typemap import SQLTypeMapping

if TYPE_CHECKING:
    from reveng.core.repository import OverrideRepository


def _association(node: AssociationNode | None) -> AssociationInfo | None:
    if node is None or not node.has_association_info:
        return None
    return AssociationInfo(
        cascade=node.cascade,
        fetch=node.fetch,
        update=node.update,
        insert=node.insert,
    )


def _declared_table(node: TableNode) -> DeclaredTable:
    """Build the declared table, keeping only foreign keys with a referenced table."""
    foreign_keys = tuple(
        DeclaredForeignKey(
            name=fk.constraint,
            referenced_table=TableIdentifier(
                catalog=fk.references.catalog,
                schema=fk.references.schema_name,
                name=fk.references.name,
            ),
            columns=tuple(fk.columns),
            referenced_columns=tuple(fk.referenced_columns),
        )
        for fk in node.foreign_keys
        if fk.references is not None
    )
    return DeclaredTable(
        catalog=node.catalog,
        schema=node.schema_name,
        name=node.name,
        foreign_keys=foreign_keys,
    )


def _bind_table(repository: OverrideRepository, node: TableNode) -> None:
    table = _declared_table(node)
    identifier = table.identifier

    repository.register_table(table, node.class_name)
    repository.set_table_meta_attributes(identifier, node.meta)

    pk = node.primary_key
    if pk is not None:
        if pk.generator is not None:
            repository.set_identifier_strategy_for_table(
                identifier, pk.generator.class_name, pk.generator.params
            )
        repository.set_primary_key_info_for_table(
            identifier,
            columns=pk.columns,
            property_name=pk.property_name,
            composite_id_name=pk.composite_id_class,
        )

    for column in node.columns:
        repository.set_type_for_column(identifier, column.name, column.type_name)
        repository.set_property_for_column(identifier, column.name, column.property_name)
        if column.exclude:
            repository.set_excluded_column(identifier, column.name)
        repository.set_column_meta_attributes(identifier, column.name, column.meta)

    for fk in node.foreign_keys:
        owning, inverse = fk.owning, fk.inverse
        repository.record_foreign_key_info(
            fk.constraint,
            owning_name=owning.property_name if owning else None,
            inverse_name=inverse.property_name if inverse else None,
            owning_exclude=owning.exclude if owning else None,
            inverse_exclude=inverse.exclude if inverse else None,
            owning_association=_association(owning),
            inverse_association=_association(inverse),
        )


def bind_document(repository: OverrideRepository, document: OverrideDocument) -> None:
    """
    Apply every entry of a validated document to the repository.

    Args:
        repository: Repository receiving the mutation calls.
        document: Validated override document.
    """
    for selection in document.schema_selections:
        repository.add_schema_selection(
            SchemaSelection(
                match_catalog=selection.catalog,
                match_schema=selection.schema_name,
                match_table=selection.table,
            )
        )

    for mapping in document.type_mappings:
        repository.add_type_mapping(
            SQLTypeMapping(
                sql_type=mapping.sql_type,
                target_type=mapping.target,
                length=mapping.length,
                precision=mapping.precision,
                scale=mapping.scale,
                nullable=None if mapping.not_null is None else not mapping.not_null,
            )
        )

    for table_filter in document.table_filters:
        repository.add_table_filter(
            TableFilter(
                match_catalog=table_filter.match_catalog,
                match_schema=table_filter.match_schema,
                match_name=table_filter.match_name,
                exclude=table_filter.exclude,
                package=table_filter.package,
                meta_attributes=table_filter.meta,
            )
        )

    for table in document.tables:
        _bind_table(repository, table)
