"""The override repository.

This module ties the override store, type mappings and filter chain
together behind one mutation API, loads override documents from files,
named resources and streams, and composes the overriding strategy a
generator consumes.

Use it in two phases: populate the repository completely, then call
``build_strategy`` and only read from it. There is no internal locking.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterable, Mapping, Sequence

from reveng.core.binder import bind_document
from reveng.core.document import parse_document
from reveng.core.errors import ConfigurationError, ResourceNotFoundError
from reveng.core.filters import FilterChain, TableFilter
from reveng.core.keys import ColumnKey, TableIdentifier
from reveng.core.meta import MetaAttributeResolver
from reveng.core.models import AssociationInfo, ForeignKeyInfo, SchemaSelection
from reveng.core.resources import ResourceLoader, default_loaders
from reveng.core.schema import SchemaTable
from reveng.core.store import OverrideStore
from reveng.core.strategy import OverridingStrategy, ReverseEngineeringStrategy
from reveng.core.typemap import SQLTypeMapping, TypeMappingResolver

logger = logging.getLogger(__name__)


class OverrideRepository:
    """Layered store of user overrides plus the strategy composition."""

    def __init__(self, loaders: Sequence[ResourceLoader] | None = None):
        """
        Create an empty repository.

        Args:
            loaders: Resource loaders used by ``add_overrides_from_resource``,
                     in lookup order. Defaults to ``default_loaders()``.
        """
        self.loaders: list[ResourceLoader] = (
            list(loaders) if loaders is not None else default_loaders()
        )
        self.store = OverrideStore()
        self.types = TypeMappingResolver()
        self.filters = FilterChain()

    def add_overrides_from_file(self, path: str | Path) -> OverrideRepository:
        """Load an override document from a file path."""
        resource = str(path)
        logger.info("Override file: %s", resource)
        try:
            stream = Path(path).open("rb")
        except OSError as exc:
            logger.error("Could not configure overrides from file: %s", resource, exc_info=True)
            raise ConfigurationError(resource, exc) from exc
        return self.add_overrides_from_stream(stream, resource=resource)

    def add_overrides_from_resource(self, name: str) -> OverrideRepository:
        """Load an override document from the first loader that knows ``name``."""
        logger.info("Override resource: %s", name)
        for loader in self.loaders:
            try:
                stream = loader.open(name)
            except OSError as exc:
                logger.error(
                    "Could not configure overrides from resource: %s", name, exc_info=True
                )
                raise ConfigurationError(name, exc) from exc
            if stream is not None:
                return self.add_overrides_from_stream(stream, resource=name)
        raise ConfigurationError(name, ResourceNotFoundError(name))

    def add_overrides_from_stream(
        self, stream: BinaryIO, resource: str = "<stream>"
    ) -> OverrideRepository:
        """
        Parse, validate and apply an override document read from ``stream``.

        The stream is closed on every exit path.

        Raises:
            ConfigurationError: On read failure, invalid document or binding
                failure. Entries bound before a binding failure are kept.
        """
        failed = True
        try:
            try:
                raw = stream.read()
                document = parse_document(raw)
                bind_document(self, document)
            except (OSError, ValueError) as exc:
                logger.error(
                    "Could not configure overrides from %s", resource, exc_info=True
                )
                raise ConfigurationError(resource, exc) from exc
            failed = False
        finally:
            try:
                stream.close()
            except OSError as exc:
                logger.error("Could not close input stream for %s", resource, exc_info=True)
                if not failed:
                    raise ConfigurationError(resource, exc) from exc
        return self

    def add_type_mapping(self, mapping: SQLTypeMapping) -> None:
        self.types.add(mapping)

    def add_table_filter(self, table_filter: TableFilter) -> None:
        self.filters.add(table_filter)

    def set_type_for_column(
        self, table: TableIdentifier, column: str, type_name: str | None
    ) -> None:
        self.store.column_types.set(ColumnKey(table, column), type_name)

    def set_excluded_column(self, table: TableIdentifier, column: str) -> None:
        self.store.excluded_columns.add(ColumnKey(table, column))

    def set_property_for_column(
        self, table: TableIdentifier, column: str, property_name: str | None
    ) -> None:
        self.store.property_names.set(ColumnKey(table, column), property_name)

    def set_identifier_strategy_for_table(
        self,
        table: TableIdentifier,
        strategy: str | None,
        properties: Mapping[str, str] | None = None,
    ) -> None:
        """
        Record the identifier generator and its parameters for a table.

        The parameters belong to the generator: a new generator without
        parameters drops the ones recorded for the previous generator.
        """
        if not strategy:
            return
        self.store.identifier_strategies.set(table, strategy)
        if not self.store.identifier_properties.set(table, dict(properties or {})):
            self.store.identifier_properties.discard(table)

    def set_primary_key_info_for_table(
        self,
        table: TableIdentifier,
        columns: Iterable[str] | None = None,
        property_name: str | None = None,
        composite_id_name: str | None = None,
    ) -> None:
        """Record primary-key columns, identifier property and composite-id class."""
        self.store.primary_key_columns.set(table, list(columns or ()))
        self.store.primary_key_properties.set(table, property_name)
        self.store.composite_id_names.set(table, composite_id_name)

    def add_schema_selection(self, selection: SchemaSelection) -> None:
        self.store.schema_selections.append(selection)

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
        Record overrides for both sides of a foreign key.

        The owning side can generate a to-one association, the inverse side a
        collection or an inverse one-to-one. Only supplied fields are written.
        """
        return self.store.record_foreign_key_info(
            constraint_name,
            owning_name=owning_name,
            inverse_name=inverse_name,
            owning_exclude=owning_exclude,
            inverse_exclude=inverse_exclude,
            owning_association=owning_association,
            inverse_association=inverse_association,
        )

    def set_table_meta_attributes(
        self, table: TableIdentifier, attributes: Mapping[str, Iterable[str]] | None
    ) -> None:
        self.store.set_meta(self.store.table_meta, table, attributes)

    def set_column_meta_attributes(
        self,
        table: TableIdentifier,
        column: str,
        attributes: Mapping[str, Iterable[str]] | None,
    ) -> None:
        self.store.set_meta(self.store.column_meta, ColumnKey(table, column), attributes)

    def register_table(self, table: SchemaTable, class_name: str | None = None) -> None:
        """Index the table's foreign keys by referenced table; record its class name."""
        self.store.register_table(table, class_name)

    def build_strategy(
        self, baseline: ReverseEngineeringStrategy | None = None
    ) -> OverridingStrategy:
        """
        Compose the overriding strategy.

        Args:
            baseline: Strategy consulted when no override applies. When None,
                      queries needing it raise DelegationError at call time.
        """
        return OverridingStrategy(
            store=self.store,
            types=self.types,
            filters=self.filters,
            meta=MetaAttributeResolver(self.store, self.filters),
            baseline=baseline,
        )
