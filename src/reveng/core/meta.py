"""Meta attribute resolution for tables and columns."""

from __future__ import annotations

from reveng.core.filters import FilterChain
from reveng.core.keys import ColumnKey, TableIdentifier
from reveng.core.models import MetaAttribute, realize_meta_attributes
from reveng.core.store import OverrideStore


class MetaAttributeResolver:
    """
    Resolve meta attributes, preferring specific overrides.

    Tables fall back to the general attributes of the filter chain;
    columns have no fallback.
    """

    def __init__(self, store: OverrideStore, filters: FilterChain):
        self.store = store
        self.filters = filters

    def for_table(self, identifier: TableIdentifier) -> dict[str, MetaAttribute] | None:
        specific = self.store.table_meta.get(identifier)
        if specific:
            return realize_meta_attributes(specific)
        general = self.filters.general_attributes_for(identifier)
        if general:
            return realize_meta_attributes(general)
        return None

    def for_column(
        self, identifier: TableIdentifier, column: str
    ) -> dict[str, MetaAttribute] | None:
        specific = self.store.column_meta.get(ColumnKey(identifier, column))
        if specific:
            return realize_meta_attributes(specific)
        return None
