"""Table filters and the ordered filter chain.

A table filter pairs a match rule over table identifiers with an
inclusion stance, an optional target package and optional general meta
attributes. Filters are evaluated in the order they were added; the
chain answers "is this table excluded", "which package does it go to"
and "which general attributes apply".

Filters are pure, side-effect-free objects.
"""

from __future__ import annotations

import re
from typing import Iterator, Mapping, Sequence

from reveng.core.keys import TableIdentifier

ANY = ".*"


def _compile(pattern: str | None, part: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern if pattern is not None else ANY)
    except re.error as exc:
        raise ValueError(f"Invalid regex expression for {part}: {exc}") from exc


class TableFilter:
    """
    Inclusion and metadata rule for tables whose identifier matches.

    Each of catalog, schema and name is matched with a regular expression
    that must match the whole value. A missing identifier part is matched
    as the empty string.
    """

    def __init__(
        self,
        *,
        match_catalog: str | None = None,
        match_schema: str | None = None,
        match_name: str | None = None,
        exclude: bool = False,
        package: str | None = None,
        meta_attributes: Mapping[str, Sequence[str]] | None = None,
    ):
        """
        Create a table filter.

        Args:
            match_catalog: Regex on the catalog, any catalog when None.
            match_schema: Regex on the schema, any schema when None.
            match_name: Regex on the table name, any name when None.
            exclude: True to exclude matching tables, False to include them.
            package: Package for classes generated from matching tables.
            meta_attributes: General ``{name: [values]}`` attributes.

        Raises:
            ValueError: If one of the patterns is not a valid regex.
        """
        self.catalog_regex = _compile(match_catalog, "catalog")
        self.schema_regex = _compile(match_schema, "schema")
        self.name_regex = _compile(match_name, "name")
        self.exclude_flag = exclude
        self.package_name = package
        self.meta = {k: list(v) for k, v in (meta_attributes or {}).items()}

    @property
    def is_include(self) -> bool:
        """True when the filter's stance is inclusion."""
        return not self.exclude_flag

    def matches(self, identifier: TableIdentifier) -> bool:
        """Check whether all three patterns match the identifier."""
        return (
            self.catalog_regex.fullmatch(identifier.catalog or "") is not None
            and self.schema_regex.fullmatch(identifier.schema or "") is not None
            and self.name_regex.fullmatch(identifier.name or "") is not None
        )

    def exclude(self, identifier: TableIdentifier) -> bool | None:
        """Exclusion verdict for a matching table, None when it does not match."""
        return self.exclude_flag if self.matches(identifier) else None

    def package(self, identifier: TableIdentifier) -> str | None:
        return self.package_name if self.matches(identifier) else None

    def meta_attributes(self, identifier: TableIdentifier) -> dict[str, list[str]] | None:
        if not self.meta or not self.matches(identifier):
            return None
        return self.meta

    def __repr__(self) -> str:
        return (
            f"TableFilter(catalog={self.catalog_regex.pattern!r}, "
            f"schema={self.schema_regex.pattern!r}, name={self.name_regex.pattern!r}, "
            f"exclude={self.exclude_flag}, package={self.package_name!r})"
        )


class FilterChain:
    """Ordered list of table filters, first answer wins."""

    def __init__(self, filters: Sequence[TableFilter] = ()):
        self.filters: list[TableFilter] = list(filters)

    def add(self, table_filter: TableFilter) -> None:
        self.filters.append(table_filter)

    def package_for(self, identifier: TableIdentifier) -> str | None:
        """Return the first package any filter yields for the table."""
        for table_filter in self.filters:
            value = table_filter.package(identifier)
            if value is not None:
                return value
        return None

    def explicit_verdict(self, identifier: TableIdentifier) -> bool | None:
        """Return the first exclusion verdict a matching filter gives, if any."""
        for table_filter in self.filters:
            verdict = table_filter.exclude(identifier)
            if verdict is not None:
                return verdict
        return None

    def default_verdict(self) -> bool:
        """
        Exclusion verdict for tables no filter matched.

        Any include-type filter narrows the chain to "only what is included",
        so everything else is excluded. A chain of excludes only (or an empty
        chain) leaves unmentioned tables included.
        """
        return any(table_filter.is_include for table_filter in self.filters)

    def is_excluded(self, identifier: TableIdentifier) -> bool:
        verdict = self.explicit_verdict(identifier)
        if verdict is not None:
            return verdict
        return self.default_verdict()

    def general_attributes_for(
        self, identifier: TableIdentifier
    ) -> dict[str, list[str]] | None:
        """Return the first general attribute map any filter yields for the table."""
        for table_filter in self.filters:
            value = table_filter.meta_attributes(identifier)
            if value is not None:
                return value
        return None

    def __iter__(self) -> Iterator[TableFilter]:
        return iter(self.filters)

    def __len__(self) -> int:
        return len(self.filters)
