"""Core domain models for mapping overrides.

These are the value objects the override repository stores and hands out
through the composed strategy: association settings, per-constraint
foreign-key overrides, schema selections and realized meta attributes.
They are intentionally simple, immutable, and free of any parsing or
presentation concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Iterable, Mapping


@dataclass(frozen=True)
class AssociationInfo:
    """
    Association settings for one side of a foreign key.

    Attributes:
        cascade: Cascade style, e.g. ``all`` or ``save-update``.
        fetch: Fetch mode, e.g. ``join`` or ``select``.
        update: Whether the association columns are updatable.
        insert: Whether the association columns are insertable.
    """

    cascade: str | None = None
    fetch: str | None = None
    update: bool | None = None
    insert: bool | None = None


@dataclass(frozen=True)
class ForeignKeyInfo:
    """
    Overrides recorded for one foreign key constraint.

    The owning side generates a to-one association, the inverse side a
    collection (or an inverse one-to-one). Every field is optional and
    ``None`` means "not overridden".
    """

    owning_name: str | None = None
    inverse_name: str | None = None
    owning_exclude: bool | None = None
    inverse_exclude: bool | None = None
    owning_association: AssociationInfo | None = None
    inverse_association: AssociationInfo | None = None

    def merged(self, other: ForeignKeyInfo) -> ForeignKeyInfo:
        """Return a copy where every non-None field of ``other`` wins."""
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **changes)


@dataclass(frozen=True)
class SchemaSelection:
    """A catalog/schema/table pattern the schema reader should visit."""

    match_catalog: str | None = None
    match_schema: str | None = None
    match_table: str | None = None


@dataclass(frozen=True)
class MetaAttribute:
    """
    A descriptive annotation attached to a generated class or property.

    Attributes:
        name: Attribute name, e.g. ``scope-class``.
        values: All values declared for the attribute, in document order.
    """

    name: str
    values: tuple[str, ...] = ()

    def __str__(self) -> str:
        return " ".join(self.values)


def realize_meta_attribute(name: str, values: Iterable[str]) -> MetaAttribute:
    """Turn a raw list of attribute values into a MetaAttribute."""
    return MetaAttribute(name=name, values=tuple(values))


def realize_meta_attributes(
    raw: Mapping[str, Iterable[str]],
) -> dict[str, MetaAttribute]:
    """Realize every entry of a raw ``{name: [values]}`` mapping."""
    return {name: realize_meta_attribute(name, values) for name, values in raw.items()}
