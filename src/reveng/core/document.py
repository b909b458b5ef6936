"""Override document schema.

Override documents are YAML (or JSON) files describing schema selections,
type mappings, table filters and per-table overrides. This module only
parses and validates; ``reveng.core.binder`` applies a validated document
to a repository.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Optional

import yaml
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from reveng.core.errors import DocumentInvalidError
from reveng.core.typemap import SqlType


def _as_value_lists(value: Any) -> Any:
    """
    Accept ``{name: value}`` as shorthand for ``{name: [value]}``.

    A null value (``{name: }``) declares the attribute without values.
    """
    if not isinstance(value, dict):
        return value
    lists = {}
    for name, raw in value.items():
        if raw is None:
            raw = []
        elif not isinstance(raw, list):
            raw = [raw]
        lists[name] = [str(v) for v in raw if v is not None]
    return lists


MetaMap = Annotated[dict[str, list[str]], BeforeValidator(_as_value_lists)]
SqlTypeCode = Annotated[int, BeforeValidator(SqlType.parse)]


class _Node(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class SchemaSelectionNode(_Node):
    catalog: Optional[str] = None
    schema_name: Optional[str] = Field(default=None, alias="schema")
    table: Optional[str] = None


class TypeMappingNode(_Node):
    sql_type: SqlTypeCode
    target: str = Field(min_length=1)
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    not_null: Optional[bool] = None


class TableFilterNode(_Node):
    match_catalog: Optional[str] = None
    match_schema: Optional[str] = None
    match_name: Optional[str] = None
    exclude: bool = False
    package: Optional[str] = None
    meta: MetaMap = Field(default_factory=dict)

    @field_validator("match_catalog", "match_schema", "match_name")
    @classmethod
    def _valid_regex(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"Invalid regex expression: {exc}") from exc
        return value


class GeneratorNode(_Node):
    class_name: str = Field(alias="class", min_length=1)
    params: dict[str, str] = Field(default_factory=dict)


class PrimaryKeyNode(_Node):
    generator: Optional[GeneratorNode] = None
    property_name: Optional[str] = Field(default=None, alias="property")
    composite_id_class: Optional[str] = None
    columns: list[str] = Field(default_factory=list)


class ColumnNode(_Node):
    name: str = Field(min_length=1)
    type_name: Optional[str] = Field(default=None, alias="type")
    property_name: Optional[str] = Field(default=None, alias="property")
    exclude: bool = False
    meta: MetaMap = Field(default_factory=dict)


class TableRefNode(_Node):
    catalog: Optional[str] = None
    schema_name: Optional[str] = Field(default=None, alias="schema")
    name: str = Field(min_length=1)


class AssociationNode(_Node):
    property_name: Optional[str] = Field(default=None, alias="property")
    exclude: Optional[bool] = None
    cascade: Optional[str] = None
    fetch: Optional[str] = None
    update: Optional[bool] = None
    insert: Optional[bool] = None

    @property
    def has_association_info(self) -> bool:
        return any(
            v is not None for v in (self.cascade, self.fetch, self.update, self.insert)
        )


class ForeignKeyNode(_Node):
    constraint: str = Field(min_length=1)
    references: Optional[TableRefNode] = None
    columns: list[str] = Field(default_factory=list)
    referenced_columns: list[str] = Field(default_factory=list)
    many_to_one: Optional[AssociationNode] = None
    one_to_one: Optional[AssociationNode] = None
    set_: Optional[AssociationNode] = Field(default=None, alias="set")
    inverse_one_to_one: Optional[AssociationNode] = None

    @model_validator(mode="after")
    def _one_association_per_side(self) -> ForeignKeyNode:
        if self.many_to_one is not None and self.one_to_one is not None:
            raise ValueError("use either many_to_one or one_to_one, not both")
        if self.set_ is not None and self.inverse_one_to_one is not None:
            raise ValueError("use either set or inverse_one_to_one, not both")
        return self

    @property
    def owning(self) -> Optional[AssociationNode]:
        return self.many_to_one or self.one_to_one

    @property
    def inverse(self) -> Optional[AssociationNode]:
        return self.set_ or self.inverse_one_to_one


class TableNode(_Node):
    catalog: Optional[str] = None
    schema_name: Optional[str] = Field(default=None, alias="schema")
    name: str = Field(min_length=1)
    class_name: Optional[str] = Field(default=None, alias="class")
    meta: MetaMap = Field(default_factory=dict)
    primary_key: Optional[PrimaryKeyNode] = None
    columns: list[ColumnNode] = Field(default_factory=list)
    foreign_keys: list[ForeignKeyNode] = Field(default_factory=list)


class OverrideDocument(_Node):
    """Root of an override document."""

    schema_selections: list[SchemaSelectionNode] = Field(default_factory=list)
    type_mappings: list[TypeMappingNode] = Field(default_factory=list)
    table_filters: list[TableFilterNode] = Field(default_factory=list)
    tables: list[TableNode] = Field(default_factory=list)


def _describe(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def parse_document(raw: bytes | str) -> OverrideDocument:
    """
    Parse and validate an override document.

    Args:
        raw: YAML or JSON text (bytes are decoded by the YAML reader).

    Returns:
        The validated document.

    Raises:
        DocumentInvalidError: If the text is not YAML, the root is not a
            mapping, or the content does not match the schema. The message
            is the first error found.
    """
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise DocumentInvalidError([f"malformed document: {exc}"]) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DocumentInvalidError(
            [f"document root must be a mapping, got {type(data).__name__}"]
        )

    try:
        return OverrideDocument.model_validate(data)
    except ValidationError as exc:
        raise DocumentInvalidError([_describe(e) for e in exc.errors()]) from exc
