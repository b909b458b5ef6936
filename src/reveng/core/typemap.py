"""SQL type to target type resolution.

Type mappings are grouped into buckets keyed by (source type code, declared
length). Within a bucket the first mapping that accepts the column wins, so
registration order matters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator

from reveng.core.keys import UNKNOWN_LENGTH, TypeMappingKey


class SqlType(IntEnum):
    """JDBC type codes as reported by schema readers."""

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    DATALINK = 70
    BOOLEAN = 16
    ROWID = -8
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    NCLOB = 2011
    SQLXML = 2009

    @classmethod
    def parse(cls, value: str | int) -> int:
        """Resolve a type name (case-insensitive) or a raw numeric code."""
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if not isinstance(value, str):
            raise ValueError(f"SQL type must be a name or a code, got {value!r}")
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return cls[text.upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown SQL type: '{value}'") from exc

    @classmethod
    def name_of(cls, code: int) -> str:
        """Type name for known codes, the number itself otherwise."""
        try:
            return cls(code).name
        except ValueError:
            return str(code)


@dataclass(frozen=True)
class SQLTypeMapping:
    """
    One candidate rule mapping a SQL type to a target type name.

    ``None`` in length, precision, scale or nullable means the rule accepts
    any value for that attribute.

    Attributes:
        sql_type: Source type code (see SqlType).
        target_type: Target type name returned on a match.
        length: Declared column length the rule is restricted to.
        precision: Numeric precision the rule is restricted to.
        scale: Numeric scale the rule is restricted to.
        nullable: Nullability the rule is restricted to.
    """

    sql_type: int
    target_type: str
    length: int | None = UNKNOWN_LENGTH
    precision: int | None = None
    scale: int | None = None
    nullable: bool | None = None

    @property
    def key(self) -> TypeMappingKey:
        return TypeMappingKey(self.sql_type, self.length)

    def matches(
        self,
        sql_type: int,
        length: int | None,
        precision: int | None,
        scale: int | None,
        nullable: bool,
    ) -> bool:
        """Check whether this rule accepts a column with the given shape."""
        return (
            sql_type == self.sql_type
            and (self.length is None or self.length == length)
            and (self.precision is None or self.precision == precision)
            and (self.scale is None or self.scale == scale)
            and (self.nullable is None or self.nullable == nullable)
        )


def scan_bucket(
    candidates: Iterable[SQLTypeMapping] | None,
    sql_type: int,
    length: int | None,
    precision: int | None,
    scale: int | None,
    nullable: bool,
) -> str | None:
    """
    Return the target type of the first candidate accepting the column.

    A candidate registered for a different source type ends the scan with
    no result; later candidates are not consulted.
    """
    if candidates is None:
        return None
    for mapping in candidates:
        if mapping.sql_type != sql_type:
            return None
        if mapping.matches(sql_type, length, precision, scale, nullable):
            return mapping.target_type
    return None


class TypeMappingResolver:
    """Ordered type mapping buckets with exact-length-first lookup."""

    def __init__(self) -> None:
        self._buckets: dict[TypeMappingKey, list[SQLTypeMapping]] = {}

    def add(self, mapping: SQLTypeMapping) -> None:
        """Append a mapping to its bucket, creating the bucket on first use."""
        self._buckets.setdefault(mapping.key, []).append(mapping)

    def resolve(
        self,
        sql_type: int,
        length: int | None,
        precision: int | None,
        scale: int | None,
        nullable: bool,
    ) -> str | None:
        """
        Resolve the preferred target type for a column.

        The exact (type, length) bucket is used when it exists; only when it
        does not is the unknown-length bucket for the type consulted.

        Returns:
            The target type name, or None when no mapping applies.
        """
        candidates = self._buckets.get(TypeMappingKey(sql_type, length))
        if candidates is None:
            candidates = self._buckets.get(TypeMappingKey(sql_type, UNKNOWN_LENGTH))
        return scan_bucket(candidates, sql_type, length, precision, scale, nullable)

    def __iter__(self) -> Iterator[SQLTypeMapping]:
        for candidates in self._buckets.values():
            yield from candidates

    def __len__(self) -> int:
        return sum(len(c) for c in self._buckets.values())
