"""SQL type values.

Types are immutable values compared structurally: two independently built
`ARRAY<STRING>` types are equal and hash the same. They are produced by the
type parser or built directly by callers, and are shared freely between
catalogs since nothing ever mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union


class TypeKind(str, Enum):
    """Kinds of simple (non-composite) SQL types."""

    INT32 = "INT32"
    INT64 = "INT64"
    UINT32 = "UINT32"
    UINT64 = "UINT64"
    BOOL = "BOOL"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    STRING = "STRING"
    BYTES = "BYTES"
    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"
    TIMESTAMP = "TIMESTAMP"
    NUMERIC = "NUMERIC"
    BIGNUMERIC = "BIGNUMERIC"
    GEOGRAPHY = "GEOGRAPHY"
    INTERVAL = "INTERVAL"
    JSON = "JSON"


@dataclass(frozen=True)
class SimpleType:
    """A scalar type such as STRING or INT64."""

    kind: TypeKind

    def __str__(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class ArrayType:
    """An ordered collection of elements of a single type."""

    element_type: Type

    def __str__(self) -> str:
        return f"ARRAY<{self.element_type}>"


@dataclass(frozen=True)
class StructField:
    """A named member of a struct."""

    name: str
    type: Type

    def __str__(self) -> str:
        return f"{self.name} {self.type}"


@dataclass(frozen=True)
class StructType:
    """An ordered sequence of named fields. Field order is significant."""

    fields: tuple[StructField, ...]

    def __post_init__(self) -> None:
        # accept any iterable of fields, store a tuple so the value stays hashable
        object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def of(cls, fields: Iterable[tuple[str, Type]]) -> StructType:
        """Build a struct from (name, type) pairs."""
        return cls(tuple(StructField(name, type_) for name, type_ in fields))

    def field(self, name: str) -> StructField | None:
        """Return the first field with the given name, if any."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __str__(self) -> str:
        return f"STRUCT<{', '.join(str(f) for f in self.fields)}>"


Type = Union[SimpleType, ArrayType, StructType]


def simple(kind: TypeKind | str) -> SimpleType:
    """Shorthand for `SimpleType(TypeKind(kind))`, case-insensitive."""
    return SimpleType(TypeKind(kind.upper()))
