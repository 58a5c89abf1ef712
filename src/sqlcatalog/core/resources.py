"""Catalog resource definitions.

Tables, functions, procedures and table-valued functions as immutable
values. A catalog stores references to these objects and a copied catalog
shares them with its source, so they must never be mutated in place; build a
new definition and replace the old one instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from sqlcatalog.core.sqltypes import Type

DEFAULT_FUNCTION_GROUP = "UDF"


def _as_path(name_path: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(name_path, str):
        return (name_path,)
    return tuple(name_path)


@dataclass(frozen=True)
class Column:
    """A named, typed column of a table or of a TVF output relation."""

    name: str
    type: Type


@dataclass(frozen=True)
class Table:
    """
    A table definition.

    Attributes:
        name: Short table name.
        columns: Ordered columns; position is significant.
        full_name: Fully qualified (possibly dotted) name. Defaults to `name`.
    """

    name: str
    columns: tuple[Column, ...] = ()
    full_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        if not self.full_name:
            object.__setattr__(self, "full_name", self.name)

    def column(self, index: int) -> Column:
        """
        Return the column at a zero-based position.

        Raises:
            IndexError: If `index` is negative or past the last column.
        """
        if not 0 <= index < len(self.columns):
            raise IndexError(f"Table {self.name!r} has no column at position {index}")
        return self.columns[index]

    def get_column(self, name: str) -> Column | None:
        """Return the column with the given name, or None."""
        for col in self.columns:
            if col.name == name:
                return col
        return None


@dataclass(frozen=True)
class FunctionSignature:
    """
    Argument types plus result type.

    `return_type` is None for signatures with no scalar result (procedures
    returning nothing, TVFs whose result is a relation).
    """

    arguments: tuple[Type, ...] = ()
    return_type: Type | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))


class FunctionMode(str, Enum):
    """How a function is evaluated."""

    SCALAR = "SCALAR"
    AGGREGATE = "AGGREGATE"
    ANALYTIC = "ANALYTIC"


@dataclass(frozen=True)
class Function:
    """
    A scalar, aggregate or analytic function.

    Functions are keyed by `group:name`, so two functions with the same name
    path in different groups are distinct resources.
    """

    name_path: tuple[str, ...]
    signatures: tuple[FunctionSignature, ...]
    group: str = DEFAULT_FUNCTION_GROUP
    mode: FunctionMode = FunctionMode.SCALAR

    def __post_init__(self) -> None:
        object.__setattr__(self, "name_path", _as_path(self.name_path))
        object.__setattr__(self, "signatures", tuple(self.signatures))
        if not self.signatures:
            raise ValueError(f"Function '{self.name}' needs at least one signature.")

    @property
    def name(self) -> str:
        return ".".join(self.name_path)

    @property
    def full_name(self) -> str:
        return f"{self.group}:{self.name}"


@dataclass(frozen=True)
class Procedure:
    """A stored procedure with a single signature."""

    name_path: tuple[str, ...]
    signature: FunctionSignature = field(default_factory=FunctionSignature)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name_path", _as_path(self.name_path))

    @property
    def name(self) -> str:
        return ".".join(self.name_path)


@dataclass(frozen=True)
class TableValuedFunction:
    """
    A function returning a relation.

    Attributes:
        name_path: Name segments of the function.
        signature: Argument types; `return_type` is normally None.
        output_columns: Ordered columns of the returned relation.
        value_table: True when the result is a value table, i.e. a relation
            of one anonymous column whose type is the row type.
    """

    name_path: tuple[str, ...]
    signature: FunctionSignature
    output_columns: tuple[Column, ...]
    value_table: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "name_path", _as_path(self.name_path))
        object.__setattr__(self, "output_columns", tuple(self.output_columns))
        if self.value_table and len(self.output_columns) != 1:
            raise ValueError(f"Value table TVF '{self.name}' must have exactly one column.")

    @classmethod
    def value_table_based(
        cls, name_path: str | Sequence[str], signature: FunctionSignature, row_type: Type
    ) -> TableValuedFunction:
        """Build a TVF whose output is a value table of `row_type`."""
        return cls(_as_path(name_path), signature, (Column("", row_type),), value_table=True)

    @property
    def name(self) -> str:
        return ".".join(self.name_path)
