"""Core domain models for Unity Catalog.

These models represent Unity Catalog tables and functions in a simple,
immutable form, with types still as the raw `type_text` strings the service
reports. They are intentionally free of Databricks SDK types so the loader
can be tested without a workspace.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UCColumn:
    """A table column or function parameter with its Spark SQL type text."""

    name: str
    type_text: str
    position: int | None = None


@dataclass(frozen=True)
class UCTable:
    """Lightweight representation of a Unity Catalog table and its columns."""

    full_name: str
    columns: tuple[UCColumn, ...] = ()
    table_type: str | None = None

    @property
    def name(self) -> str:
        return self.full_name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class UCFunction:
    """
    Lightweight representation of a Unity Catalog function.

    Attributes:
        full_name: `catalog.schema.function`.
        params: Input parameters in declaration order.
        return_type_text: Type text of a scalar result.
        returns_table: True for table functions.
        return_columns: Columns of the returned relation for table functions.
    """

    full_name: str
    params: tuple[UCColumn, ...] = ()
    return_type_text: str | None = None
    returns_table: bool = False
    return_columns: tuple[UCColumn, ...] = ()

    @property
    def name(self) -> str:
        return self.full_name.rsplit(".", 1)[-1]
