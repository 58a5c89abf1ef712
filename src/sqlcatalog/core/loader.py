"""Populate a catalog from Unity Catalog metadata.

Translates Unity Catalog tables and functions into catalog resources,
parsing their Spark SQL `type_text` with the type parser, and registers them
through the create operations with an explicit create mode.

Loading is per resource: a table whose column types do not parse, or a name
conflict under CREATE_DEFAULT, is reported in its `LoadResult` and the rest
of the schema still loads. Errors from listing (permissions, missing schema,
network) propagate to the caller; retries belong to the Databricks SDK.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Protocol, TypeVar

from sqlcatalog.core.catalog import Catalog
from sqlcatalog.core.errors import AlreadyExistsError, TypeParseError
from sqlcatalog.core.logs import get_logger
from sqlcatalog.core.operations import CreateMode, create_function, create_table, create_tvf
from sqlcatalog.core.resources import (
    Column,
    Function,
    FunctionSignature,
    Table,
    TableValuedFunction,
)
from sqlcatalog.core.sqltypes import TypeKind
from sqlcatalog.core.typeparser import DATABRICKS_TYPE_NAMES, parse_type
from sqlcatalog.core.uc import UCColumn, UCFunction, UCTable

log = get_logger(__name__)

T = TypeVar("T")


class UnityCatalogSource(Protocol):
    """What the loader needs from a Unity Catalog adapter."""

    def list_tables(self, catalog: str, schema: str) -> list[UCTable]: ...

    def list_functions(self, catalog: str, schema: str) -> list[UCFunction]: ...


@dataclass(frozen=True)
class LoadResult:
    """
    Outcome of loading one resource into a catalog.

    `loaded` is False with no `error` when CREATE_IF_NOT_EXISTS kept an
    existing resource.
    """

    name: str
    kind: str
    loaded: bool
    error: str | None = None


def parse_schema_full_name(schema_full_name: str) -> tuple[str, str]:
    """Split `catalog.schema` into (catalog, schema)."""
    parts = schema_full_name.strip().split(".")
    if len(parts) != 2:
        raise ValueError("Schema must be in the form `catalog.schema`.")
    catalog, schema = parts
    if not catalog or not schema:
        raise ValueError("Schema must be in the form `catalog.schema`.")
    return catalog, schema


def filter_by_name(items: list[T], name_regex: str | None) -> list[T]:
    """Filter tables/functions by regex on full_name (or keep all if regex is None)."""
    if not name_regex:
        return items
    try:
        rx = re.compile(name_regex)
    except re.error as exc:
        raise ValueError(f"Invalid regex expression: {exc}") from exc
    return [i for i in items if rx.search(i.full_name)]


def _columns(
    uc_columns: Iterable[UCColumn], type_names: Mapping[str, TypeKind]
) -> tuple[Column, ...]:
    return tuple(Column(c.name, parse_type(c.type_text, type_names)) for c in uc_columns)


def table_from_uc(
    uc_table: UCTable, type_names: Mapping[str, TypeKind] = DATABRICKS_TYPE_NAMES
) -> Table:
    """
    Build a Table from a Unity Catalog table.

    Raises:
        TypeParseError: If a column type is not understood.
    """
    return Table(
        name=uc_table.name,
        columns=_columns(uc_table.columns, type_names),
        full_name=uc_table.full_name,
    )


def function_from_uc(
    uc_function: UCFunction, type_names: Mapping[str, TypeKind] = DATABRICKS_TYPE_NAMES
) -> Function | TableValuedFunction:
    """
    Build a Function (scalar UDF) or TableValuedFunction (table UDF).

    Raises:
        TypeParseError: If a parameter or result type is not understood.
    """
    arguments = tuple(parse_type(p.type_text, type_names) for p in uc_function.params)
    name_path = (uc_function.full_name,)

    if uc_function.returns_table:
        return TableValuedFunction(
            name_path=name_path,
            signature=FunctionSignature(arguments),
            output_columns=_columns(uc_function.return_columns, type_names),
        )

    return_type = (
        parse_type(uc_function.return_type_text, type_names)
        if uc_function.return_type_text
        else None
    )
    return Function(name_path=name_path, signatures=(FunctionSignature(arguments, return_type),))


def _register(catalog: Catalog, full_name: str, resource, mode: CreateMode):
    if isinstance(resource, Table):
        return create_table(catalog, full_name, resource, mode)
    if isinstance(resource, TableValuedFunction):
        return create_tvf(catalog, full_name, resource, mode)
    return create_function(catalog, full_name, resource, mode)


def _load(catalog: Catalog, items, build, kind_of, mode: CreateMode) -> list[LoadResult]:
    results: list[LoadResult] = []
    for item in items:
        kind = kind_of(item)
        try:
            resource = build(item)
            stored = _register(catalog, item.full_name, resource, mode)
        except (TypeParseError, AlreadyExistsError) as e:
            log.warning("resource_load_failed", kind=kind, name=item.full_name, error=str(e))
            results.append(LoadResult(name=item.full_name, kind=kind, loaded=False, error=str(e)))
            continue
        results.append(LoadResult(name=item.full_name, kind=kind, loaded=stored is resource))
    return results


def load_tables(
    catalog: Catalog,
    tables: Iterable[UCTable],
    *,
    mode: CreateMode = CreateMode.CREATE_OR_REPLACE,
    type_names: Mapping[str, TypeKind] = DATABRICKS_TYPE_NAMES,
) -> list[LoadResult]:
    """Translate and register Unity Catalog tables under their full names."""
    return _load(
        catalog,
        tables,
        lambda t: table_from_uc(t, type_names),
        lambda _: "table",
        mode,
    )


def load_functions(
    catalog: Catalog,
    functions: Iterable[UCFunction],
    *,
    mode: CreateMode = CreateMode.CREATE_OR_REPLACE,
    type_names: Mapping[str, TypeKind] = DATABRICKS_TYPE_NAMES,
) -> list[LoadResult]:
    """Translate and register Unity Catalog functions (scalar and table) under their full names."""
    return _load(
        catalog,
        functions,
        lambda f: function_from_uc(f, type_names),
        lambda f: "table-valued function" if f.returns_table else "function",
        mode,
    )


def load_schema(
    adapter: UnityCatalogSource,
    catalog: Catalog,
    schema_full_name: str,
    *,
    mode: CreateMode = CreateMode.CREATE_OR_REPLACE,
    name_regex: str | None = None,
    include_functions: bool = True,
) -> list[LoadResult]:
    """
    Load one Unity Catalog schema into `catalog`:
      1) list tables (and functions) in the schema
      2) keep those whose full name matches `name_regex`
      3) translate and register each one with `mode`
    """
    uc_catalog, uc_schema = parse_schema_full_name(schema_full_name)

    tables = filter_by_name(adapter.list_tables(catalog=uc_catalog, schema=uc_schema), name_regex)
    results = load_tables(catalog, tables, mode=mode)

    if include_functions:
        functions = filter_by_name(
            adapter.list_functions(catalog=uc_catalog, schema=uc_schema), name_regex
        )
        results.extend(load_functions(catalog, functions, mode=mode))

    log.info(
        "schema_loaded",
        schema=schema_full_name,
        loaded=sum(1 for r in results if r.loaded),
        failed=sum(1 for r in results if r.error),
    )
    return results
