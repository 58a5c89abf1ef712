"""Create, delete and copy operations over a catalog tree.

All four resource kinds share one create routine and one delete routine;
a small `_Namespace` descriptor supplies what differs per kind (which
namespace, and how a name maps to a namespace key).

A resource name is registered under every path returned by
`resource_paths`: verbatim as one flat segment, and, when it is dotted, also
as a nested path through sub-catalogs. So a procedure created as
``"qualified.newProcedure"`` resolves both at ``["qualified.newProcedure"]``
and at ``["qualified", "newProcedure"]``.

Every existence check runs before the first mutation, so an operation that
fails leaves the catalog exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, TypeVar

from sqlcatalog.core.catalog import Catalog, ResourceKind, function_key
from sqlcatalog.core.errors import AlreadyExistsError, NotFoundError
from sqlcatalog.core.logs import get_logger
from sqlcatalog.core.resources import (
    DEFAULT_FUNCTION_GROUP,
    Function,
    Procedure,
    Table,
    TableValuedFunction,
)

log = get_logger(__name__)

R = TypeVar("R")


class CreateMode(str, Enum):
    """
    How a create resolves a name collision.

    Values:
        CREATE_DEFAULT: Fail with AlreadyExistsError.
        CREATE_OR_REPLACE: Replace the existing resource.
        CREATE_IF_NOT_EXISTS: Keep the existing resource untouched.
    """

    CREATE_DEFAULT = "CREATE_DEFAULT"
    CREATE_OR_REPLACE = "CREATE_OR_REPLACE"
    CREATE_IF_NOT_EXISTS = "CREATE_IF_NOT_EXISTS"


@dataclass(frozen=True)
class _Namespace:
    """Per-kind accessor used by the generic create/delete routines."""

    kind: ResourceKind
    key: Callable[[str], str]


def _plain(name: str) -> str:
    return name


_TABLES = _Namespace(ResourceKind.TABLE, _plain)
_PROCEDURES = _Namespace(ResourceKind.PROCEDURE, _plain)
_TVFS = _Namespace(ResourceKind.TVF, _plain)


def _functions(group: str) -> _Namespace:
    return _Namespace(ResourceKind.FUNCTION, lambda name: function_key(name, group))


def resource_paths(name: str) -> list[list[str]]:
    """
    Return the paths a resource name is registered under.

    Always the verbatim name as a single segment; for a dotted name with no
    empty segment, also the split path.
    """
    paths = [[name]]
    parts = name.split(".")
    if len(parts) > 1 and all(parts):
        paths.append(parts)
    return paths


def _existing(catalog: Catalog, ns: _Namespace, paths: list[list[str]]) -> list[Any]:
    found = []
    for path in paths:
        resource = catalog.resolve(ns.kind, path, ns.key(path[-1]))
        if resource is not None:
            found.append(resource)
    return found


def _create(catalog: Catalog, ns: _Namespace, name: str, resource: R, mode: CreateMode) -> R:
    paths = resource_paths(name)
    existing = _existing(catalog, ns, paths)

    if existing:
        if mode is CreateMode.CREATE_DEFAULT:
            raise AlreadyExistsError(ns.kind.value, name)
        if mode is CreateMode.CREATE_IF_NOT_EXISTS:
            log.debug("resource_kept", kind=ns.kind.value, name=name)
            return existing[0]

    for path in paths:
        node = catalog
        for segment in path[:-1]:
            node = node.get_or_create_catalog(segment)
        key = ns.key(path[-1])
        node.remove(ns.kind, key)
        node.put(ns.kind, key, resource)

    event = "resource_replaced" if existing else "resource_created"
    log.debug(event, kind=ns.kind.value, name=name, mode=mode.value)
    return resource


def _delete(catalog: Catalog, ns: _Namespace, name: str, missing_ok: bool) -> None:
    paths = resource_paths(name)
    if not _existing(catalog, ns, paths):
        if missing_ok:
            return
        raise NotFoundError(ns.kind.value, [name])

    for path in paths:
        node: Catalog | None = catalog
        for segment in path[:-1]:
            node = node.get_catalog(segment)
            if node is None:
                break
        if node is not None:
            node.remove(ns.kind, ns.key(path[-1]))

    log.debug("resource_deleted", kind=ns.kind.value, name=name)


def create_table(
    catalog: Catalog,
    name: str,
    table: Table,
    mode: CreateMode = CreateMode.CREATE_DEFAULT,
) -> Table:
    """
    Register `table` under `name` (typically its full name).

    Returns the table now stored: `table` itself, or the pre-existing table
    when `mode` is CREATE_IF_NOT_EXISTS and `name` was taken.

    Raises:
        AlreadyExistsError: If `name` is taken and `mode` is CREATE_DEFAULT.
    """
    return _create(catalog, _TABLES, name, table, mode)


def create_function(
    catalog: Catalog,
    name: str,
    function: Function,
    mode: CreateMode = CreateMode.CREATE_DEFAULT,
) -> Function:
    """Register `function` under `function.group:name`. See `create_table`."""
    return _create(catalog, _functions(function.group), name, function, mode)


def create_procedure(
    catalog: Catalog,
    name: str,
    procedure: Procedure,
    mode: CreateMode = CreateMode.CREATE_DEFAULT,
) -> Procedure:
    """Register `procedure` under `name`. See `create_table`."""
    return _create(catalog, _PROCEDURES, name, procedure, mode)


def create_tvf(
    catalog: Catalog,
    name: str,
    tvf: TableValuedFunction,
    mode: CreateMode = CreateMode.CREATE_DEFAULT,
) -> TableValuedFunction:
    """Register a table-valued function under `name`. See `create_table`."""
    return _create(catalog, _TVFS, name, tvf, mode)


def delete_table(catalog: Catalog, name: str, *, missing_ok: bool = False) -> None:
    """
    Remove the table registered under `name` from every path it occupies.

    Raises:
        NotFoundError: If no table is registered under `name`, unless
            `missing_ok` is set.
    """
    _delete(catalog, _TABLES, name, missing_ok)


def delete_function(
    catalog: Catalog,
    name: str,
    *,
    group: str = DEFAULT_FUNCTION_GROUP,
    missing_ok: bool = False,
) -> None:
    """Remove the `group` function registered under `name`. See `delete_table`."""
    _delete(catalog, _functions(group), name, missing_ok)


def delete_procedure(catalog: Catalog, name: str, *, missing_ok: bool = False) -> None:
    """Remove the procedure registered under `name`. See `delete_table`."""
    _delete(catalog, _PROCEDURES, name, missing_ok)


def delete_tvf(catalog: Catalog, name: str, *, missing_ok: bool = False) -> None:
    """Remove the table-valued function registered under `name`. See `delete_table`."""
    _delete(catalog, _TVFS, name, missing_ok)


def _copy(catalog: Catalog) -> Catalog:
    copied = Catalog(catalog.name)
    for kind in ResourceKind:
        for key, resource in catalog.resources(kind).items():
            copied.put(kind, key, resource)
    for sub in catalog.catalogs.values():
        copied.add_catalog(_copy(sub))
    return copied


def copy_catalog(catalog: Catalog) -> Catalog:
    """
    Return a structurally independent copy of `catalog`.

    Every node and namespace mapping is new; resource definitions are shared
    by reference since they are immutable.
    """
    copied = _copy(catalog)
    log.debug("catalog_copied", catalog=catalog.name)
    return copied
