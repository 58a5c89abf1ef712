"""The catalog resource tree.

A `Catalog` is a named node owning four independent namespaces (tables,
functions, procedures, table-valued functions) and a mapping of nested
sub-catalogs. Nodes are plain containers: conflict handling, deletion and
copying live in `sqlcatalog.core.operations`.

The node is not synchronized. Concurrent writers must hold their own lock
around each whole create/delete/copy; read-only lookups after population are
safe without one.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Sequence

from sqlcatalog.core.errors import AlreadyExistsError, NotFoundError
from sqlcatalog.core.resources import (
    DEFAULT_FUNCTION_GROUP,
    Function,
    Procedure,
    Table,
    TableValuedFunction,
)


class ResourceKind(str, Enum):
    """The namespaces a catalog node owns."""

    TABLE = "table"
    FUNCTION = "function"
    PROCEDURE = "procedure"
    TVF = "table-valued function"


def function_key(name: str, group: str = DEFAULT_FUNCTION_GROUP) -> str:
    """Return the namespace key of a function: `group:name`."""
    return f"{group}:{name}"


def _as_path(path: str | Sequence[str]) -> list[str]:
    if isinstance(path, str):
        return [path]
    return list(path)


class Catalog:
    """A node of the catalog tree."""

    def __init__(self, name: str):
        self.name = name
        self._resources: dict[ResourceKind, dict[str, Any]] = {kind: {} for kind in ResourceKind}
        self._catalogs: dict[str, Catalog] = {}

    def __repr__(self) -> str:
        counts = ", ".join(f"{kind.name.lower()}s={len(ns)}" for kind, ns in self._resources.items())
        return f"Catalog({self.name!r}, {counts}, catalogs={len(self._catalogs)})"

    # ─── Namespaces ─────────────────────────────────────────────────

    def resources(self, kind: ResourceKind) -> Mapping[str, Any]:
        """Read-only view of one namespace, keyed by namespace key."""
        return MappingProxyType(self._resources[kind])

    def get(self, kind: ResourceKind, key: str) -> Any | None:
        return self._resources[kind].get(key)

    def put(self, kind: ResourceKind, key: str, resource: Any) -> None:
        """Store `resource` under `key`, overwriting any previous entry."""
        self._resources[kind][key] = resource

    def remove(self, kind: ResourceKind, key: str) -> Any | None:
        """Remove and return the entry under `key`, or None if absent."""
        return self._resources[kind].pop(key, None)

    @property
    def tables(self) -> Mapping[str, Table]:
        return self.resources(ResourceKind.TABLE)

    @property
    def functions(self) -> Mapping[str, Function]:
        return self.resources(ResourceKind.FUNCTION)

    @property
    def procedures(self) -> Mapping[str, Procedure]:
        return self.resources(ResourceKind.PROCEDURE)

    @property
    def tvfs(self) -> Mapping[str, TableValuedFunction]:
        return self.resources(ResourceKind.TVF)

    # ─── Sub-catalogs ───────────────────────────────────────────────

    @property
    def catalogs(self) -> Mapping[str, Catalog]:
        return MappingProxyType(self._catalogs)

    def get_catalog(self, name: str) -> Catalog | None:
        return self._catalogs.get(name)

    def add_catalog(self, catalog: Catalog) -> Catalog:
        """Attach `catalog` as a sub-catalog; its name must be free."""
        if catalog.name in self._catalogs:
            raise AlreadyExistsError("catalog", catalog.name)
        self._catalogs[catalog.name] = catalog
        return catalog

    def get_or_create_catalog(self, name: str) -> Catalog:
        sub = self._catalogs.get(name)
        if sub is None:
            sub = self._catalogs[name] = Catalog(name)
        return sub

    def remove_catalog(self, name: str) -> Catalog | None:
        return self._catalogs.pop(name, None)

    # ─── Lookup ─────────────────────────────────────────────────────

    def resolve(self, kind: ResourceKind, path: Sequence[str], key: str) -> Any | None:
        """
        Walk `path[:-1]` through sub-catalogs and return the `kind` entry under
        `key` in the node reached, or None if any step is missing.
        """
        node: Catalog | None = self
        for segment in path[:-1]:
            node = node.get_catalog(segment)
            if node is None:
                return None
        return node.get(kind, key)

    def _find(
        self,
        kind: ResourceKind,
        path: str | Sequence[str],
        key_of: Callable[[str], str] = str,
    ) -> Any:
        segments = _as_path(path)
        if not segments:
            raise NotFoundError(kind.value, segments, "empty path")
        node: Catalog = self
        for i, segment in enumerate(segments[:-1]):
            sub = node.get_catalog(segment)
            if sub is None:
                raise NotFoundError(
                    kind.value, segments, f"no catalog '{'.'.join(segments[: i + 1])}'"
                )
            node = sub
        resource = node.get(kind, key_of(segments[-1]))
        if resource is None:
            raise NotFoundError(kind.value, segments)
        return resource

    def find_table(self, path: str | Sequence[str]) -> Table:
        """
        Resolve a table by qualified path.

        Each segment but the last names a sub-catalog; the last is the table
        name. A single dotted segment resolves a table registered verbatim
        under that dotted name.

        Raises:
            NotFoundError: If any segment does not resolve.
        """
        return self._find(ResourceKind.TABLE, path)

    def find_function(
        self, path: str | Sequence[str], group: str = DEFAULT_FUNCTION_GROUP
    ) -> Function:
        """Resolve a function of `group` by qualified path."""
        return self._find(ResourceKind.FUNCTION, path, lambda name: function_key(name, group))

    def find_procedure(self, path: str | Sequence[str]) -> Procedure:
        """Resolve a procedure by qualified path."""
        return self._find(ResourceKind.PROCEDURE, path)

    def find_tvf(self, path: str | Sequence[str]) -> TableValuedFunction:
        """Resolve a table-valued function by qualified path."""
        return self._find(ResourceKind.TVF, path)

    def get_function_by_full_name(self, full_name: str) -> Function | None:
        """Return the function registered in this node as `group:name`, or None."""
        return self.get(ResourceKind.FUNCTION, full_name)

    def get_tvf_by_name(self, name: str) -> TableValuedFunction | None:
        """Return the TVF registered in this node under `name`, or None."""
        return self.get(ResourceKind.TVF, name)
