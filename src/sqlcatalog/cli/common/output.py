"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme
from rich.tree import Tree

from sqlcatalog.core.catalog import Catalog
from sqlcatalog.core.sqltypes import ArrayType, StructType, Type

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def _type_node(tree: Tree, label: str, type_: Type) -> None:
    """Add `type_` (and its children, recursively) under `tree`."""
    if isinstance(type_, ArrayType):
        branch = tree.add(f"{label}[title]ARRAY[/]")
        _type_node(branch, "[meta]element:[/] ", type_.element_type)
    elif isinstance(type_, StructType):
        branch = tree.add(f"{label}[title]STRUCT[/]")
        for f in type_.fields:
            _type_node(branch, f"[ok]{f.name}[/] ", f.type)
    else:
        tree.add(f"{label}{type_}")


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    @contextmanager
    def status(self, msg: str) -> Iterator[None]:
        """Show a spinner while the body runs."""
        with console.status(msg):
            yield

    def type_tree(self, type_: Type, title: str = "Type") -> None:
        """Render a parsed type as a tree, one node per array/struct level."""
        tree = Tree(f"[title]{escape(title)}[/]")
        _type_node(tree, "", type_)
        console.print(tree)

    def load_results_table(self, results: Iterable[Any], title: str = "Load results") -> None:
        """
        Render per-resource load outcomes.

        Expects objects with `.name`, `.kind`, `.loaded` and optional `.error`
        (like sqlcatalog.core.loader.LoadResult).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Resource", style="ok")
        t.add_column("Kind", style="meta")
        t.add_column("Result")

        for r in results:
            err = getattr(r, "error", None)
            if err:
                result = f"[err]FAIL[/] {err}"
            elif getattr(r, "loaded", False):
                result = "[ok]LOADED[/]"
            else:
                result = "[warn]KEPT EXISTING[/]"
            t.add_row(str(getattr(r, "name", "")), str(getattr(r, "kind", "")), result)

        console.print(t)

    def catalog_tables_table(self, catalog: Catalog, title: str = "Tables") -> None:
        """Render the tables registered directly in `catalog` with their column types."""
        t = Table(title=title, show_lines=True)
        t.add_column("Table", style="ok")
        t.add_column("Columns")

        for name, table in sorted(catalog.tables.items()):
            columns = "\n".join(f"{c.name} [meta]{c.type}[/]" for c in table.columns)
            t.add_row(name, columns)

        console.print(t)


out = Out()
