"""Error types raised by the catalog and the type parser.

Every failure the core can report is one of these distinguishable,
recoverable exceptions. None of them is raised after a partial mutation.
"""

from __future__ import annotations

from typing import Sequence


class SqlCatalogError(Exception):
    """Base class for all catalog and type parsing errors."""


class AlreadyExistsError(SqlCatalogError):
    """Raised when a create conflicts with an existing resource under CREATE_DEFAULT."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} '{name}' already exists.")


class NotFoundError(SqlCatalogError, LookupError):
    """Raised when a qualified path does not resolve to a resource."""

    def __init__(self, kind: str, path: Sequence[str], detail: str | None = None):
        self.kind = kind
        self.path = list(path)
        message = f"{kind.capitalize()} '{'.'.join(self.path)}' not found"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(f"{message}.")


class TypeParseError(SqlCatalogError, ValueError):
    """Raised when a type expression does not follow the type grammar."""

    def __init__(self, text: str, message: str, *, token: str | None = None, position: int = 0):
        self.text = text
        self.token = token
        self.position = position
        super().__init__(f"Invalid type '{text}': {message} (at position {position}).")
