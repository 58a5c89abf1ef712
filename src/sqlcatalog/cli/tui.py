"""Interactive table picker for the Unity Catalog commands."""

from __future__ import annotations

import questionary

from sqlcatalog.cli.common.tui_style import QUESTIONARY_STYLE_SELECT
from sqlcatalog.core.uc import UCTable

_MAX_TABLE_NAME_WIDTH = 96


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _table_choice_title(table: UCTable, *, name_width: int) -> str:
    """Format one table choice as `<full name>  (<n> columns)` with aligned counts."""
    short_name = _truncate(table.full_name, _MAX_TABLE_NAME_WIDTH)
    count = len(table.columns)
    noun = "column" if count == 1 else "columns"
    return f"{short_name.ljust(name_width)}  ({count} {noun})"


def select_tables(tables: list[UCTable]) -> list[UCTable]:
    """Display a checkbox prompt to pick tables; empty list if none picked."""
    shown_names = [_truncate(t.full_name, _MAX_TABLE_NAME_WIDTH) for t in tables]
    name_width = max((len(name) for name in shown_names), default=0)

    choices = [
        questionary.Choice(title=_table_choice_title(t, name_width=name_width), value=t)
        for t in tables
    ]

    return (
        questionary.checkbox(
            "Select tables to load:",
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            instruction="Use ↑/↓, space, enter",
        ).ask()
        or []
    )
