"""Questionary / prompt_toolkit theme for the sqlcatalog CLI.

Questionary uses prompt_toolkit under the hood; the table picker style lives
here so the prompt matches the rest of the CLI theme.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

QUESTIONARY_STYLE_SELECT = Style.from_dict(
    {
        "question": "bold ansibrightcyan",
        "answer": "bold ansibrightgreen",
        "pointer": "bold ansibrightgreen",
        "highlighted": "bold ansibrightgreen",
        "selected": "bold ansibrightgreen",
        "checkbox": "ansibrightblack",
        "checkbox-selected": "bold ansibrightgreen",
        "instruction": "ansibrightblack",
        "disabled": "ansibrightblack",
    }
)