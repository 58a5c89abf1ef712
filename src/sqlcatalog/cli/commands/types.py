from __future__ import annotations

from enum import Enum

import typer

from sqlcatalog.cli.common.exits import EXIT_USAGE, exit_from_exc
from sqlcatalog.cli.common.output import out
from sqlcatalog.core.errors import TypeParseError
from sqlcatalog.core.typeparser import DATABRICKS_TYPE_NAMES, TYPE_NAMES, parse_type

types_app = typer.Typer(help="Type expression utilities.", no_args_is_help=True)


class Dialect(str, Enum):
    zetasql = "zetasql"
    databricks = "databricks"


_TYPE_NAMES_BY_DIALECT = {
    Dialect.zetasql: TYPE_NAMES,
    Dialect.databricks: DATABRICKS_TYPE_NAMES,
}


@types_app.command("parse")
def parse(
    expression: str = typer.Argument(..., help="Type expression, e.g. 'ARRAY<STRUCT<a INT64>>'"),
    dialect: Dialect = typer.Option(
        Dialect.zetasql,
        "--dialect",
        "-d",
        case_sensitive=False,
        help="Which type names to accept",
    ),
):
    """Parse a type expression and show its structure."""
    try:
        parsed = parse_type(expression, _TYPE_NAMES_BY_DIALECT[dialect])
    except TypeParseError as exc:
        exit_from_exc(exc, message=str(exc), code=EXIT_USAGE)

    out.type_tree(parsed, title=expression)
    out.kv({"Canonical": str(parsed)})
