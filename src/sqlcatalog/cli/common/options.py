"""Common CLI options for the CLI."""

import typer

from sqlcatalog.core.operations import CreateMode

ProfileOpt = typer.Option(
    None,
    "--profile",
    "-p",
    help="Databricks CLI profile (from ~/.databrickscfg)",
)

NameOpt = typer.Option(
    None,
    "--name",
    help="Regex filter on table/function full names",
)

ModeOpt = typer.Option(
    CreateMode.CREATE_OR_REPLACE,
    "--mode",
    case_sensitive=False,
    help="How to resolve name collisions while loading",
)

FunctionsOpt = typer.Option(
    True,
    "--functions/--no-functions",
    help="Also load scalar and table functions",
)

SelectOpt = typer.Option(
    False,
    "--select",
    help="Pick the tables to load interactively",
)
