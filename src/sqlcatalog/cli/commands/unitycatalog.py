from __future__ import annotations

import typer
from databricks.sdk.errors import NotFound, PermissionDenied

from sqlcatalog.cli.common.context import UCAppContext, build_uc_context
from sqlcatalog.cli.common.exits import EXIT_FAILED, EXIT_USAGE, die, exit_from_exc, warn_exit
from sqlcatalog.cli.common.options import (
    FunctionsOpt,
    ModeOpt,
    NameOpt,
    ProfileOpt,
    SelectOpt,
)
from sqlcatalog.cli.common.output import out
from sqlcatalog.cli.tui import select_tables
from sqlcatalog.core.catalog import Catalog
from sqlcatalog.core.loader import (
    filter_by_name,
    load_functions,
    load_schema,
    load_tables,
    parse_schema_full_name,
)
from sqlcatalog.core.operations import CreateMode

uc_app = typer.Typer(
    help="Build catalogs from Unity Catalog metadata.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@uc_app.callback()
def _init(ctx: typer.Context, profile: str | None = ProfileOpt):
    """Initialize Unity Catalog context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_uc_context(profile)


def _resolve_schema_or_exit(
    *,
    schema_arg: str | None,
    schema_opt: str | None,
) -> tuple[str, str, str]:
    """Resolve schema from argument/option and validate format."""
    schema_full_name = schema_opt or schema_arg
    if not schema_full_name:
        die("Missing schema. Provide it as a positional argument or via --schema.", EXIT_USAGE)
    try:
        catalog, schema_name = parse_schema_full_name(schema_full_name)
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=EXIT_USAGE)
    return f"{catalog}.{schema_name}", catalog, schema_name


@uc_app.command("load")
def load(
    ctx: typer.Context,
    schema_arg: str | None = typer.Argument(
        None, help="Schema in the form catalog.schema"
    ),
    schema: str | None = typer.Option(
        None, "--schema", help="Schema in the form catalog.schema"
    ),
    name: str | None = NameOpt,
    mode: CreateMode = ModeOpt,
    functions: bool = FunctionsOpt,
    select: bool = SelectOpt,
):
    """Load a Unity Catalog schema into an in-memory catalog and show the result."""
    appctx: UCAppContext = ctx.obj
    adapter = appctx.adapter
    schema_full_name, catalog_name, schema_name = _resolve_schema_or_exit(
        schema_arg=schema_arg,
        schema_opt=schema,
    )
    catalog = Catalog(catalog_name)

    try:
        if select:
            with out.status("Loading tables..."):
                tables = filter_by_name(
                    adapter.list_tables(catalog=catalog_name, schema=schema_name), name
                )
            if not tables:
                warn_exit("No tables found.")
            picked = select_tables(tables)
            if not picked:
                warn_exit("No tables selected.")
            results = load_tables(catalog, picked, mode=mode)
            if functions:
                with out.status("Loading functions..."):
                    fns = filter_by_name(
                        adapter.list_functions(catalog=catalog_name, schema=schema_name), name
                    )
                results.extend(load_functions(catalog, fns, mode=mode))
        else:
            with out.status(f"Loading {schema_full_name}..."):
                results = load_schema(
                    adapter,
                    catalog,
                    schema_full_name,
                    mode=mode,
                    name_regex=name,
                    include_functions=functions,
                )
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=EXIT_USAGE)
    except NotFound as exc:
        exit_from_exc(exc, message=f"Schema '{schema_full_name}' does not exist.")
    except PermissionDenied as exc:
        exit_from_exc(exc, message=f"No permission to access schema '{schema_full_name}'.")

    if not results:
        warn_exit("No tables or functions found.")

    out.header("Catalog")
    out.kv({"Schema": schema_full_name, "Mode": mode.value, "Resources": len(results)})
    out.load_results_table(results)
    out.catalog_tables_table(catalog, title=f"Tables in {schema_full_name}")

    failed = [r for r in results if r.error]
    if failed:
        die(f"Failed to load {len(failed)} resource(s).", EXIT_FAILED)

    out.success(f"Loaded {sum(1 for r in results if r.loaded)} resource(s).")
