"""CLI application for the sqlcatalog toolkit."""

import typer

from sqlcatalog.cli.commands.types import types_app
from sqlcatalog.cli.commands.unitycatalog import uc_app
from sqlcatalog.cli.common.logs import configure_logging

app = typer.Typer(
    help="sqlcatalog - SQL catalog and type tooling",
    no_args_is_help=True,
)


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Configure logging before any command runs."""
    configure_logging(verbose)


app.add_typer(types_app, name="types", help="Parse and inspect SQL type expressions.")
app.add_typer(uc_app, name="uc", help="Build catalogs from Unity Catalog metadata.")


if __name__ == "__main__":
    app()
