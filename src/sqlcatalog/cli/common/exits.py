"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from sqlcatalog.cli.common.output import out

# exit codes: 1 = operation failed, 2 = invalid input
EXIT_FAILED = 1
EXIT_USAGE = 2


def die(msg: str, code: int = EXIT_FAILED) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = EXIT_FAILED) -> NoReturn:
    """Print `message` and exit, chaining `exc` so tracebacks keep the cause."""
    out.error(message)
    raise typer.Exit(code) from exc
