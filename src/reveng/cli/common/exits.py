"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from reveng.cli.common.output import out


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """
    Print an error message and exit with a given code, chaining ``exc``.

    Keeps the original exception as the cause for debugging.
    """
    out.error(message)
    raise typer.Exit(code) from exc
