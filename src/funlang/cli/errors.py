"""
funcc Error Reporting
=====================

Maps exceptions raised while compiling to a message on stderr and a
process exit code:

| Exception                               | Exit code      |
|-----------------------------------------|----------------|
| FunlangError (scan, parse, codegen)     | BUILD_ERROR    |
| unreadable input (missing, not UTF-8)   | INVALID_ARGS   |
| anything else                           | INTERNAL_ERROR |
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Process exit codes of funcc."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Source rejected by the compiler
    INVALID_ARGS = 2     # Bad option or unreadable input file
    INTERNAL_ERROR = 3   # Bug in the compiler itself


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised by funcc and exit.

    Compiler errors are printed as-is since they carry their own
    "file:line:col: error:" prefix. Anything unexpected is an internal
    error; verbose mode adds the traceback.

    Raises:
        SystemExit: Always
    """
    from funlang.errors import FunlangError

    if isinstance(error, FunlangError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: input is not valid UTF-8: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
