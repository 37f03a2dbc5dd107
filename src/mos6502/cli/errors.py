"""
CLI Exit Codes and Error Reporting
==================================

Both command-line tools report failures the same way: one line on stderr
and an exit code that tells scripts what went wrong.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from mos6502.errors import AddressParseError, Mos6502Error


class ExitCode(IntEnum):
    """Process exit codes shared by m6502run and m6502dis."""
    SUCCESS = 0
    RUN_ERROR = 1        # Package error while running or disassembling
    INVALID_ARGS = 2     # Bad hex text or address (also click's usage code)
    INTERNAL_ERROR = 3   # Bug: anything not raised on purpose


def exit_code_for(error: Exception) -> ExitCode:
    """Map an exception to the exit code a tool should return."""
    if isinstance(error, (AddressParseError, click.BadParameter)):
        return ExitCode.INVALID_ARGS
    if isinstance(error, Mos6502Error):
        return ExitCode.RUN_ERROR
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report error on stderr and exit.

    Args:
        error: What was raised
        verbose: Also print the traceback of unexpected errors
        error_type: Label for run errors, e.g. "Run" gives "Run error: ..."
    """
    code = exit_code_for(error)
    match code:
        case ExitCode.INVALID_ARGS:
            label = "Error"
        case ExitCode.RUN_ERROR:
            label = f"{error_type} error" if error_type else "Error"
        case _:
            label = "Internal error"

    click.echo(f"{label}: {error}", err=True)
    if code == ExitCode.INTERNAL_ERROR and verbose:
        traceback.print_exc()
    sys.exit(code)
