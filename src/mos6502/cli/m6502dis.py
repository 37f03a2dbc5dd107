"""
m6502dis - 6502 Disassembler Command-Line Interface
===================================================

Disassembles machine code given as hex text.

Usage Examples
--------------
Disassemble at address 0:
    $ m6502dis "A9 10 69 05 E8 00"

With base address:
    $ m6502dis "20 00 90 60" --address 0x8000

Limit number of instructions:
    $ m6502dis "EA EA EA EA" --count 2

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

from typing import Optional

import click

from mos6502 import __version__
from mos6502.cli.errors import handle_cli_exception
from mos6502.disassembler import MOS6502Disassembler, VECTOR_SYMBOLS
from mos6502.parsing import parse_address, parse_hex_bytes


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("program", type=str)
@click.option(
    "-a", "--address",
    type=str,
    default="0",
    help="Base address for disassembly (hex with 0x/$ prefix or decimal). Default: 0",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many instructions (default: whole input)",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Leave out the raw bytes column",
)
@click.option(
    "--symbols/--no-symbols",
    default=True,
    help="Annotate the hardware vectors (default: enabled)",
)
@click.version_option(version=__version__, prog_name="m6502dis")
def main(
    program: str,
    address: str,
    count: Optional[int],
    no_bytes: bool,
    symbols: bool,
) -> None:
    """
    Disassemble 6502 machine code.

    PROGRAM is the code as hex bytes, e.g. "A9 10 69 05" or "A9106905".

    Examples:

        m6502dis "20 00 90 60" --address 0x8000

        m6502dis "A9 10 69 05 E8 00" --count 3 --no-bytes
    """
    try:
        data = parse_hex_bytes(program)
        base_address = parse_address(address)

        disasm = MOS6502Disassembler(dict(VECTOR_SYMBOLS) if symbols else None)

        for instr in disasm.disassemble(data, start_address=base_address, count=count):
            if not no_bytes:
                click.echo(str(instr))
                continue
            note = f"  ; {instr.comment}" if instr.comment else ""
            click.echo(f"${instr.address:04X}: {instr.assembly}{note}")

    except Exception as e:
        handle_cli_exception(e)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
