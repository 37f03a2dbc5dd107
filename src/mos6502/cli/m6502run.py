"""
m6502run - Run 6502 Machine Code
================================

Loads machine code given as hex text, points the reset vector at the load
address, resets the CPU, executes a fixed number of instructions and prints
the final register state.

Usage Examples
--------------
Run the default 100 steps:
    $ m6502run "A9 10 69 05 E8 00"

Run exactly four instructions at $C000:
    $ m6502run "A9 10 69 05 E8 00" --origin 0xC000 --steps 4

Trace every instruction:
    $ m6502run "A2 FF CA D0 FD" --steps 10 --trace

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import logging

import click

from mos6502 import __version__
from mos6502.cli.errors import handle_cli_exception
from mos6502.emulator import Emulator, EmulatorConfig, CPUState, format_flags
from mos6502.parsing import parse_address, parse_hex_bytes


def format_registers(state: CPUState) -> str:
    """Format a register snapshot as a two-line summary."""
    return (
        f"A=${state.a:02X} X=${state.x:02X} Y=${state.y:02X} "
        f"SP=${state.sp:02X} PC=${state.pc:04X} P=${state.p:02X}\n"
        f"Flags: NV-BDIZC {format_flags(state.p)}  Cycles: {state.cycles}"
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("program", type=str)
@click.option(
    "-o", "--origin",
    type=str,
    default="0x8000",
    help="Load address (hex with 0x/$ prefix or decimal). Default: 0x8000",
)
@click.option(
    "-n", "--steps",
    type=click.IntRange(min=0),
    default=100,
    help="Number of instructions to execute (default: 100)",
)
@click.option(
    "-t", "--trace",
    is_flag=True,
    help="Print each instruction as it executes",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="m6502run")
def main(program: str, origin: str, steps: int, trace: bool, verbose: bool) -> None:
    """
    Run 6502 machine code and print the final registers.

    PROGRAM is the code as hex bytes, e.g. "A9 10 69 05" or "A9106905".

    Examples:

        m6502run "A9 10 69 05 E8 00" --steps 4

        m6502run "A2 FF" --origin 0x0000 --steps 1
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        data = parse_hex_bytes(program)
        load_address = parse_address(origin, "origin")

        emu = Emulator(EmulatorConfig(origin=load_address, trace=trace))
        emu.load_program(data)
        emu.reset()

        if verbose:
            click.echo(f"Loaded {len(data)} bytes at ${load_address:04X}", err=True)

        for _ in range(steps):
            if trace:
                click.echo(emu.disassemble_at(emu.cpu.pc, 1)[0])
            emu.step()

        click.echo(format_registers(emu.registers()))

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Run")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
