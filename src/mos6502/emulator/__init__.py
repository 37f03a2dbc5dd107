"""
MOS6502 Emulator
================

Instruction-level emulation of the MOS 6502 with cycle counting.

This package provides:

- **MOS6502 CPU**: All documented opcodes, exact flag semantics, page-crossing
  and branch-taken cycle penalties, reset/IRQ/NMI/BRK/RTI
- **Memory**: Flat 64KB RAM with wrapping byte/word access
- **Instruction table**: Immutable 256-slot table, injectable per CPU
- **Debugging**: PC breakpoints, register conditions, break requests
- **Emulator facade**: Program loading, stepping, bounded runs and a
  background runner with cooperative stop

Quick Start
-----------

Basic usage::

    >>> from mos6502.emulator import MOS6502
    >>> cpu = MOS6502()
    >>> cpu.load_program(bytes([0xA2, 0xFF]), 0x0000)
    >>> cpu.pc = 0x0000
    >>> cpu.step()
    2
    >>> cpu.x, cpu.flag_n, cpu.flag_z
    (255, True, False)

With debugging::

    >>> emu = Emulator()
    >>> emu.load_program(program_bytes)
    >>> emu.reset()
    >>> emu.add_breakpoint(0x8010)
    >>> event = emu.run()
    >>> if event.reason == BreakReason.PC_BREAKPOINT:
    ...     print(f"Stopped at ${event.address:04X}")

Implementation Notes
--------------------

Decimal mode is stored but ignored by ADC and SBC. Opcodes outside the
documented set (other than the KIL placeholder at $02) are logged, cost two
cycles and execution continues at the next byte.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

from .cpu import (
    MOS6502,
    CPUState,
    Flags,
    BusProtocol,
    AddressResult,
    format_flags,
    NMI_VECTOR,
    RESET_VECTOR,
    IRQ_VECTOR,
    STACK_BASE,
)
from .memory import Memory
from .instructions import Instruction, INSTRUCTION_TABLE, build_instruction_table
from .breakpoints import (
    BreakpointManager,
    BreakEvent,
    BreakReason,
    RegisterCondition,
)
from .emulator import Emulator, EmulatorConfig

__all__ = [
    # Main classes
    "Emulator",
    "EmulatorConfig",

    # CPU
    "MOS6502",
    "CPUState",
    "Flags",
    "BusProtocol",
    "AddressResult",
    "format_flags",
    "NMI_VECTOR",
    "RESET_VECTOR",
    "IRQ_VECTOR",
    "STACK_BASE",

    # Memory
    "Memory",

    # Instructions
    "Instruction",
    "INSTRUCTION_TABLE",
    "build_instruction_table",

    # Debugging
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
    "RegisterCondition",
]
