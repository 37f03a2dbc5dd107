"""
MOS6502 - Instruction-Level 6502 Emulator
=========================================

This package emulates the MOS Technology 6502 8-bit processor closely
enough to run arbitrary machine code in a flat 64KB address space, with
exact flag semantics and cycle counting.

Main Components
---------------
- **cpu**: Instruction set definitions (opcodes, addressing modes, cycles)
- **emulator**: CPU core, memory, instruction table, breakpoints, and the
  Emulator facade with a background runner
- **disassembler**: 6502 disassembler sharing the emulator's opcode table
- **parsing**: Address and hex-byte parsing for user input

Quick Start
-----------
Run a program:
    >>> from mos6502 import Emulator
    >>> emu = Emulator()
    >>> emu.load_program(bytes([0xA9, 0x10, 0x69, 0x05, 0xE8, 0x00]))
    >>> emu.reset()
    >>> event = emu.run(4)
    >>> emu.cpu.a, emu.cpu.x, emu.cpu.cycles
    (21, 1, 15)

Disassemble:
    >>> from mos6502 import MOS6502Disassembler
    >>> print(MOS6502Disassembler().disassemble_to_text(bytes([0xA9, 0x41]), 0x8000))
    $8000: A9 41     LDA #$41         ; 'A'

Or use the command-line tools:
    $ m6502run "A9 10 69 05 E8 00" --steps 4
    $ m6502dis "20 00 90 60" --address 0x8000

Reference Documentation
-----------------------
- MOS MCS6500 Microcomputer Family Programming Manual
- 6502 Instruction Reference: http://www.6502.org/tutorials/6502opcodes.html
"""

__version__ = "1.0.0"
__author__ = "MOS6502 Emulator Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from mos6502.errors import (
    Mos6502Error,
    AddressParseError,
    EmulatorStateError,
)

from mos6502.cpu import (
    AddressingMode,
    OpcodeInfo,
    OPCODE_TABLE,
    get_opcode_info,
)

from mos6502.emulator import (
    MOS6502,
    CPUState,
    Flags,
    Memory,
    Emulator,
    EmulatorConfig,
    BreakpointManager,
    BreakEvent,
    BreakReason,
    RegisterCondition,
)

from mos6502.disassembler import MOS6502Disassembler, DisassembledInstruction

from mos6502.parsing import parse_address, parse_byte, parse_hex_bytes

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Exception hierarchy
    "Mos6502Error",
    "AddressParseError",
    "EmulatorStateError",
    # Instruction set
    "AddressingMode",
    "OpcodeInfo",
    "OPCODE_TABLE",
    "get_opcode_info",
    # Emulator
    "MOS6502",
    "CPUState",
    "Flags",
    "Memory",
    "Emulator",
    "EmulatorConfig",
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
    "RegisterCondition",
    # Disassembler
    "MOS6502Disassembler",
    "DisassembledInstruction",
    # Parsing
    "parse_address",
    "parse_byte",
    "parse_hex_bytes",
]
