"""
MOS6502 CPU Package
===================

Instruction set definitions shared by the emulator and the disassembler.
Both decode the same bytes, so both read the same table: an opcode's
mnemonic, addressing mode, size and base cycle cost live in exactly one
place.

Usage:
    from mos6502.cpu import AddressingMode, OPCODE_TABLE, get_opcode_info

    info = get_opcode_info(0xA9)
    print(info.mnemonic, info.mode, info.cycles)   # LDA immediate 2

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

from mos6502.cpu.opcodes import (
    AddressingMode,
    OpcodeInfo,
    OPERAND_SIZES,
    OPCODE_TABLE,
    MNEMONICS,
    BRANCH_INSTRUCTIONS,
    get_opcode_info,
    get_valid_modes,
    is_branch_instruction,
)

__all__ = [
    "AddressingMode",
    "OpcodeInfo",
    "OPERAND_SIZES",
    "OPCODE_TABLE",
    "MNEMONICS",
    "BRANCH_INSTRUCTIONS",
    "get_opcode_info",
    "get_valid_modes",
    "is_branch_instruction",
]
