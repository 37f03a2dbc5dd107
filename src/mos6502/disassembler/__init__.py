"""
MOS6502 Disassembler Module
===========================

Disassembly of 6502 machine code for debugging workflows: trace logging in
the emulator, the `m6502dis` listing tool, and inspection of memory around
the current program counter.

Usage:
    from mos6502.disassembler import MOS6502Disassembler

    disasm = MOS6502Disassembler()
    for instr in disasm.disassemble(memory_bytes, start_address=0x8000, count=10):
        print(instr)

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

from .mos6502 import MOS6502Disassembler, DisassembledInstruction, VECTOR_SYMBOLS

__all__ = [
    "MOS6502Disassembler",
    "DisassembledInstruction",
    "VECTOR_SYMBOLS",
]
