"""
MOS6502 Command-Line Interface
==============================

This package provides command-line tools:

- **m6502run**: Load hex bytes, run N instructions, print the registers
- **m6502dis**: Disassemble hex bytes

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["m6502run", "m6502dis"]
