"""
MOS 6502 Instruction Set Definition
===================================

This module defines the documented NMOS 6502 instruction set: opcodes,
mnemonics, addressing modes, base cycle counts and which instructions pay
the extra cycle when an indexed read crosses a page boundary.

The 6502 is an 8-bit CPU with a 16-bit address bus and little-endian word
ordering (least significant byte first).

Addressing Modes
----------------
The 6502 has twelve addressing modes (the zero-page indexed mode is split
into X and Y members here, giving thirteen enum values):

1. **IMPLIED**: No operand (e.g., NOP, RTS, INX)
2. **ACCUMULATOR**: Operates on A (e.g., ASL A)
3. **IMMEDIATE**: Literal byte follows opcode (e.g., LDA #$41 -> $A9 $41)
4. **ZERO_PAGE**: One-byte address in $0000-$00FF (e.g., LDA $40)
5. **ZERO_PAGE_X / ZERO_PAGE_Y**: Zero-page address plus index, wrapping
   within the zero page
6. **ABSOLUTE**: Full 16-bit address (e.g., LDA $1234 -> $AD $34 $12)
7. **ABSOLUTE_X / ABSOLUTE_Y**: Absolute address plus index
8. **ABSOLUTE_INDIRECT**: JMP ($nnnn) only; reproduces the page-wrap bug
9. **INDIRECT_X**: ($nn,X) pre-indexed pointer in zero page
10. **INDIRECT_Y**: ($nn),Y post-indexed pointer in zero page
11. **RELATIVE**: Signed 8-bit branch displacement

Cycle Counts
------------
Cycle counts are the documented base costs. The one deliberate exception is
ADC immediate ($69), which is charged 4 cycles. Programs written against the
reference debugger count on that figure.

Reference
---------
- MOS MCS6500 Microcomputer Family Programming Manual (1976)
- http://www.6502.org/tutorials/6502opcodes.html

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressingMode(Enum):
    """
    6502 addressing modes.

    Each addressing mode determines how many operand bytes follow the
    opcode and how the effective address is computed from them.
    """
    IMMEDIATE = auto()          # #$nn
    ZERO_PAGE = auto()          # $nn
    ZERO_PAGE_X = auto()        # $nn,X
    ZERO_PAGE_Y = auto()        # $nn,Y
    ABSOLUTE = auto()           # $nnnn
    ABSOLUTE_X = auto()         # $nnnn,X
    ABSOLUTE_Y = auto()         # $nnnn,Y
    ABSOLUTE_INDIRECT = auto()  # ($nnnn)
    INDIRECT_X = auto()         # ($nn,X)
    INDIRECT_Y = auto()         # ($nn),Y
    ACCUMULATOR = auto()        # A
    RELATIVE = auto()           # branch displacement
    IMPLIED = auto()            # no operand

    def __str__(self) -> str:
        """Return human-readable name for listings and error messages."""
        return self.name.lower().replace("_", " ")


# Number of operand bytes that follow the opcode for each mode
OPERAND_SIZES: dict[AddressingMode, int] = {
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.ABSOLUTE_INDIRECT: 2,
    AddressingMode.INDIRECT_X: 1,
    AddressingMode.INDIRECT_Y: 1,
    AddressingMode.ACCUMULATOR: 0,
    AddressingMode.RELATIVE: 1,
    AddressingMode.IMPLIED: 0,
}


# =============================================================================
# Opcode Information
# =============================================================================

@dataclass(frozen=True)
class OpcodeInfo:
    """
    Static description of one opcode.

    This dataclass is immutable (frozen) so the opcode table cannot be
    modified at runtime.

    Attributes:
        opcode: The opcode byte
        mnemonic: Instruction mnemonic (diagnostic only, e.g. "LDA")
        mode: Addressing mode used to resolve the operand
        cycles: Base cycle cost
        page_penalty: True if a page crossing during operand resolution
                      costs one extra cycle (indexed reads only)
    """
    opcode: int
    mnemonic: str
    mode: AddressingMode
    cycles: int
    page_penalty: bool = False

    @property
    def operand_size(self) -> int:
        """Number of operand bytes (0, 1 or 2)."""
        return OPERAND_SIZES[self.mode]

    @property
    def size(self) -> int:
        """Total instruction size in bytes, opcode included."""
        return 1 + OPERAND_SIZES[self.mode]

    def __repr__(self) -> str:
        return (
            f"OpcodeInfo(opcode=${self.opcode:02X}, mnemonic={self.mnemonic!r}, "
            f"mode={self.mode.name}, cycles={self.cycles})"
        )


_IMM = AddressingMode.IMMEDIATE
_ZP = AddressingMode.ZERO_PAGE
_ZPX = AddressingMode.ZERO_PAGE_X
_ZPY = AddressingMode.ZERO_PAGE_Y
_ABS = AddressingMode.ABSOLUTE
_ABX = AddressingMode.ABSOLUTE_X
_ABY = AddressingMode.ABSOLUTE_Y
_IND = AddressingMode.ABSOLUTE_INDIRECT
_IZX = AddressingMode.INDIRECT_X
_IZY = AddressingMode.INDIRECT_Y
_ACC = AddressingMode.ACCUMULATOR
_REL = AddressingMode.RELATIVE
_IMP = AddressingMode.IMPLIED


# =============================================================================
# Opcode Table
# =============================================================================
# Each row: (opcode, mnemonic, mode, base cycles, page-crossing penalty)
# =============================================================================

_DEFINITIONS: list[tuple[int, str, AddressingMode, int, bool]] = [
    # -------------------------------------------------------------------------
    # Load / store
    # -------------------------------------------------------------------------
    (0xA9, "LDA", _IMM, 2, False),
    (0xA5, "LDA", _ZP, 3, False),
    (0xB5, "LDA", _ZPX, 4, False),
    (0xAD, "LDA", _ABS, 4, False),
    (0xBD, "LDA", _ABX, 4, True),
    (0xB9, "LDA", _ABY, 4, True),
    (0xA1, "LDA", _IZX, 6, False),
    (0xB1, "LDA", _IZY, 5, True),

    (0xA2, "LDX", _IMM, 2, False),
    (0xA6, "LDX", _ZP, 3, False),
    (0xB6, "LDX", _ZPY, 4, False),
    (0xAE, "LDX", _ABS, 4, False),
    (0xBE, "LDX", _ABY, 4, True),

    (0xA0, "LDY", _IMM, 2, False),
    (0xA4, "LDY", _ZP, 3, False),
    (0xB4, "LDY", _ZPX, 4, False),
    (0xAC, "LDY", _ABS, 4, False),
    (0xBC, "LDY", _ABX, 4, True),

    (0x85, "STA", _ZP, 3, False),
    (0x95, "STA", _ZPX, 4, False),
    (0x8D, "STA", _ABS, 4, False),
    (0x9D, "STA", _ABX, 5, False),
    (0x99, "STA", _ABY, 5, False),
    (0x81, "STA", _IZX, 6, False),
    (0x91, "STA", _IZY, 6, False),

    (0x86, "STX", _ZP, 3, False),
    (0x96, "STX", _ZPY, 4, False),
    (0x8E, "STX", _ABS, 4, False),

    (0x84, "STY", _ZP, 3, False),
    (0x94, "STY", _ZPX, 4, False),
    (0x8C, "STY", _ABS, 4, False),

    # -------------------------------------------------------------------------
    # Register transfers
    # -------------------------------------------------------------------------
    (0xAA, "TAX", _IMP, 2, False),
    (0xA8, "TAY", _IMP, 2, False),
    (0xBA, "TSX", _IMP, 2, False),
    (0x8A, "TXA", _IMP, 2, False),
    (0x9A, "TXS", _IMP, 2, False),
    (0x98, "TYA", _IMP, 2, False),

    # -------------------------------------------------------------------------
    # Stack
    # -------------------------------------------------------------------------
    (0x48, "PHA", _IMP, 3, False),
    (0x08, "PHP", _IMP, 3, False),
    (0x68, "PLA", _IMP, 4, False),
    (0x28, "PLP", _IMP, 4, False),

    # -------------------------------------------------------------------------
    # Logical
    # -------------------------------------------------------------------------
    (0x29, "AND", _IMM, 2, False),
    (0x25, "AND", _ZP, 3, False),
    (0x35, "AND", _ZPX, 4, False),
    (0x2D, "AND", _ABS, 4, False),
    (0x3D, "AND", _ABX, 4, True),
    (0x39, "AND", _ABY, 4, True),
    (0x21, "AND", _IZX, 6, False),
    (0x31, "AND", _IZY, 5, True),

    (0x09, "ORA", _IMM, 2, False),
    (0x05, "ORA", _ZP, 3, False),
    (0x15, "ORA", _ZPX, 4, False),
    (0x0D, "ORA", _ABS, 4, False),
    (0x1D, "ORA", _ABX, 4, True),
    (0x19, "ORA", _ABY, 4, True),
    (0x01, "ORA", _IZX, 6, False),
    (0x11, "ORA", _IZY, 5, True),

    (0x49, "EOR", _IMM, 2, False),
    (0x45, "EOR", _ZP, 3, False),
    (0x55, "EOR", _ZPX, 4, False),
    (0x4D, "EOR", _ABS, 4, False),
    (0x5D, "EOR", _ABX, 4, True),
    (0x59, "EOR", _ABY, 4, True),
    (0x41, "EOR", _IZX, 6, False),
    (0x51, "EOR", _IZY, 5, True),

    (0x24, "BIT", _ZP, 3, False),
    (0x2C, "BIT", _ABS, 4, False),

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------
    (0x69, "ADC", _IMM, 4, False),
    (0x65, "ADC", _ZP, 3, False),
    (0x75, "ADC", _ZPX, 4, False),
    (0x6D, "ADC", _ABS, 4, False),
    (0x7D, "ADC", _ABX, 4, True),
    (0x79, "ADC", _ABY, 4, True),
    (0x61, "ADC", _IZX, 6, False),
    (0x71, "ADC", _IZY, 5, True),

    (0xE9, "SBC", _IMM, 2, False),
    (0xE5, "SBC", _ZP, 3, False),
    (0xF5, "SBC", _ZPX, 4, False),
    (0xED, "SBC", _ABS, 4, False),
    (0xFD, "SBC", _ABX, 4, True),
    (0xF9, "SBC", _ABY, 4, True),
    (0xE1, "SBC", _IZX, 6, False),
    (0xF1, "SBC", _IZY, 5, True),

    (0xC9, "CMP", _IMM, 2, False),
    (0xC5, "CMP", _ZP, 3, False),
    (0xD5, "CMP", _ZPX, 4, False),
    (0xCD, "CMP", _ABS, 4, False),
    (0xDD, "CMP", _ABX, 4, True),
    (0xD9, "CMP", _ABY, 4, True),
    (0xC1, "CMP", _IZX, 6, False),
    (0xD1, "CMP", _IZY, 5, True),

    (0xE0, "CPX", _IMM, 2, False),
    (0xE4, "CPX", _ZP, 3, False),
    (0xEC, "CPX", _ABS, 4, False),

    (0xC0, "CPY", _IMM, 2, False),
    (0xC4, "CPY", _ZP, 3, False),
    (0xCC, "CPY", _ABS, 4, False),

    # -------------------------------------------------------------------------
    # Increments / decrements
    # -------------------------------------------------------------------------
    (0xE6, "INC", _ZP, 5, False),
    (0xF6, "INC", _ZPX, 6, False),
    (0xEE, "INC", _ABS, 6, False),
    (0xFE, "INC", _ABX, 7, False),
    (0xE8, "INX", _IMP, 2, False),
    (0xC8, "INY", _IMP, 2, False),

    (0xC6, "DEC", _ZP, 5, False),
    (0xD6, "DEC", _ZPX, 6, False),
    (0xCE, "DEC", _ABS, 6, False),
    (0xDE, "DEC", _ABX, 7, False),
    (0xCA, "DEX", _IMP, 2, False),
    (0x88, "DEY", _IMP, 2, False),

    # -------------------------------------------------------------------------
    # Shifts / rotates
    # -------------------------------------------------------------------------
    (0x0A, "ASL", _ACC, 2, False),
    (0x06, "ASL", _ZP, 5, False),
    (0x16, "ASL", _ZPX, 6, False),
    (0x0E, "ASL", _ABS, 6, False),
    (0x1E, "ASL", _ABX, 7, False),

    (0x4A, "LSR", _ACC, 2, False),
    (0x46, "LSR", _ZP, 5, False),
    (0x56, "LSR", _ZPX, 6, False),
    (0x4E, "LSR", _ABS, 6, False),
    (0x5E, "LSR", _ABX, 7, False),

    (0x2A, "ROL", _ACC, 2, False),
    (0x26, "ROL", _ZP, 5, False),
    (0x36, "ROL", _ZPX, 6, False),
    (0x2E, "ROL", _ABS, 6, False),
    (0x3E, "ROL", _ABX, 7, False),

    (0x6A, "ROR", _ACC, 2, False),
    (0x66, "ROR", _ZP, 5, False),
    (0x76, "ROR", _ZPX, 6, False),
    (0x6E, "ROR", _ABS, 6, False),
    (0x7E, "ROR", _ABX, 7, False),

    # -------------------------------------------------------------------------
    # Jumps / subroutines
    # -------------------------------------------------------------------------
    (0x4C, "JMP", _ABS, 3, False),
    (0x6C, "JMP", _IND, 5, False),
    (0x20, "JSR", _ABS, 6, False),
    (0x60, "RTS", _IMP, 6, False),

    # -------------------------------------------------------------------------
    # Branches (taken/page penalties are added by the branch itself)
    # -------------------------------------------------------------------------
    (0x90, "BCC", _REL, 2, False),
    (0xB0, "BCS", _REL, 2, False),
    (0xF0, "BEQ", _REL, 2, False),
    (0x30, "BMI", _REL, 2, False),
    (0xD0, "BNE", _REL, 2, False),
    (0x10, "BPL", _REL, 2, False),
    (0x50, "BVC", _REL, 2, False),
    (0x70, "BVS", _REL, 2, False),

    # -------------------------------------------------------------------------
    # Status flag changes
    # -------------------------------------------------------------------------
    (0x18, "CLC", _IMP, 2, False),
    (0xD8, "CLD", _IMP, 2, False),
    (0x58, "CLI", _IMP, 2, False),
    (0xB8, "CLV", _IMP, 2, False),
    (0x38, "SEC", _IMP, 2, False),
    (0xF8, "SED", _IMP, 2, False),
    (0x78, "SEI", _IMP, 2, False),

    # -------------------------------------------------------------------------
    # System
    # -------------------------------------------------------------------------
    (0x00, "BRK", _IMP, 7, False),
    (0xEA, "NOP", _IMP, 2, False),
    (0x40, "RTI", _IMP, 6, False),

    # Illegal placeholder: consumes the byte and does nothing
    (0x02, "KIL", _IMP, 1, False),
]

OPCODE_TABLE: dict[int, OpcodeInfo] = {
    opcode: OpcodeInfo(opcode, mnemonic, mode, cycles, page_penalty)
    for opcode, mnemonic, mode, cycles, page_penalty in _DEFINITIONS
}

# Sorted list of all mnemonics
MNEMONICS: list[str] = sorted({info.mnemonic for info in OPCODE_TABLE.values()})

BRANCH_INSTRUCTIONS: frozenset[str] = frozenset(
    {"BCC", "BCS", "BEQ", "BMI", "BNE", "BPL", "BVC", "BVS"}
)


# =============================================================================
# Lookup Functions
# =============================================================================

def get_opcode_info(opcode: int) -> OpcodeInfo | None:
    """
    Look up the definition of an opcode byte.

    Args:
        opcode: Opcode byte (masked to 8 bits)

    Returns:
        OpcodeInfo, or None if the opcode is not part of the instruction set
    """
    return OPCODE_TABLE.get(opcode & 0xFF)


def get_valid_modes(mnemonic: str) -> list[AddressingMode]:
    """
    Get all addressing modes available for a mnemonic.

    Args:
        mnemonic: Instruction mnemonic (case-insensitive)

    Returns:
        List of addressing modes, in table order
    """
    mnemonic = mnemonic.upper()
    return [info.mode for info in OPCODE_TABLE.values() if info.mnemonic == mnemonic]


def is_branch_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a conditional branch."""
    return mnemonic.upper() in BRANCH_INSTRUCTIONS
