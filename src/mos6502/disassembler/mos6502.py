"""
MOS 6502 Disassembler
=====================

Turns 6502 machine code back into assembly text.

Decoding is driven by `mos6502.cpu.opcodes.OPCODE_TABLE`, the table the
emulator executes from, so a listing always shows the instruction shape the
CPU will actually use.

Operand syntax:
    - IMMEDIATE:         #$nn
    - ZERO_PAGE:         $nn
    - ZERO_PAGE_X/Y:     $nn,X / $nn,Y
    - ABSOLUTE:          $nnnn
    - ABSOLUTE_X/Y:      $nnnn,X / $nnnn,Y
    - ABSOLUTE_INDIRECT: ($nnnn)
    - INDIRECT_X:        ($nn,X)
    - INDIRECT_Y:        ($nn),Y
    - ACCUMULATOR:       A
    - RELATIVE:          $nnnn (branch target; displacement in the comment)

Bytes that do not decode (unknown opcodes, or an instruction cut short by
the end of the buffer) come out as one-byte ``.BYTE`` lines, so a listing
never stops early.

Usage:
    disasm = MOS6502Disassembler({0x8010: "loop"})
    for line in disasm.disassemble(code, start_address=0x8000, count=10):
        print(line)

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

from dataclasses import dataclass
from typing import Optional

from ..cpu.opcodes import AddressingMode, OPCODE_TABLE


# Operand templates; {b} is the one-byte operand, {w} the little-endian word
_OPERAND_FORMATS: dict[AddressingMode, str] = {
    AddressingMode.IMPLIED: "",
    AddressingMode.ACCUMULATOR: "A",
    AddressingMode.IMMEDIATE: "#${b:02X}",
    AddressingMode.ZERO_PAGE: "${b:02X}",
    AddressingMode.ZERO_PAGE_X: "${b:02X},X",
    AddressingMode.ZERO_PAGE_Y: "${b:02X},Y",
    AddressingMode.ABSOLUTE: "${w:04X}",
    AddressingMode.ABSOLUTE_X: "${w:04X},X",
    AddressingMode.ABSOLUTE_Y: "${w:04X},Y",
    AddressingMode.ABSOLUTE_INDIRECT: "(${w:04X})",
    AddressingMode.INDIRECT_X: "(${b:02X},X)",
    AddressingMode.INDIRECT_Y: "(${b:02X}),Y",
}

# Width of the raw-bytes column: three bytes, two spaces between
_BYTES_COLUMN = 8


@dataclass(frozen=True)
class DisassembledInstruction:
    """
    One decoded line of a listing.

    Attributes:
        address: Where the instruction sits in memory
        opcode: First byte
        mnemonic: e.g. "LDA", or ".BYTE" for undecodable data
        mode: Addressing mode (IMPLIED for .BYTE)
        operand_bytes: Bytes after the opcode
        operand_str: Operand in assembler syntax, "" when there is none
        size: Bytes consumed
        raw_bytes: Opcode plus operand bytes
        comment: Annotation (symbol, ASCII, branch displacement), may be ""
    """
    address: int
    opcode: int
    mnemonic: str
    mode: AddressingMode
    operand_bytes: bytes
    operand_str: str
    size: int
    raw_bytes: bytes
    comment: str = ""

    @property
    def assembly(self) -> str:
        """Mnemonic and operand, e.g. 'LDA ($80),Y'."""
        return f"{self.mnemonic} {self.operand_str}".rstrip()

    def __str__(self) -> str:
        dump = " ".join(f"{b:02X}" for b in self.raw_bytes).ljust(_BYTES_COLUMN)
        line = f"${self.address:04X}: {dump}  "
        if not self.comment:
            return line + self.assembly
        return f"{line}{self.assembly:<16} ; {self.comment}"

    def to_dict(self) -> dict:
        """Plain-data view for JSON output."""
        return {
            "address": f"${self.address:04X}",
            "address_int": self.address,
            "opcode": f"${self.opcode:02X}",
            "mnemonic": self.mnemonic,
            "mode": str(self.mode),
            "operand": self.operand_str,
            "size": self.size,
            "bytes": [f"${b:02X}" for b in self.raw_bytes],
            "comment": self.comment,
        }


class MOS6502Disassembler:
    """
    Table-driven 6502 disassembler with optional symbol annotation.

    A symbol table maps addresses to names; operands that hit a known
    address (including branch targets) get the name as their comment.
    """

    def __init__(self, symbol_table: Optional[dict[int, str]] = None):
        self._symbols: dict[int, str] = dict(symbol_table or {})

    def add_symbol(self, address: int, name: str) -> None:
        self._symbols[address & 0xFFFF] = name

    def add_symbols(self, symbols: dict[int, str]) -> None:
        for address, name in symbols.items():
            self.add_symbol(address, name)

    def disassemble_one(
        self,
        data: bytes,
        address: int = 0,
        offset: int = 0
    ) -> DisassembledInstruction:
        """
        Decode the instruction at data[offset], assumed to live at address.

        Raises:
            ValueError: If offset is not inside data
        """
        if not 0 <= offset < len(data):
            raise ValueError(f"Offset {offset} outside {len(data)}-byte buffer")

        opcode = data[offset]
        info = OPCODE_TABLE.get(opcode)
        if info is None:
            return self._data_byte(address, opcode, "unknown opcode")
        if offset + info.size > len(data):
            return self._data_byte(address, opcode, f"incomplete {info.mnemonic}")

        raw = bytes(data[offset:offset + info.size])
        operand_str, comment = self._operand(info.mode, raw[1:], address)
        return DisassembledInstruction(
            address=address,
            opcode=opcode,
            mnemonic=info.mnemonic,
            mode=info.mode,
            operand_bytes=raw[1:],
            operand_str=operand_str,
            size=info.size,
            raw_bytes=raw,
            comment=comment,
        )

    @staticmethod
    def _data_byte(address: int, value: int, comment: str) -> DisassembledInstruction:
        return DisassembledInstruction(
            address=address,
            opcode=value,
            mnemonic=".BYTE",
            mode=AddressingMode.IMPLIED,
            operand_bytes=b"",
            operand_str=f"${value:02X}",
            size=1,
            raw_bytes=bytes([value]),
            comment=comment,
        )

    def _operand(
        self,
        mode: AddressingMode,
        operand: bytes,
        address: int
    ) -> tuple[str, str]:
        """Return (operand text, comment) for an operand of the given mode."""
        b = operand[0] if operand else 0
        w = b | (operand[1] << 8) if len(operand) > 1 else b

        if mode == AddressingMode.RELATIVE:
            displacement = b - 0x100 if b & 0x80 else b
            target = (address + 2 + displacement) & 0xFFFF
            return f"${target:04X}", self._symbols.get(target, f"{displacement:+d}")

        text = _OPERAND_FORMATS[mode].format(b=b, w=w)
        if mode == AddressingMode.IMMEDIATE:
            return text, f"'{chr(b)}'" if 0x20 <= b < 0x7F else ""

        referenced = w if len(operand) > 1 else b
        comment = self._symbols.get(referenced, "") if operand else ""
        if mode == AddressingMode.ABSOLUTE_INDIRECT and (w & 0xFF) == 0xFF and not comment:
            # Pointer on a page end: the CPU wraps within the page
            comment = f"high byte from ${w & 0xFF00:04X}"
        return text, comment

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None,
        max_bytes: Optional[int] = None
    ) -> list[DisassembledInstruction]:
        """
        Decode consecutive instructions from data.

        Args:
            data: Code bytes
            start_address: Address of data[0]
            count: Stop after this many instructions
            max_bytes: Do not start an instruction at or past this offset

        Returns:
            Decoded instructions in address order
        """
        limit = len(data) if max_bytes is None else min(len(data), max_bytes)
        listing: list[DisassembledInstruction] = []
        offset = 0
        while offset < limit and (count is None or len(listing) < count):
            address = (start_address + offset) & 0xFFFF
            instr = self.disassemble_one(data, address, offset)
            listing.append(instr)
            offset += instr.size
        return listing

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None
    ) -> str:
        """Listing as a single newline-separated string."""
        return "\n".join(map(str, self.disassemble(data, start_address, count)))


# Hardware vectors, useful as a starting symbol table
VECTOR_SYMBOLS = {
    0xFFFA: "NMI_VECTOR",
    0xFFFC: "RESET_VECTOR",
    0xFFFE: "IRQ_VECTOR",
}
