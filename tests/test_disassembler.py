"""
Disassembler Tests
==================

Tests for the 6502 disassembler: operand formatting per addressing mode,
branch targets, symbol annotation and handling of bad input.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import pytest
from mos6502.cpu import AddressingMode
from mos6502.disassembler import (
    MOS6502Disassembler,
    DisassembledInstruction,
    VECTOR_SYMBOLS,
)


@pytest.fixture
def disasm():
    return MOS6502Disassembler()


class TestOperandFormatting:
    """Test operand syntax for each addressing mode."""

    @pytest.mark.parametrize("code,text", [
        (bytes([0xEA]), "NOP"),
        (bytes([0x0A]), "ASL A"),
        (bytes([0xA9, 0x10]), "LDA #$10"),
        (bytes([0xA5, 0x42]), "LDA $42"),
        (bytes([0xB5, 0x42]), "LDA $42,X"),
        (bytes([0xB6, 0x42]), "LDX $42,Y"),
        (bytes([0xAD, 0x34, 0x12]), "LDA $1234"),
        (bytes([0xBD, 0x34, 0x12]), "LDA $1234,X"),
        (bytes([0xB9, 0x34, 0x12]), "LDA $1234,Y"),
        (bytes([0x6C, 0x34, 0x12]), "JMP ($1234)"),
        (bytes([0xA1, 0x42]), "LDA ($42,X)"),
        (bytes([0xB1, 0x42]), "LDA ($42),Y"),
    ])
    def test_mode_syntax(self, disasm, code, text):
        """Each mode formats its operand in standard syntax."""
        instr = disasm.disassemble_one(code, 0x8000)
        operand = f" {instr.operand_str}" if instr.operand_str else ""
        assert f"{instr.mnemonic}{operand}" == text
        assert instr.size == len(code)
        assert instr.raw_bytes == code

    def test_immediate_ascii_comment(self, disasm):
        """Printable immediates get a character comment."""
        instr = disasm.disassemble_one(bytes([0xA9, 0x41]))
        assert instr.comment == "'A'"

    def test_indirect_page_end_comment(self, disasm):
        """JMP ($xxFF) is annotated with the real high-byte address."""
        instr = disasm.disassemble_one(bytes([0x6C, 0xFF, 0x12]))
        assert instr.comment == "high byte from $1200"


class TestBranches:
    """Test relative branch targets."""

    def test_forward(self, disasm):
        """Target is relative to the next instruction."""
        instr = disasm.disassemble_one(bytes([0xD0, 0x05]), 0x8000)
        assert instr.operand_str == "$8007"
        assert instr.comment == "+5"

    def test_backward(self, disasm):
        """Negative displacement."""
        instr = disasm.disassemble_one(bytes([0xD0, 0xFD]), 0x8003)
        assert instr.operand_str == "$8002"
        assert instr.comment == "-3"

    def test_wraps_address_space(self, disasm):
        """Targets wrap at $FFFF."""
        instr = disasm.disassemble_one(bytes([0x10, 0x10]), 0xFFF8)
        assert instr.operand_str == "$000A"


class TestBadInput:
    """Test unknown and truncated instructions."""

    def test_unknown_opcode(self, disasm):
        """Unknown opcodes become a one-byte .BYTE."""
        instr = disasm.disassemble_one(bytes([0xFF, 0x00]), 0x8000)
        assert instr.mnemonic == ".BYTE"
        assert instr.operand_str == "$FF"
        assert instr.size == 1
        assert instr.comment == "unknown opcode"

    def test_truncated_instruction(self, disasm):
        """An instruction cut off by the buffer end becomes .BYTE."""
        instr = disasm.disassemble_one(bytes([0xAD, 0x34]), 0x8000)
        assert instr.mnemonic == ".BYTE"
        assert instr.size == 1
        assert instr.comment == "incomplete LDA"

    def test_offset_past_end(self, disasm):
        """Offsets beyond the data raise ValueError."""
        with pytest.raises(ValueError):
            disasm.disassemble_one(bytes([0xEA]), 0, offset=1)

    def test_always_progresses(self, disasm):
        """Garbage input still disassembles byte by byte."""
        result = disasm.disassemble(bytes([0xFF, 0xFF, 0xAD]))
        assert [i.address for i in result] == [0, 1, 2]


class TestListing:
    """Test multi-instruction disassembly and formatting."""

    SAMPLE = bytes([0xA9, 0x10, 0x69, 0x05, 0xE8, 0x00])

    def test_disassemble_sequence(self, disasm):
        """Addresses advance by instruction size."""
        result = disasm.disassemble(self.SAMPLE, 0x8000)
        assert [i.mnemonic for i in result] == ["LDA", "ADC", "INX", "BRK"]
        assert [i.address for i in result] == [0x8000, 0x8002, 0x8004, 0x8005]

    def test_count_limit(self, disasm):
        """count caps the number of instructions."""
        assert len(disasm.disassemble(self.SAMPLE, 0x8000, count=2)) == 2

    def test_max_bytes_limit(self, disasm):
        """max_bytes stops once the byte limit is reached."""
        result = disasm.disassemble(self.SAMPLE, 0x8000, max_bytes=3)
        assert len(result) == 2

    def test_str_format(self, disasm):
        """Listing line shows address, bytes and assembly."""
        instr = disasm.disassemble_one(bytes([0x69, 0x05]), 0x8002)
        assert str(instr) == "$8002: 69 05     ADC #$05"

    def test_str_with_comment(self, disasm):
        """Comments follow a semicolon."""
        instr = disasm.disassemble_one(bytes([0xA9, 0x41]), 0x8000)
        assert str(instr).endswith("; 'A'")

    def test_to_text(self, disasm):
        """disassemble_to_text joins lines."""
        text = disasm.disassemble_to_text(self.SAMPLE, 0x8000)
        assert text.count("\n") == 3
        assert "INX" in text

    def test_to_dict(self, disasm):
        """to_dict exposes the decoded fields."""
        data = disasm.disassemble_one(bytes([0xBD, 0x34, 0x12]), 0x8000).to_dict()
        assert data["address"] == "$8000"
        assert data["mnemonic"] == "LDA"
        assert data["operand"] == "$1234,X"
        assert data["bytes"] == ["$BD", "$34", "$12"]

    def test_instruction_fields(self, disasm):
        """Decoded instruction carries its mode."""
        instr = disasm.disassemble_one(bytes([0xB1, 0x42]))
        assert isinstance(instr, DisassembledInstruction)
        assert instr.mode == AddressingMode.INDIRECT_Y
        assert instr.operand_bytes == bytes([0x42])


class TestSymbols:
    """Test symbol annotation."""

    def test_vector_symbols(self):
        """Vector table names the hardware vectors."""
        disasm = MOS6502Disassembler(dict(VECTOR_SYMBOLS))
        instr = disasm.disassemble_one(bytes([0xAD, 0xFC, 0xFF]))
        assert instr.comment == "RESET_VECTOR"

    def test_add_symbol(self, disasm):
        """Added symbols annotate operands and branch targets."""
        disasm.add_symbol(0x8010, "loop")
        disasm.add_symbols({0x0080: "ptr"})
        branch = disasm.disassemble_one(bytes([0xD0, 0x0E]), 0x8000)
        assert branch.comment == "loop"
        zp = disasm.disassemble_one(bytes([0xB1, 0x80]))
        assert zp.comment == "ptr"

    def test_symbol_table_is_copied(self):
        """add_symbol leaves the caller's table alone."""
        table = {0xFFFC: "RESET_VECTOR"}
        disasm = MOS6502Disassembler(table)
        disasm.add_symbol(0x8000, "start")
        assert table == {0xFFFC: "RESET_VECTOR"}
        instr = disasm.disassemble_one(bytes([0x4C, 0x00, 0x80]))
        assert instr.comment == "start"
