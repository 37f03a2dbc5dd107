"""
Instruction Set Definition Tests
================================

Tests for the shared opcode table: coverage of the documented 6502
instruction set, sizes, base cycle costs and page-crossing markers.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import pytest
from mos6502.cpu import (
    AddressingMode,
    OPCODE_TABLE,
    OPERAND_SIZES,
    MNEMONICS,
    get_opcode_info,
    get_valid_modes,
    is_branch_instruction,
)


class TestOpcodeTable:
    """Test the opcode table contents."""

    def test_documented_opcode_count(self):
        """151 documented opcodes plus the KIL placeholder."""
        assert len(OPCODE_TABLE) == 152

    def test_all_56_mnemonics_plus_kil(self):
        """All 56 documented mnemonics are present, plus KIL."""
        assert len(MNEMONICS) == 57
        assert "KIL" in MNEMONICS

    def test_opcode_keys_match_info(self):
        """Every entry is keyed by its own opcode byte."""
        for opcode, info in OPCODE_TABLE.items():
            assert info.opcode == opcode
            assert 0 <= opcode <= 0xFF

    def test_unknown_opcode(self):
        """Undocumented opcodes have no entry."""
        assert get_opcode_info(0xFF) is None
        assert get_opcode_info(0x03) is None

    def test_kil_placeholder(self):
        """KIL at $02 is implied, one byte, one cycle."""
        info = get_opcode_info(0x02)
        assert info.mnemonic == "KIL"
        assert info.mode == AddressingMode.IMPLIED
        assert info.cycles == 1
        assert info.size == 1

    def test_lookup_masks_opcode(self):
        """Lookup masks the opcode to 8 bits."""
        assert get_opcode_info(0x1A9).mnemonic == "LDA"


class TestSizesAndCycles:
    """Test instruction sizes and base cycle costs."""

    @pytest.mark.parametrize("opcode,size", [
        (0xEA, 1),  # NOP
        (0x0A, 1),  # ASL A
        (0xA9, 2),  # LDA #
        (0xB1, 2),  # LDA (zp),Y
        (0xD0, 2),  # BNE
        (0xAD, 3),  # LDA abs
        (0x6C, 3),  # JMP (ind)
        (0x20, 3),  # JSR
    ])
    def test_instruction_size(self, opcode, size):
        """Size is opcode plus operand bytes."""
        assert get_opcode_info(opcode).size == size

    @pytest.mark.parametrize("opcode,cycles", [
        (0xA9, 2),  # LDA #
        (0x69, 4),  # ADC #
        (0xE8, 2),  # INX
        (0x00, 7),  # BRK
        (0x20, 6),  # JSR
        (0x60, 6),  # RTS
        (0x40, 6),  # RTI
        (0x6C, 5),  # JMP (ind)
        (0xFE, 7),  # INC abs,X
        (0x91, 6),  # STA (zp),Y
    ])
    def test_base_cycles(self, opcode, cycles):
        """Base cycle costs."""
        assert get_opcode_info(opcode).cycles == cycles

    def test_operand_sizes_cover_all_modes(self):
        """Every addressing mode has an operand size."""
        assert set(OPERAND_SIZES) == set(AddressingMode)


class TestPagePenalty:
    """Test which opcodes pay for page crossings."""

    @pytest.mark.parametrize("opcode", [0xBD, 0xB9, 0xB1, 0xBE, 0xBC, 0x7D, 0xF1, 0xDD, 0x3D, 0x1D, 0x5D])
    def test_indexed_reads_pay(self, opcode):
        """Indexed reads are marked for the page-crossing penalty."""
        assert get_opcode_info(opcode).page_penalty

    @pytest.mark.parametrize("opcode", [0x9D, 0x99, 0x91, 0xFE, 0x1E, 0xA9, 0xAD])
    def test_stores_and_rmw_do_not_pay(self, opcode):
        """Stores, read-modify-write and non-indexed reads never pay."""
        assert not get_opcode_info(opcode).page_penalty

    def test_branches_carry_no_table_penalty(self):
        """Branch penalties are charged by the branch itself."""
        for info in OPCODE_TABLE.values():
            if info.mode == AddressingMode.RELATIVE:
                assert not info.page_penalty


class TestLookupHelpers:
    """Test lookup helper functions."""

    def test_valid_modes_lda(self):
        """LDA has eight addressing modes."""
        modes = get_valid_modes("lda")
        assert len(modes) == 8
        assert AddressingMode.INDIRECT_Y in modes
        assert AddressingMode.ZERO_PAGE_Y not in modes

    def test_valid_modes_ldx_uses_y_index(self):
        """LDX indexes with Y."""
        modes = get_valid_modes("LDX")
        assert AddressingMode.ZERO_PAGE_Y in modes
        assert AddressingMode.ABSOLUTE_Y in modes
        assert AddressingMode.ZERO_PAGE_X not in modes

    def test_is_branch_instruction(self):
        """Branch detection."""
        assert is_branch_instruction("BNE")
        assert is_branch_instruction("bcc")
        assert not is_branch_instruction("JMP")

    def test_mode_str(self):
        """Modes print as lowercase words."""
        assert str(AddressingMode.ZERO_PAGE_X) == "zero page x"
