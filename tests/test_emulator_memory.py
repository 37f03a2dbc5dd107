"""
Memory Bus Unit Tests
=====================

Tests for the flat 64KB memory: masking, little-endian words, wrapping
block loads and dumps.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import pytest
from mos6502.emulator import Memory


@pytest.fixture
def memory():
    """Create empty memory."""
    return Memory()


class TestByteAccess:
    """Test byte reads and writes."""

    def test_initially_zero(self, memory):
        """Memory starts cleared."""
        assert memory.read(0x0000) == 0
        assert memory.read(0xFFFF) == 0
        assert len(memory) == 0x10000

    def test_write_read(self, memory):
        """Written value reads back."""
        memory.write(0x1234, 0x42)
        assert memory.read(0x1234) == 0x42

    def test_value_masked_to_8_bits(self, memory):
        """Values are masked to 8 bits."""
        memory.write(0x0010, 0x1FF)
        assert memory.read(0x0010) == 0xFF
        memory.write(0x0011, -1)
        assert memory.read(0x0011) == 0xFF

    def test_address_masked_to_16_bits(self, memory):
        """Addresses wrap at 64KB."""
        memory.write(0x10005, 0x77)
        assert memory.read(0x0005) == 0x77


class TestWordAccess:
    """Test 16-bit little-endian access."""

    def test_read_word_little_endian(self, memory):
        """Low byte first."""
        memory.write(0xFFFC, 0x00)
        memory.write(0xFFFD, 0x80)
        assert memory.read_word(0xFFFC) == 0x8000

    def test_read_word_wraps(self, memory):
        """High byte of a word at $FFFF comes from $0000."""
        memory.write(0xFFFF, 0x34)
        memory.write(0x0000, 0x12)
        assert memory.read_word(0xFFFF) == 0x1234

    def test_write_word(self, memory):
        """Word write stores low byte first."""
        memory.write_word(0x2000, 0xABCD)
        assert memory.read(0x2000) == 0xCD
        assert memory.read(0x2001) == 0xAB


class TestBlockAccess:
    """Test loading, dumping and clearing."""

    def test_initial_image(self):
        """Initial data is loaded at $0000."""
        memory = Memory(bytes([1, 2, 3]))
        assert memory.dump(0, 4) == bytes([1, 2, 3, 0])

    def test_initial_image_too_large(self):
        """More than 64KB is rejected."""
        with pytest.raises(ValueError):
            Memory(bytes(0x10001))

    def test_load_wraps(self, memory):
        """Loading past $FFFF continues at $0000."""
        memory.load([0xAA, 0xBB, 0xCC], 0xFFFE)
        assert memory.read(0xFFFE) == 0xAA
        assert memory.read(0xFFFF) == 0xBB
        assert memory.read(0x0000) == 0xCC

    def test_dump_wraps(self, memory):
        """Dumps wrap too."""
        memory.load(b"\x01\x02", 0xFFFF)
        assert memory.dump(0xFFFF, 2) == b"\x01\x02"

    def test_clear(self, memory):
        """Clear zeroes everything."""
        memory.write(0x8000, 0x55)
        memory.clear()
        assert memory.read(0x8000) == 0
