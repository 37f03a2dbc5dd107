"""
Memory Bus for the MOS6502 Emulator
===================================

A flat 64KB byte store. There is no banking and no memory-mapped I/O; every
address from $0000 to $FFFF is plain RAM.

Memory Map (by convention, not enforced):
    $0000-$00FF  Zero page
    $0100-$01FF  Hardware stack
    $FFFA-$FFFB  NMI vector
    $FFFC-$FFFD  Reset vector
    $FFFE-$FFFF  IRQ/BRK vector

Addresses are masked to 16 bits and values to 8 bits on every access, so
out-of-range accesses cannot happen: they wrap instead.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

from typing import Iterable, Optional


class Memory:
    """
    64KB flat memory.

    Implements the bus interface expected by the CPU (`read` / `write`),
    plus word access and block helpers used for program loading and
    inspection.

    Example:
        >>> mem = Memory()
        >>> mem.write(0xFFFC, 0x00)
        >>> mem.write(0xFFFD, 0x80)
        >>> hex(mem.read_word(0xFFFC))
        '0x8000'
    """

    SIZE = 0x10000

    def __init__(self, data: Optional[bytes] = None):
        """
        Initialize memory, cleared to zero.

        Args:
            data: Optional initial image loaded at $0000 (at most 64KB)

        Raises:
            ValueError: If data is larger than the address space
        """
        self._data = bytearray(self.SIZE)
        if data is not None:
            if len(data) > self.SIZE:
                raise ValueError(
                    f"Memory image too large: {len(data)} bytes (max {self.SIZE})"
                )
            self._data[:len(data)] = data

    def read(self, address: int) -> int:
        """Read byte at address (masked to 16 bits)."""
        return self._data[address & 0xFFFF]

    def write(self, address: int, value: int) -> None:
        """Write byte at address. Value is masked to 8 bits."""
        self._data[address & 0xFFFF] = value & 0xFF

    def read_word(self, address: int) -> int:
        """
        Read little-endian 16-bit word.

        The high byte comes from address+1, which wraps from $FFFF to $0000.
        """
        lo = self._data[address & 0xFFFF]
        hi = self._data[(address + 1) & 0xFFFF]
        return (hi << 8) | lo

    def write_word(self, address: int, value: int) -> None:
        """Write little-endian 16-bit word (low byte first)."""
        self._data[address & 0xFFFF] = value & 0xFF
        self._data[(address + 1) & 0xFFFF] = (value >> 8) & 0xFF

    def load(self, data: Iterable[int], address: int) -> None:
        """
        Copy bytes into memory starting at address.

        Loading wraps across the top of the address space, so a block
        loaded near $FFFF continues at $0000.

        Args:
            data: Bytes (or ints) to copy
            address: Start address
        """
        for i, byte in enumerate(data):
            self._data[(address + i) & 0xFFFF] = byte & 0xFF

    def dump(self, address: int, length: int) -> bytes:
        """
        Return a copy of a memory region, wrapping at $FFFF.

        Args:
            address: Start address
            length: Number of bytes

        Returns:
            Region contents as immutable bytes
        """
        return bytes(self._data[(address + i) & 0xFFFF] for i in range(length))

    def clear(self) -> None:
        """Zero the whole address space."""
        self._data[:] = bytes(self.SIZE)

    def __len__(self) -> int:
        return self.SIZE

    def __repr__(self) -> str:
        return f"Memory(size={self.SIZE})"
