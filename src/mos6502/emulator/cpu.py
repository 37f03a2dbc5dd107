"""
MOS 6502 CPU Emulator
=====================

Instruction-level emulation of the NMOS 6502 with cycle counting.

The 6502 has:
- 8-bit registers: A (accumulator), X and Y (index), SP (stack pointer)
- 16-bit program counter
- Status register P: N V - B D I Z C

Execution model:
- `step()` fetches one opcode, resolves its operand address through the
  addressing-mode resolver, runs the instruction's executor and charges its
  base cycles plus any page-crossing or branch penalties.
- The instruction table is an immutable 256-slot tuple. Empty slots are
  unimplemented opcodes: they are logged, cost 2 cycles and never stop
  the machine.

Known hardware behaviour reproduced here:
- JMP ($xxFF) fetches its high byte from $xx00 (indirect page-wrap bug).
- Zero-page indexed and indirect pointer fetches wrap within page zero.
- JSR pushes the address of its last operand byte; RTS adds one.
- Decimal flag can be set and cleared but ADC/SBC always work in binary.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import logging
from dataclasses import dataclass, replace
from enum import IntFlag
from typing import Optional, Protocol, Sequence, TYPE_CHECKING

from ..cpu.opcodes import AddressingMode
from .memory import Memory

if TYPE_CHECKING:
    from .instructions import Instruction


logger = logging.getLogger(__name__)


# Interrupt vectors
NMI_VECTOR = 0xFFFA
RESET_VECTOR = 0xFFFC
IRQ_VECTOR = 0xFFFE

# Stack page base address
STACK_BASE = 0x0100

# Cycles charged for an opcode with no instruction
UNIMPLEMENTED_OPCODE_CYCLES = 2

IRQ_CYCLES = 7
NMI_CYCLES = 8


class Flags(IntFlag):
    """
    Processor status (P) flags.

    Bit layout of P register:
        7  6  5  4  3  2  1  0
        N  V  1  B  D  I  Z  C

    Bit 5 is unused and always reads as 1.
    """
    C = 0x01  # Carry
    Z = 0x02  # Zero
    I = 0x04  # Interrupt disable
    D = 0x08  # Decimal (no effect on arithmetic)
    B = 0x10  # Break
    U = 0x20  # Unused, always 1
    V = 0x40  # Overflow
    N = 0x80  # Negative


_BREAK = int(Flags.B)
_UNUSED = int(Flags.U)


def format_flags(p: int) -> str:
    """
    Format a status byte as flag letters, '.' for clear bits.

    Example:
        >>> format_flags(0x24)
        '..-..I..'
    """
    letters = []
    for letter, flag in zip("NV-BDIZC", (0x80, 0x40, 0x20, 0x10, 0x08, 0x04, 0x02, 0x01)):
        if flag == Flags.U:
            letters.append("-")
        else:
            letters.append(letter if p & flag else ".")
    return "".join(letters)


class BusProtocol(Protocol):
    """
    Protocol defining the memory bus interface.

    The CPU reads and writes memory only through this interface.
    """
    def read(self, address: int) -> int:
        """Read byte from address."""
        ...

    def write(self, address: int, value: int) -> None:
        """Write byte to address."""
        ...


@dataclass
class CPUState:
    """
    Complete register state.

    All values stored as Python ints but represent:
    - a, x, y, sp, p: 8-bit unsigned (0-255)
    - pc: 16-bit unsigned (0-65535)
    - cycles: total cycles since the last reset
    """
    a: int = 0
    x: int = 0
    y: int = 0
    sp: int = 0xFD
    p: int = 0x20
    pc: int = 0
    cycles: int = 0


@dataclass(frozen=True)
class AddressResult:
    """
    Result of resolving an addressing mode.

    Attributes:
        address: Effective address (0 for ACCUMULATOR and IMPLIED, unused)
        page_crossed: True if indexing or branching moved to another page
    """
    address: int
    page_crossed: bool = False


class MOS6502:
    """
    MOS 6502 CPU emulator.

    The CPU owns its register state and borrows a bus for memory. The
    instruction table is injected (or defaults to the shared immutable
    table), so any number of independent CPUs can coexist.

    Example:
        >>> cpu = MOS6502()
        >>> cpu.load_program(bytes([0xA9, 0x10, 0x69, 0x05]), 0x8000)
        >>> cpu.set_memory(0xFFFC, 0x00)
        >>> cpu.set_memory(0xFFFD, 0x80)
        >>> cpu.reset()
        >>> cpu.run(2)
        6
        >>> print(f"A=${cpu.a:02X} cycles={cpu.cycles}")
        A=$15 cycles=6

    Thread safety:
        Not thread-safe. `step`, `reset`, `irq` and `nmi` must be serialized
        by the caller (see `Emulator` for a locked facade).
    """

    def __init__(
        self,
        bus: Optional[BusProtocol] = None,
        instructions: Optional[Sequence[Optional["Instruction"]]] = None,
    ):
        """
        Initialize CPU and reset it.

        Args:
            bus: Memory bus implementing BusProtocol. Defaults to a fresh
                 64KB Memory.
            instructions: 256-entry instruction table. Defaults to the
                          standard 6502 table.

        Raises:
            ValueError: If the instruction table does not have 256 slots
        """
        if instructions is None:
            from .instructions import INSTRUCTION_TABLE
            instructions = INSTRUCTION_TABLE
        if len(instructions) != 256:
            raise ValueError(
                f"Instruction table must have 256 entries, got {len(instructions)}"
            )

        self.bus: BusProtocol = bus if bus is not None else Memory()
        self.instructions: tuple[Optional["Instruction"], ...] = tuple(instructions)
        self.state = CPUState()
        self.reset()

    # ========================================
    # Register Properties
    # ========================================

    @property
    def a(self) -> int:
        """Accumulator (8-bit)."""
        return self.state.a

    @a.setter
    def a(self, value: int) -> None:
        self.state.a = value & 0xFF

    @property
    def x(self) -> int:
        """Index register X (8-bit)."""
        return self.state.x

    @x.setter
    def x(self, value: int) -> None:
        self.state.x = value & 0xFF

    @property
    def y(self) -> int:
        """Index register Y (8-bit)."""
        return self.state.y

    @y.setter
    def y(self, value: int) -> None:
        self.state.y = value & 0xFF

    @property
    def sp(self) -> int:
        """Stack pointer (8-bit offset into page $01)."""
        return self.state.sp

    @sp.setter
    def sp(self, value: int) -> None:
        self.state.sp = value & 0xFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def p(self) -> int:
        """Processor status byte. The unused bit always reads as 1."""
        return self.state.p

    @p.setter
    def p(self, value: int) -> None:
        self.state.p = (int(value) & 0xFF) | _UNUSED

    @property
    def cycles(self) -> int:
        """Cycles executed since the last reset."""
        return self.state.cycles

    @cycles.setter
    def cycles(self, value: int) -> None:
        self.state.cycles = value

    # ========================================
    # Flags
    # ========================================

    def set_flag(self, flag: int, state: bool) -> None:
        """
        Set or clear a status flag.

        Every flag write goes through here, which keeps bit 5 set.
        """
        if state:
            self.state.p = (self.state.p | int(flag)) | _UNUSED
        else:
            self.state.p = (self.state.p & ~int(flag) & 0xFF) | _UNUSED

    def get_flag(self, flag: int) -> bool:
        """Return True if the flag is set."""
        return bool(self.state.p & flag)

    def update_zero_and_negative_flags(self, value: int) -> None:
        """Set Z if the low byte is zero and N from bit 7. No other flags change."""
        self.set_flag(Flags.Z, (value & 0xFF) == 0)
        self.set_flag(Flags.N, (value & 0x80) != 0)

    @property
    def flag_c(self) -> bool:
        """Carry flag."""
        return self.get_flag(Flags.C)

    @flag_c.setter
    def flag_c(self, value: bool) -> None:
        self.set_flag(Flags.C, value)

    @property
    def flag_z(self) -> bool:
        """Zero flag."""
        return self.get_flag(Flags.Z)

    @flag_z.setter
    def flag_z(self, value: bool) -> None:
        self.set_flag(Flags.Z, value)

    @property
    def flag_i(self) -> bool:
        """Interrupt disable flag."""
        return self.get_flag(Flags.I)

    @flag_i.setter
    def flag_i(self, value: bool) -> None:
        self.set_flag(Flags.I, value)

    @property
    def flag_d(self) -> bool:
        """Decimal flag (stored only)."""
        return self.get_flag(Flags.D)

    @flag_d.setter
    def flag_d(self, value: bool) -> None:
        self.set_flag(Flags.D, value)

    @property
    def flag_b(self) -> bool:
        """Break flag."""
        return self.get_flag(Flags.B)

    @flag_b.setter
    def flag_b(self, value: bool) -> None:
        self.set_flag(Flags.B, value)

    @property
    def flag_v(self) -> bool:
        """Overflow flag."""
        return self.get_flag(Flags.V)

    @flag_v.setter
    def flag_v(self, value: bool) -> None:
        self.set_flag(Flags.V, value)

    @property
    def flag_n(self) -> bool:
        """Negative flag."""
        return self.get_flag(Flags.N)

    @flag_n.setter
    def flag_n(self, value: bool) -> None:
        self.set_flag(Flags.N, value)

    # ========================================
    # Memory Access
    # ========================================

    def read_byte(self, addr: int) -> int:
        """Read byte from bus."""
        return self.bus.read(addr & 0xFFFF) & 0xFF

    def write_byte(self, addr: int, value: int) -> None:
        """Write byte to bus."""
        self.bus.write(addr & 0xFFFF, value & 0xFF)

    def read_word(self, addr: int) -> int:
        """Read 16-bit word from bus (little-endian, addr+1 wraps at $FFFF)."""
        lo = self.read_byte(addr)
        hi = self.read_byte((addr + 1) & 0xFFFF)
        return (hi << 8) | lo

    def get_memory(self, addr: int) -> int:
        """Read one byte for an observer. Same as read_byte."""
        return self.read_byte(addr)

    def set_memory(self, addr: int, value: int) -> None:
        """Write one byte for an observer. Same as write_byte."""
        self.write_byte(addr, value)

    def load_program(self, program: bytes, start_address: int) -> None:
        """
        Copy program bytes into memory.

        Loading starts at start_address & $FFFF and wraps past $FFFF.
        Registers are not touched; call reset() to start from the vector.
        """
        start = start_address & 0xFFFF
        for i, byte in enumerate(program):
            self.write_byte((start + i) & 0xFFFF, byte)

    # ========================================
    # Stack Operations
    # ========================================

    def push_byte(self, value: int) -> None:
        """Push byte onto stack (store, then post-decrement)."""
        self.write_byte(STACK_BASE + self.state.sp, value)
        self.state.sp = (self.state.sp - 1) & 0xFF

    def pop_byte(self) -> int:
        """Pop byte from stack (pre-increment, then load)."""
        self.state.sp = (self.state.sp + 1) & 0xFF
        return self.read_byte(STACK_BASE + self.state.sp)

    def push_word(self, value: int) -> None:
        """Push word onto stack, high byte first."""
        self.push_byte((value >> 8) & 0xFF)
        self.push_byte(value & 0xFF)

    def pop_word(self) -> int:
        """Pop word from stack, low byte first."""
        lo = self.pop_byte()
        hi = self.pop_byte()
        return (hi << 8) | lo

    # ========================================
    # Program Counter Operations
    # ========================================

    def _fetch_byte(self) -> int:
        """Fetch next byte at PC and increment PC."""
        value = self.read_byte(self.state.pc)
        self.state.pc = (self.state.pc + 1) & 0xFFFF
        return value

    def _fetch_word(self) -> int:
        """Fetch next little-endian word at PC and increment PC by 2."""
        value = self.read_word(self.state.pc)
        self.state.pc = (self.state.pc + 2) & 0xFFFF
        return value

    # ========================================
    # Addressing Modes
    # ========================================

    def resolve(self, mode: AddressingMode) -> AddressResult:
        """
        Consume the operand bytes for a mode and compute the effective address.

        Advances PC by the operand width. Never changes flags, other
        registers or the cycle counter.

        Args:
            mode: Addressing mode of the instruction being executed

        Returns:
            AddressResult with the effective address and page-crossing flag
        """
        match mode:
            case AddressingMode.IMMEDIATE:
                addr = self.state.pc
                self.state.pc = (addr + 1) & 0xFFFF
                return AddressResult(addr)

            case AddressingMode.ZERO_PAGE:
                return AddressResult(self._fetch_byte())

            case AddressingMode.ZERO_PAGE_X:
                return AddressResult((self._fetch_byte() + self.state.x) & 0xFF)

            case AddressingMode.ZERO_PAGE_Y:
                return AddressResult((self._fetch_byte() + self.state.y) & 0xFF)

            case AddressingMode.ABSOLUTE:
                return AddressResult(self._fetch_word())

            case AddressingMode.ABSOLUTE_X:
                base = self._fetch_word()
                addr = (base + self.state.x) & 0xFFFF
                return AddressResult(addr, (base & 0xFF00) != (addr & 0xFF00))

            case AddressingMode.ABSOLUTE_Y:
                base = self._fetch_word()
                addr = (base + self.state.y) & 0xFFFF
                return AddressResult(addr, (base & 0xFF00) != (addr & 0xFF00))

            case AddressingMode.ABSOLUTE_INDIRECT:
                pointer = self._fetch_word()
                lo = self.read_byte(pointer)
                # High byte never carries into the next page
                hi = self.read_byte((pointer & 0xFF00) | ((pointer + 1) & 0xFF))
                return AddressResult((hi << 8) | lo)

            case AddressingMode.INDIRECT_X:
                zp = (self._fetch_byte() + self.state.x) & 0xFF
                lo = self.read_byte(zp)
                hi = self.read_byte((zp + 1) & 0xFF)
                return AddressResult((hi << 8) | lo)

            case AddressingMode.INDIRECT_Y:
                zp = self._fetch_byte()
                lo = self.read_byte(zp)
                hi = self.read_byte((zp + 1) & 0xFF)
                pointer = (hi << 8) | lo
                addr = (pointer + self.state.y) & 0xFFFF
                return AddressResult(addr, (pointer & 0xFF00) != (addr & 0xFF00))

            case AddressingMode.RELATIVE:
                offset = self._fetch_byte()
                if offset & 0x80:
                    offset -= 0x100
                pc = self.state.pc
                target = (pc + offset) & 0xFFFF
                return AddressResult(target, (target & 0xFF00) != (pc & 0xFF00))

            case _:
                # ACCUMULATOR / IMPLIED
                return AddressResult(0)

    # ========================================
    # ALU Operations
    # ========================================

    def adc(self, value: int) -> None:
        """Add with carry: A = A + M + C. Sets C, V, Z, N."""
        a = self.state.a
        total = a + value + (1 if self.flag_c else 0)
        result = total & 0xFF
        self.set_flag(Flags.C, total > 0xFF)
        self.set_flag(Flags.V, (~(a ^ value) & (a ^ result) & 0x80) != 0)
        self.a = result
        self.update_zero_and_negative_flags(result)

    def sbc(self, value: int) -> None:
        """
        Subtract with borrow: A = A + ~M + C. Sets C, V, Z, N.

        Carry set means "no borrow": $00 - $01 with C=1 gives $FF, C=0, V=0.
        """
        a = self.state.a
        total = a + ((~value) & 0xFF) + (1 if self.flag_c else 0)
        result = total & 0xFF
        self.set_flag(Flags.C, total > 0xFF)
        self.set_flag(Flags.V, ((a ^ result) & (a ^ value) & 0x80) != 0)
        self.a = result
        self.update_zero_and_negative_flags(result)

    def compare(self, register: int, value: int) -> None:
        """Compare register with value (CMP/CPX/CPY). Sets C, Z, N."""
        self.set_flag(Flags.C, register >= value)
        self.update_zero_and_negative_flags(register - value)

    def bit_test(self, operand: int) -> None:
        """BIT: Z from A & M, N from bit 7 of M, V from bit 6 of M."""
        self.set_flag(Flags.Z, (self.state.a & operand) == 0)
        self.set_flag(Flags.N, (operand & 0x80) != 0)
        self.set_flag(Flags.V, (operand & 0x40) != 0)

    def asl(self, value: int) -> int:
        """Arithmetic shift left. C receives bit 7."""
        self.set_flag(Flags.C, (value & 0x80) != 0)
        result = (value << 1) & 0xFF
        self.update_zero_and_negative_flags(result)
        return result

    def lsr(self, value: int) -> int:
        """Logical shift right. C receives bit 0."""
        self.set_flag(Flags.C, (value & 0x01) != 0)
        result = (value >> 1) & 0x7F
        self.update_zero_and_negative_flags(result)
        return result

    def rol(self, value: int) -> int:
        """Rotate left through carry."""
        carry_in = 1 if self.flag_c else 0
        self.set_flag(Flags.C, (value & 0x80) != 0)
        result = ((value << 1) | carry_in) & 0xFF
        self.update_zero_and_negative_flags(result)
        return result

    def ror(self, value: int) -> int:
        """Rotate right through carry."""
        carry_in = 0x80 if self.flag_c else 0
        self.set_flag(Flags.C, (value & 0x01) != 0)
        result = ((value >> 1) | carry_in) & 0xFF
        self.update_zero_and_negative_flags(result)
        return result

    # ========================================
    # Reset and Interrupts
    # ========================================

    def reset(self) -> None:
        """
        Reset CPU.

        Sets I, clears D and B, SP=$FD, loads PC from the reset vector at
        $FFFC/$FFFD and zeroes the cycle counter. A, X and Y keep their
        values.
        """
        self.set_flag(Flags.I, True)
        self.set_flag(Flags.D, False)
        self.set_flag(Flags.B, False)
        self.state.sp = 0xFD
        self.state.pc = self.read_word(RESET_VECTOR)
        self.state.cycles = 0
        logger.debug(f"Reset: PC=${self.state.pc:04X}")

    def _enter_interrupt(self, vector: int, status: int) -> None:
        """Push PC and the given status byte, set I, load PC from vector."""
        self.push_word(self.state.pc)
        self.push_byte(status)
        self.set_flag(Flags.I, True)
        self.state.pc = self.read_word(vector)

    def irq(self) -> None:
        """
        Maskable interrupt request.

        Ignored while I is set. Otherwise pushes PC and P (B clear),
        vectors through $FFFE and charges 7 cycles.
        """
        if self.flag_i:
            return
        logger.debug(f"IRQ at PC=${self.state.pc:04X}")
        self._enter_interrupt(IRQ_VECTOR, (self.state.p & ~_BREAK & 0xFF) | _UNUSED)
        self.state.cycles += IRQ_CYCLES

    def nmi(self) -> None:
        """
        Non-maskable interrupt.

        Always taken. Pushes PC and P (B clear), vectors through $FFFA and
        charges 8 cycles.
        """
        logger.debug(f"NMI at PC=${self.state.pc:04X}")
        self._enter_interrupt(NMI_VECTOR, (self.state.p & ~_BREAK & 0xFF) | _UNUSED)
        self.state.cycles += NMI_CYCLES

    def brk(self) -> None:
        """
        Software interrupt (BRK body, cycles charged by the dispatcher).

        Skips the signature byte, pushes PC and P with B and bit 5 set,
        sets I and vectors through $FFFE.
        """
        self.state.pc = (self.state.pc + 1) & 0xFFFF
        self._enter_interrupt(IRQ_VECTOR, self.state.p | _BREAK | _UNUSED)

    def rti(self) -> None:
        """Return from interrupt: pop P (bit 5 forced), then PC as-is."""
        self.p = self.pop_byte()
        self.state.pc = self.pop_word()

    # ========================================
    # Main Execution Loop
    # ========================================

    def step(self) -> int:
        """
        Execute exactly one instruction.

        Returns:
            Number of cycles charged for the instruction
        """
        opcode_address = self.state.pc
        opcode = self._fetch_byte()
        instruction = self.instructions[opcode]

        if instruction is None:
            logger.warning(
                f"Unimplemented opcode ${opcode:02X} at ${opcode_address:04X}"
            )
            self.state.cycles += UNIMPLEMENTED_OPCODE_CYCLES
            return UNIMPLEMENTED_OPCODE_CYCLES

        operand = self.resolve(instruction.mode)
        ticks = instruction.cycles + (instruction.execute(self, operand) or 0)
        if instruction.page_penalty and operand.page_crossed:
            ticks += 1

        self.state.cycles += ticks
        return ticks

    def run(self, steps: int) -> int:
        """
        Execute exactly `steps` instructions.

        Returns:
            Total cycles charged
        """
        total = 0
        for _ in range(steps):
            total += self.step()
        return total

    # ========================================
    # Snapshot Support
    # ========================================

    def snapshot(self) -> CPUState:
        """Return a copy of the current register state."""
        return replace(self.state)

    def restore(self, state: CPUState) -> None:
        """Restore registers from a snapshot taken by snapshot()."""
        self.a = state.a
        self.x = state.x
        self.y = state.y
        self.sp = state.sp
        self.p = state.p
        self.pc = state.pc
        self.cycles = state.cycles

    def __repr__(self) -> str:
        return (
            f"MOS6502(A=${self.a:02X} X=${self.x:02X} Y=${self.y:02X} "
            f"SP=${self.sp:02X} P=${self.p:02X} PC=${self.pc:04X} cycles={self.cycles})"
        )
