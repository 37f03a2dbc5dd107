"""
MOS 6502 Instruction Executors
==============================

Behaviour of every opcode, bound to the static definitions in
`mos6502.cpu.opcodes`.

Each executor has the signature::

    executor(cpu, operand) -> Optional[int]

where `operand` is the AddressResult produced by the CPU's addressing-mode
resolver. The return value is the number of extra cycles beyond the base
cost (branches use this); None means no extra cycles. Page-crossing
penalties for indexed reads are charged by the CPU from the opcode's
`page_penalty` marker.

The assembled table is a 256-slot tuple indexed by opcode byte. Unused
slots are None. It is built once at import time and never mutated.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

from dataclasses import dataclass
from typing import Callable, Optional, TYPE_CHECKING

from ..cpu.opcodes import AddressingMode, OpcodeInfo, OPCODE_TABLE

if TYPE_CHECKING:
    from .cpu import MOS6502, AddressResult


Executor = Callable[["MOS6502", "AddressResult"], Optional[int]]


@dataclass(frozen=True)
class Instruction:
    """
    One executable opcode: static definition plus behaviour.

    Attributes:
        info: Opcode definition (mnemonic, mode, base cycles, penalty)
        execute: Executor applied after operand resolution
    """
    info: OpcodeInfo
    execute: Executor

    @property
    def opcode(self) -> int:
        return self.info.opcode

    @property
    def mnemonic(self) -> str:
        return self.info.mnemonic

    @property
    def mode(self) -> AddressingMode:
        return self.info.mode

    @property
    def cycles(self) -> int:
        return self.info.cycles

    @property
    def page_penalty(self) -> bool:
        return self.info.page_penalty

    def __repr__(self) -> str:
        return f"Instruction(${self.opcode:02X} {self.mnemonic} {self.mode})"


# =============================================================================
# Load / Store
# =============================================================================

def _lda(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.a = cpu.read_byte(op.address)
    cpu.update_zero_and_negative_flags(cpu.a)


def _ldx(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.x = cpu.read_byte(op.address)
    cpu.update_zero_and_negative_flags(cpu.x)


def _ldy(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.y = cpu.read_byte(op.address)
    cpu.update_zero_and_negative_flags(cpu.y)


def _sta(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.write_byte(op.address, cpu.a)


def _stx(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.write_byte(op.address, cpu.x)


def _sty(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.write_byte(op.address, cpu.y)


# =============================================================================
# Register Transfers
# =============================================================================

def _tax(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.x = cpu.a
    cpu.update_zero_and_negative_flags(cpu.x)


def _tay(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.y = cpu.a
    cpu.update_zero_and_negative_flags(cpu.y)


def _txa(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.a = cpu.x
    cpu.update_zero_and_negative_flags(cpu.a)


def _tya(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.a = cpu.y
    cpu.update_zero_and_negative_flags(cpu.a)


def _tsx(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.x = cpu.sp
    cpu.update_zero_and_negative_flags(cpu.x)


def _txs(cpu: "MOS6502", op: "AddressResult") -> None:
    # No flags
    cpu.sp = cpu.x


# =============================================================================
# Stack
# =============================================================================

def _pha(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.push_byte(cpu.a)


def _php(cpu: "MOS6502", op: "AddressResult") -> None:
    # Pushed copy always has B and bit 5 set
    cpu.push_byte(cpu.p | 0x30)


def _pla(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.a = cpu.pop_byte()
    cpu.update_zero_and_negative_flags(cpu.a)


def _plp(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.p = cpu.pop_byte()


# =============================================================================
# Logical and Arithmetic
# =============================================================================

def _and(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.a = cpu.a & cpu.read_byte(op.address)
    cpu.update_zero_and_negative_flags(cpu.a)


def _ora(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.a = cpu.a | cpu.read_byte(op.address)
    cpu.update_zero_and_negative_flags(cpu.a)


def _eor(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.a = cpu.a ^ cpu.read_byte(op.address)
    cpu.update_zero_and_negative_flags(cpu.a)


def _bit(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.bit_test(cpu.read_byte(op.address))


def _adc(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.adc(cpu.read_byte(op.address))


def _sbc(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.sbc(cpu.read_byte(op.address))


def _cmp(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.compare(cpu.a, cpu.read_byte(op.address))


def _cpx(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.compare(cpu.x, cpu.read_byte(op.address))


def _cpy(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.compare(cpu.y, cpu.read_byte(op.address))


# =============================================================================
# Increments / Decrements
# =============================================================================

def _inc(cpu: "MOS6502", op: "AddressResult") -> None:
    value = (cpu.read_byte(op.address) + 1) & 0xFF
    cpu.write_byte(op.address, value)
    cpu.update_zero_and_negative_flags(value)


def _dec(cpu: "MOS6502", op: "AddressResult") -> None:
    value = (cpu.read_byte(op.address) - 1) & 0xFF
    cpu.write_byte(op.address, value)
    cpu.update_zero_and_negative_flags(value)


def _inx(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.x = cpu.x + 1
    cpu.update_zero_and_negative_flags(cpu.x)


def _iny(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.y = cpu.y + 1
    cpu.update_zero_and_negative_flags(cpu.y)


def _dex(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.x = cpu.x - 1
    cpu.update_zero_and_negative_flags(cpu.x)


def _dey(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.y = cpu.y - 1
    cpu.update_zero_and_negative_flags(cpu.y)


# =============================================================================
# Shifts / Rotates
# =============================================================================

def _make_shift(operation: str, accumulator: bool) -> Executor:
    """
    Build a shift/rotate executor.

    Args:
        operation: Name of the CPU ALU method ("asl", "lsr", "rol", "ror")
        accumulator: True for the A-register form, False for read-modify-write
    """
    if accumulator:
        def execute(cpu: "MOS6502", op: "AddressResult") -> None:
            cpu.a = getattr(cpu, operation)(cpu.a)
    else:
        def execute(cpu: "MOS6502", op: "AddressResult") -> None:
            value = getattr(cpu, operation)(cpu.read_byte(op.address))
            cpu.write_byte(op.address, value)
    return execute


# =============================================================================
# Jumps / Subroutines / Interrupts
# =============================================================================

def _jmp(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.pc = op.address


def _jsr(cpu: "MOS6502", op: "AddressResult") -> None:
    # PC already points past the operand; push the last operand byte address
    cpu.push_word((cpu.pc - 1) & 0xFFFF)
    cpu.pc = op.address


def _rts(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.pc = cpu.pop_word() + 1


def _brk(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.brk()


def _rti(cpu: "MOS6502", op: "AddressResult") -> None:
    cpu.rti()


# =============================================================================
# Branches
# =============================================================================

def _make_branch(flag: str, expected: bool) -> Executor:
    """
    Build a conditional branch executor.

    A taken branch costs one extra cycle, plus one more if the target is on
    a different page than the instruction that follows the branch.

    Args:
        flag: CPU flag property name (e.g. "flag_z")
        expected: Flag value that takes the branch
    """
    def execute(cpu: "MOS6502", op: "AddressResult") -> int:
        if getattr(cpu, flag) != expected:
            return 0
        cpu.pc = op.address
        return 2 if op.page_crossed else 1
    return execute


# =============================================================================
# Flag Operations
# =============================================================================

def _make_flag_op(flag: str, value: bool) -> Executor:
    """Build an executor that sets or clears one flag."""
    def execute(cpu: "MOS6502", op: "AddressResult") -> None:
        setattr(cpu, flag, value)
    return execute


def _nop(cpu: "MOS6502", op: "AddressResult") -> None:
    pass


# =============================================================================
# Table Assembly
# =============================================================================

EXECUTORS: dict[str, Executor] = {
    "LDA": _lda, "LDX": _ldx, "LDY": _ldy,
    "STA": _sta, "STX": _stx, "STY": _sty,
    "TAX": _tax, "TAY": _tay, "TXA": _txa, "TYA": _tya, "TSX": _tsx, "TXS": _txs,
    "PHA": _pha, "PHP": _php, "PLA": _pla, "PLP": _plp,
    "AND": _and, "ORA": _ora, "EOR": _eor, "BIT": _bit,
    "ADC": _adc, "SBC": _sbc,
    "CMP": _cmp, "CPX": _cpx, "CPY": _cpy,
    "INC": _inc, "DEC": _dec,
    "INX": _inx, "INY": _iny, "DEX": _dex, "DEY": _dey,
    "JMP": _jmp, "JSR": _jsr, "RTS": _rts,
    "BRK": _brk, "RTI": _rti,
    "BCC": _make_branch("flag_c", False),
    "BCS": _make_branch("flag_c", True),
    "BNE": _make_branch("flag_z", False),
    "BEQ": _make_branch("flag_z", True),
    "BPL": _make_branch("flag_n", False),
    "BMI": _make_branch("flag_n", True),
    "BVC": _make_branch("flag_v", False),
    "BVS": _make_branch("flag_v", True),
    "CLC": _make_flag_op("flag_c", False),
    "SEC": _make_flag_op("flag_c", True),
    "CLI": _make_flag_op("flag_i", False),
    "SEI": _make_flag_op("flag_i", True),
    "CLD": _make_flag_op("flag_d", False),
    "SED": _make_flag_op("flag_d", True),
    "CLV": _make_flag_op("flag_v", False),
    "NOP": _nop,
    "KIL": _nop,
}

_SHIFTS = ("ASL", "LSR", "ROL", "ROR")


def _executor_for(info: OpcodeInfo) -> Executor:
    if info.mnemonic in _SHIFTS:
        return _make_shift(
            info.mnemonic.lower(), info.mode == AddressingMode.ACCUMULATOR
        )
    return EXECUTORS[info.mnemonic]


def build_instruction_table() -> tuple[Optional[Instruction], ...]:
    """
    Build the 256-slot instruction table.

    Returns:
        Tuple indexed by opcode byte; None marks an unimplemented opcode
    """
    table: list[Optional[Instruction]] = [None] * 256
    for opcode, info in OPCODE_TABLE.items():
        table[opcode] = Instruction(info, _executor_for(info))
    return tuple(table)


INSTRUCTION_TABLE: tuple[Optional[Instruction], ...] = build_instruction_table()
