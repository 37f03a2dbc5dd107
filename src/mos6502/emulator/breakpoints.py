"""
Stop Conditions for the Emulator
================================

Everything that can halt a running program between two instructions:

- PC breakpoints, keyed by address
- Register conditions such as ``x == $10`` or ``p & $80``
- A break request, raised from any thread to stop the background runner

The CPU core never consults this module. `Emulator` asks the manager before
every instruction it executes under `run()`; a returned False means "stop
here, the instruction at PC has not run yet".

Example usage:

    >>> from mos6502.emulator import Emulator, BreakReason
    >>> emu = Emulator()
    >>> emu.breakpoints.add_breakpoint(0x8010)
    >>> cid = emu.breakpoints.add_condition("a", "==", 0x42)
    >>> event = emu.run(10_000)
    >>> event.reason in (BreakReason.PC_BREAKPOINT, BreakReason.REGISTER_CONDITION)
    True

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from operator import eq, ge, gt, le, lt, ne
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .cpu import MOS6502


logger = logging.getLogger(__name__)


class BreakReason(Enum):
    """What ended a run (or a single step)."""
    NONE = auto()
    PC_BREAKPOINT = auto()
    REGISTER_CONDITION = auto()
    STEP = auto()
    USER_INTERRUPT = auto()      # request_break(), usually from another thread
    MAX_STEPS = auto()           # step budget used up


_DEFAULT_TEXT = {
    BreakReason.REGISTER_CONDITION: "Register condition met",
    BreakReason.STEP: "Single step",
    BreakReason.USER_INTERRUPT: "Break requested",
    BreakReason.MAX_STEPS: "Maximum steps reached",
}


@dataclass(frozen=True)
class BreakEvent:
    """
    A stop, as reported to the debugger.

    Attributes:
        reason: The BreakReason
        address: PC when execution stopped, if known
        message: Text shown to the user; derived from the reason when empty
    """
    reason: BreakReason
    address: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return self.message
        if self.reason == BreakReason.PC_BREAKPOINT:
            if self.address is None:
                return "Breakpoint"
            return f"Breakpoint at ${self.address:04X}"
        return _DEFAULT_TEXT.get(self.reason, "Unknown")


def _bits_set(actual: int, mask: int) -> bool:
    return (actual & mask) != 0


_COMPARISONS: dict[str, Callable[[int, int], bool]] = {
    "==": eq,
    "!=": ne,
    "<": lt,
    "<=": le,
    ">": gt,
    ">=": ge,
    "&": _bits_set,
}


@dataclass
class RegisterCondition:
    """
    A test of one CPU register against a constant.

    ``register`` names a CPU attribute: a, x, y, sp, pc, p, cycles or one of
    the flag_c .. flag_n booleans. ``operator`` is one of ==, !=, <, <=, >,
    >= or ``&`` (true when any masked bit is set).

    Examples:
        >>> RegisterCondition("a", "==", 0x42)
        >>> RegisterCondition("p", "&", 0x80)          # N set
        >>> RegisterCondition("flag_z", "==", True)

    Raises:
        ValueError: On an unknown register or operator
    """
    register: str
    operator: str
    value: int | bool
    description: str = field(default="", repr=False)

    VALID_REGISTERS = frozenset({
        "a", "x", "y", "sp", "pc", "p", "cycles",
        "flag_c", "flag_z", "flag_i", "flag_d", "flag_b", "flag_v", "flag_n",
    })
    VALID_OPERATORS = frozenset(_COMPARISONS)

    def __post_init__(self):
        name = self.register
        self.register = name.lower()
        if self.register not in self.VALID_REGISTERS:
            raise ValueError(
                f"Unknown register '{name}' "
                f"(expected one of {', '.join(sorted(self.VALID_REGISTERS))})"
            )
        if self.operator not in _COMPARISONS:
            raise ValueError(
                f"Unknown operator '{self.operator}' "
                f"(expected one of {' '.join(sorted(_COMPARISONS))})"
            )
        if not self.description:
            self.description = f"{name} {self.operator} {self.value}"

    def check(self, cpu: "MOS6502") -> bool:
        """True when the CPU currently satisfies the condition."""
        return _COMPARISONS[self.operator](getattr(cpu, self.register), self.value)


class BreakpointManager:
    """
    Holds the stop conditions for one emulator.

    Breakpoints and register conditions are edited from the debugger side.
    Edits and evaluation share one lock, so the debugger may change them
    while the runner thread is checking.
    `request_break` may be called from any thread; the request is consumed
    by the next `check_instruction`.

    Condition IDs are handed out in increasing order and never reused, so a
    stale ID can never remove somebody else's condition.

    Example:
        >>> mgr = BreakpointManager()
        >>> mgr.add_breakpoint(0x8100)
        >>> cid = mgr.add_condition("x", "==", 0x10)
        >>> mgr.remove_register_condition(cid)
    """

    def __init__(self):
        self._pc_breakpoints: set[int] = set()
        self._conditions: dict[int, RegisterCondition] = {}
        self._next_condition_id = 0
        self._last_event: Optional[BreakEvent] = None
        self._break_requested = threading.Event()
        self._lock = threading.Lock()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def last_event(self) -> Optional[BreakEvent]:
        """Most recent event recorded, or None."""
        return self._last_event

    @property
    def breakpoint_count(self) -> int:
        with self._lock:
            return len(self._pc_breakpoints)

    @property
    def break_requested(self) -> bool:
        """True while a break request is waiting to be consumed."""
        return self._break_requested.is_set()

    # =========================================================================
    # PC Breakpoints
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """Stop before the instruction at address. Adding twice is harmless."""
        with self._lock:
            self._pc_breakpoints.add(address & 0xFFFF)

    def remove_breakpoint(self, address: int) -> None:
        """Forget the breakpoint at address, if any."""
        with self._lock:
            self._pc_breakpoints.discard(address & 0xFFFF)

    def has_breakpoint(self, address: int) -> bool:
        with self._lock:
            return (address & 0xFFFF) in self._pc_breakpoints

    def clear_breakpoints(self) -> None:
        with self._lock:
            self._pc_breakpoints.clear()

    def list_breakpoints(self) -> list[int]:
        """Breakpoint addresses in ascending order."""
        with self._lock:
            return sorted(self._pc_breakpoints)

    # =========================================================================
    # Register Conditions
    # =========================================================================

    def add_register_condition(self, condition: RegisterCondition) -> int:
        """
        Register a condition.

        Returns:
            ID to pass to remove_register_condition()
        """
        with self._lock:
            condition_id = self._next_condition_id
            self._next_condition_id += 1
            self._conditions[condition_id] = condition
        return condition_id

    def add_condition(
        self,
        register: str,
        operator: str,
        value: int | bool,
        description: str = ""
    ) -> int:
        """Shorthand for add_register_condition(RegisterCondition(...))."""
        condition = RegisterCondition(register, operator, value, description)
        return self.add_register_condition(condition)

    def remove_register_condition(self, condition_id: int) -> None:
        """Drop a condition; unknown IDs are ignored."""
        with self._lock:
            self._conditions.pop(condition_id, None)

    def clear_register_conditions(self) -> None:
        with self._lock:
            self._conditions.clear()

    def list_register_conditions(self) -> list[tuple[int, RegisterCondition]]:
        """(id, condition) pairs in the order they were added."""
        with self._lock:
            return sorted(self._conditions.items())

    # =========================================================================
    # Break Requests
    # =========================================================================

    def request_break(self) -> None:
        """Ask the runner to stop before its next instruction. Thread-safe."""
        self._break_requested.set()

    def clear_break_request(self) -> None:
        self._break_requested.clear()

    def wait_for_break(self, timeout: float) -> bool:
        """
        Block for up to timeout seconds or until a break is requested.

        Used as an interruptible sleep between steps. The request is left
        pending for check_instruction() to report.

        Returns:
            True if a break request is pending
        """
        return self._break_requested.wait(timeout)

    def record(self, event: BreakEvent) -> BreakEvent:
        """Remember event as the last one and hand it back."""
        self._last_event = event
        return event

    def clear_all(self) -> None:
        """Drop breakpoints, conditions, any pending request and the last event."""
        with self._lock:
            self._pc_breakpoints.clear()
            self._conditions.clear()
        self._break_requested.clear()
        self._last_event = None

    # =========================================================================
    # Evaluation
    # =========================================================================

    def _pending_stop(
        self,
        cpu: "MOS6502",
        pc: int,
        resume_address: Optional[int]
    ) -> Optional[BreakEvent]:
        # Priority: break request, then breakpoint, then conditions
        if self._break_requested.is_set():
            self._break_requested.clear()
            return BreakEvent(BreakReason.USER_INTERRUPT, pc, "Break requested")

        with self._lock:
            hit_breakpoint = pc in self._pc_breakpoints
            conditions = tuple(self._conditions.values())

        if pc != resume_address and hit_breakpoint:
            return BreakEvent(BreakReason.PC_BREAKPOINT, pc, f"Breakpoint at ${pc:04X}")

        for condition in conditions:
            if condition.check(cpu):
                return BreakEvent(
                    BreakReason.REGISTER_CONDITION, pc, f"Condition: {condition.description}"
                )
        return None

    def check_instruction(
        self,
        cpu: "MOS6502",
        pc: int,
        opcode: int,
        resume_address: Optional[int] = None
    ) -> bool:
        """
        Decide whether the instruction at pc may run.

        Args:
            cpu: CPU to test register conditions against
            pc: Address of the next instruction
            opcode: Byte at pc (for the log)
            resume_address: Where the current run started. A breakpoint
                            there does not fire, so continuing from a
                            breakpoint moves past it.

        Returns:
            True to execute the instruction, False to stop (the reason is
            then available as last_event)
        """
        event = self._pending_stop(cpu, pc, resume_address)
        if event is None:
            return True
        logger.debug(f"Stopping at ${pc:04X} before opcode ${opcode:02X}: {event}")
        self.record(event)
        return False
