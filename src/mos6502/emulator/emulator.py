"""
MOS6502 Emulator - Main Orchestrator
====================================

This module provides the `Emulator` class, the high-level API a debugger or
test harness drives. It wraps one MOS6502 CPU and adds:

- Program loading with optional reset-vector setup
- Execution control (step, run with a step budget, reset, IRQ, NMI)
- Breakpoints and register conditions between instructions
- Continuous execution on a background thread with cooperative stop
- Memory and register inspection, disassembly around any address

Threading model:
    The CPU is not thread-safe. Every facade call that touches the CPU holds
    one re-entrant lock for exactly one instruction (or one reset/interrupt),
    so requests from a debugger thread land between instructions while the
    background runner is executing. `stop()` raises the break request; the
    runner observes it before its next instruction.

Example usage:
    >>> from mos6502.emulator import Emulator
    >>> emu = Emulator()
    >>> emu.load_program(bytes([0xA9, 0x10, 0x69, 0x05, 0xE8, 0x00]))
    >>> emu.reset()
    >>> event = emu.run(4)
    >>> print(f"A=${emu.cpu.a:02X} X=${emu.cpu.x:02X} cycles={emu.cpu.cycles}")
    A=$15 X=$01 cycles=15

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from ..disassembler import MOS6502Disassembler, VECTOR_SYMBOLS
from ..errors import EmulatorStateError
from .breakpoints import BreakpointManager, BreakEvent, BreakReason
from .cpu import MOS6502, CPUState, RESET_VECTOR, format_flags


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        origin: Default load address for load_program()
        set_reset_vector: Point the reset vector at the load address when
                          loading a program, so reset() starts there
        trace: Log every executed instruction (disassembled) at DEBUG level
        max_steps: Default step budget for run(), at least 1

    Example:
        >>> config = EmulatorConfig(origin=0xC000, trace=True)

    Raises:
        ValueError: If max_steps is less than 1
    """
    origin: int = 0x8000
    set_reset_vector: bool = True
    trace: bool = False
    max_steps: int = 1_000_000

    def __post_init__(self):
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {self.max_steps}")


class Emulator:
    """
    MOS6502 emulator with debugging support.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        cpu: The MOS6502 CPU instance (accessible for low-level control)
        breakpoints: The breakpoint manager

    Example:
        >>> emu = Emulator()
        >>> emu.load_program(program_bytes)
        >>> emu.reset()
        >>> emu.add_breakpoint(0x8010)
        >>> event = emu.run()
        >>> print(event)
        Breakpoint at $8010
    """

    def __init__(
        self,
        config: Optional[EmulatorConfig] = None,
        cpu: Optional[MOS6502] = None
    ):
        """
        Initialize the emulator.

        Args:
            config: EmulatorConfig. Defaults to EmulatorConfig().
            cpu: CPU to drive. Defaults to a new MOS6502 with 64KB of RAM.
        """
        self.config = config or EmulatorConfig()
        self.cpu = cpu if cpu is not None else MOS6502()
        self.breakpoints = BreakpointManager()
        self.disassembler = MOS6502Disassembler(dict(VECTOR_SYMBOLS))

        self._lock = threading.RLock()
        self._worker: Optional[threading.Thread] = None
        self._total_steps = 0

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_program(self, data: bytes, address: Optional[int] = None) -> None:
        """
        Load machine code into memory.

        Args:
            data: Program bytes
            address: Load address (default: config.origin)

        If config.set_reset_vector is True the reset vector is pointed at the
        load address. Registers are untouched until reset() is called.
        """
        start = (self.config.origin if address is None else address) & 0xFFFF
        with self._lock:
            self.cpu.load_program(data, start)
            if self.config.set_reset_vector:
                self.cpu.set_memory(RESET_VECTOR, start & 0xFF)
                self.cpu.set_memory(RESET_VECTOR + 1, start >> 8)
        logger.debug(f"Loaded {len(data)} bytes at ${start:04X}")

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """
        Reset the CPU.

        Safe to call while the background runner is active: the reset lands
        between two instructions. A pending break request is discarded only
        when the emulator is idle.
        """
        with self._lock:
            self.cpu.reset()
            self._total_steps = 0
        if not self.is_running:
            self.breakpoints.clear_break_request()

    def irq(self) -> None:
        """Raise a maskable interrupt (ignored while I is set)."""
        with self._lock:
            self.cpu.irq()

    def nmi(self) -> None:
        """Raise a non-maskable interrupt."""
        with self._lock:
            self.cpu.nmi()

    def _execute_one(self) -> int:
        """Execute one instruction. Caller holds the lock."""
        if self.config.trace:
            pc = self.cpu.pc
            instr = self.disassembler.disassemble_one(self.read_memory(pc, 3), pc)
            logger.debug(
                f"{instr}  A={self.cpu.a:02X} X={self.cpu.x:02X} "
                f"Y={self.cpu.y:02X} SP={self.cpu.sp:02X} "
                f"P={format_flags(self.cpu.p)}"
            )
        cycles = self.cpu.step()
        self._total_steps += 1
        return cycles

    def step(self) -> BreakEvent:
        """
        Execute a single instruction, ignoring breakpoints.

        Returns:
            BreakEvent with reason=STEP and the new PC
        """
        with self._lock:
            self._execute_one()
            pc = self.cpu.pc
        return self.breakpoints.record(BreakEvent(
            BreakReason.STEP,
            address=pc,
            message=f"Step at ${pc:04X}"
        ))

    def run(self, max_steps: Optional[int] = None, step_delay: float = 0.0) -> BreakEvent:
        """
        Run until a break condition or the step budget is exhausted.

        Execution stops before an instruction when:
        - PC reaches a breakpoint (other than the one execution resumes from)
        - A register condition is met
        - A break was requested (stop() or request_break())

        Args:
            max_steps: Maximum instructions to execute (default: config.max_steps)
            step_delay: Seconds to wait between instructions

        Returns:
            BreakEvent describing why execution stopped
        """
        budget = self.config.max_steps if max_steps is None else max_steps
        with self._lock:
            resume_address = self.cpu.pc
        return self._run(budget, step_delay, resume_address)

    def _run(
        self,
        budget: int,
        step_delay: float,
        resume_address: Optional[int]
    ) -> BreakEvent:
        for _ in range(budget):
            with self._lock:
                pc = self.cpu.pc
                opcode = self.cpu.get_memory(pc)
                if not self.breakpoints.check_instruction(
                    self.cpu, pc, opcode, resume_address
                ):
                    return self.breakpoints.last_event
                self._execute_one()
            # Only the first instruction may sit on the breakpoint we resume from
            resume_address = None
            if step_delay > 0:
                # Wakes early on a break request; the next check reports it
                self.breakpoints.wait_for_break(step_delay)

        return self.breakpoints.record(BreakEvent(
            BreakReason.MAX_STEPS,
            address=self.cpu.pc,
            message=f"Reached max steps ({budget})"
        ))

    def run_until_pc(self, address: int, max_steps: Optional[int] = None) -> bool:
        """
        Run until execution arrives at address.

        A breakpoint is placed there for the duration of the run unless one
        already exists. Any other stop ends the run early.

        Returns:
            True if execution stopped at address
        """
        target = address & 0xFFFF
        temporary = not self.breakpoints.has_breakpoint(target)
        if temporary:
            self.breakpoints.add_breakpoint(target)
        try:
            event = self.run(max_steps)
        finally:
            if temporary:
                self.breakpoints.remove_breakpoint(target)
        return event.reason == BreakReason.PC_BREAKPOINT and event.address == target

    # =========================================================================
    # Background Execution
    # =========================================================================

    @property
    def is_running(self) -> bool:
        """True while the background runner thread is executing."""
        worker = self._worker
        return worker is not None and worker.is_alive()

    def start(self, step_delay: float = 0.0) -> None:
        """
        Start continuous execution on a background thread.

        The runner keeps executing until a breakpoint, register condition or
        stop() ends it.

        Args:
            step_delay: Seconds to wait between instructions (speed control)

        Raises:
            EmulatorStateError: If the runner is already active
        """
        if self.is_running:
            raise EmulatorStateError("Emulator is already running")

        self.breakpoints.clear_break_request()
        self._worker = threading.Thread(
            target=self._run_forever,
            args=(step_delay,),
            name="mos6502-runner",
            daemon=True,
        )
        logger.info(f"Starting emulator at PC=${self.cpu.pc:04X} (step delay {step_delay}s)")
        self._worker.start()

    def _run_forever(self, step_delay: float) -> None:
        with self._lock:
            resume_address: Optional[int] = self.cpu.pc
        while True:
            event = self._run(self.config.max_steps, step_delay, resume_address)
            if event.reason != BreakReason.MAX_STEPS:
                break
            resume_address = None
        logger.info(f"Emulator stopped: {event}")

    def stop(self, timeout: Optional[float] = None) -> Optional[BreakEvent]:
        """
        Stop the background runner.

        At most one further instruction executes after this is called.

        Args:
            timeout: Seconds to wait for the runner to finish (None = forever)

        Returns:
            The last break event, or None if nothing has run yet
        """
        worker = self._worker
        if worker is not None:
            if worker.is_alive():
                self.breakpoints.request_break()
                worker.join(timeout)
            if not worker.is_alive():
                self._worker = None
                # The runner may have ended on its own before seeing the request
                self.breakpoints.clear_break_request()
        return self.breakpoints.last_event

    # =========================================================================
    # Breakpoint Management (delegates to BreakpointManager)
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """Add a PC breakpoint at the specified address."""
        self.breakpoints.add_breakpoint(address)

    def remove_breakpoint(self, address: int) -> None:
        """Remove a PC breakpoint at the specified address."""
        self.breakpoints.remove_breakpoint(address)

    def clear_breakpoints(self) -> None:
        """Remove all breakpoints and register conditions."""
        self.breakpoints.clear_all()

    # =========================================================================
    # Memory and Register Inspection
    # =========================================================================

    def read_memory(self, address: int, length: int) -> bytes:
        """
        Read a block of memory, wrapping at $FFFF.

        Args:
            address: Start address
            length: Number of bytes

        Returns:
            Memory contents
        """
        with self._lock:
            return bytes(
                self.cpu.get_memory((address + i) & 0xFFFF) for i in range(length)
            )

    def write_memory(self, address: int, data: bytes) -> None:
        """Write a block of memory, wrapping at $FFFF."""
        with self._lock:
            for i, byte in enumerate(data):
                self.cpu.set_memory((address + i) & 0xFFFF, byte)

    def registers(self) -> CPUState:
        """Return a consistent snapshot of the CPU registers."""
        with self._lock:
            return self.cpu.snapshot()

    @property
    def total_steps(self) -> int:
        """Instructions executed through this facade since the last reset."""
        return self._total_steps

    def disassemble_at(self, address: int, count: int = 10) -> list[str]:
        """
        Disassemble instructions starting at an address.

        Args:
            address: Start address
            count: Number of instructions

        Returns:
            List of listing lines
        """
        # 3 bytes is the longest 6502 instruction
        data = self.read_memory(address, count * 3)
        return [
            str(instr)
            for instr in self.disassembler.disassemble(data, address, count)
        ]

    def __repr__(self) -> str:
        state = "running" if self.is_running else "stopped"
        return f"Emulator({self.cpu!r}, {state})"
