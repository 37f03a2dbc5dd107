"""
MOS6502 Emulator Error Hierarchy
================================

This module defines the exception hierarchy for the package. All exceptions
inherit from Mos6502Error, allowing callers to catch every package error
with a single except clause if desired.

Exception Hierarchy
-------------------
Mos6502Error (base)
├── AddressParseError - malformed or out-of-range address/byte text
└── EmulatorStateError - emulator facade used in the wrong state

The CPU core itself never raises during execution: every opcode, register
value and memory content is a valid input. Errors only arise at the edges,
where text from a user or debugger is turned into numbers, or where the
background runner is driven incorrectly.
"""


# =============================================================================
# Base Exception Class
# =============================================================================

class Mos6502Error(Exception):
    """
    Base exception for all package errors.

        try:
            address = parse_address(text)
        except Mos6502Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Input Errors
# =============================================================================

class AddressParseError(Mos6502Error, ValueError):
    """
    Text could not be parsed as an address, byte or byte sequence.

    Also a ValueError, so callers validating input generically still
    catch it.

    Attributes:
        param_name: Name of the field being parsed
        value: The offending input
    """

    def __init__(self, param_name: str, value: object, message: str):
        self.param_name = param_name
        self.value = value
        super().__init__(f"{param_name}: {message}")


# =============================================================================
# Emulator Errors
# =============================================================================

class EmulatorStateError(Mos6502Error, RuntimeError):
    """Operation not allowed in the emulator's current state (e.g. starting twice)."""
    pass
