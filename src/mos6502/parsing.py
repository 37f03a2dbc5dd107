"""
Address and Byte Parsing
========================

Turns text typed by a user (CLI arguments, debugger fields) into numbers
and program bytes.

Numbers may be written as:
    - Python ints: 0x8000, 32768
    - "0x8000" / "0X8000" or assembler style "$8000"
    - Decimal "32768"
    - Bare hex "FFFC" when the text is not valid decimal

Program bytes are hex text, e.g. "A9 10 69 05", "A9,10,69,05",
"$A9 $10" or "A9106905".

Anything malformed or out of range raises AddressParseError. The CPU core
masks every address itself, so validation lives only here at the edge.

Copyright (c) 2026 MOS6502 Emulator Contributors
"""

import re
from typing import Any, Optional

from .errors import AddressParseError


_RANGE_HINTS = {
    0xFF: "0-255 (0x00-0xFF)",
    0xFFFF: "0-65535 (0x0000-0xFFFF)",
}

_SEPARATORS = re.compile(r"[\s,]+")
_HEX_DIGITS = re.compile(r"^[0-9A-Fa-f]+$")


def _strip_hex_prefix(text: str) -> Optional[str]:
    """Digits after a 0x/$ prefix, or None when there is no prefix."""
    if text[:2].lower() == "0x":
        return text[2:]
    if text.startswith("$"):
        return text[1:]
    return None


def _int_from_text(text: str) -> int:
    digits = _strip_hex_prefix(text)
    if digits is not None:
        return int(digits, 16)
    if text.isdecimal():
        return int(text)
    return int(text, 16)


def parse_integer(
    value: Any,
    param_name: str,
    min_val: int = 0,
    max_val: int = 0xFFFF,
    default: Optional[int] = None
) -> int:
    """
    Parse an integer given as an int or as text.

    None and blank text give `default` when one is supplied.

    Args:
        value: int, str or None
        param_name: Field name used in error messages
        min_val: Smallest accepted value
        max_val: Largest accepted value
        default: Returned for None or blank text

    Returns:
        The value, range-checked

    Raises:
        AddressParseError: Unparseable, wrong type, missing or out of range

    Examples:
        >>> parse_integer("$8000", "address")
        32768
        >>> parse_integer("FFFC", "address")
        65532
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            if default is not None:
                return default
            raise AddressParseError(param_name, value, "empty string")
        try:
            parsed = _int_from_text(text)
        except ValueError as e:
            raise AddressParseError(
                param_name, value,
                f"cannot read '{text}' as a number; "
                f"write decimal (32768) or hex (0x8000, $8000)"
            ) from e
    elif value is None:
        if default is not None:
            return default
        raise AddressParseError(param_name, value, "value required")
    elif isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    else:
        raise AddressParseError(
            param_name, value,
            f"expected integer or string, got {type(value).__name__}"
        )

    if parsed < min_val or parsed > max_val:
        hint = _RANGE_HINTS.get(max_val) if min_val == 0 else None
        raise AddressParseError(
            param_name, value,
            f"value {parsed} out of range, must be {hint or f'{min_val}-{max_val}'}"
        )
    return parsed


def parse_address(value: Any, param_name: str = "address", default: Optional[int] = None) -> int:
    """Parse a 16-bit address."""
    return parse_integer(value, param_name, 0, 0xFFFF, default)


def parse_byte(value: Any, param_name: str = "value", default: Optional[int] = None) -> int:
    """Parse an 8-bit value."""
    return parse_integer(value, param_name, 0, 0xFF, default)


def parse_hex_bytes(text: str, param_name: str = "program") -> bytes:
    """
    Parse hex text into bytes.

    Tokens are separated by whitespace or commas and may carry a "0x" or
    "$" prefix. A single digit is one byte; longer tokens are read as
    digit pairs, so "A91069" is three bytes.

    Raises:
        AddressParseError: Empty input, a non-hex token, or a multi-digit
                           token with an odd number of digits

    Examples:
        >>> parse_hex_bytes("$A2,$FF")
        b'\\xa2\\xff'
    """
    result = bytearray()
    for token in filter(None, _SEPARATORS.split(text)):
        digits = _strip_hex_prefix(token)
        if digits is None:
            digits = token
        if not _HEX_DIGITS.match(digits):
            raise AddressParseError(param_name, text, f"'{token}' is not hex")
        if len(digits) == 1:
            digits = "0" + digits
        elif len(digits) % 2:
            raise AddressParseError(
                param_name, text, f"'{token}' has an odd number of hex digits"
            )
        result += bytes.fromhex(digits)

    if not result:
        raise AddressParseError(param_name, text, "no bytes given")
    return bytes(result)
