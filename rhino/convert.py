"""Strict conversions between integers and decimal strings."""

from __future__ import annotations

import re

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _parse(text: str) -> int:
    if not _DECIMAL.fullmatch(text):
        return 0
    value = int(text)
    if value < _INT64_MIN or value > _INT64_MAX:
        return 0
    return value


def itoa(val: int) -> str:
    """Format an integer in base 10."""
    return str(val)


def atoi(text: str) -> int:
    """Parse a base-10 integer, returning 0 for anything invalid or out of range."""
    return _parse(text)


def atol(text: str) -> int:
    """Parse a 64-bit base-10 integer, returning 0 when it cannot be parsed."""
    return _parse(text)


def ltoa(val: int) -> str:
    """Format a 64-bit integer in base 10."""
    return str(val)