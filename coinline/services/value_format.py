from __future__ import annotations

import re

# plain decimal or exponent notation; no underscores, nan or inf
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_TEXT_SPEC = re.compile(r"([ -]?)(\d+)", re.ASCII)
_FLOAT_SPEC = re.compile(r"[ -]?\d*\.?\d+", re.ASCII)


def parse_float(value: str) -> float | None:
    """Parse an API numeric string, returning None instead of raising."""
    if not value or not _NUMBER.fullmatch(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def format_float(value: str, modifier: str = "") -> str:
    """Render ``value`` like printf ``%<modifier>f``.

    Without a modifier, or when ``value`` is not a number, the raw string is
    returned unchanged.
    """
    if not modifier or not _FLOAT_SPEC.fullmatch(modifier):
        return value
    number = parse_float(value)
    if number is None:
        return value
    try:
        return ("%" + modifier + "f") % number
    except (ValueError, OverflowError, MemoryError):
        return value


def format_text(value: str, modifier: str = "") -> str:
    """Render ``value`` like printf ``%<modifier>s``.

    ``-`` left-aligns, a leading ``0`` on the width pads with zeros on the
    left, and a leading space is accepted but has no effect on text.
    """
    if not modifier:
        return value
    parsed = _TEXT_SPEC.fullmatch(modifier)
    if parsed is None:
        return value

    flag, digits = parsed.groups()
    width = int(digits)
    if len(value) >= width:
        return value
    try:
        if flag == "-":
            return value.ljust(width)
        if digits.startswith("0"):
            return value.rjust(width, "0")
        return value.rjust(width)
    except (OverflowError, MemoryError):
        return value
