"""
Decimal parsing and rendering for operands and results.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

# Plain decimal literal: optional sign, digits with optional fraction.
# Exponents, NaN and Infinity are not numbers here.
_DECIMAL_LITERAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def parse_decimal(text: str) -> Optional[Decimal]:
    """Parse a decimal literal, returning None if the text is not one."""
    if not _DECIMAL_LITERAL.match(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def is_number(text: str) -> bool:
    """Return True if the text is a decimal literal."""
    return parse_decimal(text) is not None


def to_text(value: Decimal) -> str:
    """Render a decimal in fixed-point notation, folding -0 to 0."""
    if value.is_zero() and value.is_signed():
        value = value.copy_abs()
    return format(value, "f")


def canonical(text: str) -> Optional[str]:
    """Return the canonical text of a decimal literal, or None."""
    value = parse_decimal(text)
    if value is None:
        return None
    return to_text(value)
