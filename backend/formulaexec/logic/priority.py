"""
Operator priority table.

Lower numbers bind last (they become the outermost split), higher numbers
bind first. The unary minus marker sits above every binary operator.
"""

from __future__ import annotations

import sys
from types import MappingProxyType
from typing import Mapping

# Reserved marker for unary minus, never present in surface syntax
UNARY_MINUS = "_"

# Returned for characters that are not operators
NOT_AN_OPERATOR = sys.maxsize

OPERATOR_PRIORITIES: Mapping[str, int] = MappingProxyType({
    "*": 5, "/": 5,
    "+": 4, "-": 4,
    "?": 3, "\\": 3, "<": 3, ">": 3,  # >=, <=, <, >
    "&": 2, "|": 2,
    "=": 1, "!": 1,  # ==, !=
    UNARY_MINUS: 6,
})


def priority(symbol: str) -> int:
    """Return the precedence of an operator symbol, or NOT_AN_OPERATOR."""
    return OPERATOR_PRIORITIES.get(symbol, NOT_AN_OPERATOR)


def is_operator(symbol: str) -> bool:
    """Return True if the symbol is in the priority table."""
    return symbol in OPERATOR_PRIORITIES
