"""
Parenthesis depth tracking shared by the bracket normalizer and the tree builder.
"""

from __future__ import annotations


def update_depth(char: str, depth: int) -> int:
    """Return the nesting depth after scanning one character left to right."""
    if char == "(":
        return depth + 1
    if char == ")":
        return depth - 1
    return depth


def validates_nest(formula: str) -> bool:
    """
    Check that parentheses are balanced.

    The depth must never go negative during a left-to-right scan and must
    end at exactly zero.
    """
    depth = 0
    for char in formula:
        depth = update_depth(char, depth)
        if depth < 0:
            return False
    return depth == 0


def nest_drop_point(formula: str) -> int:
    """Return the first index where the depth falls back to zero, or len(formula)."""
    depth = 0
    for i, char in enumerate(formula):
        depth = update_depth(char, depth)
        if depth <= 0:
            return i
    return len(formula)
