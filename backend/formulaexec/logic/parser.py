"""
Formula Parser.

Splits a flat formula string into a binary expression tree by repeatedly
choosing the lowest-priority operator outside any parentheses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import FormulaError, FormulaErrorKind
from .depth import nest_drop_point, validates_nest
from .priority import NOT_AN_OPERATOR, UNARY_MINUS, is_operator, priority
from .tree import OperationNode

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """Result of building a tree from a formula."""
    node: Optional[OperationNode] = None
    error: Optional[FormulaError] = None
    formula: str = ""

    @property
    def success(self) -> bool:
        return self.node is not None and self.error is None


class FormulaParser:
    """
    Parser for single-line calculation formulas.

    Converts formulas like:
        "(2 + 3) * 4"
        "1 >= 0 And 2 < 3"

    Into expression trees whose post-order sequence feeds the evaluator:
        ["2", "3", "+", "4", "*"]
        ["1", "0", "?", "2", "3", "<", "&"]
    """

    # Rewrites applied in order; compound operators fold before spaces go
    REPLACEMENTS: List[Tuple[str, str]] = [
        ("--", "+"),
        ("+-", "-"),
        (">=", "?"),
        ("<=", "\\"),
        ("!=", "!"),
        (" ", ""),
        ("　", ""),  # full-width space
        ("And", "&"),
        ("Or", "|"),
    ]

    def preprocess(self, formula: str) -> str:
        """Fold compound and keyword operators into single characters and drop spaces."""
        for old, new in self.REPLACEMENTS:
            formula = formula.replace(old, new)
        return formula

    def most_outers_are_brackets(self, formula: str) -> bool:
        """Return True if one matching pair of parentheses encloses the whole formula."""
        if not formula:
            return False
        if not (formula[0] == "(" and formula[-1] == ")"):
            return False
        if not validates_nest(formula):
            return False
        # "(1)+(2)" opens and closes with brackets, but they are not a pair
        return nest_drop_point(formula) == len(formula) - 1

    def strip_outer_brackets(self, formula: str) -> str:
        """Strip enclosing parentheses until none remain."""
        while self.most_outers_are_brackets(formula):
            formula = formula[1:-1]
            if not formula:
                break
        return formula

    def normalize(self, formula: str) -> str:
        """Preprocess and strip redundant outer parentheses."""
        return self.strip_outer_brackets(self.preprocess(formula))

    def is_unary_minus(self, formula: str, index: int) -> bool:
        """
        Decide whether the '-' at index negates rather than subtracts.

        A minus is unary at the start of the formula or after another
        operator or an opening bracket. After a digit or a closing bracket
        it is always subtraction.
        """
        if formula[index] != "-":
            return False
        if index == 0:
            return True
        previous = formula[index - 1]
        if previous.isdigit() or previous == ")":
            return False
        return is_operator(previous) or previous == "("

    def lookup_split_index(self, formula: str) -> int:
        """
        Find the operator to split on.

        Scans right to left at depth zero for the lowest priority. Binary ties
        keep the rightmost occurrence so that equal-priority operators group
        left to right. Unary minus ties keep the leftmost, outermost negation.

        Returns:
            Index of the split operator, or -1 if there is none.
        """
        split_index = -1
        lowest = NOT_AN_OPERATOR
        depth = 0

        for i in range(len(formula) - 1, -1, -1):
            char = formula[i]
            # Reversed scan: ')' opens a group, '(' closes it
            if char == ")":
                depth += 1
            elif char == "(":
                depth -= 1

            if depth != 0:
                continue

            if self.is_unary_minus(formula, i):
                current = priority(UNARY_MINUS)
            else:
                current = priority(char)
                if current == NOT_AN_OPERATOR:
                    continue

            if current < lowest or (current == lowest and current == priority(UNARY_MINUS)):
                # "--5" splits on the first minus and negates twice
                lowest = current
                split_index = i

        return split_index

    def build(self, formula: str) -> ParseResult:
        """
        Build an expression tree from a formula.

        The formula is preprocessed once; every subtree is then bracket
        normalized and split. Subtrees are grown from an explicit work
        stack, so long flat formulas do not hit the recursion limit.

        Args:
            formula: The formula text.

        Returns:
            ParseResult with the root node, or the error that stopped the build.
        """
        root_formula = self.normalize(formula)
        root = OperationNode(root_formula)
        # (node to fill, its text, nearest enclosing formula)
        pending: List[Tuple[OperationNode, str, str]] = [(root, root_formula, "")]

        while pending:
            node, text, enclosing = pending.pop()
            text = self.strip_outer_brackets(text)

            if not text:
                error = FormulaError(
                    kind=FormulaErrorKind.MALFORMED_FORMAT,
                    message="Empty formula",
                    formula=enclosing,
                )
                logger.debug("Tree build failed in %r: %s", enclosing, error.message)
                return ParseResult(error=error, formula=root_formula)

            index = self.lookup_split_index(text)

            if index == -1:
                node.label = text
                continue

            node.right = OperationNode("")
            pending.append((node.right, text[index + 1:], text))

            if self.is_unary_minus(text, index):
                node.label = UNARY_MINUS
                continue

            node.label = text[index]
            node.left = OperationNode("")
            pending.append((node.left, text[:index], text))

        return ParseResult(node=root, formula=root_formula)

    def validate(self, formula: str) -> Tuple[bool, Optional[str]]:
        """
        Validate a formula without evaluating it.

        Returns:
            Tuple of (is_valid, error_message).
        """
        if not validates_nest(formula):
            return False, "Unbalanced parentheses"
        result = self.build(formula)
        if not result.success:
            return False, result.error.message if result.error else "Malformed formula"
        return True, None
