"""
Stack Evaluator for post-order formula sequences.

Reduces the sequence produced by OperationNode.traverse to a single decimal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Context, Decimal, InvalidOperation, Overflow, localcontext
from typing import Callable, List, Mapping, Optional

from ..errors import FormulaError, FormulaErrorKind
from .numeric import is_number, parse_decimal, to_text
from .priority import UNARY_MINUS

logger = logging.getLogger(__name__)

ONE = Decimal(1)
ZERO = Decimal(0)


def _truth(condition: bool) -> Decimal:
    return ONE if condition else ZERO


BINARY_OPERATIONS: Mapping[str, Callable[[Decimal, Decimal], Decimal]] = {
    "*": lambda a, b: a * b,
    "/": lambda a, b: a / b,
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "?": lambda a, b: _truth(a >= b),
    "\\": lambda a, b: _truth(a <= b),
    "<": lambda a, b: _truth(a < b),
    ">": lambda a, b: _truth(a > b),
    "&": lambda a, b: _truth(a != 0 and b != 0),
    "|": lambda a, b: _truth(a != 0 or b != 0),
    "=": lambda a, b: _truth(a == b),
    "!": lambda a, b: _truth(a != b),
}

UNARY_OPERATIONS: Mapping[str, Callable[[Decimal], Decimal]] = {
    UNARY_MINUS: lambda a: -a,
}


@dataclass
class EvaluationOutcome:
    """Result of reducing one evaluation sequence."""
    value: Optional[Decimal] = None
    error: Optional[FormulaError] = None

    @property
    def success(self) -> bool:
        return self.error is None and self.value is not None


class StackEvaluator:
    """
    Stack machine over post-order token sequences.

    Operands are kept as text on the stack and parsed when an operator
    consumes them. Every failure is returned as an EvaluationOutcome with
    an error; nothing is raised for a bad formula.
    """

    def __init__(self, precision: int = 28):
        """
        Initialize the evaluator.

        Args:
            precision: Significant digits for decimal arithmetic.
        """
        self.precision = precision

    def evaluate(self, sequence: List[str]) -> EvaluationOutcome:
        """
        Evaluate a post-order sequence.

        Args:
            sequence: Tokens in children-before-parent order.

        Returns:
            EvaluationOutcome holding the final value or the first error.
        """
        context = Context(prec=self.precision)
        with localcontext(context):
            return self._run(sequence)

    def _run(self, sequence: List[str]) -> EvaluationOutcome:
        stack: List[str] = []

        for token in sequence:
            if token in BINARY_OPERATIONS:
                if len(stack) < 2:
                    return self._fail(FormulaErrorKind.INSUFFICIENT_OPERANDS, "Missing operand", token)
                right = parse_decimal(stack.pop())
                left = parse_decimal(stack.pop())
                if left is None or right is None:
                    return self._fail(FormulaErrorKind.MALFORMED_FORMAT, "Operand is not a number", token)
                if token == "/" and right == 0:
                    return self._fail(FormulaErrorKind.DIVISION_BY_ZERO, "Division by zero", token)
                try:
                    result = BINARY_OPERATIONS[token](left, right)
                except (InvalidOperation, Overflow) as e:
                    return self._fail(FormulaErrorKind.MALFORMED_FORMAT, f"Arithmetic error: {e!r}", token)
                stack.append(to_text(result))

            elif token in UNARY_OPERATIONS:
                if len(stack) < 1:
                    return self._fail(FormulaErrorKind.INSUFFICIENT_OPERANDS, "Missing operand", token)
                operand = parse_decimal(stack.pop())
                if operand is None:
                    return self._fail(FormulaErrorKind.MALFORMED_FORMAT, "Operand is not a number", token)
                stack.append(to_text(UNARY_OPERATIONS[token](operand)))

            else:
                if not is_number(token):
                    return self._fail(FormulaErrorKind.MALFORMED_FORMAT, "Unrecognized token", token)
                stack.append(token)

        if len(stack) != 1:
            return self._fail(
                FormulaErrorKind.MALFORMED_FORMAT,
                f"Expected one value after evaluation, found {len(stack)}",
            )

        return EvaluationOutcome(value=parse_decimal(stack[0]))

    def _fail(
        self,
        kind: FormulaErrorKind,
        message: str,
        token: Optional[str] = None
    ) -> EvaluationOutcome:
        logger.debug("Evaluation failed at %r: %s", token, message)
        return EvaluationOutcome(error=FormulaError(kind=kind, message=message, token=token))
