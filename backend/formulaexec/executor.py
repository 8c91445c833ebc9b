"""
Formula Executor.

Public entry point: evaluates a formula string and returns either the
decimal result or a fixed error text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import ExecutorConfig
from .errors import FormulaError, FormulaErrorKind
from .logic.depth import validates_nest
from .logic.evaluator import StackEvaluator
from .logic.numeric import canonical, to_text
from .logic.parser import FormulaParser

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """
    Outcome of evaluating one formula.

    Attributes:
        success: Whether a number was produced.
        value: Canonical decimal text on success.
        error: The failure on error.
        formula: The formula as given.
    """

    success: bool
    value: Optional[str] = None
    error: Optional[FormulaError] = None
    formula: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "value": self.value,
            "error": self.error.to_dict() if self.error else None,
            "formula": self.formula,
        }


class FormulaExecutor:
    """
    Evaluates calculation formulas.

    Each call builds its own tree, so one executor can be shared across
    threads. Errors never escape evaluate(); they come back as the
    configured sentinel texts.
    """

    def __init__(self, config: Optional[ExecutorConfig] = None):
        """
        Initialize the executor.

        Args:
            config: Precision and error texts; defaults if omitted.
        """
        self.config = config or ExecutorConfig()
        self.parser = FormulaParser()
        self.evaluator = StackEvaluator(precision=self.config.precision)

    @property
    def error_message(self) -> str:
        """Text returned for format errors."""
        return self.config.messages.malformed_format

    def evaluate(self, formula: str) -> str:
        """
        Evaluate a formula.

        Args:
            formula: The formula text, e.g. "(2 + 3) * 4".

        Returns:
            The result as decimal text, or an error text.
        """
        result = self.evaluate_detailed(formula)
        if result.success:
            return result.value
        return self.config.messages.for_kind(result.error.kind)

    def evaluate_detailed(self, formula: str) -> EvaluationResult:
        """
        Evaluate a formula and report the exact error kind on failure.

        Args:
            formula: The formula text.

        Returns:
            EvaluationResult with the value or the error.
        """
        if not validates_nest(formula):
            return self._error(formula, FormulaErrorKind.UNBALANCED_PARENTHESES, "Unbalanced parentheses")

        try:
            built = self.parser.build(formula)
        except RecursionError:
            logger.warning("Formula nested too deeply to build: %r", formula[:80])
            return self._error(formula, FormulaErrorKind.MALFORMED_FORMAT, "Formula nested too deeply")

        if not built.success:
            # A bare signed number such as "+5" has no tree but is still a value
            value = canonical(built.formula)
            if value is not None:
                logger.debug("Using numeric fallback for %r", formula)
                return EvaluationResult(success=True, value=value, formula=formula)
            return EvaluationResult(success=False, error=built.error, formula=formula)

        root = built.node
        if root.is_leaf:
            value = canonical(root.label)
            if value is not None:
                return EvaluationResult(success=True, value=value, formula=formula)

        try:
            sequence = root.traverse()
        except RecursionError:
            logger.warning("Formula nested too deeply to evaluate: %r", formula[:80])
            return self._error(formula, FormulaErrorKind.MALFORMED_FORMAT, "Formula nested too deeply")

        outcome = self.evaluator.evaluate(sequence)
        if not outcome.success:
            outcome.error.formula = formula
            return EvaluationResult(success=False, error=outcome.error, formula=formula)

        return EvaluationResult(success=True, value=to_text(outcome.value), formula=formula)

    def _error(self, formula: str, kind: FormulaErrorKind, message: str) -> EvaluationResult:
        logger.debug("Formula %r rejected: %s", formula, message)
        return EvaluationResult(
            success=False,
            error=FormulaError(kind=kind, message=message, formula=formula),
            formula=formula,
        )


def evaluate(formula: str, config: Optional[ExecutorConfig] = None) -> str:
    """
    Convenience function to evaluate a formula.

    Args:
        formula: The formula text.
        config: Optional executor configuration.

    Returns:
        The result as decimal text, or an error text.
    """
    return FormulaExecutor(config).evaluate(formula)
