"""
Logic engine for formula-exec.

Provides tree building and stack evaluation for calculation formulas.
"""

from .parser import FormulaParser, ParseResult
from .evaluator import StackEvaluator, EvaluationOutcome
from .tree import OperationNode

__all__ = [
    "FormulaParser",
    "ParseResult",
    "StackEvaluator",
    "EvaluationOutcome",
    "OperationNode",
]
