"""
Error taxonomy for formula evaluation.

Failures travel as values: helpers return a FormulaError instead of raising,
and the executor turns it into a fixed sentinel text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class FormulaErrorKind(str, Enum):
    """Kinds of evaluation failure."""
    UNBALANCED_PARENTHESES = "unbalanced_parentheses"
    MALFORMED_FORMAT = "malformed_format"
    INSUFFICIENT_OPERANDS = "insufficient_operands"
    DIVISION_BY_ZERO = "division_by_zero"


@dataclass
class FormulaError:
    """Represents a failure found while building or evaluating a formula."""
    kind: FormulaErrorKind
    message: str
    formula: str = ""
    token: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "formula": self.formula,
            "token": self.token,
        }


class ConfigError(ValueError):
    """Raised when an executor configuration cannot be loaded."""
