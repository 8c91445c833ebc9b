"""
formula-exec: single-line calculation formula evaluator.

Evaluates arithmetic, comparison and boolean formulas over decimals,
returning the result as text or a fixed error text.
"""

from .config import ExecutorConfig, ErrorMessages, load_config
from .errors import ConfigError, FormulaError, FormulaErrorKind
from .executor import EvaluationResult, FormulaExecutor, evaluate

__version__ = "1.0.0"
__all__ = [
    "evaluate",
    "FormulaExecutor",
    "EvaluationResult",
    "ExecutorConfig",
    "ErrorMessages",
    "load_config",
    "ConfigError",
    "FormulaError",
    "FormulaErrorKind",
]
