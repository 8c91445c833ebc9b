"""
Executor configuration.

Settings are read from a YAML file such as:

    precision: 28
    messages:
      malformed_format: "A format does wrong."
      division_by_zero: "Division by zero."
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError, FormulaErrorKind

CONFIG_ENV_VAR = "FORMULAEXEC_CONFIG"

FORMAT_ERROR_TEXT = "A format does wrong."
DIVISION_BY_ZERO_TEXT = "Division by zero."


class ErrorMessages(BaseModel):
    """Sentinel texts returned in place of a number."""

    model_config = ConfigDict(extra="forbid")

    malformed_format: str = FORMAT_ERROR_TEXT
    unbalanced_parentheses: str = FORMAT_ERROR_TEXT
    insufficient_operands: str = FORMAT_ERROR_TEXT
    division_by_zero: str = DIVISION_BY_ZERO_TEXT

    def for_kind(self, kind: FormulaErrorKind) -> str:
        """Return the sentinel text for an error kind."""
        return getattr(self, kind.value)


class ExecutorConfig(BaseModel):
    """Configuration for FormulaExecutor."""

    model_config = ConfigDict(extra="forbid")

    precision: int = Field(default=28, ge=1, le=999)
    messages: ErrorMessages = Field(default_factory=ErrorMessages)


def load_config(path: Optional[Union[str, Path]] = None) -> ExecutorConfig:
    """
    Load executor configuration from YAML.

    Args:
        path: Path to the YAML file. Falls back to $FORMULAEXEC_CONFIG.

    Returns:
        ExecutorConfig; defaults when no file is given or it does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or holds invalid settings.
    """
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR)
    if not path:
        return ExecutorConfig()

    path = Path(path)
    if not path.exists():
        return ExecutorConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

    try:
        return ExecutorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
