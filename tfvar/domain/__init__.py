"""
Domain models, constants and errors for tfvar.
"""

from .constants import (
    RESERVED_VARIABLE_NAMES,
    VAR_ENV_PREFIX,
    ParsingMode,
    Variable,
    is_valid_identifier,
)
from .errors import ConfigLoadError, InvalidValueError, TfvarError, WriteError

__all__ = [
    "ConfigLoadError",
    "InvalidValueError",
    "ParsingMode",
    "RESERVED_VARIABLE_NAMES",
    "TfvarError",
    "VAR_ENV_PREFIX",
    "Variable",
    "WriteError",
    "is_valid_identifier",
]
