"""
tfvar package.

Extracts input variable declarations from Terraform configurations and
writes them as environment variable exports or variable definitions.
"""

__version__ = "0.3.0"
__description__ = "Terraform input variable extractor"

from .config import TfvarConfig
from .data import load, write_as_env_vars, write_as_tfvars
from .domain import ConfigLoadError, ParsingMode, Variable, WriteError

__all__ = [
    'ConfigLoadError',
    'ParsingMode',
    'TfvarConfig',
    'Variable',
    'WriteError',
    'load',
    'write_as_env_vars',
    'write_as_tfvars'
]
