"""
Configuration package for tfvar.
"""

from .settings import TfvarConfig
from .defaults import (
    AUTO_DEFINITIONS_FILES,
    AUTO_DEFINITIONS_SUFFIXES,
    CONFIG_FILE_SUFFIXES,
    DEBUG_FILES,
    DEFAULT_CONFIG_DIR,
    DEFAULT_DEBUG_DIR,
    ENV_VAR_MAPPINGS,
    OVERRIDE_FILE_NAMES,
    OVERRIDE_FILE_SUFFIXES,
    get_env_value,
    get_default_paths
)

__all__ = [
    'TfvarConfig',
    'AUTO_DEFINITIONS_FILES',
    'AUTO_DEFINITIONS_SUFFIXES',
    'CONFIG_FILE_SUFFIXES',
    'DEBUG_FILES',
    'DEFAULT_CONFIG_DIR',
    'DEFAULT_DEBUG_DIR',
    'ENV_VAR_MAPPINGS',
    'OVERRIDE_FILE_NAMES',
    'OVERRIDE_FILE_SUFFIXES',
    'get_env_value',
    'get_default_paths'
]
