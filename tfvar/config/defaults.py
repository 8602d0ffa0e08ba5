"""
Default configuration values and constants for tfvar.
"""

import os
from pathlib import Path

# Directory defaults
DEFAULT_CONFIG_DIR = "."
DEFAULT_DEBUG_DIR = "debug"

# Terraform configuration file suffixes
CONFIG_FILE_SUFFIXES = {
    'hcl': '.tf',
    'json': '.tf.json',
}

# Override files are merged over the primary declarations
OVERRIDE_FILE_NAMES = ('override.tf', 'override.tf.json')
OVERRIDE_FILE_SUFFIXES = ('_override.tf', '_override.tf.json')

# Variable definitions files loaded automatically, in precedence order
AUTO_DEFINITIONS_FILES = ('terraform.tfvars', 'terraform.tfvars.json')
AUTO_DEFINITIONS_SUFFIXES = ('.auto.tfvars', '.auto.tfvars.json')

# Debug file names
DEBUG_FILES = {
    'variables': 'variables.csv',
}

# Logging
DEFAULT_LOGLEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
)

# Environment variable mappings
ENV_VAR_MAPPINGS = {
    'debug_dir': 'TFVAR_DEBUG_DIR',
    'enable_debug': 'TFVAR_DEBUG_ENABLED',
    'loglevel': 'TFVAR_LOGLEVEL',
    'log_file': 'TFVAR_LOG_FILE',
    'describe_unset': 'TFVAR_DESCRIBE_UNSET',
}

TRUTHY_VALUES = ("true", "1", "yes", "on")


def get_env_value(key: str, default=None):
    """Get environment variable value with optional default."""
    env_key = ENV_VAR_MAPPINGS.get(key, key.upper())
    return os.getenv(env_key, default)


def get_env_flag(key: str):
    """Get a boolean environment override, or None when it is not set."""
    value = get_env_value(key)
    if not value:
        return None
    return value.lower() in TRUTHY_VALUES


def get_default_paths():
    """Get default directory paths relative to the working directory."""
    return {
        'config_dir': Path(DEFAULT_CONFIG_DIR),
        'debug_dir': Path(DEFAULT_DEBUG_DIR),
    }
