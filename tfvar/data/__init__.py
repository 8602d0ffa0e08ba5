"""
Data package for tfvar.

This package handles loading variable declarations, collecting values for
them and exporting them in the supported output formats.
"""

from .definitions import (
    UnparsedValue,
    collect_auto_files,
    collect_from_env_vars,
    collect_from_file,
    collect_from_string,
    drop_defaults,
    parse_values,
)
from .exporters import EnvVarExporter, TFVarsExporter, write_as_env_vars, write_as_tfvars
from .loaders import ConfigFileReader, VariableLoader, load

__all__ = [
    "ConfigFileReader",
    "EnvVarExporter",
    "TFVarsExporter",
    "UnparsedValue",
    "VariableLoader",
    "collect_auto_files",
    "collect_from_env_vars",
    "collect_from_file",
    "collect_from_string",
    "drop_defaults",
    "load",
    "parse_values",
    "write_as_env_vars",
    "write_as_tfvars",
]
