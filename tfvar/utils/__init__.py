"""
Utility modules for tfvar.

This package contains the HCL literal writer, the constant expression
evaluator and the helpers that turn python-hcl2 parse results into plain values.
"""

from .data_processing import (
    NonLiteralValueError,
    normalize_value,
    type_expression,
)
from .expressions import ExpressionError, evaluate_constant
from .hclwrite import HCLFile, format_tokens, tokens_for_value, tokens_to_string

__all__ = [
    "ExpressionError",
    "HCLFile",
    "NonLiteralValueError",
    "evaluate_constant",
    "format_tokens",
    "normalize_value",
    "tokens_for_value",
    "tokens_to_string",
    "type_expression",
]
