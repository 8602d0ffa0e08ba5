"""
Domain models and constants for tfvar.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet

# Environment variable prefix Terraform reads input variables from
VAR_ENV_PREFIX = "TF_VAR_"

# HCL identifier: (ID_Start | '_') (ID_Continue | '-')*
IDENTIFIER_PATTERN = re.compile(r"^[^\W\d][\w-]*$")

# Names Terraform refuses for input variables
RESERVED_VARIABLE_NAMES: FrozenSet[str] = frozenset(
    {
        "source",
        "version",
        "providers",
        "count",
        "for_each",
        "lifecycle",
        "depends_on",
        "locals",
    }
)

# Comment markers written by the variable-definitions formatter
REQUIRED_MARKER = "## REQUIRED\n"
OPTIONAL_MARKER = "## OPTIONAL\n"
DEFAULT_MARKER = "#"


class ParsingMode(Enum):
    """How a raw string value supplied for a variable is interpreted."""

    LITERAL = "literal"
    HCL = "hcl"


# Data model for extracted input variables
@dataclass(frozen=True)
class Variable:
    """Simplified Terraform input variable, e.g. ``variable "image_id" {}``.

    ``value`` is the declared default and is ``None`` when the variable is
    required. It is one of ``str``, ``bool``, ``int``, ``float``, ``list`` or
    ``dict``.
    """

    name: str
    value: Any = None
    description: str = ""
    description_set: bool = False
    parsing_mode: ParsingMode = ParsingMode.LITERAL

    @property
    def required(self) -> bool:
        return self.value is None


def is_valid_identifier(name: str) -> bool:
    """Check that name is a valid HCL identifier."""
    return bool(name) and IDENTIFIER_PATTERN.match(name) is not None
