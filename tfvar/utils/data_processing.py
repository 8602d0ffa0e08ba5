"""
Helpers for turning python-hcl2 parse results into plain literal values.

python-hcl2 represents any non-literal expression as a ``"${...}"`` string,
and recent releases return heredocs as their raw ``<<EOT`` source text.
Depending on the release, quoted string literals either come back bare or
with their surrounding quotes and escape sequences intact; both shapes are
accepted here.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from .expressions import ExpressionError, evaluate_constant

logger = logging.getLogger(__name__)

EXPRESSION_PATTERN = re.compile(r"^\$\{(.*)\}$", re.DOTALL)
INTERPOLATION_PATTERN = re.compile(r"(?<![$%])[$%]\{")
ESCAPE_PATTERN = re.compile(r'\\(?:u([0-9a-fA-F]{4})|U([0-9a-fA-F]{8})|(.))', re.DOTALL)
HEREDOC_PATTERN = re.compile(
    r"^<<(-?)([^\W\d][\w-]*)\r?\n(.*?)^[ \t]*\2\s*\Z", re.DOTALL | re.MULTILINE
)

SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    '"': '"',
    "\\": "\\",
}

# Keys python-hcl2 may add to block bodies
META_KEYS = frozenset({"__start_line__", "__end_line__", "__is_block__"})


class NonLiteralValueError(ValueError):
    """Raised when a parsed value is an expression rather than a literal."""


def is_quoted(raw: str) -> bool:
    return len(raw) >= 2 and raw.startswith('"') and raw.endswith('"')


def strip_quotes(raw: str) -> str:
    """Remove one pair of surrounding double quotes, if present."""
    if is_quoted(raw):
        return raw[1:-1]
    return raw


def is_expression(raw: Any) -> bool:
    """Check whether a parsed value is a wrapped ``${...}`` expression."""
    return isinstance(raw, str) and EXPRESSION_PATTERN.match(raw) is not None


def unwrap_expression(raw: str) -> str:
    """Return the source text of a wrapped expression, or the input unchanged."""
    match = EXPRESSION_PATTERN.match(raw)
    if match:
        return match.group(1).strip()
    return raw


def unescape_string(text: str) -> str:
    """Decode HCL quoted-literal escape sequences."""

    def replace(match: "re.Match") -> str:
        short, long, simple = match.groups()
        if short or long:
            return chr(int(short or long, 16))
        return SIMPLE_ESCAPES.get(simple, "\\" + simple)

    return ESCAPE_PATTERN.sub(replace, text)


def heredoc_body(raw: str) -> Optional[str]:
    """Return the content of a ``<<ID`` / ``<<-ID`` heredoc, or None for other text.

    Every content line keeps its newline. The indented form removes the
    indentation shared by all non-blank lines.
    """
    match = HEREDOC_PATTERN.match(raw)
    if match is None:
        return None
    indented, _, body = match.groups()
    lines = body.splitlines(keepends=True)
    if indented:
        margins = [len(line) - len(line.lstrip(" \t")) for line in lines if line.strip()]
        margin = min(margins, default=0)
        lines = [line[margin:] if line.strip() else line.lstrip(" \t") for line in lines]
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines)


def normalize_string(raw: str, unquote: bool = True) -> str:
    """Convert a parsed string literal to its value.

    JSON sources pass ``unquote=False``: their strings never carry HCL quoting
    and are never heredocs.

    Raises:
        NonLiteralValueError: If the string is a template with interpolations
    """
    heredoc = heredoc_body(raw) if unquote else None
    if heredoc is not None:
        text = heredoc
    elif unquote and is_quoted(raw):
        text = unescape_string(raw[1:-1])
    else:
        text = raw

    if INTERPOLATION_PATTERN.search(text):
        raise NonLiteralValueError(f"template interpolation is not allowed: {raw!r}")

    return text.replace("$${", "${").replace("%%{", "%{")


def normalize_key(raw: Any) -> str:
    return strip_quotes(str(raw))


def normalize_value(raw: Any, unquote: bool = True) -> Any:
    """Convert a python-hcl2 value into a plain literal.

    Args:
        raw: Value as returned by ``hcl2.load`` or ``json.load``
        unquote: Decode quoted string literals (False for JSON sources)

    Returns:
        None, bool, int, float, str, list or dict

    Raises:
        NonLiteralValueError: If the value (or any nested element) is not a literal
    """
    if raw is None or isinstance(raw, (bool, int, float)):
        return raw
    if isinstance(raw, str):
        if is_expression(raw):
            return _normalize_expression(unwrap_expression(raw))
        return normalize_string(raw, unquote)
    if isinstance(raw, (list, tuple)):
        return [normalize_value(item, unquote) for item in raw]
    if isinstance(raw, dict):
        return {
            normalize_key(key): normalize_value(value, unquote)
            for key, value in raw.items()
            if key not in META_KEYS
        }
    raise NonLiteralValueError(f"unsupported value type: {type(raw).__name__}")


def _normalize_expression(source: str) -> Any:
    # Keywords, exponent numbers and operator expressions all arrive wrapped
    try:
        return evaluate_constant(source)
    except ExpressionError as e:
        raise NonLiteralValueError(str(e)) from e


def type_expression(raw: Any) -> str:
    """Source text of a ``type`` constraint, e.g. ``string`` or ``list(string)``."""
    if not isinstance(raw, str):
        return str(raw)
    if is_expression(raw):
        return unwrap_expression(raw)
    return strip_quotes(raw).strip()


def iter_blocks(parsed: Dict[str, Any], block_type: str) -> List[Tuple[str, Dict[str, Any]]]:
    """Collect ``(label, body)`` pairs for a labelled block type.

    Accepts both the HCL shape (a list of ``{label: body}`` dicts) and the
    JSON configuration shape (a single ``{label: body}`` dict, whose bodies
    may themselves be lists).
    """
    raw_blocks = parsed.get(block_type)
    if raw_blocks is None:
        return []
    if isinstance(raw_blocks, dict):
        raw_blocks = [raw_blocks]

    blocks = []
    for entry in raw_blocks:
        if not isinstance(entry, dict):
            raise ValueError(f"malformed {block_type} block: {entry!r}")
        for label, body in entry.items():
            if label in META_KEYS:
                continue
            bodies = body if isinstance(body, list) else [body]
            for item in bodies:
                if not isinstance(item, dict):
                    raise ValueError(f"malformed {block_type} block {label!r}")
                blocks.append((normalize_key(label), item))
    logger.debug(f"Found {len(blocks)} {block_type} blocks")
    return blocks
