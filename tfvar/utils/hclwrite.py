"""
HCL literal writer.

Renders literal values as HCL tokens and lays them out the way Terraform's
canonical formatter does: two spaces of indentation per open bracket line,
single spaces between tokens, no spaces inside list brackets, and ``=``
aligned across runs of consecutive single-line attributes.

The document model (``HCLFile`` / ``Body``) keeps attributes and raw
tokens (comments, blank lines) in order and is formatted once when written.

python-hcl2 ships a reverse writer, but its output is not usable here: it
emits strings unquoted (``instance_name = my-instance``), does not align
``=`` and has no place for comments.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, TextIO, Union

from ..domain.constants import is_valid_identifier


class TokenType(Enum):
    IDENT = "ident"
    NUMBER = "number"
    STRING = "string"
    EQUAL = "="
    COMMA = ","
    OBRACK = "["
    CBRACK = "]"
    OBRACE = "{"
    CBRACE = "}"
    NEWLINE = "newline"
    COMMENT = "comment"


@dataclass
class Token:
    type: TokenType
    text: str
    spaces_before: int = 0


Tokens = List[Token]

_OPENING = (TokenType.OBRACK, TokenType.OBRACE)
_CLOSING = (TokenType.CBRACK, TokenType.CBRACE)

SPACES_PER_INDENT = 2


def tokens_to_string(tokens: Tokens) -> str:
    """Concatenate tokens, honouring their leading spaces."""
    return "".join(" " * token.spaces_before + token.text for token in tokens)


def comment_tokens(text: str) -> Tokens:
    """Wrap raw comment text in a single comment token."""
    return [Token(TokenType.COMMENT, text)]


def newline_tokens() -> Tokens:
    return [Token(TokenType.NEWLINE, "\n")]


def escape_string(value: str) -> str:
    """Escape a string for use inside an HCL quoted literal."""
    out = []
    length = len(value)
    for i, ch in enumerate(value):
        if ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\\":
            out.append("\\\\")
        elif ch in "$%":
            out.append(ch)
            # Double up the template introducer so it stays literal
            if i + 1 < length and value[i + 1] == "{":
                out.append(ch)
        elif not ch.isprintable():
            code = ord(ch)
            out.append(f"\\u{code:04x}" if code < 0x10000 else f"\\U{code:08x}")
        else:
            out.append(ch)
    return "".join(out)


def format_number(value: Union[int, float]) -> str:
    """Format a number in positional notation, without a trailing ``.0``."""
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot represent {value!r} as an HCL number")
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def tokens_for_value(value: Any) -> Tokens:
    """Render a literal value as formatted HCL tokens.

    Args:
        value: None, bool, int, float, str, list/tuple or dict

    Returns:
        Tokens with canonical spacing applied

    Raises:
        TypeError: If the value (or a nested element) is not a literal type
    """
    tokens = _append_tokens_for_value(value, [])
    format_tokens(tokens)
    return tokens


def _append_tokens_for_value(value: Any, tokens: Tokens) -> Tokens:
    if value is None:
        tokens.append(Token(TokenType.IDENT, "null"))
    elif isinstance(value, bool):
        tokens.append(Token(TokenType.IDENT, "true" if value else "false"))
    elif isinstance(value, (int, float)):
        tokens.append(Token(TokenType.NUMBER, format_number(value)))
    elif isinstance(value, str):
        tokens.append(Token(TokenType.STRING, f'"{escape_string(value)}"'))
    elif isinstance(value, (list, tuple)):
        tokens.append(Token(TokenType.OBRACK, "["))
        for index, element in enumerate(value):
            if index > 0:
                tokens.append(Token(TokenType.COMMA, ","))
            _append_tokens_for_value(element, tokens)
        tokens.append(Token(TokenType.CBRACK, "]"))
    elif isinstance(value, dict):
        tokens.append(Token(TokenType.OBRACE, "{"))
        if value:
            tokens.append(Token(TokenType.NEWLINE, "\n"))
        for key in sorted(value, key=str):
            name = str(key)
            if is_valid_identifier(name):
                tokens.append(Token(TokenType.IDENT, name))
            else:
                tokens.append(Token(TokenType.STRING, f'"{escape_string(name)}"'))
            tokens.append(Token(TokenType.EQUAL, "="))
            _append_tokens_for_value(value[key], tokens)
            tokens.append(Token(TokenType.NEWLINE, "\n"))
        tokens.append(Token(TokenType.CBRACE, "}"))
    else:
        raise TypeError(f"Unsupported value type for HCL literal: {type(value).__name__}")
    return tokens


# Formatting


@dataclass
class _FormatLine:
    lead: Tokens
    assign: Optional[Tokens] = None


def _ends_line(token: Token) -> bool:
    # Comments consume their terminating newline
    if token.type is TokenType.NEWLINE:
        return True
    return token.type is TokenType.COMMENT and token.text.endswith("\n")


def _bracket_change(token: Token) -> int:
    if token.type in _OPENING:
        return 1
    if token.type in _CLOSING:
        return -1
    return 0


def _columns(tokens: Tokens) -> int:
    return sum(token.spaces_before + len(token.text) for token in tokens)


def _lines_for_format(tokens: Tokens) -> List[_FormatLine]:
    lines = []
    current: Tokens = []
    for token in tokens:
        current.append(token)
        if _ends_line(token):
            lines.append(_FormatLine(lead=current))
            current = []
    if current:
        lines.append(_FormatLine(lead=current))

    # Split off the "= value" cell when the value is a whole expression
    for line in lines:
        for index, token in enumerate(line.lead):
            if index > 0 and token.type is TokenType.EQUAL:
                net_brackets = sum(_bracket_change(t) for t in line.lead[index:])
                if net_brackets == 0:
                    line.assign = line.lead[index:]
                    line.lead = line.lead[:index]
                break
    return lines


def _format_indent(lines: List[_FormatLine]) -> None:
    indents: List[int] = []
    for line in lines:
        if not line.lead:
            continue
        if line.lead[0].type is TokenType.NEWLINE:
            line.lead[0].spaces_before = 0
            continue

        net_brackets = sum(_bracket_change(t) for t in line.lead)
        net_brackets += sum(_bracket_change(t) for t in line.assign or [])

        if net_brackets > 0:
            line.lead[0].spaces_before = SPACES_PER_INDENT * len(indents)
            indents.append(net_brackets)
        elif net_brackets < 0:
            closed = -net_brackets
            while closed > 0 and indents:
                if closed > indents[-1]:
                    closed -= indents.pop()
                elif closed < indents[-1]:
                    indents[-1] -= closed
                    closed = 0
                else:
                    indents.pop()
                    closed = 0
            line.lead[0].spaces_before = SPACES_PER_INDENT * len(indents)
        else:
            line.lead[0].spaces_before = SPACES_PER_INDENT * len(indents)


def _space_after(subject: Token, after: Optional[Token]) -> bool:
    if after is None or after.type is TokenType.NEWLINE:
        return False
    if after.type is TokenType.COMMA:
        return False
    if subject.type is TokenType.OBRACE or after.type is TokenType.CBRACE:
        # foo = {} rather than foo = { }
        return not (subject.type is TokenType.OBRACE and after.type is TokenType.CBRACE)
    if subject.type is TokenType.OBRACK or after.type is TokenType.CBRACK:
        return False
    return True


def _format_cell_spaces(cell: Tokens) -> None:
    for index, token in enumerate(cell[:-1]):
        after = cell[index + 1]
        after.spaces_before = 1 if _space_after(token, after) else 0


def _format_spaces(lines: List[_FormatLine]) -> None:
    for line in lines:
        _format_cell_spaces(line.lead)
        if line.assign:
            _format_cell_spaces(line.assign)


def _format_cells(lines: List[_FormatLine]) -> None:
    chain_start: Optional[int] = None
    max_columns = 0

    def close_chain(end: int) -> None:
        for chain_line in lines[chain_start:end]:
            chain_line.assign[0].spaces_before = max_columns - _columns(chain_line.lead) + 1

    for index, line in enumerate(lines):
        if line.assign is None:
            if chain_start is not None:
                close_chain(index)
                chain_start = None
                max_columns = 0
        else:
            if chain_start is None:
                chain_start = index
            max_columns = max(max_columns, _columns(line.lead))

    if chain_start is not None:
        close_chain(len(lines))


def format_tokens(tokens: Tokens) -> Tokens:
    """Apply canonical spacing to tokens in place and return them."""
    lines = _lines_for_format(tokens)
    _format_indent(lines)
    _format_spaces(lines)
    _format_cells(lines)
    return tokens


# Document model


class Attribute:
    """A ``name = expression`` line in a body."""

    def __init__(self, name: str, expr: Tokens):
        self.name = name
        self.expr = expr

    def build_tokens(self) -> Tokens:
        tokens = [Token(TokenType.IDENT, self.name), Token(TokenType.EQUAL, "=")]
        tokens.extend(Token(t.type, t.text) for t in self.expr)
        tokens.append(Token(TokenType.NEWLINE, "\n"))
        return tokens


class Body:
    """Ordered sequence of attributes and unstructured tokens."""

    def __init__(self):
        self._items: List[Union[Attribute, Tokens]] = []

    def append_unstructured_tokens(self, tokens: Tokens) -> None:
        self._items.append(list(tokens))

    def get_attribute(self, name: str) -> Optional[Attribute]:
        for item in self._items:
            if isinstance(item, Attribute) and item.name == name:
                return item
        return None

    def set_attribute_value(self, name: str, value: Any) -> Attribute:
        """Set an attribute to a literal value, replacing an existing one in place."""
        expr = tokens_for_value(value)
        attribute = self.get_attribute(name)
        if attribute is not None:
            attribute.expr = expr
            return attribute
        attribute = Attribute(name, expr)
        self._items.append(attribute)
        return attribute

    def build_tokens(self) -> Tokens:
        tokens: Tokens = []
        for item in self._items:
            if isinstance(item, Attribute):
                tokens.extend(item.build_tokens())
            else:
                tokens.extend(Token(t.type, t.text) for t in item)
        return tokens


class HCLFile:
    """In-memory HCL document built from a root body."""

    def __init__(self):
        self._body = Body()

    @property
    def body(self) -> Body:
        return self._body

    def build_tokens(self) -> Tokens:
        return format_tokens(self._body.build_tokens())

    def to_string(self) -> str:
        return tokens_to_string(self.build_tokens())

    def write_to(self, stream: TextIO) -> int:
        """Write the formatted document to a text stream.

        Returns:
            Number of characters written
        """
        text = self.to_string()
        stream.write(text)
        return len(text)
