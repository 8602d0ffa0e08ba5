"""
Evaluation of constant HCL expressions.

Terraform evaluates a variable default without any variables or functions in
scope, so operators over literals are allowed (``1 + 1``, ``-5``,
``!false``, ``3 > 2 ? 1 : 0``) while references are not. This module covers
number, bool and null operands with the arithmetic, comparison, logical and
conditional operators. Anything else (references, function calls,
collections built from ``for`` expressions, templates) raises
``ExpressionError``.
"""

import re
from typing import Any, List, Optional, Tuple

NUMBER_PATTERN = re.compile(r"^\d+(?:\.\d+)?(?:[eE][+-]?\d+)?$")

TOKEN_PATTERN = re.compile(
    r"""\s*(?:
        (?P<number>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
      | (?P<ident>[^\W\d][\w-]*)
      | (?P<op>\|\||&&|==|!=|<=|>=|[-+*/%<>!?:()])
    )""",
    re.VERBOSE,
)

# An identifier directly followed by an attribute, index or call
REFERENCE_PATTERN = re.compile(r"[^\W\d][\w-]*[.\[(]")

KEYWORDS = {"null": None, "true": True, "false": False}

# Binary operators, loosest binding first
BINARY_PRECEDENCE = (
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", ">", "<=", ">="),
    ("+", "-"),
    ("*", "/", "%"),
)


class ExpressionError(ValueError):
    """Raised when an expression is not a constant this module can evaluate."""


def parse_number(text: str) -> Any:
    """Convert an HCL number literal to int, or float when it has a fraction or exponent."""
    if not NUMBER_PATTERN.match(text):
        raise ExpressionError(f"invalid number literal: {text}")
    if text.isdigit():
        return int(text)
    return float(text)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _tokenize(source: str) -> List[Tuple[str, str]]:
    tokens = []
    position = 0
    while position < len(source):
        if source[position:].strip() == "":
            break
        match = TOKEN_PATTERN.match(source, position)
        if match is None:
            if REFERENCE_PATTERN.search(source):
                raise ExpressionError(f"variables and function calls are not allowed here: {source}")
            raise ExpressionError(
                f"only literal values and constant operators are allowed here: {source}"
            )
        kind = match.lastgroup
        tokens.append((kind, match.group(kind)))
        position = match.end()
    return tokens


class _Evaluator:
    """Precedence-climbing evaluator over a token list."""

    def __init__(self, source: str):
        self.source = source
        self.tokens = _tokenize(source)
        self.index = 0

    def evaluate(self) -> Any:
        value = self._conditional()
        if self._peek() is not None:
            raise ExpressionError(f"unexpected {self._peek()[1]!r} in expression: {self.source}")
        return value

    def _peek(self) -> Optional[Tuple[str, str]]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _accept(self, *ops: str) -> Optional[str]:
        token = self._peek()
        if token is not None and token[0] == "op" and token[1] in ops:
            self.index += 1
            return token[1]
        return None

    def _expect(self, op: str) -> None:
        if self._accept(op) is None:
            raise ExpressionError(f"expected {op!r} in expression: {self.source}")

    def _conditional(self) -> Any:
        condition = self._binary(0)
        if self._accept("?") is None:
            return condition
        when_true = self._conditional()
        self._expect(":")
        when_false = self._conditional()
        if not isinstance(condition, bool):
            raise ExpressionError(f"condition must be a bool: {self.source}")
        return when_true if condition else when_false

    def _binary(self, level: int) -> Any:
        if level == len(BINARY_PRECEDENCE):
            return self._unary()
        left = self._binary(level + 1)
        while True:
            op = self._accept(*BINARY_PRECEDENCE[level])
            if op is None:
                return left
            right = self._binary(level + 1)
            left = self._apply_binop(op, left, right)

    def _unary(self) -> Any:
        op = self._accept("-", "!")
        if op is None:
            return self._operand()
        operand = self._unary()
        if op == "-":
            if not _is_number(operand):
                raise ExpressionError(f"unary - needs a number: {self.source}")
            return -operand
        if not isinstance(operand, bool):
            raise ExpressionError(f"! needs a bool: {self.source}")
        return not operand

    def _operand(self) -> Any:
        token = self._peek()
        if token is None:
            raise ExpressionError(f"incomplete expression: {self.source}")
        kind, text = token
        if kind == "op" and text == "(":
            self.index += 1
            value = self._conditional()
            self._expect(")")
            return value
        self.index += 1
        if kind == "number":
            return parse_number(text)
        if kind == "ident" and text in KEYWORDS:
            return KEYWORDS[text]
        if kind == "ident":
            raise ExpressionError(f"variables and function calls are not allowed here: {self.source}")
        raise ExpressionError(f"unexpected {text!r} in expression: {self.source}")

    def _apply_binop(self, op: str, left: Any, right: Any) -> Any:
        if op in ("==", "!="):
            equal = left == right and _is_number(left) == _is_number(right)
            return equal if op == "==" else not equal

        if op in ("&&", "||"):
            if not (isinstance(left, bool) and isinstance(right, bool)):
                raise ExpressionError(f"{op} needs bool operands: {self.source}")
            return (left and right) if op == "&&" else (left or right)

        if not (_is_number(left) and _is_number(right)):
            raise ExpressionError(f"{op} needs number operands: {self.source}")

        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            if right == 0:
                raise ExpressionError(f"division by zero: {self.source}")
            if isinstance(left, int) and isinstance(right, int) and left % right == 0:
                return left // right
            return left / right
        if op == "%":
            if right == 0:
                raise ExpressionError(f"modulo by zero: {self.source}")
            # Remainder takes the sign of the dividend
            remainder = abs(left) % abs(right)
            return remainder if left >= 0 else -remainder
        if op == "<":
            return left < right
        if op == ">":
            return left > right
        if op == "<=":
            return left <= right
        if op == ">=":
            return left >= right

        raise ExpressionError(f"unsupported operator {op!r}: {self.source}")


def evaluate_constant(source: str) -> Any:
    """
    Evaluate the source text of a constant expression.

    Args:
        source: Expression text, e.g. ``1e3`` or ``2 * (3 + 4)``

    Returns:
        None, bool, int or float

    Raises:
        ExpressionError: If the expression needs anything beyond literals and operators
    """
    return _Evaluator(source).evaluate()
