"""Token types and token representation for Tray expressions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from tray.tray_value import format_float


class TrayTokenType(Enum):
    """Token types for Tray expressions."""
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    INT32 = "i32"
    INT64 = "i64"
    INT128 = "i128"
    FLOAT32 = "f32"
    FLOAT64 = "f64"
    STRING = "STRING"
    CHAR = "CHAR"
    LPAREN = "("
    RPAREN = ")"

    def is_number(self) -> bool:
        """Check if this token type is a numeric literal."""
        return self in NUMBER_TOKEN_TYPES

    def is_binary_operator(self) -> bool:
        """Check if this token type can join two operands."""
        return self in BINARY_OPERATOR_TOKEN_TYPES


NUMBER_TOKEN_TYPES = frozenset({
    TrayTokenType.INT32,
    TrayTokenType.INT64,
    TrayTokenType.INT128,
    TrayTokenType.FLOAT32,
    TrayTokenType.FLOAT64,
})

BINARY_OPERATOR_TOKEN_TYPES = frozenset({
    TrayTokenType.PLUS,
    TrayTokenType.MINUS,
    TrayTokenType.MULTIPLY,
    TrayTokenType.DIVIDE,
})

_TOKEN_NAMES = {
    TrayTokenType.PLUS: "Plus",
    TrayTokenType.MINUS: "Minus",
    TrayTokenType.MULTIPLY: "Multiply",
    TrayTokenType.DIVIDE: "Divide",
    TrayTokenType.LPAREN: "Left parenthesis",
    TrayTokenType.RPAREN: "Right parenthesis",
}


@dataclass(frozen=True)
class TrayToken:
    """
    Represents a single token in a Tray expression.

    Tokens carry no position; the lexer records spans separately.
    """
    type: TrayTokenType
    value: Any = None

    def __str__(self) -> str:
        if self.type in _TOKEN_NAMES:
            return _TOKEN_NAMES[self.type]

        if self.type == TrayTokenType.STRING:
            return f'"{self.value}"'

        if self.type == TrayTokenType.CHAR:
            return f"'{self.value}'"

        if self.type in (TrayTokenType.FLOAT32, TrayTokenType.FLOAT64):
            return f"{format_float(self.value, self.type == TrayTokenType.FLOAT32)}{self.type.value}"

        return f"{self.value}{self.type.value}"

    def __repr__(self) -> str:
        if self.value is None:
            return f"TrayToken({self.type.name})"

        return f"TrayToken({self.type.name}, {self.value!r})"


@dataclass(frozen=True)
class TraySpan:
    """Half-open range of character indices a token was read from."""
    start: int
    end: int

    @property
    def length(self) -> int:
        """Number of characters covered by the span."""
        return self.end - self.start
