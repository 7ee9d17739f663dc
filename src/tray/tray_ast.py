"""Tray AST Node hierarchy - the expression tree built for a single line.

Every node exclusively owns its children, so a tree is acyclic and finite.
Parenthesized sub-expressions are kept as explicit nodes: they are transparent
when evaluated, but they stop the parser from regrouping the operators they
contain.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from tray.tray_value import TrayNumber


class TrayUnaryOperator(Enum):
    """Prefix operators."""
    PLUS = "+"
    MINUS = "-"

    def describe(self) -> str:
        """Name used when rendering trees."""
        return "pos" if self is TrayUnaryOperator.PLUS else "neg"


class TrayBinaryOperator(Enum):
    """Infix operators."""
    PLUS = "+"
    MINUS = "-"
    DIVIDE = "/"
    MULTIPLY = "*"

    def priority(self) -> int:
        """
        Get the rank used when regrouping operator chains.

        The order is Minus < Plus < Divide < Multiply, which is deliberately not
        conventional arithmetic precedence.
        """
        return _PRIORITIES[self]


_PRIORITIES = {
    TrayBinaryOperator.MINUS: 0,
    TrayBinaryOperator.PLUS: 1,
    TrayBinaryOperator.DIVIDE: 2,
    TrayBinaryOperator.MULTIPLY: 3,
}


class TrayExpression(ABC):
    """Abstract base class for all expression tree nodes."""

    @abstractmethod
    def describe(self) -> str:
        """Render the node as a prefix s-expression."""

    def unwrap_content(self) -> "TrayExpression":
        """Strip any number of enclosing parentheses."""
        return self

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class TrayUnaryOperation(TrayExpression):
    """A prefix operator applied to one operand."""
    operator: TrayUnaryOperator
    operand: TrayExpression

    def describe(self) -> str:
        return f"({self.operator.describe()} {self.operand.describe()})"


@dataclass(frozen=True)
class TrayBinaryOperation(TrayExpression):
    """An infix operator applied to two operands."""
    operator: TrayBinaryOperator
    left: TrayExpression
    right: TrayExpression

    def describe(self) -> str:
        return f"({self.operator.value} {self.left.describe()} {self.right.describe()})"


@dataclass(frozen=True)
class TrayParenthesized(TrayExpression):
    """An expression written inside parentheses."""
    inner: TrayExpression

    def describe(self) -> str:
        return f"(paren {self.inner.describe()})"

    def unwrap_content(self) -> TrayExpression:
        return self.inner.unwrap_content()


@dataclass(frozen=True)
class TrayNumberLiteral(TrayExpression):
    """A numeric literal."""
    number: TrayNumber

    def describe(self) -> str:
        return self.number.describe()


@dataclass(frozen=True)
class TrayCharLiteral(TrayExpression):
    """A character literal."""
    value: str

    def describe(self) -> str:
        return f"'{self.value}'"


@dataclass(frozen=True)
class TrayStringLiteral(TrayExpression):
    """A string literal."""
    value: str

    def describe(self) -> str:
        return f'"{self.value}"'
