"""Evaluator for Tray expression trees with detailed error messages."""

import logging
import math

from tray.tray_ast import (
    TrayExpression, TrayUnaryOperation, TrayBinaryOperation, TrayParenthesized,
    TrayNumberLiteral, TrayCharLiteral, TrayStringLiteral, TrayUnaryOperator, TrayBinaryOperator
)
from tray.tray_error import TrayEvalError
from tray.tray_value import TrayValue, TrayNumber, TrayChar, TrayString, TrayInt128, TrayFloat64


class TrayEvaluator:
    """
    Evaluates Tray expression trees.

    Binary operations promote their operands: if either one is a floating
    point kind both are widened to Float64, otherwise both are widened to
    Int128.  Unary operations keep the operand's kind.
    """

    def __init__(self, max_depth: int = 1000):
        """
        Initialize evaluator.

        Args:
            max_depth: Maximum recursion depth
        """
        self.max_depth = max_depth
        self._logger = logging.getLogger("TrayEvaluator")

    def evaluate(self, expr: TrayExpression) -> TrayValue:
        """
        Evaluate an expression tree.

        Args:
            expr: Expression to evaluate

        Returns:
            Evaluation result as a TrayValue

        Raises:
            TrayEvalError: If evaluation fails
        """
        try:
            result = self._evaluate_expression(expr, 0)

        except TrayEvalError:
            raise

        except Exception as e:
            raise TrayEvalError(
                message=f"Unexpected error during evaluation: {e}",
                suggestion="This is an internal error - please report this issue"
            ) from e

        self._logger.debug("evaluated %s to %s", expr.describe(), result.describe())
        return result

    def _evaluate_expression(self, expr: TrayExpression, depth: int) -> TrayValue:
        """Internal expression evaluation with type dispatch."""
        if depth > self.max_depth:
            raise TrayEvalError(
                message=f"Expression too deeply nested (max depth: {self.max_depth})",
                suggestion="Reduce nesting depth or increase max_depth limit"
            )

        if isinstance(expr, TrayNumberLiteral):
            return expr.number

        if isinstance(expr, TrayCharLiteral):
            return TrayChar(expr.value)

        if isinstance(expr, TrayStringLiteral):
            return TrayString(expr.value)

        if isinstance(expr, TrayParenthesized):
            return self._evaluate_expression(expr.inner, depth + 1)

        if isinstance(expr, TrayUnaryOperation):
            operand = self._evaluate_expression(expr.operand, depth + 1)
            return self._apply_unary(expr.operator, operand)

        if isinstance(expr, TrayBinaryOperation):
            left = self._evaluate_expression(expr.left, depth + 1)
            right = self._evaluate_expression(expr.right, depth + 1)
            return self._apply_binary(expr.operator, left, right)

        raise TrayEvalError(
            message=f"Cannot evaluate expression of type {type(expr).__name__}",
            suggestion="This is an internal error - please report this issue"
        )

    def _apply_unary(self, operator: TrayUnaryOperator, operand: TrayValue) -> TrayValue:
        """Apply a prefix operator; the result keeps the operand's kind."""
        if not isinstance(operand, TrayNumber):
            raise TrayEvalError(
                message=f"Unary '{operator.value}' requires a number, got {operand.type_name()}",
                received=f"Operand: {operand.describe()}",
                expected="A numeric operand"
            )

        if operator is TrayUnaryOperator.PLUS:
            return operand

        return operand.negate()

    def _apply_binary(self, operator: TrayBinaryOperator, left: TrayValue, right: TrayValue) -> TrayValue:
        """Apply an infix operator after promoting both operands to a common kind."""
        if not isinstance(left, TrayNumber) or not isinstance(right, TrayNumber):
            raise TrayEvalError(
                message=f"Binary '{operator.value}' requires numbers, "
                    f"got {left.type_name()} and {right.type_name()}",
                received=f"Operands: {left.describe()} and {right.describe()}",
                expected="Numeric operands"
            )

        if left.is_float() or right.is_float():
            return TrayFloat64(self._float_operation(operator, left.as_f64(), right.as_f64()))

        return TrayInt128.checked(self._integer_operation(operator, left.as_i128(), right.as_i128()))

    def _float_operation(self, operator: TrayBinaryOperator, a: float, b: float) -> float:
        """Apply an operator with IEEE 754 double precision semantics."""
        if operator is TrayBinaryOperator.PLUS:
            return a + b

        if operator is TrayBinaryOperator.MINUS:
            return a - b

        if operator is TrayBinaryOperator.MULTIPLY:
            return a * b

        if b == 0.0:
            if a == 0.0 or math.isnan(a):
                return math.nan

            return math.copysign(math.inf, a) * math.copysign(1.0, b)

        return a / b

    def _integer_operation(self, operator: TrayBinaryOperator, a: int, b: int) -> int:
        """Apply an operator with integer semantics; division truncates toward zero."""
        if operator is TrayBinaryOperator.PLUS:
            return a + b

        if operator is TrayBinaryOperator.MINUS:
            return a - b

        if operator is TrayBinaryOperator.MULTIPLY:
            return a * b

        if b == 0:
            raise TrayEvalError(
                message="Division by zero",
                received=f"Dividend: {a}, divisor: 0",
                suggestion="Integer division needs a non-zero divisor, use a float operand to get inf"
            )

        quotient = abs(a) // abs(b)
        return quotient if (a < 0) == (b < 0) else -quotient
