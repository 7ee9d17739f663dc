"""Parser for Tray expressions with detailed error messages."""

import logging
from typing import List, Optional, Tuple

from tray.tray_ast import (
    TrayExpression, TrayUnaryOperation, TrayBinaryOperation, TrayParenthesized,
    TrayNumberLiteral, TrayCharLiteral, TrayStringLiteral, TrayUnaryOperator, TrayBinaryOperator
)
from tray.tray_error import TrayParseError
from tray.tray_token import TrayToken, TrayTokenType, TraySpan
from tray.tray_value import TrayNumber, TrayInt32, TrayInt64, TrayInt128, TrayFloat32, TrayFloat64


BINARY_OPERATORS = {
    TrayTokenType.PLUS: TrayBinaryOperator.PLUS,
    TrayTokenType.MINUS: TrayBinaryOperator.MINUS,
    TrayTokenType.MULTIPLY: TrayBinaryOperator.MULTIPLY,
    TrayTokenType.DIVIDE: TrayBinaryOperator.DIVIDE,
}

UNARY_OPERATORS = {
    TrayTokenType.PLUS: TrayUnaryOperator.PLUS,
    TrayTokenType.MINUS: TrayUnaryOperator.MINUS,
}

NUMBER_TYPES = {
    TrayTokenType.INT32: TrayInt32,
    TrayTokenType.INT64: TrayInt64,
    TrayTokenType.INT128: TrayInt128,
    TrayTokenType.FLOAT32: TrayFloat32,
    TrayTokenType.FLOAT64: TrayFloat64,
}

# Tree depth never exceeds the token count, so this also bounds recursion in tree walks
MAX_LINE_TOKENS = 1000


class TrayParser:
    """
    Parses a token sequence into a single expression tree.

    Operator chains group from the right.  When a new operator meets an
    already built right-hand binary operation, their priorities decide
    whether the right-hand side is nested as-is or rotated one level so that
    the new operator binds to the inner left operand.
    """

    def __init__(
        self,
        tokens: List[TrayToken],
        spans: Optional[List[TraySpan]] = None,
        max_depth: int = 200,
        max_tokens: int = MAX_LINE_TOKENS
    ):
        """
        Initialize parser with tokens.

        Args:
            tokens: List of tokens to parse
            spans: Optional character spans of the tokens, used for error positions
            max_depth: Maximum nesting depth of parentheses and prefix operators
            max_tokens: Maximum number of tokens in one line
        """
        self.tokens = tokens
        self.spans = spans
        self.max_depth = max_depth
        self.max_tokens = max_tokens
        self.pos = 0
        self.depth = 0
        self._logger = logging.getLogger("TrayParser")

    def parse(self) -> Optional[TrayExpression]:
        """
        Parse the tokens into an expression tree.

        Returns:
            The expression tree, or None if there were no tokens

        Raises:
            TrayParseError: If the tokens do not form exactly one expression
        """
        if not self.tokens:
            return None

        if len(self.tokens) > self.max_tokens:
            raise self._error(
                f"Line too long: {len(self.tokens)} tokens (max: {self.max_tokens})",
                self.max_tokens,
                suggestion="Split the expression into smaller lines"
            )

        expr = self._parse_expression()

        if self.pos < len(self.tokens):
            raise self._error(
                f"Unexpected token after complete expression: {self.tokens[self.pos]}",
                self.pos,
                expected="End of line",
                suggestion="Join the expressions with an operator or remove the extra tokens"
            )

        self._logger.debug("parsed tree %s", expr.describe())
        return expr

    def _parse_expression(self) -> TrayExpression:
        """
        Parse `operand (binop operand)*` up to ')' or the end of the line.

        Operands of a chain are collected left to right and then combined from
        the right, so long chains do not recurse.  Only parentheses and prefix
        operators applied to sub-expressions count towards the nesting depth.
        """
        if self._current() is None:
            raise self._error(
                "Expected an operand but found end of line",
                self.pos,
                expected="Number, string, character, '(', '+' or '-'"
            )

        self.depth += 1
        if self.depth > self.max_depth:
            raise self._error(
                f"Expression too deeply nested (max depth: {self.max_depth})",
                self.pos,
                suggestion="Split the expression into smaller lines"
            )

        try:
            operands: List[TrayExpression] = []
            operators: List[Tuple[TrayBinaryOperator, int]] = []

            while True:
                operand, ends_chain = self._parse_operand()
                operands.append(operand)
                if ends_chain:
                    break

                token = self._current()
                if token is None or token.type == TrayTokenType.RPAREN:
                    break

                if not token.type.is_binary_operator():
                    raise self._error(
                        f"Unexpected token: {token}",
                        self.pos,
                        received=f"Token: {token}",
                        expected="An operator (+ - * /), ')' or end of line",
                        suggestion="Join the operands with an operator"
                    )

                operator = BINARY_OPERATORS[token.type]
                operators.append((operator, self.pos))
                self._advance()

                if self._current() is None:
                    raise self._error(
                        f"Expected an operand after '{operator.value}'",
                        self.pos - 1,
                        expected="Number or expression"
                    )

            expr = operands[-1]
            for index in range(len(operators) - 1, -1, -1):
                operator, operator_index = operators[index]
                expr = self._combine(operands[index], operator, operator_index, expr)

            return expr

        finally:
            self.depth -= 1

    def _parse_operand(self) -> Tuple[TrayExpression, bool]:
        """
        Parse one operand of an operator chain.

        Returns:
            Tuple of (operand, True if the operand consumed the rest of the chain)
        """
        token = self._current()
        if token is None:
            raise self._error(
                "Expected an operand but found end of line",
                self.pos,
                expected="Number, string, character, '(', '+' or '-'"
            )

        if token.type in UNARY_OPERATORS:
            self._advance()
            return self._parse_unary(UNARY_OPERATORS[token.type])

        if token.type.is_number():
            self._advance()
            return TrayNumberLiteral(self._make_number(token)), False

        if token.type == TrayTokenType.STRING:
            self._advance()
            return TrayStringLiteral(token.value), False

        if token.type == TrayTokenType.CHAR:
            self._advance()
            return TrayCharLiteral(token.value), False

        if token.type == TrayTokenType.LPAREN:
            return self._parse_parenthesized(), False

        raise self._error(
            f"Unexpected token: {token}",
            self.pos,
            received=f"Token: {token}",
            expected="Number, string, character, '(', '+' or '-'",
            suggestion=f"'{token.type.value}' cannot start an expression"
        )

    def _parse_parenthesized(self) -> TrayExpression:
        """Parse `'(' expr ')'`."""
        open_index = self.pos
        self._advance()  # consume '('

        if self._current() is None:
            raise self._unclosed_error(open_index)

        inner = self._parse_expression()

        token = self._current()
        if token is None:
            raise self._unclosed_error(open_index)

        if token.type != TrayTokenType.RPAREN:
            raise self._error(
                f"Unexpected token: {token}",
                self.pos,
                received=f"Token: {token}",
                expected="')' to close the parenthesis",
                suggestion="Join the expressions with an operator"
            )

        self._advance()  # consume ')'
        return TrayParenthesized(inner)

    def _parse_unary(self, operator: TrayUnaryOperator) -> Tuple[TrayExpression, bool]:
        """
        Parse the operand of a prefix operator.

        A numeric literal operand binds directly, so a following binary
        operator takes the whole unary operation as its left operand.  Any
        other operand is a complete sub-expression that ends the chain.
        """
        operator_index = self.pos - 1
        token = self._current()
        if token is None:
            raise self._error(
                f"Expected an operand after unary '{operator.value}'",
                operator_index,
                expected="Number or expression"
            )

        if token.type.is_number():
            self._advance()
            return TrayUnaryOperation(operator, TrayNumberLiteral(self._make_number(token))), False

        operand = self._parse_expression()

        if isinstance(operand.unwrap_content(), (TrayStringLiteral, TrayCharLiteral)):
            raise self._error(
                f"Unary '{operator.value}' cannot be applied to {self._literal_kind(operand)} literal",
                operator_index,
                received=f"Operand: {operand.describe()}",
                expected="Numeric operand"
            )

        return TrayUnaryOperation(operator, operand), True

    def _combine(
        self,
        left: TrayExpression,
        operator: TrayBinaryOperator,
        operator_index: int,
        right: TrayExpression
    ) -> TrayExpression:
        """
        Combine a left operand and operator with the right-hand expression.

        If the right-hand expression is itself a binary operation that binds
        less tightly, the tree is rotated once so the new operator takes the
        inner left operand.  The rotation does not look any deeper.
        """
        for operand in (left, right):
            if isinstance(operand.unwrap_content(), (TrayStringLiteral, TrayCharLiteral)):
                raise self._error(
                    f"Binary '{operator.value}' cannot be applied to {self._literal_kind(operand)} literal",
                    operator_index,
                    received=f"Operand: {operand.describe()}",
                    expected="Numeric operands"
                )

        if isinstance(right, TrayBinaryOperation) and operator.priority() > right.operator.priority():
            return TrayBinaryOperation(
                right.operator,
                TrayBinaryOperation(operator, left, right.left),
                right.right
            )

        return TrayBinaryOperation(operator, left, right)

    def _make_number(self, token: TrayToken) -> TrayNumber:
        """Convert a numeric token to its number value."""
        return NUMBER_TYPES[token.type](token.value)

    def _literal_kind(self, expr: TrayExpression) -> str:
        """Describe the literal kind of a string or character operand."""
        return "a string" if isinstance(expr.unwrap_content(), TrayStringLiteral) else "a character"

    def _unclosed_error(self, open_index: int) -> TrayParseError:
        """Create the error for a '(' that is never closed."""
        return self._error(
            "Unclosed parenthesis",
            open_index,
            expected="')' before the end of line",
            suggestion="Add a closing ')'"
        )

    def _error(
        self,
        message: str,
        index: int,
        received: Optional[str] = None,
        expected: Optional[str] = None,
        suggestion: Optional[str] = None
    ) -> TrayParseError:
        """Create a parse error located at a token index, with its span when known."""
        start: Optional[int] = None
        end: Optional[int] = None
        if self.spans is not None:
            if index < len(self.spans):
                start, end = self.spans[index].start, self.spans[index].end

            elif self.spans:
                start = self.spans[-1].end
                end = start + 1

            else:
                start, end = 0, 1

        return TrayParseError(
            message=message,
            token_index=index,
            start=start,
            end=end,
            received=received,
            expected=expected,
            suggestion=suggestion
        )

    def _current(self) -> Optional[TrayToken]:
        """Get the current token, or None at end of input."""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]

        return None

    def _advance(self) -> None:
        """Move to the next token."""
        self.pos += 1
