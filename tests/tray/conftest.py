"""Shared fixtures and utilities for Tray tests."""

from typing import List

import pytest

from tray import Tray, TrayLexer, TrayParser, TrayToken, TrayExpression


@pytest.fixture
def tray():
    """Create a fresh Tray instance for each test."""
    return Tray()


@pytest.fixture
def lexer():
    """Create a fresh lexer for each test."""
    return TrayLexer()


class TrayTestHelpers:
    """Helper utilities for Tray testing."""

    @staticmethod
    def lex(line: str) -> List[TrayToken]:
        """Lex a line with a fresh lexer."""
        return TrayLexer().lex(line)

    @staticmethod
    def parse(line: str) -> TrayExpression:
        """Lex and parse a line that is expected to hold an expression."""
        lexer = TrayLexer()
        tokens = lexer.lex(line)
        expr = TrayParser(tokens, lexer.spans).parse()
        assert expr is not None, f"Expected an expression for {line!r}"
        return expr

    @staticmethod
    def assert_tree(line: str, expected: str) -> None:
        """Assert that a line parses to the expected s-expression rendering."""
        result = TrayTestHelpers.parse(line).describe()
        assert result == expected, f"Expected tree '{expected}', got '{result}'"

    @staticmethod
    def assert_evaluates_to(tray: Tray, line: str, expected: str) -> None:
        """Assert that a line evaluates to the expected formatted value."""
        result = tray.evaluate_and_format(line)
        assert result == expected, f"Expected '{expected}', got '{result}'"

    @staticmethod
    def caret_line(diagnostic: str) -> str:
        """Get the caret underline from a three-line diagnostic."""
        return diagnostic.split("\n")[2]


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return TrayTestHelpers
