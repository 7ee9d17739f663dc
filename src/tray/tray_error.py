"""Exception classes for Tray with character span information for caret diagnostics."""

from typing import Optional


class TrayError(Exception):
    """Base exception for Tray errors with detailed context information."""

    def __init__(
        self,
        message: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        received: Optional[str] = None,
        expected: Optional[str] = None,
        suggestion: Optional[str] = None,
        context: Optional[str] = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            start: Index of the first offending character in the source line
            end: Index one past the last offending character (exclusive)
            received: What was actually received
            expected: What was expected
            suggestion: Suggestion for fixing the error
            context: Additional context information
        """
        self.message = message
        self.start = start
        self.end = end
        self.received = received
        self.expected = expected
        self.suggestion = suggestion
        self.context = context

        super().__init__(self._format_detailed_message())

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.start is not None:
            parts.append(f"Position: {self.start}")

        if self.received:
            parts.append(f"Received: {self.received}")

        if self.expected:
            parts.append(f"Expected: {self.expected}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        return "\n".join(parts)

    def span(self, line: str) -> tuple[int, int]:
        """
        Get the half-open character span to underline in a line.

        Errors raised without position information underline the whole line.

        Args:
            line: The source line the error was raised for

        Returns:
            Tuple of (start, end) character indices
        """
        if self.start is None:
            return 0, max(len(line), 1)

        end = self.end if self.end is not None and self.end > self.start else self.start + 1
        return self.start, end

    def format_caret(self, line: str) -> str:
        """
        Format the error as a message, the source line and a caret underline.

        Args:
            line: The source line the error was raised for

        Returns:
            Three-line caret diagnostic
        """
        start, end = self.span(line)
        return f"{self.message}\n{line}\n{' ' * start}{'^' * (end - start)}"


class TrayLexError(TrayError):
    """Tokenization errors, always carrying a character span."""


class TrayIllegalCharacterError(TrayLexError):
    """A single character that cannot start any token."""

    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(
            message=f"Unrecognized character {character}",
            start=position,
            end=position + 1,
            received=f"Character: {character!r} (code {ord(character)})",
            expected="Digits, operators (+ - * /), parentheses, string or character literals"
        )


class TrayParsingError(TrayLexError):
    """A malformed literal or escape sequence."""

    def __init__(self, message: str, start: int, end: int, suggestion: Optional[str] = None):
        super().__init__(message=message, start=start, end=end, suggestion=suggestion)


class TrayParseError(TrayError):
    """Structural errors found while building the expression tree."""

    def __init__(
        self,
        message: str,
        token_index: Optional[int] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        received: Optional[str] = None,
        expected: Optional[str] = None,
        suggestion: Optional[str] = None
    ):
        self.token_index = token_index
        super().__init__(
            message=message,
            start=start,
            end=end,
            received=received,
            expected=expected,
            suggestion=suggestion
        )


class TrayEvalError(TrayError):
    """Evaluation errors: operand type mismatches and arithmetic failures."""
