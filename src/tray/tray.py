"""Main Tray class: evaluates single lines of arithmetic source text."""

from dataclasses import dataclass, field
import logging
from typing import List, Optional

from tray.tray_ast import TrayExpression
from tray.tray_error import TrayError
from tray.tray_evaluator import TrayEvaluator
from tray.tray_lexer import TrayLexer
from tray.tray_parser import TrayParser
from tray.tray_settings import TraySettings
from tray.tray_token import TrayToken
from tray.tray_trace import TrayTraceEvent, TrayTraceStage, TrayTraceWatcher
from tray.tray_value import TrayValue


@dataclass
class TrayLineResult:
    """Outcome of processing one line: either a value or an error, never both."""
    line: str
    tokens: List[TrayToken] = field(default_factory=list)
    expression: Optional[TrayExpression] = None
    value: Optional[TrayValue] = None
    error: Optional[TrayError] = None

    @property
    def ok(self) -> bool:
        """True if the line was processed without error."""
        return self.error is None

    def format(self) -> str:
        """
        Format the outcome for display.

        Returns:
            The caret diagnostic for a failed line, the formatted value for a
            successful one, or an empty string for a blank line
        """
        if self.error is not None:
            return self.error.format_caret(self.line)

        if self.value is None:
            return ""

        return self.value.describe()


class Tray:
    """
    Tray calculator for lines of arithmetic over numbers, characters and strings.

    Every line runs through a fresh lexer, parser and evaluator, so nothing is
    remembered between lines.
    """

    def __init__(self, settings: Optional[TraySettings] = None):
        """
        Initialize Tray.

        Args:
            settings: Settings controlling nesting limits, defaults if omitted
        """
        self.settings = settings if settings is not None else TraySettings.create_default()
        self._watchers: List[TrayTraceWatcher] = []
        self._logger = logging.getLogger("Tray")

    def add_trace_watcher(self, watcher: TrayTraceWatcher) -> None:
        """Register a watcher that receives the stage events of each processed line."""
        self._watchers.append(watcher)

    def remove_trace_watcher(self, watcher: TrayTraceWatcher) -> None:
        """Stop sending trace events to a watcher."""
        self._watchers.remove(watcher)

    def tokenize(self, line: str) -> List[TrayToken]:
        """
        Tokenize a line.

        Raises:
            TrayLexError: If tokenization fails
        """
        return TrayLexer().lex(line)

    def parse(self, line: str) -> Optional[TrayExpression]:
        """
        Tokenize and parse a line.

        Returns:
            The expression tree, or None for a line with no tokens

        Raises:
            TrayLexError: If tokenization fails
            TrayParseError: If parsing fails
        """
        lexer = TrayLexer()
        tokens = lexer.lex(line)
        return TrayParser(tokens, lexer.spans, self.settings.parser_max_depth).parse()

    def evaluate(self, line: str) -> Optional[TrayValue]:
        """
        Evaluate a line.

        Args:
            line: Source line to evaluate

        Returns:
            The result, or None for a line with no tokens

        Raises:
            TrayLexError: If tokenization fails
            TrayParseError: If parsing fails
            TrayEvalError: If evaluation fails
        """
        expression = self.parse(line)
        if expression is None:
            return None

        return TrayEvaluator(self.settings.evaluator_max_depth).evaluate(expression)

    def evaluate_and_format(self, line: str) -> str:
        """
        Evaluate a line and format the result.

        Returns:
            The formatted result, or an empty string for a line with no tokens

        Raises:
            TrayLexError: If tokenization fails
            TrayParseError: If parsing fails
            TrayEvalError: If evaluation fails
        """
        value = self.evaluate(line)
        return value.describe() if value is not None else ""

    def process_line(self, line: str) -> TrayLineResult:
        """
        Run a line through the whole pipeline without raising Tray errors.

        Args:
            line: Source line to process

        Returns:
            The line's outcome, holding the error if any stage failed
        """
        result = TrayLineResult(line)

        try:
            lexer = TrayLexer()
            result.tokens = lexer.lex(line)
            self._trace(TrayTraceStage.TOKENS, line, " ".join(str(token) for token in result.tokens))

            result.expression = TrayParser(result.tokens, lexer.spans, self.settings.parser_max_depth).parse()
            if result.expression is None:
                return result

            self._trace(TrayTraceStage.TREE, line, result.expression.describe())

            result.value = TrayEvaluator(self.settings.evaluator_max_depth).evaluate(result.expression)
            self._trace(TrayTraceStage.RESULT, line, result.value.describe())

        except TrayError as e:
            self._logger.warning("Failed to process line %r: %s", line, e.message)
            result.error = e
            self._trace(TrayTraceStage.ERROR, line, e.message, e)

        return result

    def format_error(self, error: TrayError, line: str) -> str:
        """Format an error raised for a line as a caret diagnostic."""
        return error.format_caret(line)

    def _trace(self, stage: TrayTraceStage, line: str, text: str, error: Optional[TrayError] = None) -> None:
        """Send a stage event to every watcher."""
        if not self._watchers:
            return

        event = TrayTraceEvent(stage, line, text, error)
        for watcher in self._watchers:
            watcher.on_trace(event)
