"""Interactive read-eval-print loop and file batch mode for Tray."""

import logging
import sys
from typing import Iterable, Iterator, Optional, TextIO

from tray.tray import Tray, TrayLineResult


class TrayColors:
    """ANSI color codes for terminal output."""

    RESET = '\033[0m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    CYAN = '\033[36m'
    BRIGHT_BLACK = '\033[90m'
    BOLD = '\033[1m'

    @staticmethod
    def colorize(text: str, color: str) -> str:
        """Wrap text in color codes."""
        return f"{color}{text}{TrayColors.RESET}"


class TrayLineReader:
    """Reads lines from a text stream, showing a prompt before each one."""

    def __init__(self, stream: TextIO, output: Optional[TextIO] = None, prompt: str = "tray> "):
        """
        Initialize line reader.

        Args:
            stream: Stream to read lines from
            output: Stream to write the prompt to, or None for no prompt
            prompt: Prompt text
        """
        self.stream = stream
        self.output = output
        self.prompt = prompt

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self.output is not None:
            self.output.write(self.prompt)
            self.output.flush()

        line = self.stream.readline()
        if not line:
            raise StopIteration

        return line.rstrip('\r\n')


class TrayRepl:
    """Evaluates lines one at a time, reporting errors without stopping."""

    def __init__(
        self,
        tray: Tray,
        output: Optional[TextIO] = None,
        error_output: Optional[TextIO] = None,
        show_tokens: bool = False,
        show_tree: bool = True,
        color: bool = False
    ):
        """
        Initialize the loop.

        Args:
            tray: Tray instance used to process each line
            output: Stream for results (default stdout)
            error_output: Stream for caret diagnostics (default stderr)
            show_tokens: Print the tokens of each line
            show_tree: Print the expression tree of each line
            color: Use ANSI colors
        """
        self.tray = tray
        self.output = output if output is not None else sys.stdout
        self.error_output = error_output if error_output is not None else sys.stderr
        self.show_tokens = show_tokens
        self.show_tree = show_tree
        self.color = color
        self._logger = logging.getLogger("TrayRepl")

    def run(self, lines: Iterable[str]) -> int:
        """
        Process lines until the source is exhausted.

        Args:
            lines: Source lines, without trailing newlines

        Returns:
            Number of lines that failed
        """
        failures = 0
        for line in lines:
            if not self.run_line(line).ok:
                failures += 1

        self._logger.debug("finished with %d failed lines", failures)
        return failures

    def run_line(self, line: str) -> TrayLineResult:
        """
        Process one line and print its outcome.

        Args:
            line: Source line

        Returns:
            The line's outcome
        """
        result = self.tray.process_line(line)

        if not result.ok:
            self._print(self.error_output, result.format(), TrayColors.RED)
            return result

        if self.show_tokens and result.tokens:
            self._print(self.output, " ".join(str(token) for token in result.tokens), TrayColors.BRIGHT_BLACK)

        if self.show_tree and result.expression is not None:
            self._print(self.output, result.expression.describe(), TrayColors.CYAN)

        if result.value is not None:
            self._print(self.output, result.value.describe(), TrayColors.GREEN)

        return result

    def run_file(self, path: str) -> int:
        """
        Evaluate every non-blank line of a file independently.

        Args:
            path: Path of the file to evaluate

        Returns:
            Number of lines that failed

        Raises:
            OSError: If the file cannot be read
        """
        self._logger.info("evaluating file %s", path)
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()

        return self.run(line for line in content.splitlines() if line.strip())

    def _print(self, stream: TextIO, text: str, color: str) -> None:
        if self.color:
            text = TrayColors.colorize(text, color)

        stream.write(text + "\n")
        stream.flush()
