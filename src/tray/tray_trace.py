"""Trace events for the stages of each processed line, and the watchers that receive them.

The Tray facade reports the tokens, the expression tree and the result of
every line it processes, or the error that stopped it, as `TrayTraceEvent`
values.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Protocol, TextIO

from tray.tray_error import TrayError


class TrayTraceStage(Enum):
    """Pipeline stage a trace event reports on."""
    TOKENS = "tokens"
    TREE = "tree"
    RESULT = "result"
    ERROR = "error"


@dataclass(frozen=True)
class TrayTraceEvent:
    """The output of one pipeline stage for one source line."""
    stage: TrayTraceStage
    line: str
    text: str
    error: Optional[TrayError] = None

    def format(self) -> str:
        """
        Format the event as trace output.

        Errors are written as their caret diagnostic so the failing span is
        visible in the trace.
        """
        if self.error is not None:
            return f"{self.stage.value}: {self.error.format_caret(self.line)}"

        return f"{self.stage.value}: {self.text}"


class TrayTraceWatcher(Protocol):
    """Anything that accepts trace events."""

    def on_trace(self, event: TrayTraceEvent) -> None:
        """Receive one trace event."""


class TrayStreamTraceWatcher:
    """Writes formatted trace events to a text stream."""

    def __init__(self, stream: TextIO, stages: Optional[List[TrayTraceStage]] = None):
        """
        Initialize stream trace watcher.

        Args:
            stream: Stream to write to
            stages: Stages to write, or None for all of them
        """
        self.stream = stream
        self.stages = set(stages) if stages is not None else set(TrayTraceStage)

    def on_trace(self, event: TrayTraceEvent) -> None:
        if event.stage not in self.stages:
            return

        self.stream.write(event.format() + '\n')
        self.stream.flush()


class TrayFileTraceWatcher(TrayStreamTraceWatcher):
    """Writes formatted trace events to a file that it owns."""

    def __init__(self, filepath: str, stages: Optional[List[TrayTraceStage]] = None):
        """
        Open the trace file, replacing any previous contents.

        Raises:
            RuntimeError: If the file cannot be opened
        """
        try:
            stream = open(filepath, 'w', encoding='utf-8')  # pylint: disable=consider-using-with

        except OSError as e:
            raise RuntimeError(f"Failed to open trace file '{filepath}': {e}") from e

        super().__init__(stream, stages)

    def close(self) -> None:
        """Close the trace file."""
        self.stream.close()

    def __enter__(self) -> 'TrayFileTraceWatcher':
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class TrayBufferingTraceWatcher:
    """Keeps trace events in memory for programmatic access."""

    def __init__(self) -> None:
        self.events: List[TrayTraceEvent] = []

    def on_trace(self, event: TrayTraceEvent) -> None:
        self.events.append(event)

    def get_events(self, stage: Optional[TrayTraceStage] = None) -> List[TrayTraceEvent]:
        """
        Get buffered events.

        Args:
            stage: Only return events for this stage, or None for all

        Returns:
            Copy of the matching events, oldest first
        """
        return [event for event in self.events if stage is None or event.stage == stage]

    def get_traces(self) -> List[str]:
        """Get buffered events formatted as trace output."""
        return [event.format() for event in self.events]

    def clear(self) -> None:
        """Drop all buffered events."""
        self.events.clear()
