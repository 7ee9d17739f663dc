"""Tray - evaluates lines of arithmetic over numbers, characters and strings."""

# Main API
from tray.tray import Tray, TrayLineResult
from tray.tray_settings import TraySettings

# Exceptions
from tray.tray_error import (
    TrayError, TrayLexError, TrayIllegalCharacterError, TrayParsingError, TrayParseError, TrayEvalError
)

# Value types
from tray.tray_value import (
    TrayValue, TrayNumber, TrayInteger, TrayFloat, TrayInt32, TrayInt64, TrayInt128,
    TrayFloat32, TrayFloat64, TrayChar, TrayString
)

# Expression tree
from tray.tray_ast import (
    TrayExpression, TrayUnaryOperation, TrayBinaryOperation, TrayParenthesized,
    TrayNumberLiteral, TrayCharLiteral, TrayStringLiteral, TrayUnaryOperator, TrayBinaryOperator
)

# Lower-level components (for advanced usage)
from tray.tray_token import TrayToken, TrayTokenType, TraySpan
from tray.tray_lexer import TrayLexer
from tray.tray_parser import TrayParser
from tray.tray_evaluator import TrayEvaluator
from tray.tray_trace import (
    TrayTraceStage, TrayTraceEvent, TrayStreamTraceWatcher, TrayFileTraceWatcher, TrayBufferingTraceWatcher
)


__version__ = "0.1.0"

__all__ = [
    # Main API
    "Tray", "TrayLineResult", "TraySettings",

    # Exceptions
    "TrayError", "TrayLexError", "TrayIllegalCharacterError", "TrayParsingError", "TrayParseError",
    "TrayEvalError",

    # Value types
    "TrayValue", "TrayNumber", "TrayInteger", "TrayFloat", "TrayInt32", "TrayInt64", "TrayInt128",
    "TrayFloat32", "TrayFloat64", "TrayChar", "TrayString",

    # Expression tree
    "TrayExpression", "TrayUnaryOperation", "TrayBinaryOperation", "TrayParenthesized",
    "TrayNumberLiteral", "TrayCharLiteral", "TrayStringLiteral", "TrayUnaryOperator", "TrayBinaryOperator",

    # Lower-level components
    "TrayToken", "TrayTokenType", "TraySpan", "TrayLexer", "TrayParser", "TrayEvaluator",
    "TrayTraceStage", "TrayTraceEvent", "TrayStreamTraceWatcher", "TrayFileTraceWatcher", "TrayBufferingTraceWatcher",
]
