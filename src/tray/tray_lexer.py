"""Lexer for Tray expressions with position-tracked error messages."""

import logging
from typing import List, Tuple

from tray.tray_error import TrayIllegalCharacterError, TrayParsingError
from tray.tray_token import TrayToken, TrayTokenType, TraySpan
from tray.tray_value import TrayInt32, TrayInt64, TrayInt128, to_float32


DIGITS = "0123456789"
HEX_DIGITS = "0123456789abcdefABCDEF"

SIMPLE_ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    '\\': '\\',
    '0': '\0',
    "'": "'",
    '"': '"',
}

SINGLE_CHARACTER_TOKENS = {
    '+': TrayTokenType.PLUS,
    '-': TrayTokenType.MINUS,
    '*': TrayTokenType.MULTIPLY,
    '/': TrayTokenType.DIVIDE,
    '(': TrayTokenType.LPAREN,
    ')': TrayTokenType.RPAREN,
}

# Digit count limits for each literal width (the decimal point counts as a digit)
MAX_32_BIT_DIGITS = 9
MAX_64_BIT_DIGITS = 18

MAX_UNICODE_ESCAPE_DIGITS = 6
MAX_HEX_ESCAPE_VALUE = 0x7F


class TrayLexer:
    """Lexes a single line of Tray source into tokens."""

    def __init__(self) -> None:
        """Initialize the lexer."""
        self.spans: List[TraySpan] = []
        self._logger = logging.getLogger("TrayLexer")

    def lex(self, line: str) -> List[TrayToken]:
        """
        Lex one line of source text.

        The character span of every token is recorded in `self.spans`, in the
        same order as the returned tokens.

        Args:
            line: The source line, without a trailing newline

        Returns:
            List of tokens in input order

        Raises:
            TrayIllegalCharacterError: If a character cannot start a token
            TrayParsingError: If a literal or escape sequence is malformed
        """
        tokens: List[TrayToken] = []
        spans: List[TraySpan] = []
        self.spans = spans
        i = 0

        while i < len(line):
            char = line[i]

            if char.isspace():
                i += 1
                continue

            if char in SINGLE_CHARACTER_TOKENS:
                tokens.append(TrayToken(SINGLE_CHARACTER_TOKENS[char]))
                spans.append(TraySpan(i, i + 1))
                i += 1
                continue

            if char in DIGITS:
                token, end = self._read_number(line, i)

            elif char == '"':
                token, end = self._read_string(line, i)

            elif char == "'":
                token, end = self._read_char(line, i)

            else:
                raise TrayIllegalCharacterError(char, i)

            tokens.append(token)
            spans.append(TraySpan(i, end))
            i = end

        self._logger.debug("lexed %d tokens from %r", len(tokens), line)
        return tokens

    def _read_number(self, line: str, start: int) -> Tuple[TrayToken, int]:
        """
        Read a numeric literal.

        Digits and at most one decimal point are accumulated; `_` separates
        digit groups.  The literal's kind is chosen from the number of
        accumulated characters, never from its magnitude.

        Returns:
            Tuple of (token, index one past the literal)

        Raises:
            TrayParsingError: If the literal is malformed or does not fit its kind
        """
        digits: List[str] = []
        has_dot = False
        i = start

        while i < len(line):
            char = line[i]

            if char == '_' and digits and digits[-1] == '.':
                raise TrayParsingError(
                    "Syntax Error: Cannot add a `_` in a number right after a floating point `.`",
                    start, i + 1,
                    suggestion="Put at least one digit after the `.` before using `_`"
                )

            if char == '.' and has_dot:
                raise TrayParsingError(
                    "Syntax Error: A floating point number cannot have multiple `.`",
                    start, i + 1
                )

            if char == '.':
                has_dot = True
                digits.append(char)

            elif char in DIGITS:
                digits.append(char)

            elif char != '_':
                break

            i += 1

        text = ''.join(digits)
        count = len(text)

        if has_dot:
            # Decimal text of digits and one point always converts to a float
            if count <= MAX_32_BIT_DIGITS:
                return TrayToken(TrayTokenType.FLOAT32, to_float32(float(text))), i

            return TrayToken(TrayTokenType.FLOAT64, float(text)), i

        if count <= MAX_32_BIT_DIGITS:
            kind, integer_type = TrayTokenType.INT32, TrayInt32

        elif count <= MAX_64_BIT_DIGITS:
            kind, integer_type = TrayTokenType.INT64, TrayInt64

        else:
            kind, integer_type = TrayTokenType.INT128, TrayInt128

        value = int(text)
        if not integer_type.fits(value):
            raise TrayParsingError(
                f"Parsing Error: Couldn't parse number to a {integer_type(0).type_name()}",
                start, i,
                suggestion=f"Integer literals must not exceed {integer_type.max_value()}"
            )

        return TrayToken(kind, value), i

    def _read_string(self, line: str, start: int) -> Tuple[TrayToken, int]:
        """
        Read a string literal, decoding escape sequences.

        Returns:
            Tuple of (token, index one past the closing quote)

        Raises:
            TrayParsingError: If the string is unterminated or has a bad escape
        """
        result: List[str] = []
        last = start
        i = start + 1

        while i < len(line):
            char = line[i]

            if char == '"':
                return TrayToken(TrayTokenType.STRING, ''.join(result)), i + 1

            if char == '\\':
                decoded, i = self._read_escape(line, i)
                result.append(decoded)
                last = i - 1
                continue

            result.append(char)
            last = i
            i += 1

        raise TrayParsingError(
            "Syntax Error: Found end of line while trying to parse string literal. "
            "Make sure to close the quotes or remove the trailing `\"`",
            start, last + 1
        )

    def _read_char(self, line: str, start: int) -> Tuple[TrayToken, int]:
        """
        Read a character literal holding exactly one raw or escaped character.

        Returns:
            Tuple of (token, index one past the closing quote)

        Raises:
            TrayParsingError: If the literal is empty, unterminated or has a bad escape
        """
        i = start + 1
        if i >= len(line):
            raise TrayParsingError(
                "Syntax Error: Found end of line while trying to parse a character literal. "
                "Try removing the trailing `'`.",
                start, start + 1
            )

        char = line[i]
        if char == "'":
            raise TrayParsingError("Character literal cannot be empty.", start, i + 1)

        if char == '\\':
            content, i = self._read_escape(line, i)

        else:
            content = char
            i += 1

        if i < len(line) and line[i] == "'":
            return TrayToken(TrayTokenType.CHAR, content), i + 1

        raise TrayParsingError(
            "Syntax Error: Expected `'` to end the character literal.",
            start, min(i + 1, len(line)),
            suggestion="Character literals hold exactly one character, use double quotes for strings"
        )

    def _read_escape(self, line: str, start: int) -> Tuple[str, int]:
        """
        Decode an escape sequence starting at the backslash at `start`.

        Returns:
            Tuple of (decoded character, index one past the escape sequence)

        Raises:
            TrayParsingError: If the escape sequence is invalid
        """
        i = start + 1
        if i >= len(line):
            raise TrayParsingError(
                "Syntax Error: Found end of line after `\\`, expected an escape sequence.",
                start, start + 1
            )

        char = line[i]
        if char in SIMPLE_ESCAPES:
            return SIMPLE_ESCAPES[char], i + 1

        if char == 'x':
            return self._read_hex_escape(line, start)

        if char == 'u':
            return self._read_unicode_escape(line, start)

        raise TrayParsingError(
            f"Syntax Error: Character {char} preceded by a `\\` cannot be escaped, make sure to "
            f"escape the backslash like `\\\\{char}` if you meant to add a backslash to the string.",
            start, i + 1
        )

    def _read_hex_escape(self, line: str, start: int) -> Tuple[str, int]:
        """Decode `\\xHH`, limited to the 7-bit range."""
        digits = line[start + 2:start + 4]

        if not digits:
            raise TrayParsingError(
                "Syntax Error: Tried to escape a 7-bit hexadecimal number with \\x but couldn't "
                "find the two required hexadecimal digits.",
                start, start + 2
            )

        if len(digits) == 1:
            raise TrayParsingError(
                "Syntax Error: Expected two hexadecimal digits to be escaped, could only find one. "
                "Make sure to use two hexadecimal digits like `\\x7F`",
                start, start + 3
            )

        end = start + 4
        if not all(c in HEX_DIGITS for c in digits):
            raise TrayParsingError(
                "Syntax Error: Couldn't parse escaped hexadecimal number. Make sure the digits "
                "are valid hexadecimal characters (0-9, A-F).",
                start, end
            )

        code = int(digits, 16)
        if code > MAX_HEX_ESCAPE_VALUE:
            raise TrayParsingError(
                "Syntax Error: Expected two digits hexadecimal number between 0x00 and 0x7F.",
                start, end,
                suggestion=f"Use a unicode escape like `\\u{{{code:X}}}` for characters above 0x7F"
            )

        return chr(code), end

    def _read_unicode_escape(self, line: str, start: int) -> Tuple[str, int]:
        """Decode `\\u{H..H}` with one to six hexadecimal digits."""
        brace = start + 2
        if brace >= len(line) or line[brace] != '{':
            raise TrayParsingError(
                "Syntax error: Escaped unicode characters must follow the format: `\\u{07FFFF}` "
                "with from 1 to 6 digits. The range of numbers is [0, 10FFFF].",
                start, min(brace + 1, len(line))
            )

        # Count alphanumeric characters so non-hex letters are reported as bad digits
        i = brace + 1
        while i < len(line) and line[i].isascii() and line[i].isalnum():
            i += 1

        digits = line[brace + 1:i]

        if not digits:
            raise TrayParsingError(
                "Syntax Error: Tried to escape a 24bit unicode character but no hexadecimal digits "
                "were found. Make sure to specify a hexadecimal number in range [0, 10FFFF]",
                start, min(brace + 2, len(line))
            )

        if len(digits) > MAX_UNICODE_ESCAPE_DIGITS:
            raise TrayParsingError(
                "Syntax Error: Tried to escape a 24bit unicode character but found 7 or more "
                "characters. A 24bit unicode character can at most have 6 hexadecimal digits "
                "and has to be in range [0, 10FFFF].",
                start, brace + 1 + MAX_UNICODE_ESCAPE_DIGITS + 1
            )

        if i >= len(line) or line[i] != '}':
            raise TrayParsingError(
                "Syntax error: Escaped unicode characters must follow the format: `\\u{07FFFF}` "
                "with from 1 to 6 digits. The range of numbers is [0, 10FFFF].",
                start, min(i + 1, len(line))
            )

        end = i + 1
        if not all(c in HEX_DIGITS for c in digits):
            raise TrayParsingError(
                "Parsing error: Couldn't convert escaped 24bit unicode character into a number. "
                "Make sure to use valid hexadecimal digits from 0-9 and A-F",
                start, end
            )

        code = int(digits, 16)
        if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
            raise TrayParsingError(
                "Parsing error: Couldn't convert escaped unicode character back into a single "
                "character, make sure the number represented is a valid character in range [0, 10FFFF]",
                start, end
            )

        return chr(code), end
