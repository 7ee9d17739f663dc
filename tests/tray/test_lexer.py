"""Tests for the lexer: operators, literals, spans and illegal characters."""

import pytest

from tray import TrayLexer, TrayToken, TrayTokenType, TraySpan, TrayIllegalCharacterError, TrayParsingError


class TestLexer:
    """Test tokenization of single lines."""

    def test_empty_line(self, lexer):
        """An empty or blank line yields no tokens."""
        assert lexer.lex("") == []
        assert lexer.lex("   \t ") == []

    def test_operators_and_parentheses(self, lexer):
        """Single character tokens are recognised in order."""
        assert lexer.lex("+-*/()") == [
            TrayToken(TrayTokenType.PLUS),
            TrayToken(TrayTokenType.MINUS),
            TrayToken(TrayTokenType.MULTIPLY),
            TrayToken(TrayTokenType.DIVIDE),
            TrayToken(TrayTokenType.LPAREN),
            TrayToken(TrayTokenType.RPAREN),
        ]

    def test_whitespace_separates_tokens(self, lexer):
        """Whitespace is ignored apart from ending numbers."""
        assert lexer.lex(" 1  + 2 ") == [
            TrayToken(TrayTokenType.INT32, 1),
            TrayToken(TrayTokenType.PLUS),
            TrayToken(TrayTokenType.INT32, 2),
        ]

    def test_numbers_end_at_other_characters(self, lexer):
        """A number ends at the first character that is not a digit, point or separator."""
        assert lexer.lex("12+3") == [
            TrayToken(TrayTokenType.INT32, 12),
            TrayToken(TrayTokenType.PLUS),
            TrayToken(TrayTokenType.INT32, 3),
        ]
        assert lexer.lex("1 2") == [TrayToken(TrayTokenType.INT32, 1), TrayToken(TrayTokenType.INT32, 2)]

    def test_string_and_char_tokens(self, lexer):
        """String and character literals produce their decoded values."""
        assert lexer.lex('"hello world"') == [TrayToken(TrayTokenType.STRING, "hello world")]
        assert lexer.lex("'a'") == [TrayToken(TrayTokenType.CHAR, "a")]
        assert lexer.lex('""') == [TrayToken(TrayTokenType.STRING, "")]

    def test_token_after_char_literal_is_kept(self, lexer):
        """The character following a closing quote is lexed normally."""
        assert lexer.lex("'a'+1") == [
            TrayToken(TrayTokenType.CHAR, "a"),
            TrayToken(TrayTokenType.PLUS),
            TrayToken(TrayTokenType.INT32, 1),
        ]

    def test_string_keeps_other_characters_verbatim(self, lexer):
        """Characters that are illegal outside a string are fine inside one."""
        assert lexer.lex('"@ $ # é"') == [TrayToken(TrayTokenType.STRING, "@ $ # é")]

    def test_spans_are_recorded(self, lexer):
        """Each token's half-open character span is recorded in order."""
        lexer.lex(' 12 + "ab"')
        assert lexer.spans == [TraySpan(1, 3), TraySpan(4, 5), TraySpan(6, 10)]

    def test_spans_are_reset_for_each_line(self, lexer):
        """Spans describe only the most recent line."""
        lexer.lex("1 + 2")
        lexer.lex("7")
        assert lexer.spans == [TraySpan(0, 1)]

    @pytest.mark.parametrize("line,position,character", [
        ("@", 0, "@"),
        ("1 + a", 4, "a"),
        ("2 % 3", 2, "%"),
        ("(1 + 2]", 6, "]"),
        (".5", 0, "."),
    ])
    def test_illegal_character(self, lexer, line, position, character):
        """An unrecognised character fails at its index."""
        with pytest.raises(TrayIllegalCharacterError, match="Unrecognized character") as exc_info:
            lexer.lex(line)

        error = exc_info.value
        assert error.position == position
        assert error.character == character
        assert (error.start, error.end) == (position, position + 1)

    def test_lexing_stops_at_first_error(self, lexer):
        """The first illegal character is reported, not a later one."""
        with pytest.raises(TrayIllegalCharacterError) as exc_info:
            lexer.lex("1 # 2 @")

        assert exc_info.value.position == 2

    def test_unterminated_string(self, lexer):
        """An unterminated string spans from the opening quote to end of line."""
        with pytest.raises(TrayParsingError, match="end of line") as exc_info:
            lexer.lex('"abc')

        assert (exc_info.value.start, exc_info.value.end) == (0, 4)

    def test_unterminated_string_after_other_tokens(self, lexer):
        """The span starts at the opening quote, not the start of the line."""
        with pytest.raises(TrayParsingError) as exc_info:
            lexer.lex('1 + "ab')

        assert (exc_info.value.start, exc_info.value.end) == (4, 7)

    def test_lone_quote(self, lexer):
        """A lone double quote is an unterminated string of one character."""
        with pytest.raises(TrayParsingError) as exc_info:
            lexer.lex('"')

        assert (exc_info.value.start, exc_info.value.end) == (0, 1)

    def test_empty_char_literal(self, lexer):
        """An empty character literal is rejected."""
        with pytest.raises(TrayParsingError, match="cannot be empty") as exc_info:
            lexer.lex("''")

        assert (exc_info.value.start, exc_info.value.end) == (0, 2)

    def test_char_literal_at_end_of_line(self, lexer):
        """A quote at the end of the line cannot start a character literal."""
        with pytest.raises(TrayParsingError, match="end of line"):
            lexer.lex("1 + '")

    @pytest.mark.parametrize("line", ["'ab'", "'a", "'\\n"])
    def test_char_literal_missing_closing_quote(self, lexer, line):
        """A character literal must close right after one character."""
        with pytest.raises(TrayParsingError, match="Expected `'`"):
            lexer.lex(line)

    def test_token_str(self):
        """Tokens render with their kind."""
        assert str(TrayToken(TrayTokenType.PLUS)) == "Plus"
        assert str(TrayToken(TrayTokenType.LPAREN)) == "Left parenthesis"
        assert str(TrayToken(TrayTokenType.INT32, 5)) == "5i32"
        assert str(TrayToken(TrayTokenType.INT128, 7)) == "7i128"
        assert str(TrayToken(TrayTokenType.FLOAT32, 1.5)) == "1.5f32"
        assert str(TrayToken(TrayTokenType.FLOAT64, 7.0)) == "7f64"
        assert str(TrayToken(TrayTokenType.STRING, "hi")) == '"hi"'
        assert str(TrayToken(TrayTokenType.CHAR, "c")) == "'c'"

    def test_float32_token_shows_shortest_text(self, lexer):
        """A rounded Float32 literal prints as written."""
        tokens = lexer.lex("3.14")
        assert tokens[0].value != 3.14
        assert str(tokens[0]) == "3.14f32"

    def test_fresh_lexer_per_call_is_independent(self):
        """Lexing one line does not affect the next."""
        first = TrayLexer().lex("1")
        second = TrayLexer().lex("1")
        assert first == second
