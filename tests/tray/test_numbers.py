"""Tests for numeric literal scanning and kind selection."""

import pytest

from tray import (
    TrayToken, TrayTokenType, TrayParsingError, TrayEvalError,
    TrayInt32, TrayInt64, TrayInt128, TrayFloat32, TrayFloat64
)
from tray.tray_value import to_float32


class TestNumberKinds:
    """The digit count of a literal, not its magnitude, selects its kind."""

    @pytest.mark.parametrize("text,kind,value", [
        ("0", TrayTokenType.INT32, 0),
        ("7", TrayTokenType.INT32, 7),
        ("123456789", TrayTokenType.INT32, 123456789),
        ("000000001", TrayTokenType.INT32, 1),
        ("1234567890", TrayTokenType.INT64, 1234567890),
        ("0000000001", TrayTokenType.INT64, 1),
        ("123456789012345678", TrayTokenType.INT64, 123456789012345678),
        ("1234567890123456789", TrayTokenType.INT128, 1234567890123456789),
        ("0000000000000000001", TrayTokenType.INT128, 1),
        ("9" * 38, TrayTokenType.INT128, 10**38 - 1),
    ])
    def test_integer_kinds(self, lexer, text, kind, value):
        """Integer literals of 1-9, 10-18 and 19+ digits get 32, 64 and 128-bit kinds."""
        assert lexer.lex(text) == [TrayToken(kind, value)]

    @pytest.mark.parametrize("text,kind,value", [
        ("3.14", TrayTokenType.FLOAT32, to_float32(3.14)),
        ("1.", TrayTokenType.FLOAT32, 1.0),
        ("1234567.8", TrayTokenType.FLOAT32, 1234567.75),
        ("12345678.9", TrayTokenType.FLOAT64, 12345678.9),
        ("123456789.5", TrayTokenType.FLOAT64, 123456789.5),
        ("12345678901234567.8", TrayTokenType.FLOAT64, 12345678901234567.8),
        ("1234567890123456789.5", TrayTokenType.FLOAT64, 1234567890123456789.5),
    ])
    def test_float_kinds(self, lexer, text, kind, value):
        """The decimal point counts towards the literal length; floats never exceed 64 bits."""
        assert lexer.lex(text) == [TrayToken(kind, value)]

    @pytest.mark.parametrize("text,kind,value", [
        ("1_000", TrayTokenType.INT32, 1000),
        ("1_000_000_000", TrayTokenType.INT64, 1000000000),
        ("123_456_789", TrayTokenType.INT32, 123456789),
        ("1_0.5", TrayTokenType.FLOAT32, 10.5),
        ("1.5_0", TrayTokenType.FLOAT32, 1.5),
        ("7_", TrayTokenType.INT32, 7),
    ])
    def test_separators_are_not_counted(self, lexer, text, kind, value):
        """Underscores group digits and do not count towards the literal length."""
        assert lexer.lex(text) == [TrayToken(kind, value)]

    def test_separator_after_point(self, lexer):
        """An underscore cannot follow the decimal point directly."""
        with pytest.raises(TrayParsingError, match="right after a floating point") as exc_info:
            lexer.lex("12._5")

        assert (exc_info.value.start, exc_info.value.end) == (0, 4)

    def test_second_point(self, lexer):
        """A literal can hold at most one decimal point."""
        with pytest.raises(TrayParsingError, match="multiple `.`") as exc_info:
            lexer.lex("1 + 1.2.3")

        assert (exc_info.value.start, exc_info.value.end) == (4, 8)

    def test_integer_too_large_for_int128(self, lexer):
        """A 128-bit literal that overflows fails with a span over the literal."""
        text = "9" * 40
        with pytest.raises(TrayParsingError, match="Int128") as exc_info:
            lexer.lex(f"1 + {text}")

        assert (exc_info.value.start, exc_info.value.end) == (4, 44)

    def test_int128_maximum(self, lexer):
        """The largest 128-bit value is accepted."""
        text = str(TrayInt128.max_value())
        assert lexer.lex(text) == [TrayToken(TrayTokenType.INT128, 2**127 - 1)]

    def test_int128_maximum_plus_one(self, lexer):
        """One past the largest 128-bit value is rejected."""
        with pytest.raises(TrayParsingError):
            lexer.lex(str(2**127))


class TestNumberValues:
    """Test the number value types."""

    def test_widening_conversions(self):
        """Widening produces new values and leaves the source unchanged."""
        number = TrayInt32(5)
        assert number.as_f64() == 5.0
        assert isinstance(number.as_f64(), float)
        assert number.as_i128() == 5
        assert number == TrayInt32(5)

    def test_kinds_are_distinct(self):
        """Equal values of different kinds are different numbers."""
        assert TrayInt32(1) != TrayInt64(1)
        assert TrayFloat32(1.0) != TrayFloat64(1.0)

    @pytest.mark.parametrize("number,expected", [
        (TrayInt32(5), TrayInt32(-5)),
        (TrayInt64(5), TrayInt64(-5)),
        (TrayInt128(-5), TrayInt128(5)),
        (TrayFloat32(1.5), TrayFloat32(-1.5)),
        (TrayFloat64(2.5), TrayFloat64(-2.5)),
    ])
    def test_negate_keeps_kind(self, number, expected):
        """Negation never widens."""
        assert number.negate() == expected

    def test_negate_overflow(self):
        """Negating the smallest value of a kind overflows."""
        with pytest.raises(TrayEvalError, match="Integer overflow"):
            TrayInt32(TrayInt32.min_value()).negate()

    def test_ranges(self):
        """Integer kinds know their signed ranges."""
        assert TrayInt32.max_value() == 2**31 - 1
        assert TrayInt64.min_value() == -(2**63)
        assert TrayInt128.fits(2**127 - 1)
        assert not TrayInt128.fits(2**127)

    def test_describe(self):
        """Numbers render with a kind suffix."""
        assert TrayInt32(3).describe() == "3i32"
        assert TrayInt64(-4).describe() == "-4i64"
        assert TrayFloat64(3.5).describe() == "3.5f64"
        assert TrayFloat32(0.25).describe() == "0.25f32"

    @pytest.mark.parametrize("number,expected", [
        (TrayFloat32(to_float32(3.14)), "3.14f32"),
        (TrayFloat32(1234567.75), "1234567.8f32"),
        (TrayFloat64(7.0), "7f64"),
        (TrayFloat64(-0.0), "-0f64"),
        (TrayFloat64(1e20), "100000000000000000000f64"),
        (TrayFloat64(1e-7), "0.0000001f64"),
        (TrayFloat64(float("nan")), "NaNf64"),
        (TrayFloat64(float("inf")), "inff64"),
        (TrayFloat32(float("-inf")), "-inff32"),
    ])
    def test_describe_floats(self, number, expected):
        """Floats print their shortest round-trip digits in positional notation."""
        assert number.describe() == expected

    def test_float32_is_single_precision(self):
        """A Float32 literal holds the nearest single precision value."""
        assert to_float32(3.14) != 3.14
        assert to_float32(3.14) == 3.140000104904175
        assert to_float32(0.5) == 0.5

    @pytest.mark.parametrize("expression,expected", [
        ("3.14 + 0", "3.140000104904175f64"),
        ("1234567.8 + 0", "1234567.75f64"),
        ("0.1 * 1", "0.10000000149011612f64"),
        ("12345678.9 + 0", "12345678.9f64"),
    ])
    def test_widening_keeps_single_precision_value(self, tray, expression, expected):
        """Widening a Float32 to Float64 exposes its single precision value."""
        assert tray.evaluate_and_format(expression) == expected

    def test_is_float(self):
        """Only the floating point kinds report is_float."""
        assert TrayFloat32(1.0).is_float()
        assert TrayFloat64(1.0).is_float()
        assert not TrayInt32(1).is_float()
        assert not TrayInt128(1).is_float()
