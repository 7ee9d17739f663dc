"""Tray Value hierarchy - immutable result types produced by the evaluator."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
import math
import struct
from typing import Any, ClassVar, Union

from tray.tray_error import TrayEvalError


# Enough significant digits to round-trip any single precision value
MAX_FLOAT32_DIGITS = 9


def to_float32(value: float) -> float:
    """Round a double to the nearest single precision value."""
    if math.isnan(value) or math.isinf(value):
        return value

    return struct.unpack('f', struct.pack('f', value))[0]


def format_float(value: float, single: bool = False) -> str:
    """
    Format a float the way numbers are displayed to the user.

    The shortest decimal text that reads back as the same value is printed in
    positional notation, without a trailing `.0` on whole values.  NaN prints
    as `NaN` and infinities as `inf` / `-inf`.

    Args:
        value: Value to format
        single: Find the shortest text for single precision rather than double

    Returns:
        Formatted value
    """
    if math.isnan(value):
        return "NaN"

    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    text = repr(value)
    if single:
        for digits in range(1, MAX_FLOAT32_DIGITS + 1):
            candidate = f"{value:.{digits}g}"
            if to_float32(float(candidate)) == value:
                text = candidate
                break

    return format(Decimal(text).normalize(), 'f')


class TrayValue(ABC):
    """
    Abstract base class for all Tray values.

    A value is a number, a character or a string.  All values are immutable.
    """

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to Python value."""

    @abstractmethod
    def type_name(self) -> str:
        """Return Tray type name for error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the value the way it is displayed to the user."""


class TrayNumber(TrayValue):
    """
    Base class for the five numeric kinds.

    Widening conversions are pure and never change the source value.
    """

    value: Union[int, float]
    suffix: ClassVar[str] = ""

    def to_python(self) -> Union[int, float]:
        return self.value

    def describe(self) -> str:
        return f"{self.value}{self.suffix}"

    def is_float(self) -> bool:
        """Check if this number is a floating point kind."""
        return False

    def as_f64(self) -> float:
        """Widen to a double precision float."""
        return float(self.value)

    def as_i128(self) -> int:
        """Widen to a 128-bit signed integer."""
        return int(self.value)

    @abstractmethod
    def negate(self) -> "TrayNumber":
        """Negate the value, keeping the numeric kind."""


class TrayInteger(TrayNumber):
    """Common behaviour for the signed integer kinds."""

    bits: ClassVar[int] = 0

    @classmethod
    def min_value(cls) -> int:
        """Smallest value representable by this kind."""
        return -(1 << (cls.bits - 1))

    @classmethod
    def max_value(cls) -> int:
        """Largest value representable by this kind."""
        return (1 << (cls.bits - 1)) - 1

    @classmethod
    def fits(cls, value: int) -> bool:
        """Check if an integer is within this kind's range."""
        return cls.min_value() <= value <= cls.max_value()

    @classmethod
    def checked(cls, value: int) -> "TrayInteger":
        """
        Build a value of this kind, rejecting out of range integers.

        Raises:
            TrayEvalError: If the value overflows the kind
        """
        if not cls.fits(value):
            raise TrayEvalError(
                message=f"Integer overflow: {value} does not fit in {cls.__name__[4:]}",
                received=f"Value: {value}",
                expected=f"Value in range [{cls.min_value()}, {cls.max_value()}]",
                suggestion="Use a floating point operand to get a float result"
            )

        return cls(value)  # type: ignore[call-arg]

    def negate(self) -> "TrayNumber":
        return self.checked(-self.value)  # type: ignore[arg-type]


class TrayFloat(TrayNumber):
    """Common behaviour for the floating point kinds."""

    single_precision: ClassVar[bool] = False

    def describe(self) -> str:
        return f"{format_float(self.value, self.single_precision)}{self.suffix}"

    def is_float(self) -> bool:
        return True

    def negate(self) -> "TrayNumber":
        return type(self)(-self.value)  # type: ignore[call-arg]


@dataclass(frozen=True)
class TrayInt32(TrayInteger):
    """32-bit signed integer."""
    value: int
    suffix: ClassVar[str] = "i32"
    bits: ClassVar[int] = 32

    def type_name(self) -> str:
        return "Int32"


@dataclass(frozen=True)
class TrayInt64(TrayInteger):
    """64-bit signed integer."""
    value: int
    suffix: ClassVar[str] = "i64"
    bits: ClassVar[int] = 64

    def type_name(self) -> str:
        return "Int64"


@dataclass(frozen=True)
class TrayInt128(TrayInteger):
    """128-bit signed integer, the widest integer kind."""
    value: int
    suffix: ClassVar[str] = "i128"
    bits: ClassVar[int] = 128

    def type_name(self) -> str:
        return "Int128"


@dataclass(frozen=True)
class TrayFloat32(TrayFloat):
    """Single precision float, held as a Python float rounded to single precision."""
    value: float
    suffix: ClassVar[str] = "f32"
    single_precision: ClassVar[bool] = True

    def type_name(self) -> str:
        return "Float32"


@dataclass(frozen=True)
class TrayFloat64(TrayFloat):
    """Double precision float."""
    value: float
    suffix: ClassVar[str] = "f64"

    def type_name(self) -> str:
        return "Float64"


@dataclass(frozen=True)
class TrayChar(TrayValue):
    """Represents a single Unicode character."""
    value: str

    def to_python(self) -> str:
        return self.value

    def type_name(self) -> str:
        return "Char"

    def describe(self) -> str:
        return f"'{self.value}'"


@dataclass(frozen=True)
class TrayString(TrayValue):
    """Represents string values."""
    value: str

    def to_python(self) -> str:
        return self.value

    def type_name(self) -> str:
        return "String"

    def describe(self) -> str:
        return f'"{self.value}"'
