"""Checked unsigned integer wrapper for reserve and share arithmetic.

This module provides SafeInt, a lightweight wrapper that makes arithmetic
on pool quantities behave like checked 128-bit unsigned machine integers:
- Results above 2^128-1 raise Overflow
- Subtraction below zero raises Underflow
- Division by zero raises DivisionByZero
- Narrowing to 64 bits is checked on conversion

All three errors are ArithmeticOverflow, so callers can treat any failed
step as a single failure kind.

Usage pattern:
    from cpamm.safe_int import S

    def scaled(x: int, ratio: int, precision: int) -> int:
        # Wrap at entry
        sx = S(x)

        # Natural arithmetic - every step checked
        result = sx * ratio // precision - sx

        # Unwrap at exit, narrowing to the output width
        return result.to_u64()
"""

from __future__ import annotations

from cpamm.constants import U64_MAX, U128_MAX
from cpamm.errors import DivisionByZero, Overflow, Underflow


class SafeInt:
    """Unsigned 128-bit integer with checked arithmetic.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt
            Underflow: If value is negative
            Overflow: If value exceeds 2^128-1
        """
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = _check_u128(value)

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        """Add two values.

        Raises:
            Overflow: If the sum exceeds 2^128-1
        """
        return SafeInt(_checked(self._value + _extract_value(other), "+", self, other))

    def __radd__(self, other: int) -> SafeInt:
        return self.__add__(other)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        return SafeInt(_checked_sub(self._value, _extract_value(other)))

    def __rsub__(self, other: int) -> SafeInt:
        """Subtract self from other (other - self).

        Raises:
            Underflow: If result would be negative
        """
        return SafeInt(_checked_sub(other, self._value))

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply two values.

        Raises:
            Overflow: If the product exceeds 2^128-1
        """
        return SafeInt(_checked(self._value * _extract_value(other), "*", self, other))

    def __rmul__(self, other: int) -> SafeInt:
        return self.__mul__(other)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division (floor).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        if self._value == 0:
            raise DivisionByZero(f"Division by zero: {other} // 0")
        return SafeInt(other // self._value)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    def to_u64(self) -> int:
        """Convert to int, validating the value fits in 64 bits.

        Raises:
            Overflow: If value exceeds 2^64-1
        """
        if self._value > U64_MAX:
            raise Overflow(f"Value exceeds u64 max: {self._value}")
        return self._value


def _check_u128(value: int) -> int:
    if value < 0:
        raise Underflow(f"Negative value cannot be unsigned: {value}")
    if value > U128_MAX:
        raise Overflow(f"Value exceeds u128 max: {value}")
    return value


def _checked(result: int, op: str, left: SafeInt, right: SafeInt | int) -> int:
    if result > U128_MAX:
        raise Overflow(f"Overflow: {left.value} {op} {_extract_value(right)} exceeds u128")
    return result


def _checked_sub(left: int, right: int) -> int:
    if right > left:
        raise Underflow(f"Underflow: {left} - {right} is negative")
    return left - right


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
