"""
Arithmetic and Math Keys

The four-function keys plus the shifted math functions (1/x, x², √x, y^x,
x!, %, %CHG). Results that are not finite numbers raise ComputationError.
"""

import math

from fincalc.calculations.errors import (
    ComputationError,
    DivisionByZeroError,
    InvalidInputError,
)

MAX_FACTORIAL = 170  # 171! overflows a double


def _finite(value: float, operation: str) -> float:
    if not math.isfinite(value):
        raise ComputationError(f"{operation} result is not a finite number")
    return value


def apply_operator(operation: str, left: float, right: float) -> float:
    """
    Apply a binary operator key.

    Args:
        operation: One of "+", "-", "*", "/"
        left: Value entered before the operator
        right: Value entered after the operator

    Raises:
        DivisionByZeroError: On division by zero
        InvalidInputError: On an unknown operator
    """
    if operation == "+":
        result = left + right
    elif operation == "-":
        result = left - right
    elif operation == "*":
        result = left * right
    elif operation == "/":
        if right == 0:
            raise DivisionByZeroError()
        result = left / right
    else:
        raise InvalidInputError(f"Unknown operator: {operation}")
    return _finite(result, operation)


def reciprocal(value: float) -> float:
    if value == 0:
        raise DivisionByZeroError()
    return _finite(1 / value, "1/x")


def square(value: float) -> float:
    return _finite(value * value, "x²")


def square_root(value: float) -> float:
    if value < 0:
        raise InvalidInputError("Cannot take square root of negative number")
    return math.sqrt(value)


def power(base: float, exponent: float) -> float:
    """y^x. Fractional powers of negative numbers have no real result."""
    try:
        result = math.pow(base, exponent)
    except ValueError as e:
        raise ComputationError(f"y^x has no real result: {e}") from e
    except OverflowError as e:
        raise ComputationError(f"y^x overflowed: {e}") from e
    return _finite(result, "y^x")


def factorial(value: float) -> float:
    """
    x! of the integer part of ``value``.

    Raises:
        InvalidInputError: If the integer part is outside 0..170
    """
    n = math.trunc(value)
    if n < 0 or n > MAX_FACTORIAL:
        raise InvalidInputError(f"Factorial only valid for 0 <= n <= {MAX_FACTORIAL}")
    return float(math.factorial(n))


def percentage(base: float, percent: float) -> float:
    """%: ``percent`` percent of ``base``."""
    return _finite(base * percent / 100, "%")


def percent_change(old: float, new: float) -> float:
    """%CHG: change from ``old`` to ``new`` in percent."""
    if old == 0:
        raise DivisionByZeroError("Percent change from zero is undefined")
    return _finite((new - old) / old * 100, "%CHG")
