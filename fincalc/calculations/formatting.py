"""
Display Formatting

Turns calculator results into the strings shown on the display.
"""

import math
from typing import Optional

ERROR_TEXT = "Error"
SCIENTIFIC_UPPER = 1e10
SCIENTIFIC_LOWER = 1e-6
DISPLAY_DECIMALS = 8
MANTISSA_DECIMALS = 6


def _scientific(value: float) -> str:
    """Render as d.dddddde±x (no zero padding on the exponent)."""
    mantissa, exponent = f"{value:.{MANTISSA_DECIMALS}e}".split("e")
    exp = int(exponent)
    sign = "+" if exp >= 0 else "-"
    return f"{mantissa}e{sign}{abs(exp)}"


def round_display(value: float, decimals: int = DISPLAY_DECIMALS) -> float:
    """Round half up to a fixed number of decimals."""
    scale = 10 ** decimals
    return math.floor(value * scale + 0.5) / scale


def format_number(value: Optional[float]) -> str:
    """
    Format a number for display.

    Args:
        value: Number to format (None, NaN and infinities are errors)

    Returns:
        "Error" for non-finite input, scientific notation for very large or
        very small magnitudes, otherwise the value rounded to 8 decimals
        without trailing zeros.
    """
    if value is None or not math.isfinite(value):
        return ERROR_TEXT

    magnitude = abs(value)
    if magnitude >= SCIENTIFIC_UPPER or (0 < magnitude < SCIENTIFIC_LOWER):
        return _scientific(value)

    rounded = round_display(value)
    if rounded == 0:
        return "0"
    if rounded.is_integer():
        return str(int(rounded))

    text = repr(rounded)
    if "e" in text:
        # repr switches to exponent form below 1e-4
        text = f"{rounded:.{DISPLAY_DECIMALS}f}".rstrip("0").rstrip(".")
    return text
