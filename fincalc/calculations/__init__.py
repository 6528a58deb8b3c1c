"""
Financial Calculation Engine

Time value of money solves, cash flow NPV/IRR, and the calculator's
arithmetic keys. Pure computation: no I/O, no display state.
"""

from fincalc.calculations import (
    arithmetic,
    cashflow,
    errors,
    formatting,
    rootfinding,
    session,
    tvm,
)

__all__ = [
    "arithmetic",
    "cashflow",
    "errors",
    "formatting",
    "rootfinding",
    "session",
    "tvm",
]
