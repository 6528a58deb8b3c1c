"""
Time Value of Money (TVM) Calculations

Solves the five-key annuity equation

    PV * (1+i)^N + PMT * (1+i*type) * ((1+i)^N - 1) / i + FV = 0

for any one of N, I/YR, PV, PMT or FV given the other four, the way a
handheld financial calculator does. ``i`` is the periodic rate
(I/YR / 100 / P/YR) and ``type`` is 1 for BEGIN mode, 0 for END mode.

Sign convention is the caller's: money paid out is negative, money received
is positive. Nothing here normalizes signs.
"""

import enum
import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from typing import Optional

from fincalc.calculations.errors import (
    CalculationError,
    ComputationError,
    DegenerateInputError,
    InvalidInputError,
)
from fincalc.calculations.rootfinding import Criterion, RootFindResult, newton_raphson
from fincalc.config import get_settings

logger = logging.getLogger(__name__)


class Timing(str, enum.Enum):
    """Whether payments fall at the end (ordinary annuity) or beginning (annuity due)."""

    END = "end"
    BEGIN = "begin"

    @property
    def factor(self) -> int:
        return 1 if self is Timing.BEGIN else 0


# Register key -> dataclass attribute
TVM_FIELDS = {
    "n": "n",
    "i": "i_annual_pct",
    "pv": "pv",
    "pmt": "pmt",
    "fv": "fv",
}


@contextmanager
def _arithmetic_guard(operation: str):
    """Re-raise float domain errors (log of a negative, x/0, overflow) as ComputationError."""
    try:
        yield
    except CalculationError:
        raise
    except (ZeroDivisionError, OverflowError, ValueError) as e:
        raise ComputationError(f"{operation} failed: {e}") from e


def _require_finite(value: float, operation: str) -> float:
    if not math.isfinite(value):
        raise ComputationError(f"{operation} result is not a finite number")
    return value


def _growth(rate: float, n: float) -> float:
    """(1+i)^N; math.pow refuses fractional powers of negatives instead of going complex."""
    return math.pow(1 + rate, n)


def _annuity_factor(rate: float, n: float, timing: Timing) -> float:
    """(1+i*type) * ((1+i)^N - 1) / i"""
    return (1 + rate * timing.factor) * ((_growth(rate, n) - 1) / rate)


# =============================================================================
# PURE SOLVERS
# =============================================================================


def calculate_n(
    rate: float, pv: float, pmt: float, fv: float, timing: Timing = Timing.END
) -> float:
    """
    Solve for the number of periods.

    Args:
        rate: Periodic interest rate as decimal
        pv: Present value
        pmt: Periodic payment
        fv: Future value
        timing: Payment timing

    Returns:
        Number of periods (may be fractional)

    Raises:
        DegenerateInputError: If rate and payment are both zero
        ComputationError: If the inputs have no real solution
    """
    with _arithmetic_guard("N"):
        if rate == 0:
            if pmt == 0:
                raise DegenerateInputError("N is undefined when I/YR and PMT are both zero")
            n = -(pv + fv) / pmt
        else:
            adjusted_pmt = pmt * (1 + rate * timing.factor)
            ratio = (adjusted_pmt - fv * rate) / (adjusted_pmt + pv * rate)
            n = math.log(ratio) / math.log(1 + rate)
    return _require_finite(n, "N")


def _balance(rate: float, n: float, pv: float, pmt: float, fv: float, timing: Timing) -> float:
    return pv * _growth(rate, n) + pmt * _annuity_factor(rate, n, timing) + fv


def _balance_derivative(
    rate: float, n: float, pv: float, pmt: float, timing: Timing
) -> float:
    growth = _growth(rate, n)
    growth_prev = math.pow(1 + rate, n - 1)
    return (
        n * pv * growth_prev
        + pmt * (1 + rate * timing.factor) * (n * growth_prev * rate - growth + 1) / (rate * rate)
        + pmt * timing.factor * ((growth - 1) / rate)
    )


def calculate_rate(
    n: float,
    pv: float,
    pmt: float,
    fv: float,
    timing: Timing = Timing.END,
    guess: Optional[float] = None,
) -> RootFindResult:
    """
    Solve for the periodic interest rate with Newton-Raphson.

    Stops when successive iterates differ by less than the solver tolerance.
    Running out of iterations is not an error: the last iterate is returned
    with ``converged=False``.

    Returns:
        RootFindResult holding the periodic rate as decimal

    Raises:
        ComputationError: If an iterate or function value stops being finite
    """
    with _arithmetic_guard("I/YR"):
        result = newton_raphson(
            lambda i: _balance(i, n, pv, pmt, fv, timing),
            lambda i: _balance_derivative(i, n, pv, pmt, timing),
            initial_guess=guess,
            criterion=Criterion.STEP,
        )
    _require_finite(result.value, "I/YR")
    return result


def calculate_pv(
    n: float, rate: float, pmt: float, fv: float, timing: Timing = Timing.END
) -> float:
    """Solve for present value."""
    with _arithmetic_guard("PV"):
        if rate == 0:
            pv = -fv - pmt * n
        else:
            pv = (-fv - pmt * _annuity_factor(rate, n, timing)) / _growth(rate, n)
    return _require_finite(pv, "PV")


def calculate_pmt(
    n: float, rate: float, pv: float, fv: float, timing: Timing = Timing.END
) -> float:
    """
    Solve for the periodic payment.

    Raises:
        ComputationError: If N is zero (no payments to spread the balance over)
    """
    with _arithmetic_guard("PMT"):
        if rate == 0:
            pmt = -(pv + fv) / n
        else:
            pmt = (-fv - pv * _growth(rate, n)) / _annuity_factor(rate, n, timing)
    return _require_finite(pmt, "PMT")


def calculate_fv(
    n: float, rate: float, pv: float, pmt: float, timing: Timing = Timing.END
) -> float:
    """Solve for future value."""
    with _arithmetic_guard("FV"):
        if rate == 0:
            fv = -pv - pmt * n
        else:
            fv = -pv * _growth(rate, n) - pmt * _annuity_factor(rate, n, timing)
    return _require_finite(fv, "FV")


# =============================================================================
# REGISTER SET
# =============================================================================


def _default_payments_per_year() -> float:
    return get_settings().default_payments_per_year


@dataclass
class TvmRegisters:
    """
    The five TVM registers plus P/YR and BEGIN/END.

    Solve methods store into their register and return the value. A failed
    solve raises and leaves every register as it was.
    """

    n: float = 0.0
    i_annual_pct: float = 0.0  # I/YR, e.g. 6.0 for 6%
    pv: float = 0.0
    pmt: float = 0.0
    fv: float = 0.0
    payments_per_year: float = field(default_factory=_default_payments_per_year)
    timing: Timing = Timing.END
    # Outcome of the last successful I/YR solve
    last_rate_solve: Optional[RootFindResult] = field(
        default=None, repr=False, compare=False
    )

    def __post_init__(self):
        if not self.payments_per_year > 0:
            raise InvalidInputError("P/YR must be greater than zero")
        self.timing = Timing(self.timing)

    @property
    def periodic_rate(self) -> float:
        return self.i_annual_pct / 100 / self.payments_per_year

    def get(self, key: str) -> float:
        return getattr(self, _attribute(key))

    def set(self, key: str, value: float) -> float:
        setattr(self, _attribute(key), float(value))
        return float(value)

    def set_payments_per_year(self, value: float) -> float:
        if not value > 0:
            raise InvalidInputError("P/YR must be greater than zero")
        self.payments_per_year = float(value)
        return self.payments_per_year

    def toggle_timing(self) -> Timing:
        self.timing = Timing.END if self.timing is Timing.BEGIN else Timing.BEGIN
        return self.timing

    def reset(self):
        """Clear all registers back to their defaults."""
        defaults = TvmRegisters()
        for f in fields(self):
            setattr(self, f.name, getattr(defaults, f.name))

    def solve_n(self) -> float:
        self.n = calculate_n(self.periodic_rate, self.pv, self.pmt, self.fv, self.timing)
        logger.debug(f"Solved N = {self.n}")
        return self.n

    def solve_i(self) -> float:
        result = calculate_rate(self.n, self.pv, self.pmt, self.fv, self.timing)
        if not result.converged:
            logger.warning(
                f"I/YR solve did not converge after {result.iterations} iterations; "
                f"keeping last iterate {result.value}"
            )
        self.i_annual_pct = result.value * self.payments_per_year * 100
        self.last_rate_solve = result
        logger.debug(f"Solved I/YR = {self.i_annual_pct}")
        return self.i_annual_pct

    def solve_pv(self) -> float:
        self.pv = calculate_pv(self.n, self.periodic_rate, self.pmt, self.fv, self.timing)
        logger.debug(f"Solved PV = {self.pv}")
        return self.pv

    def solve_pmt(self) -> float:
        self.pmt = calculate_pmt(self.n, self.periodic_rate, self.pv, self.fv, self.timing)
        logger.debug(f"Solved PMT = {self.pmt}")
        return self.pmt

    def solve_fv(self) -> float:
        self.fv = calculate_fv(self.n, self.periodic_rate, self.pv, self.pmt, self.timing)
        logger.debug(f"Solved FV = {self.fv}")
        return self.fv

    def solve(self, key: str) -> float:
        """Solve the register named by ``key`` (n, i, pv, pmt or fv)."""
        _attribute(key)
        return getattr(self, f"solve_{key.lower()}")()


def _attribute(key: str) -> str:
    try:
        return TVM_FIELDS[key.lower()]
    except KeyError:
        raise InvalidInputError(f"Unknown TVM register: {key}") from None
