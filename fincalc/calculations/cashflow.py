"""
Cash Flow Register Calculations

Uneven cash flow list (CF0, CF1..CFj with Nj repeat counts) and the NPV / IRR
keys that work on it.

Periods are counted cumulatively across repeats: with CF1=500 (N1=2) and
CF2=800, the 500 is discounted at periods 1 and 2 and the 800 at period 3.
CF0 sits at period 0 and its repeat count is ignored.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np

from fincalc.calculations.errors import (
    ComputationError,
    DidNotConvergeError,
    InsufficientCashFlowsError,
    InvalidInputError,
    NoCashFlowsError,
    NoInitialCashFlowError,
)
from fincalc.calculations.rootfinding import Criterion, newton_raphson

logger = logging.getLogger(__name__)


@dataclass
class CashFlow:
    """A single CFj entry with its Nj repeat count."""

    amount: float
    frequency: int = 1


class CashFlowSeries:
    """Ordered CF0..CFj list."""

    def __init__(self, flows: Optional[List[CashFlow]] = None):
        self._flows: List[CashFlow] = []
        for flow in flows or []:
            self._validate_frequency(flow.frequency)
            self._flows.append(CashFlow(float(flow.amount), int(flow.frequency)))

    def __len__(self) -> int:
        return len(self._flows)

    def __iter__(self) -> Iterator[CashFlow]:
        return iter(self._flows)

    def __getitem__(self, index: int) -> CashFlow:
        return self._flows[index]

    @property
    def flows(self) -> List[CashFlow]:
        return list(self._flows)

    @staticmethod
    def _validate_frequency(frequency: int):
        if int(frequency) != frequency or frequency < 1:
            raise InvalidInputError("Cash flow frequency must be a whole number >= 1")

    def clear(self):
        self._flows = []

    def set_initial(self, amount: float) -> float:
        """CFo: start a new list with the initial cash flow."""
        self._flows = [CashFlow(float(amount), 1)]
        return self._flows[0].amount

    def append(self, amount: float) -> int:
        """
        CFj: add the next cash flow.

        Returns:
            Index j of the new entry
        """
        if not self._flows:
            raise NoInitialCashFlowError()
        self._flows.append(CashFlow(float(amount), 1))
        return len(self._flows) - 1

    def set_frequency(self, index: int, frequency: int) -> int:
        """Set Nj for the entry at ``index``."""
        if not self._flows:
            raise NoCashFlowsError()
        self._validate_frequency(frequency)
        if not 0 <= index < len(self._flows):
            raise InvalidInputError(f"No cash flow at index {index}")
        self._flows[index].frequency = int(frequency)
        return self._flows[index].frequency

    def set_last_frequency(self, frequency: int) -> int:
        """Nj: repeat count for the most recently entered cash flow."""
        if not self._flows:
            raise NoCashFlowsError()
        return self.set_frequency(len(self._flows) - 1, frequency)

    @property
    def initial(self) -> float:
        if not self._flows:
            raise NoCashFlowsError()
        return self._flows[0].amount

    def expanded(self) -> np.ndarray:
        """Per-period amounts for periods 1..total_periods (CF0 excluded)."""
        rest = self._flows[1:]
        return np.repeat(
            np.array([f.amount for f in rest], dtype=float),
            np.array([f.frequency for f in rest], dtype=int),
        )

    @property
    def total_periods(self) -> int:
        return sum(f.frequency for f in self._flows[1:])

    def npv(self, annual_rate_pct: float, payments_per_year: float) -> float:
        """
        NPV key: discount the list at I/YR.

        Args:
            annual_rate_pct: Annual rate in percent (e.g., 10 for 10%)
            payments_per_year: P/YR

        Returns:
            Net present value

        Raises:
            NoCashFlowsError: If no cash flows have been entered
        """
        if not self._flows:
            raise NoCashFlowsError()
        rate = annual_rate_pct / 100 / payments_per_year
        value = calculate_npv(self, rate)
        if not math.isfinite(value):
            raise ComputationError(f"NPV at {annual_rate_pct}% is not a finite number")
        logger.debug(f"NPV at {annual_rate_pct}% = {value}")
        return value

    def irr(self, payments_per_year: float) -> float:
        """
        IRR key: annual rate in percent at which NPV is zero.

        Raises:
            InsufficientCashFlowsError: If fewer than 2 cash flows were entered
            DidNotConvergeError: If Newton-Raphson does not get |NPV| under tolerance
        """
        if len(self._flows) < 2:
            raise InsufficientCashFlowsError()
        result = calculate_irr(self)
        annual = result * payments_per_year * 100
        logger.debug(f"IRR = {annual}%")
        return annual


# =============================================================================
# NPV / IRR
# =============================================================================


def _discount_terms(series: CashFlowSeries, rate: float):
    amounts = series.expanded()
    periods = np.arange(1, amounts.size + 1, dtype=float)
    return amounts, periods, 1.0 + rate


def calculate_npv(series: CashFlowSeries, rate: float) -> float:
    """
    NPV at a periodic rate.

    NPV = CF0 + sum over expanded periods t of CF_t / (1+rate)^t
    """
    amounts, periods, base = _discount_terms(series, rate)
    with np.errstate(all="ignore"):
        value = series.initial + float(np.sum(amounts / base ** periods))
    return value


def npv_derivative(series: CashFlowSeries, rate: float) -> float:
    """d(NPV)/d(rate) = sum of -t * CF_t / (1+rate)^(t+1)."""
    amounts, periods, base = _discount_terms(series, rate)
    with np.errstate(all="ignore"):
        value = float(np.sum(-periods * amounts / base ** (periods + 1)))
    return value


def calculate_irr(series: CashFlowSeries, guess: Optional[float] = None) -> float:
    """
    Periodic IRR using Newton-Raphson, stopping once |NPV| < tolerance.

    Returns:
        Periodic IRR as decimal (e.g., 0.10 for 10%)

    Raises:
        InsufficientCashFlowsError: If fewer than 2 cash flows
        DidNotConvergeError: If the iteration budget runs out, or the
            iteration leaves the real line
    """
    if len(series) < 2:
        raise InsufficientCashFlowsError()

    try:
        result = newton_raphson(
            lambda r: calculate_npv(series, r),
            lambda r: npv_derivative(series, r),
            initial_guess=guess,
            criterion=Criterion.RESIDUAL,
        )
    except ComputationError as e:
        logger.warning(f"IRR iteration broke down: {e}")
        raise DidNotConvergeError(f"IRR calculation did not converge: {e}") from e

    if not result.converged:
        logger.warning(f"IRR did not converge after {result.iterations} iterations")
        raise DidNotConvergeError()
    return result.value
