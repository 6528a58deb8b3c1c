"""
Newton-Raphson Root Finding

Shared solver used by the interest-rate (I/YR) solve and by IRR.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from fincalc.calculations.errors import ComputationError
from fincalc.config import get_settings

logger = logging.getLogger(__name__)


class Criterion(enum.Enum):
    """When to stop iterating."""

    STEP = "step"  # |x_new - x| < tolerance
    RESIDUAL = "residual"  # |f(x)| < tolerance


@dataclass
class RootFindResult:
    """Outcome of a root search. ``converged=False`` carries the last iterate."""

    value: float
    converged: bool
    iterations: int


def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise ComputationError(f"Newton-Raphson {what} is not finite")
    return value


def newton_raphson(
    func: Callable[[float], float],
    derivative: Callable[[float], float],
    initial_guess: Optional[float] = None,
    max_iterations: Optional[int] = None,
    tolerance: Optional[float] = None,
    criterion: Criterion = Criterion.STEP,
) -> RootFindResult:
    """
    Find a root of ``func`` with Newton-Raphson.

    Args:
        func: Function whose root is sought
        derivative: Analytic derivative of ``func``
        initial_guess: Starting point (settings default 0.1)
        max_iterations: Iteration budget (settings default 100)
        tolerance: Absolute tolerance (settings default 1e-6)
        criterion: STEP compares successive iterates, RESIDUAL compares |f(x)|

    Returns:
        RootFindResult; not converged if the budget runs out

    Raises:
        ComputationError: If the derivative is zero or a value stops being finite
    """
    settings = get_settings()
    x = settings.solver_initial_guess if initial_guess is None else initial_guess
    max_iterations = (
        settings.solver_max_iterations if max_iterations is None else max_iterations
    )
    tolerance = settings.solver_tolerance if tolerance is None else tolerance

    for iteration in range(1, max_iterations + 1):
        fx = _finite(func(x), "function value")

        if criterion is Criterion.RESIDUAL and abs(fx) < tolerance:
            return RootFindResult(value=x, converged=True, iterations=iteration)

        dfx = _finite(derivative(x), "derivative")
        if dfx == 0:
            raise ComputationError("Newton-Raphson derivative is zero")

        x_new = _finite(x - fx / dfx, "iterate")

        if criterion is Criterion.STEP and abs(x_new - x) < tolerance:
            return RootFindResult(value=x_new, converged=True, iterations=iteration)

        x = x_new

    logger.debug(f"Newton-Raphson stopped after {max_iterations} iterations at {x}")
    return RootFindResult(value=x, converged=False, iterations=max_iterations)
