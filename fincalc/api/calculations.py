"""
Financial calculation API endpoints.

Stateless: each request carries the register / cash flow values it needs and
gets back the computed value plus its display string.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from fincalc.calculations import arithmetic
from fincalc.calculations.cashflow import CashFlow, CashFlowSeries
from fincalc.calculations.errors import CalculationError, InvalidInputError
from fincalc.calculations.formatting import format_number
from fincalc.calculations.tvm import Timing, TvmRegisters
from fincalc.config import get_settings

router = APIRouter()


def _default_payments_per_year() -> float:
    return get_settings().default_payments_per_year


def _bad_request(error: CalculationError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"message": str(error), "kind": error.kind.value},
    )


class ValueResponse(BaseModel):
    """A computed value and how the calculator would display it."""

    value: float
    display: str


# =============================================================================
# TVM
# =============================================================================


class TvmRegistersModel(BaseModel):
    """TVM register values."""

    n: float = 0.0
    i_annual_pct: float = 0.0
    pv: float = 0.0
    pmt: float = 0.0
    fv: float = 0.0
    payments_per_year: float = Field(default_factory=_default_payments_per_year, gt=0)
    timing: Timing = Timing.END


class TvmSolveInput(TvmRegistersModel):
    """Registers plus the one to solve for."""

    solve_for: Literal["n", "i", "pv", "pmt", "fv"]


class TvmSolveResponse(ValueResponse):
    """Solved value with the full register set after the solve."""

    solve_for: str
    registers: TvmRegistersModel
    converged: Optional[bool] = None  # only reported for I/YR


@router.post("/tvm/solve", response_model=TvmSolveResponse)
async def solve_tvm(inputs: TvmSolveInput):
    """Solve one TVM register from the other four."""
    try:
        registers = TvmRegisters(
            n=inputs.n,
            i_annual_pct=inputs.i_annual_pct,
            pv=inputs.pv,
            pmt=inputs.pmt,
            fv=inputs.fv,
            payments_per_year=inputs.payments_per_year,
            timing=inputs.timing,
        )
        value = registers.solve(inputs.solve_for)
    except CalculationError as e:
        raise _bad_request(e)

    converged = None
    if inputs.solve_for == "i":
        converged = registers.last_rate_solve.converged

    return TvmSolveResponse(
        solve_for=inputs.solve_for,
        value=value,
        display=format_number(value),
        registers=TvmRegistersModel(
            n=registers.n,
            i_annual_pct=registers.i_annual_pct,
            pv=registers.pv,
            pmt=registers.pmt,
            fv=registers.fv,
            payments_per_year=registers.payments_per_year,
            timing=registers.timing,
        ),
        converged=converged,
    )


# =============================================================================
# CASH FLOWS
# =============================================================================


class CashFlowModel(BaseModel):
    """A CFj entry; ``frequency`` is Nj."""

    amount: float
    frequency: int = Field(default=1, ge=1)


class NPVInput(BaseModel):
    """Input for NPV calculation."""

    cash_flows: List[CashFlowModel]
    annual_rate: float  # I/YR in percent
    payments_per_year: float = Field(default_factory=_default_payments_per_year, gt=0)


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[CashFlowModel]
    payments_per_year: float = Field(default_factory=_default_payments_per_year, gt=0)


class IRRResponse(ValueResponse):
    """Annual IRR in percent, plus the periodic rate as decimal."""

    periodic_rate: float


def _series(cash_flows: List[CashFlowModel]) -> CashFlowSeries:
    return CashFlowSeries([CashFlow(cf.amount, cf.frequency) for cf in cash_flows])


@router.post("/cashflows/npv", response_model=ValueResponse)
async def calculate_npv_endpoint(inputs: NPVInput):
    """NPV of the cash flow list at I/YR."""
    try:
        npv = _series(inputs.cash_flows).npv(inputs.annual_rate, inputs.payments_per_year)
    except CalculationError as e:
        raise _bad_request(e)
    return ValueResponse(value=npv, display=format_number(npv))


@router.post("/cashflows/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """IRR of the cash flow list, annualized by P/YR."""
    try:
        annual = _series(inputs.cash_flows).irr(inputs.payments_per_year)
    except CalculationError as e:
        raise _bad_request(e)
    return IRRResponse(
        value=annual,
        display=format_number(annual),
        periodic_rate=annual / inputs.payments_per_year / 100,
    )


# =============================================================================
# ARITHMETIC
# =============================================================================

BINARY_OPERATIONS = {
    "+": lambda x, y: arithmetic.apply_operator("+", x, y),
    "-": lambda x, y: arithmetic.apply_operator("-", x, y),
    "*": lambda x, y: arithmetic.apply_operator("*", x, y),
    "/": lambda x, y: arithmetic.apply_operator("/", x, y),
    "y^x": arithmetic.power,
    "%": arithmetic.percentage,
    "%CHG": arithmetic.percent_change,
}

UNARY_OPERATIONS = {
    "1/x": arithmetic.reciprocal,
    "x²": arithmetic.square,
    "√x": arithmetic.square_root,
    "x!": arithmetic.factorial,
}


class ArithmeticInput(BaseModel):
    """
    Input for an arithmetic key.

    Binary keys use ``x`` as the first operand (the value entered before the
    key) and ``y`` as the second.
    """

    operation: str
    x: float
    y: Optional[float] = None


@router.post("/arithmetic", response_model=ValueResponse)
async def calculate_arithmetic(inputs: ArithmeticInput):
    """Evaluate a four-function or math key."""
    try:
        if inputs.operation in UNARY_OPERATIONS:
            result = UNARY_OPERATIONS[inputs.operation](inputs.x)
        elif inputs.operation in BINARY_OPERATIONS:
            if inputs.y is None:
                raise InvalidInputError(f"{inputs.operation} needs a second operand")
            result = BINARY_OPERATIONS[inputs.operation](inputs.x, inputs.y)
        else:
            raise InvalidInputError(f"Unknown operation: {inputs.operation}")
    except CalculationError as e:
        raise _bad_request(e)
    return ValueResponse(value=result, display=format_number(result))


@router.get("/format")
async def format_value(value: float):
    """Display string for a number."""
    return {"display": format_number(value)}
