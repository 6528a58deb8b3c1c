"""
Calculation Errors

Every engine failure is raised as a CalculationError subclass. The ``kind``
attribute lets callers (the HTTP layer, a UI) decide how to present it.
"""

import enum


class ErrorKind(str, enum.Enum):
    """Machine-readable failure categories."""

    DEGENERATE_INPUT = "degenerate_input"
    COMPUTATION_ERROR = "computation_error"
    NO_INITIAL_CASH_FLOW = "no_initial_cash_flow"
    NO_CASH_FLOWS = "no_cash_flows"
    INSUFFICIENT_CASH_FLOWS = "insufficient_cash_flows"
    DID_NOT_CONVERGE = "did_not_converge"
    DIVISION_BY_ZERO = "division_by_zero"
    INVALID_INPUT = "invalid_input"


class CalculationError(ValueError):
    """Base class for all calculator failures."""

    kind: ErrorKind = ErrorKind.COMPUTATION_ERROR
    default_message = "Calculation failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class DegenerateInputError(CalculationError):
    kind = ErrorKind.DEGENERATE_INPUT
    default_message = "Inputs do not determine a unique solution"


class ComputationError(CalculationError):
    kind = ErrorKind.COMPUTATION_ERROR
    default_message = "Result is not a finite number"


class NoInitialCashFlowError(CalculationError):
    kind = ErrorKind.NO_INITIAL_CASH_FLOW
    default_message = "Enter the initial cash flow (CF0) first"


class NoCashFlowsError(CalculationError):
    kind = ErrorKind.NO_CASH_FLOWS
    default_message = "No cash flows entered"


class InsufficientCashFlowsError(CalculationError):
    kind = ErrorKind.INSUFFICIENT_CASH_FLOWS
    default_message = "Need at least 2 cash flows for IRR calculation"


class DidNotConvergeError(CalculationError):
    kind = ErrorKind.DID_NOT_CONVERGE
    default_message = "IRR calculation did not converge"


class DivisionByZeroError(CalculationError):
    kind = ErrorKind.DIVISION_BY_ZERO
    default_message = "Division by zero"


class InvalidInputError(CalculationError):
    kind = ErrorKind.INVALID_INPUT
    default_message = "Invalid input"
