"""
Calculator Session

One calculator's numeric state: the TVM registers, the cash flow list and the
memory register. Keys map onto methods here; display and key-entry state
belong to whatever drives the session.
"""

import logging
from typing import Optional

from fincalc.calculations.cashflow import CashFlowSeries
from fincalc.calculations.formatting import format_number
from fincalc.calculations.tvm import TvmRegisters

logger = logging.getLogger(__name__)


class Calculator:
    """Financial calculator state."""

    def __init__(
        self,
        registers: Optional[TvmRegisters] = None,
        cash_flows: Optional[CashFlowSeries] = None,
    ):
        self.registers = registers if registers is not None else TvmRegisters()
        self.cash_flows = cash_flows if cash_flows is not None else CashFlowSeries()
        self.memory = 0.0

    # Memory
    def store(self, value: float) -> float:
        """STO"""
        self.memory = float(value)
        return self.memory

    def recall(self) -> float:
        """RCL"""
        return self.memory

    @property
    def memory_in_use(self) -> bool:
        return self.memory != 0

    # Cash flow keys
    def npv(self) -> float:
        """NPV at the current I/YR and P/YR."""
        return self.cash_flows.npv(
            self.registers.i_annual_pct, self.registers.payments_per_year
        )

    def irr(self) -> float:
        """IRR; a successful result also lands in I/YR."""
        rate = self.cash_flows.irr(self.registers.payments_per_year)
        self.registers.i_annual_pct = rate
        return rate

    def clear_all(self):
        """CLEAR ALL: registers, cash flows and memory back to defaults."""
        self.registers.reset()
        self.cash_flows.clear()
        self.memory = 0.0
        logger.debug("Calculator cleared")

    @staticmethod
    def display(value: Optional[float]) -> str:
        return format_number(value)
