"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fincalc.calculations.cashflow import CashFlowSeries
from fincalc.calculations.session import Calculator
from fincalc.calculations.tvm import TvmRegisters


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def registers():
    """Fresh TVM registers (P/YR=12, END mode)."""
    return TvmRegisters()


@pytest.fixture
def annual_registers():
    """TVM registers with one payment per year."""
    return TvmRegisters(payments_per_year=1)


@pytest.fixture
def uneven_series():
    """CF0=-1000, CF1=500 (N1=2), CF2=800."""
    series = CashFlowSeries()
    series.set_initial(-1000)
    series.append(500)
    series.set_last_frequency(2)
    series.append(800)
    return series


@pytest.fixture
def calculator():
    """Calculator session with default state."""
    return Calculator()
