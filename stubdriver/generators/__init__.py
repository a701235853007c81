"""
Source generators for stubs, drivers and the generation summary.
"""

from stubdriver.generators.values import ValueGenerator
from stubdriver.generators.stub import StubGenerator
from stubdriver.generators.driver import DriverGenerator
from stubdriver.generators.report import SummaryGenerator

__all__ = ['ValueGenerator', 'StubGenerator', 'DriverGenerator', 'SummaryGenerator']
