"""
Calculation function interface.

A calculation function computes one or more measures for a target type
across all scenarios of a calculation. It declares the market data it needs
up front so that the market data can be assembled before the run.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Set

from ..basics.currency import Currency
from .measure import Measure
from .requirements import FunctionRequirements
from .result import FailureReason, Result


class CalculationFunction(ABC):
    """Computes measures for a calculation target."""

    @abstractmethod
    def supported_measures(self) -> Set[Measure]:
        pass

    @abstractmethod
    def requirements(self, target, measures: Set[Measure]) -> FunctionRequirements:
        pass

    @abstractmethod
    def calculate(self, target, measures: Set[Measure], market_data) -> Dict[Measure, Result]:
        """
        Calculate the measures for all scenarios.

        Args:
            target: The calculation target
            measures: Measures to calculate
            market_data: CalculationMarketData for all scenarios

        Returns:
            One Result per requested measure; values are ScenarioResults
        """

    def default_reporting_currency(self, target) -> Optional[Currency]:
        """Reporting currency used when the reporting rules give none."""
        return None


def unsupported_measure_failure(measure: Measure) -> Result:
    return Result.failure(FailureReason.INVALID_INPUT, f"Unsupported measure: {measure}")


__all__ = [
    "CalculationFunction",
    "unsupported_measure_failure",
]
