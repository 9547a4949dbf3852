"""
Calculation task: one measure for one target, across all scenarios.

A task occupies one cell of the results grid. Executing it calls the
calculation function, checks the shape of the result and converts
currency-bearing values into the reporting currency.

Reporting currency resolution:
    1. the reporting rules of the task
    2. the default reporting currency of the function
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..basics.currency import Currency
from ..market.data import ScenarioMarketData
from ..market.keys import FxRateKey
from .config import ReportingRules
from .function import CalculationFunction
from .mappings import CalculationMarketData, MarketDataMappings
from .measure import Measure
from .requirements import FunctionRequirements, MarketDataRequirements
from .result import FailureReason, Result
from .scenario import ScenarioFxConvertible, ScenarioFxRateProvider, ScenarioResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationResult:
    """The result of a task, placed in the results grid."""
    target: Any
    row: int
    column: int
    result: Result


class CalculationTask:
    """
    Calculates one measure for one target.

    Attributes:
        target: The calculation target
        measure: The measure to calculate
        row: Row of the cell in the results grid
        column: Column of the cell in the results grid
        function: The function performing the calculation
        mappings: Mappings from market data keys to identifiers
        reporting_rules: Rules giving the reporting currency
    """

    def __init__(
        self,
        target,
        measure: Measure,
        row: int,
        column: int,
        function: CalculationFunction,
        mappings: MarketDataMappings,
        reporting_rules: ReportingRules,
    ):
        self.target = target
        self.measure = measure
        self.row = row
        self.column = column
        self.function = function
        self.mappings = mappings
        self.reporting_rules = reporting_rules

    @classmethod
    def of(cls, target, measure, row, column, function, mappings, reporting_rules) -> "CalculationTask":
        return cls(target, measure, row, column, function, mappings, reporting_rules)

    def reporting_currency(self) -> Optional[Currency]:
        currency = self.reporting_rules.reporting_currency(self.target)
        if currency is not None:
            return currency
        return self.function.default_reporting_currency(self.target)

    def requirements(self) -> MarketDataRequirements:
        """
        Market data needed by the task.

        Adds the FX rates needed to convert each output currency of the
        function into the reporting currency.
        """
        function_reqs = self.function.requirements(self.target, {self.measure})
        reporting_currency = self.reporting_currency()
        if reporting_currency is not None:
            fx_keys = {
                FxRateKey(ccy, reporting_currency)
                for ccy in function_reqs.output_currencies
                if ccy != reporting_currency
            }
            function_reqs = function_reqs.combined_with(FunctionRequirements.of(single_values=fx_keys))
        return MarketDataRequirements.of(function_reqs, self.mappings)

    def execute(self, market_data: ScenarioMarketData) -> CalculationResult:
        """
        Run the calculation for all scenarios.

        Any exception raised by the function is captured in the result
        as an ERROR failure, so sibling cells are unaffected.
        """
        calc_data = CalculationMarketData(market_data, self.mappings)
        result = Result.wrap(lambda: self._calculate(calc_data))
        result = result.flat_map(lambda value: self._check_scenario_count(value, calc_data))
        result = result.flat_map(lambda value: self._convert_currency(value, calc_data))
        if result.is_failure:
            logger.debug("%s failed: %s", self, result.get_failure())
        return CalculationResult(self.target, self.row, self.column, result)

    def _calculate(self, calc_data: CalculationMarketData) -> Result:
        results = self.function.calculate(self.target, {self.measure}, calc_data)
        result = results.get(self.measure)
        if result is None:
            return Result.failure(
                FailureReason.ERROR,
                f"Function '{type(self.function).__name__}' did not return a result for "
                f"measure '{self.measure}'")
        return result

    def _check_scenario_count(self, value, calc_data: CalculationMarketData) -> Result:
        if isinstance(value, ScenarioResult) and value.scenario_count != calc_data.scenario_count:
            return Result.failure(
                FailureReason.ERROR,
                f"Function '{type(self.function).__name__}' returned {value.scenario_count} values "
                f"for measure '{self.measure}' but the market data has {calc_data.scenario_count} scenarios")
        return Result.success(value)

    def _convert_currency(self, value, calc_data: CalculationMarketData) -> Result:
        if not isinstance(value, ScenarioFxConvertible):
            return Result.success(value)
        reporting_currency = self.reporting_currency()
        if reporting_currency is None:
            return Result.failure(
                FailureReason.ERROR,
                "No reporting currency available. Specify the reporting currency in the reporting "
                "rules or the function must provide a default reporting currency")
        try:
            return Result.success(value.convert_to(reporting_currency, ScenarioFxRateProvider(calc_data)))
        except Exception as e:
            return Result.failure(
                FailureReason.CURRENCY_CONVERSION,
                f"Failed to convert value {value} to currency {reporting_currency}: {e}")

    def __str__(self) -> str:
        return f"CalculationTask[cell=({self.row}, {self.column}), measure={self.measure}]"

    __repr__ = __str__


__all__ = [
    "CalculationResult",
    "CalculationTask",
]
