"""
Calculation engine.

Maps (target type, measure) pairs to calculation functions through pricing
rules, resolves market data requirements, runs the functions over all
scenarios and converts results into the reporting currency.
"""

from .result import FailureReason, Failure, Result
from .measure import Measure
from .target import CalculationTarget
from .scenario import (
    ScenarioResult,
    ScenarioFxConvertible,
    DefaultScenarioResult,
    ValuesArray,
    CurrencyValuesArray,
    MultiCurrencyValuesArray,
    FxConvertibleList,
    ScenarioFxRateProvider,
)
from .requirements import FunctionRequirements, MarketDataRequirements
from .mappings import (
    MarketDataMappings,
    MarketDataRules,
    MarketDataRule,
    CalculationMarketData,
)
from .function import CalculationFunction, unsupported_measure_failure
from .config import (
    FunctionConfig,
    FunctionGroup,
    DefaultFunctionGroup,
    ConfiguredFunctionGroup,
    PricingRule,
    PricingRules,
    ReportingRules,
    CalculationRules,
)
from .task import CalculationTask, CalculationResult
from .runner import Column, CalculationTasks, CalculationRunner, Results

__all__ = [
    "FailureReason",
    "Failure",
    "Result",
    "Measure",
    "CalculationTarget",
    "ScenarioResult",
    "ScenarioFxConvertible",
    "DefaultScenarioResult",
    "ValuesArray",
    "CurrencyValuesArray",
    "MultiCurrencyValuesArray",
    "FxConvertibleList",
    "ScenarioFxRateProvider",
    "FunctionRequirements",
    "MarketDataRequirements",
    "MarketDataMappings",
    "MarketDataRules",
    "MarketDataRule",
    "CalculationMarketData",
    "CalculationFunction",
    "unsupported_measure_failure",
    "FunctionConfig",
    "FunctionGroup",
    "DefaultFunctionGroup",
    "ConfiguredFunctionGroup",
    "PricingRule",
    "PricingRules",
    "ReportingRules",
    "CalculationRules",
    "CalculationTask",
    "CalculationResult",
    "Column",
    "CalculationTasks",
    "CalculationRunner",
    "Results",
]
