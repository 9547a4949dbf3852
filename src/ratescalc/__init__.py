"""
ratescalc: multi-scenario calculation engine and curve calibration for rates products

A library for:
- Dispatching (trade type, measure) pairs to calculation functions through
  pricing rules, across market data scenarios, with reporting currency conversion
- Pricing FRAs, term deposits and single FX trades by discounting
- Calibrating curve groups and keeping the calibration Jacobian
- Bucketed PV01, market quote sensitivities and semi-parallel gamma
- Building scenarios by perturbing base market data, and serving calibrated
  curve groups to the engine as market data

Scope: Ibor FRAs, term deposits and single FX exchanges, single and multi
curve discounting.
"""

__version__ = "0.1.0"

# Errors and settings
from .errors import (
    MarketDataNotFoundError,
    ConfigurationError,
    MissingJacobianError,
    CurveNotFoundError,
    ParameterCountMismatchError,
    CalibrationError,
)
from .settings import EngineSettings, CalibrationSettings, configure_logging

# Basics
from .basics import Currency, CurrencyPair, CurrencyAmount, MultiCurrencyAmount, FxRate, FxMatrix, DayCount, IborIndex

# Calculation engine
from .calc import (
    Measure,
    Result,
    FailureReason,
    CalculationRules,
    PricingRule,
    PricingRules,
    ReportingRules,
    Column,
    CalculationTasks,
    CalculationRunner,
)

# Market
from .market import (
    ImmutableMarketData,
    ImmutableScenarioMarketData,
    DiscountCurveKey,
    IborIndexCurveKey,
    FxRateKey,
    CurveGroupKey,
    QuoteKey,
    IndexRateKey,
    CurveGroupDefinition,
    NodalCurveDefinition,
    CurveGroup,
    ScenarioDefinition,
    PerturbationMapping,
    AnyDiscountCurveFilter,
    AnyIndexCurveFilter,
    CurveParallelShifts,
    CurvePointShifts,
)

# Products and pricers
from .product import BuySell, Fra, FraTrade, TermDeposit, TermDepositTrade, FxSingle, FxSingleTrade
from .pricer import (
    ImmutableRatesProvider,
    DiscountingFraProductPricer,
    DiscountingTermDepositProductPricer,
    DiscountingFxSingleProductPricer,
)
from .pricer.calibration import CurveCalibrator, ImmutableRatesProviderGenerator
from .pricer.sensitivity import MarketQuoteSensitivityCalculator, CurveGammaCalculator

# Functions
from .function import CurveGroupMarketDataFunction, standard_pricing_rules

__all__ = [
    "__version__",
    "MarketDataNotFoundError",
    "ConfigurationError",
    "MissingJacobianError",
    "CurveNotFoundError",
    "ParameterCountMismatchError",
    "CalibrationError",
    "EngineSettings",
    "CalibrationSettings",
    "configure_logging",
    "Currency",
    "CurrencyPair",
    "CurrencyAmount",
    "MultiCurrencyAmount",
    "FxRate",
    "FxMatrix",
    "DayCount",
    "IborIndex",
    "Measure",
    "Result",
    "FailureReason",
    "CalculationRules",
    "PricingRule",
    "PricingRules",
    "ReportingRules",
    "Column",
    "CalculationTasks",
    "CalculationRunner",
    "ImmutableMarketData",
    "ImmutableScenarioMarketData",
    "DiscountCurveKey",
    "IborIndexCurveKey",
    "FxRateKey",
    "CurveGroupKey",
    "QuoteKey",
    "IndexRateKey",
    "CurveGroupDefinition",
    "NodalCurveDefinition",
    "CurveGroup",
    "ScenarioDefinition",
    "PerturbationMapping",
    "AnyDiscountCurveFilter",
    "AnyIndexCurveFilter",
    "CurveParallelShifts",
    "CurvePointShifts",
    "BuySell",
    "Fra",
    "FraTrade",
    "TermDeposit",
    "TermDepositTrade",
    "FxSingle",
    "FxSingleTrade",
    "ImmutableRatesProvider",
    "DiscountingFraProductPricer",
    "DiscountingTermDepositProductPricer",
    "DiscountingFxSingleProductPricer",
    "CurveCalibrator",
    "ImmutableRatesProviderGenerator",
    "MarketQuoteSensitivityCalculator",
    "CurveGammaCalculator",
    "CurveGroupMarketDataFunction",
    "standard_pricing_rules",
]
