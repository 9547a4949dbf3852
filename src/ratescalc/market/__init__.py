"""
Market model: market data containers, keys, curves, views, sensitivities
and scenario perturbations.
"""

from .keys import (
    MarketDataKey,
    ObservableKey,
    MarketDataFeed,
    ObservableId,
    DiscountCurveKey,
    IborIndexCurveKey,
    FxRateKey,
    CurveGroupKey,
    QuoteKey,
    IndexRateKey,
)
from .data import (
    MarketDataBox,
    MarketData,
    ImmutableMarketData,
    ScenarioMarketData,
    ImmutableScenarioMarketData,
    empty_time_series,
)
from .sensitivity import (
    ZeroRateSensitivity,
    IborRateSensitivity,
    PointSensitivities,
    CurveCurrencyParameterSensitivity,
    CurveCurrencyParameterSensitivities,
)
from .view import DiscountFactors, ZeroRateDiscountFactors, SimpleDiscountFactors, DiscountIborIndexRates
from .definition import (
    CurveNode,
    TermDepositCurveNode,
    FraCurveNode,
    NodalCurveDefinition,
    CurveGroupEntry,
    CurveGroupDefinition,
)
from .scenario import (
    MarketDataFilter,
    AnyDiscountCurveFilter,
    AnyIndexCurveFilter,
    CurveNameFilter,
    IdentifierFilter,
    ScenarioPerturbation,
    PerturbationMapping,
    ScenarioDefinition,
)
from .curve.perturb import ShiftType, CurveParallelShifts, CurvePointShifts
from .curve.group import CurveGroup

__all__ = [
    "MarketDataKey",
    "ObservableKey",
    "MarketDataFeed",
    "ObservableId",
    "DiscountCurveKey",
    "IborIndexCurveKey",
    "FxRateKey",
    "CurveGroupKey",
    "QuoteKey",
    "IndexRateKey",
    "MarketDataBox",
    "MarketData",
    "ImmutableMarketData",
    "ScenarioMarketData",
    "ImmutableScenarioMarketData",
    "empty_time_series",
    "ZeroRateSensitivity",
    "IborRateSensitivity",
    "PointSensitivities",
    "CurveCurrencyParameterSensitivity",
    "CurveCurrencyParameterSensitivities",
    "DiscountFactors",
    "ZeroRateDiscountFactors",
    "SimpleDiscountFactors",
    "DiscountIborIndexRates",
    "CurveNode",
    "TermDepositCurveNode",
    "FraCurveNode",
    "NodalCurveDefinition",
    "CurveGroupEntry",
    "CurveGroupDefinition",
    "MarketDataFilter",
    "AnyDiscountCurveFilter",
    "AnyIndexCurveFilter",
    "CurveNameFilter",
    "IdentifierFilter",
    "ScenarioPerturbation",
    "PerturbationMapping",
    "ScenarioDefinition",
    "ShiftType",
    "CurveParallelShifts",
    "CurvePointShifts",
    "CurveGroup",
]
