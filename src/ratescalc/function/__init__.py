"""
Calculation functions and function groups for the library's products, and
the market data function building calibrated curves.
"""

from .fra import FraCalculationFunction, FraFunctionGroups
from .deposit import TermDepositCalculationFunction, TermDepositFunctionGroups
from .fx import FxSingleCalculationFunction, FxSingleFunctionGroups
from .marketdata import CurveGroupMarketDataFunction
from .standard import standard_pricing_rules

__all__ = [
    "FraCalculationFunction",
    "FraFunctionGroups",
    "TermDepositCalculationFunction",
    "TermDepositFunctionGroups",
    "FxSingleCalculationFunction",
    "FxSingleFunctionGroups",
    "CurveGroupMarketDataFunction",
    "standard_pricing_rules",
]
