"""
Sensitivity calculators built on curve parameter sensitivities.
"""

from .market_quote import MarketQuoteSensitivityCalculator
from .gamma import CurveGammaCalculator, ONE_BASIS_POINT

__all__ = [
    "MarketQuoteSensitivityCalculator",
    "CurveGammaCalculator",
    "ONE_BASIS_POINT",
]
