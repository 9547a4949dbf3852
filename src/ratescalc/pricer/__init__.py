"""
Pricers, rates providers, curve calibration and sensitivity calculators.
"""

from .rates_provider import RatesProvider, ImmutableRatesProvider, MarketDataRatesProvider
from .fra import DiscountingFraProductPricer
from .deposit import DiscountingTermDepositProductPricer
from .fx import DiscountingFxSingleProductPricer

__all__ = [
    "RatesProvider",
    "ImmutableRatesProvider",
    "MarketDataRatesProvider",
    "DiscountingFraProductPricer",
    "DiscountingTermDepositProductPricer",
    "DiscountingFxSingleProductPricer",
]
