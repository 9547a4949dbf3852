"""
Basic building blocks: currencies, day counts, tenors and indices.
"""

from .currency import (
    Currency,
    CurrencyPair,
    CurrencyAmount,
    MultiCurrencyAmount,
    FxRate,
    FxMatrix,
    FxRateProvider,
    FxConvertible,
)
from .conventions import DayCount, year_fraction
from .dates import add_tenor, add_months, parse_tenor, tenor_to_months
from .index import IborIndex, USD_LIBOR_3M, USD_LIBOR_6M, GBP_LIBOR_3M, EUR_EURIBOR_3M

__all__ = [
    "Currency",
    "CurrencyPair",
    "CurrencyAmount",
    "MultiCurrencyAmount",
    "FxRate",
    "FxMatrix",
    "FxRateProvider",
    "FxConvertible",
    "DayCount",
    "year_fraction",
    "add_tenor",
    "add_months",
    "parse_tenor",
    "tenor_to_months",
    "IborIndex",
    "USD_LIBOR_3M",
    "USD_LIBOR_6M",
    "GBP_LIBOR_3M",
    "EUR_EURIBOR_3M",
]
