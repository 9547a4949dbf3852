"""
Rates providers: the market view used by pricers.

Provides:
- RatesProvider: discount factors, index rates, FX rates and curve
  parameter sensitivities
- ImmutableRatesProvider: curves held in dictionaries
- MarketDataRatesProvider: curves read from a single scenario of market data
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterable, Mapping, Optional

import pandas as pd

from ..basics.currency import Currency, FxMatrix, FxRateProvider
from ..basics.index import IborIndex
from ..errors import MarketDataNotFoundError
from ..market.curve.curves import Curve
from ..market.curve.metadata import CurveName
from ..market.data import MarketData, empty_time_series
from ..market.keys import DiscountCurveKey, FxRateKey, IborIndexCurveKey, IndexRateKey
from ..market.sensitivity import (
    CurveCurrencyParameterSensitivities,
    IborRateSensitivity,
    PointSensitivities,
    ZeroRateSensitivity,
)
from ..market.view import DiscountFactors, DiscountIborIndexRates


class RatesProvider(FxRateProvider, ABC):
    """
    Market data for pricing rates products.

    Implementations expose a `valuation_date` attribute.
    """

    valuation_date: date

    @abstractmethod
    def discount_curve(self, currency: Currency) -> Curve:
        pass

    @abstractmethod
    def index_curve(self, index: IborIndex) -> Curve:
        pass

    @abstractmethod
    def time_series(self, index: IborIndex) -> pd.Series:
        pass

    @abstractmethod
    def curves(self) -> Dict[CurveName, Curve]:
        """Every curve of the provider by name."""

    def discount_factors(self, currency: Currency) -> DiscountFactors:
        return DiscountFactors.of(currency, self.valuation_date, self.discount_curve(currency))

    def ibor_index_rates(self, index: IborIndex) -> DiscountIborIndexRates:
        dfs = DiscountFactors.of(index.currency, self.valuation_date, self.index_curve(index))
        return DiscountIborIndexRates(index, dfs, self.time_series(index))

    def find_curve(self, name: CurveName) -> Optional[Curve]:
        return self.curves().get(name)

    def curve_parameter_sensitivity(self, sensitivities: PointSensitivities) -> CurveCurrencyParameterSensitivities:
        """
        Convert point sensitivities into curve parameter sensitivities.

        Raises:
            TypeError: For point sensitivity types the provider does not handle
        """
        result = CurveCurrencyParameterSensitivities.empty()
        for point in sensitivities:
            if isinstance(point, ZeroRateSensitivity):
                converted = self.discount_factors(point.curve_currency).curve_parameter_sensitivity(point)
            elif isinstance(point, IborRateSensitivity):
                converted = self.ibor_index_rates(point.index).curve_parameter_sensitivity(point)
            else:
                raise TypeError(f"Unsupported point sensitivity type: {type(point).__name__}")
            result = result.combined_with(converted)
        return result


@dataclass(frozen=True)
class ImmutableRatesProvider(RatesProvider):
    """
    Rates provider backed by dictionaries of curves.

    Attributes:
        valuation_date: Valuation date
        discount_curves: Discount curve by currency
        index_curves: Forward curve by index
        fx_matrix: FX rates
        index_fixings: Historic fixings by index
    """
    valuation_date: date
    discount_curves: Mapping[Currency, Curve] = field(default_factory=dict)
    index_curves: Mapping[IborIndex, Curve] = field(default_factory=dict)
    fx_matrix: FxMatrix = field(default_factory=FxMatrix.empty)
    index_fixings: Mapping[IborIndex, pd.Series] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "discount_curves", dict(self.discount_curves))
        object.__setattr__(self, "index_curves", dict(self.index_curves))
        object.__setattr__(self, "index_fixings", dict(self.index_fixings))

    __hash__ = None

    def discount_curve(self, currency: Currency) -> Curve:
        try:
            return self.discount_curves[currency]
        except KeyError:
            raise MarketDataNotFoundError(DiscountCurveKey(currency), f"No discount curve for currency {currency}") from None

    def index_curve(self, index: IborIndex) -> Curve:
        try:
            return self.index_curves[index]
        except KeyError:
            raise MarketDataNotFoundError(IborIndexCurveKey(index), f"No forward curve for index {index}") from None

    def time_series(self, index: IborIndex) -> pd.Series:
        return self.index_fixings.get(index, empty_time_series())

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        return self.fx_matrix.fx_rate(base, counter)

    def curves(self) -> Dict[CurveName, Curve]:
        result = {c.name: c for c in self.discount_curves.values()}
        result.update({c.name: c for c in self.index_curves.values()})
        return result

    def with_curves(
        self,
        discount_curves: Optional[Mapping[Currency, Curve]] = None,
        index_curves: Optional[Mapping[IborIndex, Curve]] = None,
    ) -> "ImmutableRatesProvider":
        """Copy with the given curves added or replaced; this provider is unchanged."""
        discount = dict(self.discount_curves)
        discount.update(discount_curves or {})
        index = dict(self.index_curves)
        index.update(index_curves or {})
        return replace(self, discount_curves=discount, index_curves=index)

    def with_fixings(self, index: IborIndex, fixings: pd.Series) -> "ImmutableRatesProvider":
        all_fixings = dict(self.index_fixings)
        all_fixings[index] = fixings
        return replace(self, index_fixings=all_fixings)


class MarketDataRatesProvider(RatesProvider):
    """
    Rates provider reading one scenario of market data by key.

    Discount curves come from DiscountCurveKey, forward curves from
    IborIndexCurveKey, fixings from IndexRateKey time series and FX rates
    from FxRateKey values.

    Key based market data cannot list its contents, so `curves()` only
    returns the curves of the given curve keys.
    """

    def __init__(self, market_data: MarketData, curve_keys: Iterable = ()):
        self._market_data = market_data
        self._curve_keys = tuple(curve_keys)

    @property
    def market_data(self) -> MarketData:
        return self._market_data

    @property
    def valuation_date(self) -> date:
        return self._market_data.valuation_date

    def discount_curve(self, currency: Currency) -> Curve:
        return self._market_data.get_value(DiscountCurveKey(currency))

    def index_curve(self, index: IborIndex) -> Curve:
        return self._market_data.get_value(IborIndexCurveKey(index))

    def time_series(self, index: IborIndex) -> pd.Series:
        return self._market_data.get_time_series(IndexRateKey(index))

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        if base == counter:
            return 1.0
        rate = self._market_data.find_value(FxRateKey(base, counter))
        if rate is None:
            rate = self._market_data.get_value(FxRateKey(counter, base))
        return rate.fx_rate(base, counter)

    def curves(self) -> Dict[CurveName, Curve]:
        result = {}
        for key in self._curve_keys:
            curve = self._market_data.find_value(key)
            if curve is not None:
                result[curve.name] = curve
        return result


__all__ = [
    "RatesProvider",
    "ImmutableRatesProvider",
    "MarketDataRatesProvider",
]
