"""
Views of curves as discount factors and index rates.

Provides:
- DiscountFactors: discount factors of a currency from a curve
  - ZeroRateDiscountFactors: curve of continuously compounded zero rates
  - SimpleDiscountFactors: curve of discount factors
- DiscountIborIndexRates: Ibor forward rates from a discount factor curve,
  with historic fixings before the valuation date

Conventions:
    Relative time is the year fraction from the valuation date using the
    curve's day count. Zero rates are continuously compounded:
    DF(t) = exp(-z(t) * t).
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

import numpy as np
import pandas as pd

from ..basics.conventions import DayCount
from ..basics.currency import Currency
from ..basics.index import IborIndex
from .curve.curves import Curve
from .curve.metadata import ValueType
from .data import empty_time_series
from .sensitivity import (
    CurveCurrencyParameterSensitivities,
    CurveCurrencyParameterSensitivity,
    IborRateSensitivity,
    PointSensitivities,
    ZeroRateSensitivity,
)


class DiscountFactors(ABC):
    """Discount factors for one currency."""

    def __init__(self, currency: Currency, valuation_date: date, curve: Curve):
        day_count = curve.metadata.day_count
        if day_count is None:
            raise ValueError(f"Curve '{curve.name}' must define a day count in its metadata")
        self.currency = currency
        self.valuation_date = valuation_date
        self.curve = curve
        self.day_count: DayCount = day_count

    @staticmethod
    def of(currency: Currency, valuation_date: date, curve: Curve) -> "DiscountFactors":
        """
        Discount factors backed by the curve, chosen by the curve's y value type.

        Raises:
            ValueError: If the y value type is neither zero rate nor discount factor
        """
        y_type = curve.metadata.y_value_type
        if y_type == ValueType.ZERO_RATE:
            return ZeroRateDiscountFactors(currency, valuation_date, curve)
        if y_type == ValueType.DISCOUNT_FACTOR:
            return SimpleDiscountFactors(currency, valuation_date, curve)
        raise ValueError(
            f"Unable to create discount factors from curve '{curve.name}' with y value type {y_type.value}")

    @property
    def curve_name(self):
        return self.curve.name

    @property
    def parameter_count(self) -> int:
        return self.curve.parameter_count

    def relative_time(self, d: date) -> float:
        return self.day_count.year_fraction(self.valuation_date, d)

    @abstractmethod
    def discount_factor(self, d: date) -> float:
        pass

    @abstractmethod
    def zero_rate(self, d: date) -> float:
        """Continuously compounded zero rate to the date."""

    @abstractmethod
    def _zero_rate_parameter_sensitivity(self, d: date) -> np.ndarray:
        """Sensitivity of the zero rate at the date to each curve parameter."""

    def zero_rate_point_sensitivity(self, d: date, currency: Optional[Currency] = None) -> ZeroRateSensitivity:
        """
        Point sensitivity of the discount factor to the zero rate at the date.

        d DF / d z = -t * DF
        """
        t = self.relative_time(d)
        return ZeroRateSensitivity(
            self.currency, d, currency or self.currency, -t * self.discount_factor(d))

    def curve_parameter_sensitivity(self, point: ZeroRateSensitivity) -> CurveCurrencyParameterSensitivities:
        """Convert a zero rate point sensitivity into curve parameter sensitivities."""
        sens = point.sensitivity * self._zero_rate_parameter_sensitivity(point.date)
        return CurveCurrencyParameterSensitivities.of(
            CurveCurrencyParameterSensitivity(self.curve.metadata, point.currency, sens))

    def with_curve(self, curve: Curve) -> "DiscountFactors":
        return DiscountFactors.of(self.currency, self.valuation_date, curve)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.currency}, {self.valuation_date}, {self.curve.name})"


class ZeroRateDiscountFactors(DiscountFactors):
    """Discount factors from a curve of continuously compounded zero rates."""

    def discount_factor(self, d: date) -> float:
        t = self.relative_time(d)
        return float(np.exp(-self.curve.y_value(t) * t))

    def zero_rate(self, d: date) -> float:
        return self.curve.y_value(self.relative_time(d))

    def _zero_rate_parameter_sensitivity(self, d: date) -> np.ndarray:
        return self.curve.y_value_parameter_sensitivity(self.relative_time(d))


class SimpleDiscountFactors(DiscountFactors):
    """Discount factors read directly from a curve of discount factors."""

    def discount_factor(self, d: date) -> float:
        return float(self.curve.y_value(self.relative_time(d)))

    def zero_rate(self, d: date) -> float:
        t = max(self.relative_time(d), 1e-6)
        return float(-np.log(self.curve.y_value(t)) / t)

    def _zero_rate_parameter_sensitivity(self, d: date) -> np.ndarray:
        # z = -ln(DF) / t  =>  dz/dp = -1 / (t * DF) * dDF/dp
        t = self.relative_time(d)
        if t <= 0:
            return np.zeros(self.curve.parameter_count)
        df = self.curve.y_value(t)
        return -1.0 / (t * df) * self.curve.y_value_parameter_sensitivity(t)


class DiscountIborIndexRates:
    """
    Ibor index rates implied by a discount factor curve.

    Forward rate for a fixing date with accrual [s, e] and year fraction tau:
        F = (DF(s) / DF(e) - 1) / tau

    Fixings before the valuation date come from the time series. On the
    valuation date a fixing is used if present, otherwise the forward.
    """

    def __init__(
        self,
        index: IborIndex,
        discount_factors: DiscountFactors,
        fixings: Optional[pd.Series] = None,
    ):
        self.index = index
        self.discount_factors = discount_factors
        self.fixings = fixings if fixings is not None else empty_time_series()

    @property
    def valuation_date(self) -> date:
        return self.discount_factors.valuation_date

    def _fixing(self, fixing_date: date) -> Optional[float]:
        if self.fixings.empty:
            return None
        value = self.fixings.get(fixing_date)
        if value is None:
            value = self.fixings.get(pd.Timestamp(fixing_date))
        if value is None or pd.isna(value):
            return None
        return float(value)

    def is_historic(self, fixing_date: date) -> bool:
        if fixing_date < self.valuation_date:
            return True
        return fixing_date == self.valuation_date and self._fixing(fixing_date) is not None

    def rate(self, fixing_date: date) -> float:
        """
        Rate of the index for the fixing date.

        Raises:
            ValueError: If a fixing before the valuation date is missing
        """
        if fixing_date < self.valuation_date:
            fixing = self._fixing(fixing_date)
            if fixing is None:
                raise ValueError(f"Unable to get fixing for {self.index} on date {fixing_date}, no time series available")
            return fixing
        if fixing_date == self.valuation_date:
            fixing = self._fixing(fixing_date)
            if fixing is not None:
                return fixing
        return self.forward_rate(fixing_date)

    def forward_rate(self, fixing_date: date) -> float:
        start, end, tau = self._accrual(fixing_date)
        df_start = self.discount_factors.discount_factor(start)
        df_end = self.discount_factors.discount_factor(end)
        return (df_start / df_end - 1.0) / tau

    def _accrual(self, fixing_date: date):
        start = fixing_date
        end = self.index.maturity_date(fixing_date)
        tau = self.index.day_count.year_fraction(start, end)
        return start, end, tau

    def rate_point_sensitivity(self, fixing_date: date, currency: Optional[Currency] = None) -> PointSensitivities:
        """Sensitivity of the rate to itself, empty once the rate has fixed."""
        if self.is_historic(fixing_date):
            return PointSensitivities.empty()
        return PointSensitivities.of(
            IborRateSensitivity(self.index, fixing_date, currency or self.index.currency, 1.0))

    def curve_parameter_sensitivity(self, point: IborRateSensitivity) -> CurveCurrencyParameterSensitivities:
        """
        Convert an index rate point sensitivity into curve parameter sensitivities.

        dF/dz(s) = -t(s) * (DF(s) / DF(e)) / tau
        dF/dz(e) =  t(e) * (DF(s) / DF(e)) / tau
        """
        start, end, tau = self._accrual(point.fixing_date)
        dfs = self.discount_factors
        ratio = dfs.discount_factor(start) / dfs.discount_factor(end)
        dz_start = -dfs.relative_time(start) * ratio / tau
        dz_end = dfs.relative_time(end) * ratio / tau
        sens = point.sensitivity * (
            dz_start * dfs._zero_rate_parameter_sensitivity(start)
            + dz_end * dfs._zero_rate_parameter_sensitivity(end))
        return CurveCurrencyParameterSensitivities.of(
            CurveCurrencyParameterSensitivity(dfs.curve.metadata, point.currency, sens))

    def with_discount_factors(self, discount_factors: DiscountFactors) -> "DiscountIborIndexRates":
        return DiscountIborIndexRates(self.index, discount_factors, self.fixings)

    def __repr__(self) -> str:
        return f"DiscountIborIndexRates({self.index}, {self.discount_factors.curve.name})"


__all__ = [
    "DiscountFactors",
    "ZeroRateDiscountFactors",
    "SimpleDiscountFactors",
    "DiscountIborIndexRates",
]
