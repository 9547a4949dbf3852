"""
Point and curve parameter sensitivities.

Point sensitivities are produced by pricers: the sensitivity of a value to
a zero rate at a date or to an index rate on a fixing date. A rates provider
turns them into curve parameter sensitivities, one array per curve and
currency with one entry per curve parameter.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..basics.currency import Currency, CurrencyAmount, FxConvertible, FxRateProvider, MultiCurrencyAmount
from ..basics.index import IborIndex
from .curve.metadata import CurveMetadata, CurveName


# ----------------------------------------------------------------------------
# Point sensitivities
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class ZeroRateSensitivity:
    """
    Sensitivity to the zero rate of a discount curve at a date.

    Attributes:
        curve_currency: Currency of the discount curve
        date: Date of the zero rate
        currency: Currency of the sensitivity value
        sensitivity: Value of the sensitivity
    """
    curve_currency: Currency
    date: date
    currency: Currency
    sensitivity: float

    def with_sensitivity(self, sensitivity: float) -> "ZeroRateSensitivity":
        return ZeroRateSensitivity(self.curve_currency, self.date, self.currency, sensitivity)

    def grouping_key(self):
        return (type(self).__name__, self.curve_currency.code, self.date, self.currency.code)


@dataclass(frozen=True)
class IborRateSensitivity:
    """
    Sensitivity to the rate of an Ibor index on a fixing date.

    Attributes:
        index: The index
        fixing_date: Fixing date of the rate
        currency: Currency of the sensitivity value
        sensitivity: Value of the sensitivity
    """
    index: IborIndex
    fixing_date: date
    currency: Currency
    sensitivity: float

    def with_sensitivity(self, sensitivity: float) -> "IborRateSensitivity":
        return IborRateSensitivity(self.index, self.fixing_date, self.currency, sensitivity)

    def grouping_key(self):
        return (type(self).__name__, self.index.name, self.fixing_date, self.currency.code)


class PointSensitivities:
    """A list of point sensitivities."""

    def __init__(self, sensitivities: Iterable = ()):
        self.sensitivities: Tuple = tuple(sensitivities)

    @classmethod
    def of(cls, *sensitivities) -> "PointSensitivities":
        return cls(sensitivities)

    @classmethod
    def empty(cls) -> "PointSensitivities":
        return cls()

    def combined_with(self, other: "PointSensitivities") -> "PointSensitivities":
        return PointSensitivities(self.sensitivities + other.sensitivities)

    def multiplied_by(self, factor: float) -> "PointSensitivities":
        return PointSensitivities(s.with_sensitivity(s.sensitivity * factor) for s in self.sensitivities)

    def normalized(self) -> "PointSensitivities":
        """Merge entries that differ only by value, sorted by their grouping key."""
        merged: Dict = {}
        for s in self.sensitivities:
            key = s.grouping_key()
            if key in merged:
                merged[key] = merged[key].with_sensitivity(merged[key].sensitivity + s.sensitivity)
            else:
                merged[key] = s
        return PointSensitivities(merged[k] for k in sorted(merged))

    def __len__(self) -> int:
        return len(self.sensitivities)

    def __iter__(self):
        return iter(self.sensitivities)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PointSensitivities):
            return NotImplemented
        return self.sensitivities == other.sensitivities

    def __repr__(self) -> str:
        return f"PointSensitivities({list(self.sensitivities)!r})"


# ----------------------------------------------------------------------------
# Curve parameter sensitivities
# ----------------------------------------------------------------------------

class CurveCurrencyParameterSensitivity(FxConvertible):
    """
    Sensitivity to the parameters of one curve, in one currency.

    Attributes:
        metadata: Metadata of the curve
        currency: Currency of the sensitivity values
        sensitivity: One value per curve parameter
    """

    def __init__(self, metadata: CurveMetadata, currency: Currency, sensitivity):
        self.metadata = metadata
        self.currency = currency
        self.sensitivity = np.array(sensitivity, dtype=float).reshape(-1)
        n_meta = len(metadata.parameter_metadata)
        if n_meta and n_meta != len(self.sensitivity):
            raise ValueError(
                f"Curve '{metadata.curve_name}' has {n_meta} parameters but the sensitivity "
                f"has {len(self.sensitivity)} values")

    @classmethod
    def of(cls, metadata: CurveMetadata, currency: Currency, sensitivity) -> "CurveCurrencyParameterSensitivity":
        return cls(metadata, currency, sensitivity)

    @property
    def curve_name(self) -> CurveName:
        return self.metadata.curve_name

    @property
    def parameter_count(self) -> int:
        return len(self.sensitivity)

    def multiplied_by(self, factor: float) -> "CurveCurrencyParameterSensitivity":
        return CurveCurrencyParameterSensitivity(self.metadata, self.currency, self.sensitivity * factor)

    def plus(self, other: "CurveCurrencyParameterSensitivity") -> "CurveCurrencyParameterSensitivity":
        """
        Raises:
            ValueError: If the arrays have different lengths
        """
        if len(other.sensitivity) != len(self.sensitivity):
            raise ValueError(
                f"Sensitivity arrays for curve '{self.curve_name}' have different lengths: "
                f"{len(self.sensitivity)} and {len(other.sensitivity)}")
        return CurveCurrencyParameterSensitivity(self.metadata, self.currency, self.sensitivity + other.sensitivity)

    def total(self) -> CurrencyAmount:
        return CurrencyAmount(self.currency, float(self.sensitivity.sum()))

    def convert_to(self, currency: Currency, fx_provider: FxRateProvider) -> "CurveCurrencyParameterSensitivity":
        if currency == self.currency:
            return self
        rate = fx_provider.fx_rate(self.currency, currency)
        return CurveCurrencyParameterSensitivity(self.metadata, currency, self.sensitivity * rate)

    def labels(self) -> List[str]:
        if self.metadata.parameter_metadata:
            return [p.label for p in self.metadata.parameter_metadata]
        return [str(i) for i in range(len(self.sensitivity))]

    def __eq__(self, other) -> bool:
        if not isinstance(other, CurveCurrencyParameterSensitivity):
            return NotImplemented
        return (self.metadata == other.metadata and self.currency == other.currency
                and np.array_equal(self.sensitivity, other.sensitivity))

    def __repr__(self) -> str:
        return (f"CurveCurrencyParameterSensitivity({self.curve_name}, {self.currency}, "
                f"{self.sensitivity.tolist()})")


class CurveCurrencyParameterSensitivities(FxConvertible):
    """
    Sensitivities to the parameters of several curves.

    Entries are keyed by curve name and currency; combining sums entries
    with the same key.
    """

    def __init__(self, sensitivities: Iterable[CurveCurrencyParameterSensitivity] = ()):
        merged: Dict[Tuple[CurveName, Currency], CurveCurrencyParameterSensitivity] = {}
        for s in sensitivities:
            key = (s.curve_name, s.currency)
            merged[key] = merged[key].plus(s) if key in merged else s
        self._entries = merged

    @classmethod
    def of(cls, *sensitivities: CurveCurrencyParameterSensitivity) -> "CurveCurrencyParameterSensitivities":
        return cls(sensitivities)

    @classmethod
    def empty(cls) -> "CurveCurrencyParameterSensitivities":
        return cls()

    @property
    def sensitivities(self) -> List[CurveCurrencyParameterSensitivity]:
        return list(self._entries.values())

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())

    def find_sensitivity(self, curve_name: CurveName, currency: Currency) -> Optional[CurveCurrencyParameterSensitivity]:
        return self._entries.get((curve_name, currency))

    def get_sensitivity(self, curve_name: CurveName, currency: Currency) -> CurveCurrencyParameterSensitivity:
        found = self.find_sensitivity(curve_name, currency)
        if found is None:
            raise ValueError(f"Unable to find sensitivity for curve '{curve_name}' and currency {currency}")
        return found

    def combined_with(self, other) -> "CurveCurrencyParameterSensitivities":
        """Add a single sensitivity or another set of sensitivities."""
        if isinstance(other, CurveCurrencyParameterSensitivity):
            return CurveCurrencyParameterSensitivities(self.sensitivities + [other])
        return CurveCurrencyParameterSensitivities(self.sensitivities + other.sensitivities)

    def multiplied_by(self, factor: float) -> "CurveCurrencyParameterSensitivities":
        return CurveCurrencyParameterSensitivities(s.multiplied_by(factor) for s in self)

    def total(self) -> MultiCurrencyAmount:
        """Sum of all sensitivity values, by currency."""
        result = MultiCurrencyAmount()
        for s in self:
            result = result.plus(s.total())
        return result

    def convert_to(self, currency: Currency, fx_provider: FxRateProvider) -> "CurveCurrencyParameterSensitivities":
        return CurveCurrencyParameterSensitivities(s.convert_to(currency, fx_provider) for s in self)

    def equal_with_tolerance(self, other: "CurveCurrencyParameterSensitivities", tolerance: float) -> bool:
        """
        Compare with another set of sensitivities within an absolute tolerance.

        Entries missing on one side are compared against zero.
        """
        keys = set(self._entries) | set(other._entries)
        for key in keys:
            mine, theirs = self._entries.get(key), other._entries.get(key)
            a = mine.sensitivity if mine is not None else np.zeros(len(theirs.sensitivity))
            b = theirs.sensitivity if theirs is not None else np.zeros(len(a))
            if a.shape != b.shape or np.any(np.abs(a - b) > tolerance):
                return False
        return True

    def to_dataframe(self) -> pd.DataFrame:
        """One row per curve parameter: curve, currency, label, date and sensitivity."""
        rows = []
        for s in self:
            dates = ([p.date for p in s.metadata.parameter_metadata]
                     if s.metadata.parameter_metadata else [None] * s.parameter_count)
            for label, d, value in zip(s.labels(), dates, s.sensitivity):
                rows.append({
                    "curve": s.curve_name.name,
                    "currency": s.currency.code,
                    "label": label,
                    "date": d,
                    "sensitivity": float(value),
                })
        return pd.DataFrame(rows, columns=["curve", "currency", "label", "date", "sensitivity"])

    def __eq__(self, other) -> bool:
        if not isinstance(other, CurveCurrencyParameterSensitivities):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"CurveCurrencyParameterSensitivities({self.sensitivities!r})"


__all__ = [
    "ZeroRateSensitivity",
    "IborRateSensitivity",
    "PointSensitivities",
    "CurveCurrencyParameterSensitivity",
    "CurveCurrencyParameterSensitivities",
]
