"""
Calibration measures.

A calibration measure is the quantity driven to zero for each calibration
trade, together with its sensitivity to the curve parameters. Par spread is
used for every supported trade type, so a calibrated curve reprices each node
at its market quote.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, Sequence

import numpy as np

from ...market.curve.metadata import CurveParameterSize
from ...market.sensitivity import CurveCurrencyParameterSensitivities
from ...product.deposit import TermDepositTrade
from ...product.fra import FraTrade
from ..deposit import DiscountingTermDepositProductPricer
from ..fra import DiscountingFraProductPricer
from ..rates_provider import RatesProvider


class CalibrationMeasure(ABC):
    """Value and parameter sensitivity of one trade type for calibration."""

    name: str
    trade_type: type

    @abstractmethod
    def value(self, trade, provider: RatesProvider) -> float:
        """The value driven to zero by calibration."""

    @abstractmethod
    def sensitivities(self, trade, provider: RatesProvider) -> CurveCurrencyParameterSensitivities:
        pass


class TradeCalibrationMeasure(CalibrationMeasure):
    """
    Calibration measure built from two functions of the trade and provider.

    Attributes:
        name: Measure name, used in logs
        trade_type: The trade class the measure applies to
        value_fn: Function returning the value to drive to zero
        sensitivity_fn: Function returning the parameter sensitivities of the value
    """

    def __init__(
        self,
        name: str,
        trade_type: type,
        value_fn: Callable[[object, RatesProvider], float],
        sensitivity_fn: Callable[[object, RatesProvider], CurveCurrencyParameterSensitivities],
    ):
        self.name = name
        self.trade_type = trade_type
        self._value_fn = value_fn
        self._sensitivity_fn = sensitivity_fn

    @classmethod
    def of(cls, name, trade_type, value_fn, sensitivity_fn) -> "TradeCalibrationMeasure":
        return cls(name, trade_type, value_fn, sensitivity_fn)

    def value(self, trade, provider: RatesProvider) -> float:
        return self._value_fn(trade, provider)

    def sensitivities(self, trade, provider: RatesProvider) -> CurveCurrencyParameterSensitivities:
        return self._sensitivity_fn(trade, provider)

    def __repr__(self) -> str:
        return f"TradeCalibrationMeasure({self.name}, {self.trade_type.__name__})"


_FRA_PRICER = DiscountingFraProductPricer()
_DEPOSIT_PRICER = DiscountingTermDepositProductPricer()

FRA_PAR_SPREAD = TradeCalibrationMeasure.of(
    "FraParSpread",
    FraTrade,
    lambda trade, provider: _FRA_PRICER.par_spread(trade.product, provider),
    lambda trade, provider: provider.curve_parameter_sensitivity(
        _FRA_PRICER.par_spread_sensitivity(trade.product, provider)),
)

TERM_DEPOSIT_PAR_SPREAD = TradeCalibrationMeasure.of(
    "TermDepositParSpread",
    TermDepositTrade,
    lambda trade, provider: _DEPOSIT_PRICER.par_spread(trade.product, provider),
    lambda trade, provider: provider.curve_parameter_sensitivity(
        _DEPOSIT_PRICER.par_spread_sensitivity(trade.product, provider)),
)


class CalibrationMeasures:
    """
    Calibration measures by trade type.

    Raises:
        ValueError: If two measures are given for the same trade type
    """

    def __init__(self, measures: Iterable[CalibrationMeasure]):
        by_type: Dict[type, CalibrationMeasure] = {}
        for measure in measures:
            if measure.trade_type in by_type:
                raise ValueError(f"Duplicate calibration measure for trade type {measure.trade_type.__name__}")
            by_type[measure.trade_type] = measure
        self._measures = by_type

    @classmethod
    def of(cls, *measures: CalibrationMeasure) -> "CalibrationMeasures":
        return cls(measures)

    @property
    def trade_types(self):
        return set(self._measures)

    def _measure(self, trade) -> CalibrationMeasure:
        measure = self._measures.get(type(trade))
        if measure is None:
            raise ValueError(f"Trade type '{type(trade).__name__}' is not supported for calibration")
        return measure

    def value(self, trade, provider: RatesProvider) -> float:
        return self._measure(trade).value(trade, provider)

    def derivative(self, trade, provider: RatesProvider, order: Sequence[CurveParameterSize]) -> np.ndarray:
        """
        Sensitivity of the measure to every calibrated parameter.

        The sensitivities of each curve are summed over currencies and laid
        out in the order of the calibrated curves; curves outside the order
        are ignored and curves without sensitivity contribute zeros.
        """
        sensitivities = self._measure(trade).sensitivities(trade, provider)
        by_curve: Dict = {}
        for s in sensitivities:
            by_curve[s.curve_name] = by_curve.get(s.curve_name, 0.0) + s.sensitivity
        blocks = []
        for size in order:
            values = by_curve.get(size.name)
            blocks.append(np.zeros(size.parameter_count) if values is None else np.asarray(values, dtype=float))
        return np.concatenate(blocks) if blocks else np.zeros(0)

    def __repr__(self) -> str:
        return f"CalibrationMeasures({list(self._measures.values())!r})"


PAR_SPREAD = CalibrationMeasures.of(FRA_PAR_SPREAD, TERM_DEPOSIT_PAR_SPREAD)


__all__ = [
    "CalibrationMeasure",
    "TradeCalibrationMeasure",
    "CalibrationMeasures",
    "FRA_PAR_SPREAD",
    "TERM_DEPOSIT_PAR_SPREAD",
    "PAR_SPREAD",
]
