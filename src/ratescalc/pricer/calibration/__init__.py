"""
Curve calibration.

Provides:
- ImmutableRatesProviderGenerator: rates provider from a flat parameter vector
- CalibrationMeasures: value and derivative of each calibration trade
- CurveCalibrator: joint solve of a curve group against market quotes
"""

from .generator import RatesProviderGenerator, ImmutableRatesProviderGenerator
from .measures import (
    CalibrationMeasure,
    TradeCalibrationMeasure,
    CalibrationMeasures,
    FRA_PAR_SPREAD,
    TERM_DEPOSIT_PAR_SPREAD,
    PAR_SPREAD,
)
from .calibrator import CalibrationResult, CurveCalibrator

__all__ = [
    "RatesProviderGenerator",
    "ImmutableRatesProviderGenerator",
    "CalibrationMeasure",
    "TradeCalibrationMeasure",
    "CalibrationMeasures",
    "FRA_PAR_SPREAD",
    "TERM_DEPOSIT_PAR_SPREAD",
    "PAR_SPREAD",
    "CalibrationResult",
    "CurveCalibrator",
]
