"""
Exception types.

Two families are kept apart:
- Lookup and calculation problems (missing market data, bad inputs) that
  calculation functions turn into per-cell failure results.
- Configuration problems in the calibration and sensitivity setup. These
  are raised by the calibrator, the provider generator and the market quote
  calculator when called directly. Inside a calculation task every exception,
  these included, becomes an ERROR failure of that cell.
"""


class MarketDataNotFoundError(LookupError):
    """Raised when requested market data is not available."""

    def __init__(self, identifier, message: str = None):
        self.identifier = identifier
        super().__init__(message or f"No market data available for '{identifier}'")


class ConfigurationError(ValueError):
    """Invalid calibration or sensitivity configuration."""


class MissingJacobianError(ConfigurationError):
    """A curve used for market quote sensitivity carries no calibration Jacobian."""


class CurveNotFoundError(ConfigurationError):
    """A curve named by calibration metadata is not in the rates provider."""


class ParameterCountMismatchError(ConfigurationError):
    """A parameter vector does not match the declared curve parameter counts."""


class CalibrationError(RuntimeError):
    """Curve calibration failed to converge."""


__all__ = [
    "MarketDataNotFoundError",
    "ConfigurationError",
    "MissingJacobianError",
    "CurveNotFoundError",
    "ParameterCountMismatchError",
    "CalibrationError",
]
