"""
Curve calibration.

Solves for the parameters of every curve of a group so that each node's
calibration trade has a measure of zero (by default its par spread to the
market quote):

    V_i(p) = 0   for every node i

All nodes are solved together with scipy.optimize.root using the analytic
derivative dV/dp. The Jacobian of the parameters with respect to the market
quotes is then

    dp/dq = (dV/dp)^-1

and the rows of each curve are stored in that curve's metadata, which makes
market quote sensitivities available for the calibrated curves.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
from scipy.optimize import root

from ...errors import CalibrationError
from ...market.curve.metadata import CurveName, CurveParameterSize, JacobianCalibrationMatrix
from ...market.data import MarketData
from ...market.definition import CurveGroupDefinition
from ...settings import CalibrationSettings
from ..rates_provider import ImmutableRatesProvider
from .generator import ImmutableRatesProviderGenerator
from .measures import PAR_SPREAD, CalibrationMeasures

logger = logging.getLogger(__name__)


@dataclass
class CalibrationResult:
    """
    Result of a curve group calibration.

    Attributes:
        provider: Provider with the calibrated curves installed
        parameters: Calibrated parameters, all curves concatenated
        residuals: Measure value of each node after calibration, by node label
        evaluations: Number of function evaluations used by the solver
    """
    provider: ImmutableRatesProvider
    parameters: np.ndarray
    residuals: Dict[str, float] = field(default_factory=dict)
    evaluations: int = 0

    @property
    def max_residual(self) -> float:
        return max((abs(r) for r in self.residuals.values()), default=0.0)


class CurveCalibrator:
    """
    Calibrates the curves of a curve group to market quotes.

    Attributes:
        measures: Calibration measure by trade type
        settings: Solver settings
    """

    def __init__(
        self,
        measures: Optional[CalibrationMeasures] = None,
        settings: Optional[CalibrationSettings] = None,
    ):
        self.measures = measures or PAR_SPREAD
        self.settings = settings or CalibrationSettings()

    def calibrate(
        self,
        group: CurveGroupDefinition,
        market_data: MarketData,
        known_provider: Optional[ImmutableRatesProvider] = None,
    ) -> ImmutableRatesProvider:
        """
        Calibrate the group and return the provider with the calibrated curves.

        Args:
            group: Curves to calibrate
            market_data: Market quotes keyed by QuoteKey
            known_provider: Provider holding curves that are not calibrated,
                defaults to an empty provider at the market data valuation date

        Raises:
            CalibrationError: If the solver does not reprice every node
        """
        return self.calibrate_with_result(group, market_data, known_provider).provider

    def calibrate_with_result(
        self,
        group: CurveGroupDefinition,
        market_data: MarketData,
        known_provider: Optional[ImmutableRatesProvider] = None,
    ) -> CalibrationResult:
        """Calibrate the group and return the provider with solver diagnostics."""
        valuation_date = market_data.valuation_date
        if known_provider is None:
            known_provider = ImmutableRatesProvider(valuation_date)
        elif known_provider.valuation_date != valuation_date:
            raise ValueError(
                f"Known provider valuation date {known_provider.valuation_date} does not match "
                f"market data valuation date {valuation_date}")

        generator = ImmutableRatesProviderGenerator.of(known_provider, group)
        order = [d.to_curve_parameter_size() for d in group.curve_definitions]
        labels = [n.label for d in group.curve_definitions for n in d.nodes]
        trades = [n.trade(valuation_date, market_data) for d in group.curve_definitions for n in d.nodes]
        guess = np.array([g for d in group.curve_definitions for g in d.initial_guess(valuation_date, market_data)])

        def values(p: np.ndarray) -> np.ndarray:
            provider = generator.generate(p)
            return np.array([self.measures.value(t, provider) for t in trades])

        def derivatives(p: np.ndarray) -> np.ndarray:
            provider = generator.generate(p)
            return np.vstack([self.measures.derivative(t, provider, order) for t in trades])

        logger.debug("Calibrating curve group '%s' with %d parameters", group.name, len(guess))
        solution = root(values, guess, jac=derivatives, method=self.settings.method, options=self._solver_options())
        params = np.asarray(solution.x, dtype=float)
        residuals = values(params)
        max_residual = float(np.max(np.abs(residuals))) if residuals.size else 0.0
        if not np.isfinite(max_residual) or max_residual > self.settings.tolerance:
            logger.error(
                "Calibration of curve group '%s' failed: max residual %.3e, solver message: %s",
                group.name, max_residual, solution.message)
            raise CalibrationError(
                f"Calibration of curve group '{group.name}' did not converge: max residual "
                f"{max_residual:.3e} exceeds tolerance {self.settings.tolerance:.1e} ({solution.message})")

        jacobians = self._jacobians(order, derivatives(params), group.name)
        provider = generator.generate(params, jacobians)
        evaluations = int(getattr(solution, "nfev", 0))
        logger.info(
            "Calibrated curve group '%s': %d curves, %d parameters, max residual %.2e, %d evaluations",
            group.name, len(order), len(params), max_residual, evaluations)
        return CalibrationResult(
            provider=provider,
            parameters=params,
            residuals=dict(zip(labels, residuals.tolist())),
            evaluations=evaluations,
        )

    def _solver_options(self) -> dict:
        # step tolerance well below the residual tolerance so the solver does not stop early
        if self.settings.method == "hybr":
            return {"maxfev": self.settings.max_iterations, "xtol": self.settings.tolerance * 1e-3}
        if self.settings.method == "lm":
            return {"maxiter": self.settings.max_iterations, "xtol": self.settings.tolerance * 1e-3}
        return {"maxiter": self.settings.max_iterations}

    @staticmethod
    def _jacobians(
        order: List[CurveParameterSize],
        value_derivatives: np.ndarray,
        group_name: str,
    ) -> Dict[CurveName, JacobianCalibrationMatrix]:
        """Split dp/dq = (dV/dp)^-1 into one block of rows per curve."""
        try:
            dp_dq = np.linalg.inv(value_derivatives)
        except np.linalg.LinAlgError as e:
            logger.error("Calibration Jacobian of curve group '%s' is singular", group_name)
            raise CalibrationError(f"Calibration Jacobian of curve group '{group_name}' is singular") from e
        jacobians = {}
        start = 0
        for size in order:
            rows = dp_dq[start:start + size.parameter_count, :]
            jacobians[size.name] = JacobianCalibrationMatrix.of(order, rows)
            start += size.parameter_count
        return jacobians


__all__ = [
    "CalibrationResult",
    "CurveCalibrator",
]
