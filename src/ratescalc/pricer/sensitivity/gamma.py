"""
Curve gamma by finite difference.

Semi-parallel gamma measures how the total first order sensitivity changes
when one node of the curve moves:

    gamma_i = (S(p + h e_i) - S(p - h e_i)) / (2h)

where S is the sum of the parameter sensitivities of the curve and h the
shift applied to node i.
"""

from typing import Callable

import numpy as np

from ...basics.currency import Currency
from ...market.curve.curves import NodalCurve
from ...market.sensitivity import CurveCurrencyParameterSensitivity

ONE_BASIS_POINT = 1e-4


class CurveGammaCalculator:
    """
    Finite difference gamma calculator.

    Attributes:
        shift: Node shift used for the central difference
    """

    def __init__(self, shift: float = ONE_BASIS_POINT):
        if shift <= 0:
            raise ValueError(f"Shift must be positive, was {shift}")
        self.shift = shift

    def calculate_semi_parallel_gamma(
        self,
        curve: NodalCurve,
        currency: Currency,
        sensitivity_fn: Callable[[NodalCurve], CurveCurrencyParameterSensitivity],
    ) -> CurveCurrencyParameterSensitivity:
        """
        Semi-parallel gamma of each node of the curve.

        Args:
            curve: The curve to bump
            currency: Currency of the result
            sensitivity_fn: Parameter sensitivity computed with a bumped curve
        """
        def total_delta(bumped: NodalCurve) -> float:
            return float(np.sum(sensitivity_fn(bumped).sensitivity))

        gamma = np.zeros(curve.parameter_count)
        for i, y in enumerate(curve.y_values):
            up = total_delta(curve.with_node(i, y + self.shift))
            down = total_delta(curve.with_node(i, y - self.shift))
            gamma[i] = (up - down) / (2.0 * self.shift)
        return CurveCurrencyParameterSensitivity.of(curve.metadata, currency, gamma)


__all__ = ["CurveGammaCalculator", "ONE_BASIS_POINT"]
