"""
Interpolation methods for nodal curves.

Provides:
- LinearInterpolator: Linear interpolation between nodes
- CubicSplineInterpolator: Natural cubic spline

Both extrapolate flat beyond the first and last node and can report the
sensitivity of an interpolated value to each node value, which is what
curve parameter sensitivities are built from.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

import numpy as np


class Interpolator(ABC):
    """Abstract base class for curve interpolation."""

    name: str = ""

    @abstractmethod
    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        """
        Fit the interpolator to data points.

        Args:
            times: Array of x values (must be sorted ascending)
            values: Array of node values
        """
        pass

    @abstractmethod
    def interpolate(self, t: float) -> float:
        pass

    def __call__(self, t: float) -> float:
        return self.interpolate(t)

    @abstractmethod
    def derivative(self, t: float) -> float:
        """First derivative of the interpolated function at t."""
        pass

    @abstractmethod
    def node_sensitivity(self, t: float) -> np.ndarray:
        """
        Sensitivity of the interpolated value at t to each node value.

        Returns:
            Array with one entry per node
        """
        pass

    def _check_fitted(self) -> None:
        if getattr(self, "times", None) is None:
            raise RuntimeError("Interpolator not fitted")

    @staticmethod
    def _validate(times, values):
        times = np.asarray(times, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)
        if len(times) != len(values):
            raise ValueError("Times and values must have same length")
        if len(times) < 1:
            raise ValueError("Need at least 1 point for interpolation")
        if np.any(np.diff(times) <= 0):
            raise ValueError("Times must be strictly increasing")
        return times, values


class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Extrapolates flat beyond boundaries.
    """

    name = "linear"

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        self.times, self.values = self._validate(times, values)

    def _bracket(self, t: float):
        idx = np.searchsorted(self.times, t, side='right') - 1
        idx = max(0, min(idx, len(self.times) - 2))
        t0, t1 = self.times[idx], self.times[idx + 1]
        return idx, (t - t0) / (t1 - t0)

    def interpolate(self, t: float) -> float:
        self._check_fitted()
        if t <= self.times[0]:
            return float(self.values[0])
        if t >= self.times[-1]:
            return float(self.values[-1])
        idx, w = self._bracket(t)
        v0, v1 = self.values[idx], self.values[idx + 1]
        return float(v0 + w * (v1 - v0))

    def derivative(self, t: float) -> float:
        """Derivative of linear interpolation (piecewise constant)."""
        self._check_fitted()
        if t <= self.times[0] or t >= self.times[-1]:
            return 0.0
        idx, _ = self._bracket(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        return float((self.values[idx + 1] - self.values[idx]) / (t1 - t0))

    def node_sensitivity(self, t: float) -> np.ndarray:
        self._check_fitted()
        sens = np.zeros(len(self.times))
        if t <= self.times[0]:
            sens[0] = 1.0
        elif t >= self.times[-1]:
            sens[-1] = 1.0
        else:
            idx, w = self._bracket(t)
            sens[idx] = 1.0 - w
            sens[idx + 1] = w
        return sens


class CubicSplineInterpolator(Interpolator):
    """
    Natural cubic spline interpolation.

    Second derivative is zero at the boundaries. The spline is linear in
    the node values, so node sensitivities are the splines through the unit
    vectors.
    """

    name = "natural_cubic_spline"

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None
        self.coefficients: Optional[np.ndarray] = None  # Shape: (n-1, 4) for [a, b, c, d]
        self._basis: Dict[int, "CubicSplineInterpolator"] = {}

    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        """
        Fit natural cubic spline.

        Solves tridiagonal system for second derivatives,
        then computes polynomial coefficients for each interval.
        """
        self.times, self.values = self._validate(times, values)
        self._basis = {}
        n = len(self.times)

        if n == 1:
            self.coefficients = np.array([[self.values[0], 0.0, 0.0, 0.0]])
            return
        if n == 2:
            # Degenerate to linear
            h = self.times[1] - self.times[0]
            slope = (self.values[1] - self.values[0]) / h
            self.coefficients = np.array([[self.values[0], slope, 0.0, 0.0]])
            return

        h = np.diff(self.times)

        # Natural spline: M[0] = M[n-1] = 0
        A = np.zeros((n, n))
        b = np.zeros(n)
        A[0, 0] = 1.0
        A[n-1, n-1] = 1.0
        for i in range(1, n-1):
            A[i, i-1] = h[i-1]
            A[i, i] = 2 * (h[i-1] + h[i])
            A[i, i+1] = h[i]
            b[i] = 6 * ((self.values[i+1] - self.values[i]) / h[i] -
                        (self.values[i] - self.values[i-1]) / h[i-1])

        M = np.linalg.solve(A, b)

        # S_i(x) = a_i + b_i*(x-x_i) + c_i*(x-x_i)^2 + d_i*(x-x_i)^3
        self.coefficients = np.zeros((n-1, 4))
        for i in range(n-1):
            self.coefficients[i, 0] = self.values[i]
            self.coefficients[i, 1] = (self.values[i+1] - self.values[i]) / h[i] - h[i] * (M[i+1] + 2*M[i]) / 6
            self.coefficients[i, 2] = M[i] / 2
            self.coefficients[i, 3] = (M[i+1] - M[i]) / (6 * h[i])

    def _interval(self, t: float) -> int:
        idx = np.searchsorted(self.times, t, side='right') - 1
        return max(0, min(idx, len(self.coefficients) - 1))

    def interpolate(self, t: float) -> float:
        self._check_fitted()
        if t <= self.times[0]:
            return float(self.values[0])
        if t >= self.times[-1]:
            return float(self.values[-1])
        idx = self._interval(t)
        dx = t - self.times[idx]
        a, b, c, d = self.coefficients[idx]
        return float(a + b*dx + c*dx**2 + d*dx**3)

    def derivative(self, t: float) -> float:
        self._check_fitted()
        if t <= self.times[0] or t >= self.times[-1]:
            return 0.0
        idx = self._interval(t)
        dx = t - self.times[idx]
        _, b, c, d = self.coefficients[idx]
        return float(b + 2*c*dx + 3*d*dx**2)

    def node_sensitivity(self, t: float) -> np.ndarray:
        self._check_fitted()
        n = len(self.times)
        sens = np.zeros(n)
        if t <= self.times[0]:
            sens[0] = 1.0
            return sens
        if t >= self.times[-1]:
            sens[-1] = 1.0
            return sens
        for j in range(n):
            sens[j] = self._basis_spline(j).interpolate(t)
        return sens

    def _basis_spline(self, j: int) -> "CubicSplineInterpolator":
        spline = self._basis.get(j)
        if spline is None:
            spline = CubicSplineInterpolator()
            spline.fit(self.times, np.eye(len(self.times))[j])
            self._basis[j] = spline
        return spline


def create_interpolator(method: str) -> Interpolator:
    """
    Factory function to create an interpolator by name.

    Args:
        method: One of "linear", "natural_cubic_spline"

    Returns:
        Interpolator instance
    """
    method = method.lower().replace("-", "_").replace(" ", "_")

    if method in ("linear", "lin"):
        return LinearInterpolator()
    elif method in ("natural_cubic_spline", "cubic_spline", "cubic", "spline"):
        return CubicSplineInterpolator()
    else:
        raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
]
