"""
Curve representation.

A curve maps an x value (a year fraction) to a y value whose meaning is
given by its metadata: a zero rate or a discount factor. Curves are
immutable; "with" methods return modified copies.

Nodal curves are defined by node values; their parameters are the y values
of the nodes, in node order.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from .interpolation import Interpolator, create_interpolator
from .metadata import CurveMetadata, CurveName, CurveParameterMetadata


class Curve(ABC):
    """A curve of y values against year fractions."""

    @property
    @abstractmethod
    def metadata(self) -> CurveMetadata:
        pass

    @property
    def name(self) -> CurveName:
        return self.metadata.curve_name

    @property
    @abstractmethod
    def parameter_count(self) -> int:
        pass

    @abstractmethod
    def y_value(self, x: float) -> float:
        pass

    @abstractmethod
    def y_value_parameter_sensitivity(self, x: float) -> np.ndarray:
        """Sensitivity of y(x) to each curve parameter."""

    @abstractmethod
    def first_derivative(self, x: float) -> float:
        pass

    @abstractmethod
    def with_metadata(self, metadata: CurveMetadata) -> "Curve":
        pass

    def to_nodal_curve(self) -> "NodalCurve":
        raise TypeError(f"Curve '{self.name}' of type {type(self).__name__} is not a nodal curve")


class NodalCurve(Curve):
    """A curve defined by node values."""

    @property
    @abstractmethod
    def x_values(self) -> np.ndarray:
        pass

    @property
    @abstractmethod
    def y_values(self) -> np.ndarray:
        pass

    @abstractmethod
    def with_y_values(self, y_values: Sequence[float]) -> "NodalCurve":
        pass

    @property
    def parameter_count(self) -> int:
        return len(self.y_values)

    def with_node(self, index: int, y_value: float) -> "NodalCurve":
        """Copy of the curve with the y value of one node replaced."""
        y = np.array(self.y_values, dtype=float)
        y[index] = y_value
        return self.with_y_values(y)

    def with_parallel_shift(self, shift: float) -> "NodalCurve":
        return self.with_y_values(np.asarray(self.y_values, dtype=float) + shift)

    def to_nodal_curve(self) -> "NodalCurve":
        return self


class InterpolatedNodalCurve(NodalCurve):
    """
    Nodal curve interpolated between nodes.

    Attributes:
        metadata: Curve metadata
        x_values: Node x values, strictly increasing
        y_values: Node y values
        interpolator: Name of the interpolation method
    """

    def __init__(
        self,
        metadata: CurveMetadata,
        x_values: Sequence[float],
        y_values: Sequence[float],
        interpolator: str = "linear",
    ):
        x = np.array(x_values, dtype=float)
        y = np.array(y_values, dtype=float)
        if x.shape != y.shape or x.ndim != 1:
            raise ValueError(f"x and y values must be 1-d arrays of equal length, got {x.shape} and {y.shape}")
        if len(x) < 2:
            raise ValueError("Interpolated curve needs at least 2 nodes")
        n_meta = len(metadata.parameter_metadata)
        if n_meta and n_meta != len(x):
            raise ValueError(f"Parameter metadata has {n_meta} entries, curve has {len(x)} nodes")
        self._metadata = metadata
        self._x = x
        self._y = y
        self._x.setflags(write=False)
        self._y.setflags(write=False)
        self._interpolator_name = interpolator
        self._interpolator: Interpolator = create_interpolator(interpolator)
        self._interpolator.fit(self._x, self._y)

    @classmethod
    def of(cls, metadata: CurveMetadata, x_values, y_values, interpolator: str = "linear") -> "InterpolatedNodalCurve":
        return cls(metadata, x_values, y_values, interpolator)

    @property
    def metadata(self) -> CurveMetadata:
        return self._metadata

    @property
    def x_values(self) -> np.ndarray:
        return self._x

    @property
    def y_values(self) -> np.ndarray:
        return self._y

    @property
    def interpolator(self) -> str:
        return self._interpolator_name

    def y_value(self, x: float) -> float:
        return self._interpolator.interpolate(x)

    def y_value_parameter_sensitivity(self, x: float) -> np.ndarray:
        return self._interpolator.node_sensitivity(x)

    def first_derivative(self, x: float) -> float:
        return self._interpolator.derivative(x)

    def with_metadata(self, metadata: CurveMetadata) -> "InterpolatedNodalCurve":
        return InterpolatedNodalCurve(metadata, self._x, self._y, self._interpolator_name)

    def with_y_values(self, y_values: Sequence[float]) -> "InterpolatedNodalCurve":
        return InterpolatedNodalCurve(self._metadata, self._x, y_values, self._interpolator_name)

    def __eq__(self, other) -> bool:
        if not isinstance(other, InterpolatedNodalCurve):
            return NotImplemented
        return (self._metadata == other._metadata
                and self._interpolator_name == other._interpolator_name
                and np.array_equal(self._x, other._x)
                and np.array_equal(self._y, other._y))

    def __hash__(self):
        return hash((self._metadata.curve_name, len(self._x)))

    def __repr__(self) -> str:
        return (f"InterpolatedNodalCurve({self.name}, nodes={len(self._x)}, "
                f"interpolator={self._interpolator_name})")


class ConstantNodalCurve(NodalCurve):
    """A curve with the same y value everywhere, one parameter."""

    def __init__(self, metadata: CurveMetadata, y_value: float):
        self._metadata = metadata
        self._y_value = float(y_value)

    @classmethod
    def of(cls, metadata: CurveMetadata, y_value: float) -> "ConstantNodalCurve":
        return cls(metadata, y_value)

    @property
    def metadata(self) -> CurveMetadata:
        return self._metadata

    @property
    def x_values(self) -> np.ndarray:
        return np.array([0.0])

    @property
    def y_values(self) -> np.ndarray:
        return np.array([self._y_value])

    def y_value(self, x: float) -> float:
        return self._y_value

    def y_value_parameter_sensitivity(self, x: float) -> np.ndarray:
        return np.array([1.0])

    def first_derivative(self, x: float) -> float:
        return 0.0

    def with_metadata(self, metadata: CurveMetadata) -> "ConstantNodalCurve":
        return ConstantNodalCurve(metadata, self._y_value)

    def with_y_values(self, y_values: Sequence[float]) -> "ConstantNodalCurve":
        y = np.asarray(y_values, dtype=float)
        if y.shape != (1,):
            raise ValueError(f"Constant curve has one parameter, got {y.shape}")
        return ConstantNodalCurve(self._metadata, float(y[0]))

    def __eq__(self, other) -> bool:
        if not isinstance(other, ConstantNodalCurve):
            return NotImplemented
        return self._metadata == other._metadata and self._y_value == other._y_value

    def __hash__(self):
        return hash((self._metadata.curve_name, self._y_value))

    def __repr__(self) -> str:
        return f"ConstantNodalCurve({self.name}, {self._y_value})"


def node_metadata(labels: Sequence[str], dates=None) -> tuple:
    """Parameter metadata for nodes with the given labels and optional dates."""
    if dates is None:
        return tuple(CurveParameterMetadata(label) for label in labels)
    return tuple(CurveParameterMetadata(label, d) for label, d in zip(labels, dates))


__all__ = [
    "Curve",
    "NodalCurve",
    "InterpolatedNodalCurve",
    "ConstantNodalCurve",
    "node_metadata",
]
