"""
Curve names, metadata and calibration information.

CurveMetadata describes what a curve's x and y values mean, labels each
parameter and carries additional information such as the Jacobian captured
when the curve was calibrated.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np

from ...basics.conventions import DayCount


@dataclass(frozen=True, order=True)
class CurveName:
    """Name of a curve."""
    name: str

    @classmethod
    def of(cls, name: str) -> "CurveName":
        return cls(name)

    def __str__(self) -> str:
        return self.name


class ValueType(Enum):
    """Meaning of the x or y values of a curve."""
    YEAR_FRACTION = "YearFraction"
    ZERO_RATE = "ZeroRate"
    DISCOUNT_FACTOR = "DiscountFactor"
    UNKNOWN = "Unknown"


class CurveInfoType(Enum):
    """Keys of the additional information held in curve metadata."""
    JACOBIAN = "Jacobian"


@dataclass(frozen=True)
class CurveParameterMetadata:
    """
    Label of one curve parameter.

    Attributes:
        label: Label, typically the tenor of the node
        date: Date of the node, if any
    """
    label: str
    date: Optional[date] = None

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class CurveParameterSize:
    """Name and number of parameters of a curve."""
    name: CurveName
    parameter_count: int

    def __post_init__(self):
        if self.parameter_count < 0:
            raise ValueError(f"Parameter count must not be negative, was {self.parameter_count}")


class JacobianCalibrationMatrix:
    """
    Jacobian of curve parameters with respect to market quotes.

    Rows are the parameters of one curve; columns are the market quotes of
    every curve in the calibration, laid out in consecutive blocks in the
    order given by `order`.

    Attributes:
        order: Names and parameter counts of the calibrated curves
        jacobian_matrix: Matrix of shape (curve parameters, total parameters)
    """

    def __init__(self, order: Sequence[CurveParameterSize], jacobian_matrix):
        self.order: Tuple[CurveParameterSize, ...] = tuple(order)
        self.jacobian_matrix = np.atleast_2d(np.asarray(jacobian_matrix, dtype=float))
        if self.jacobian_matrix.shape[1] != self.total_parameter_count:
            raise ValueError(
                f"Jacobian has {self.jacobian_matrix.shape[1]} columns but the order describes "
                f"{self.total_parameter_count} parameters")

    @classmethod
    def of(cls, order: Sequence[CurveParameterSize], jacobian_matrix) -> "JacobianCalibrationMatrix":
        return cls(order, jacobian_matrix)

    @property
    def total_parameter_count(self) -> int:
        return sum(p.parameter_count for p in self.order)

    @property
    def curve_names(self) -> Tuple[CurveName, ...]:
        return tuple(p.name for p in self.order)

    def split_values(self, array) -> Dict[CurveName, np.ndarray]:
        """
        Split an array of total_parameter_count values into one array per curve.

        Raises:
            ValueError: If the array length does not match the order
        """
        array = np.asarray(array, dtype=float)
        if array.shape != (self.total_parameter_count,):
            raise ValueError(
                f"Array of length {array.shape[0] if array.ndim else 0} cannot be split, "
                f"expected {self.total_parameter_count} values")
        result = {}
        start = 0
        for size in self.order:
            result[size.name] = array[start:start + size.parameter_count].copy()
            start += size.parameter_count
        return result

    def __eq__(self, other) -> bool:
        if not isinstance(other, JacobianCalibrationMatrix):
            return NotImplemented
        return self.order == other.order and np.array_equal(self.jacobian_matrix, other.jacobian_matrix)

    def __repr__(self) -> str:
        names = ", ".join(f"{p.name}:{p.parameter_count}" for p in self.order)
        return f"JacobianCalibrationMatrix([{names}], shape={self.jacobian_matrix.shape})"


@dataclass(frozen=True)
class CurveMetadata:
    """
    Metadata describing a curve.

    Attributes:
        curve_name: Name of the curve
        x_value_type: Meaning of x values, normally year fractions
        y_value_type: Meaning of y values
        day_count: Day count converting dates to x values
        parameter_metadata: One entry per parameter, empty if unknown
        info: Additional information keyed by CurveInfoType
    """
    curve_name: CurveName
    x_value_type: ValueType = ValueType.YEAR_FRACTION
    y_value_type: ValueType = ValueType.UNKNOWN
    day_count: Optional[DayCount] = None
    parameter_metadata: Tuple[CurveParameterMetadata, ...] = ()
    info: Mapping[CurveInfoType, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.curve_name, str):
            object.__setattr__(self, "curve_name", CurveName(self.curve_name))
        object.__setattr__(self, "parameter_metadata", tuple(self.parameter_metadata))
        object.__setattr__(self, "info", dict(self.info))

    def __hash__(self):
        return hash((self.curve_name, self.y_value_type))

    def find_info(self, info_type: CurveInfoType) -> Optional[Any]:
        return self.info.get(info_type)

    def get_info(self, info_type: CurveInfoType) -> Any:
        """
        Raises:
            ValueError: If the info is not present
        """
        if info_type not in self.info:
            raise ValueError(f"Curve '{self.curve_name}' has no metadata info of type {info_type.value}")
        return self.info[info_type]

    def with_info(self, info_type: CurveInfoType, value: Any) -> "CurveMetadata":
        info = dict(self.info)
        info[info_type] = value
        return replace(self, info=info)

    def with_parameter_metadata(self, parameter_metadata: Iterable[CurveParameterMetadata]) -> "CurveMetadata":
        return replace(self, parameter_metadata=tuple(parameter_metadata))


class Curves:
    """Factory helpers for common curve metadata."""

    @staticmethod
    def zero_rates(name, day_count: DayCount, parameter_metadata: Iterable[CurveParameterMetadata] = ()) -> CurveMetadata:
        """Metadata of a curve of continuously compounded zero rates against year fraction."""
        return CurveMetadata(
            curve_name=CurveName(name) if isinstance(name, str) else name,
            x_value_type=ValueType.YEAR_FRACTION,
            y_value_type=ValueType.ZERO_RATE,
            day_count=day_count,
            parameter_metadata=tuple(parameter_metadata),
        )

    @staticmethod
    def discount_factors(name, day_count: DayCount, parameter_metadata: Iterable[CurveParameterMetadata] = ()) -> CurveMetadata:
        """Metadata of a curve of discount factors against year fraction."""
        return CurveMetadata(
            curve_name=CurveName(name) if isinstance(name, str) else name,
            x_value_type=ValueType.YEAR_FRACTION,
            y_value_type=ValueType.DISCOUNT_FACTOR,
            day_count=day_count,
            parameter_metadata=tuple(parameter_metadata),
        )


__all__ = [
    "CurveName",
    "ValueType",
    "CurveInfoType",
    "CurveParameterMetadata",
    "CurveParameterSize",
    "JacobianCalibrationMatrix",
    "CurveMetadata",
    "Curves",
]
