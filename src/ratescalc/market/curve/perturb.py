"""
Curve perturbations used to build scenarios.

Provides:
- ShiftType: absolute shifts add to the node values, relative shifts scale them
- CurveParallelShifts: one parallel shift of every node per scenario
- CurvePointShifts: per scenario shifts of individual nodes, by node label

Shifts apply to the y values of nodal curves, so a zero rate curve is shifted
in rate and a discount factor curve in discount factor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Sequence, Tuple

import numpy as np

from ..scenario import ScenarioPerturbation
from .curves import Curve


class ShiftType(Enum):
    """How a shift amount is applied to a value."""
    ABSOLUTE = "Absolute"
    RELATIVE = "Relative"

    def apply_shift(self, value, shift: float):
        """
        Shifted value.

        ABSOLUTE: value + shift
        RELATIVE: value * (1 + shift)
        """
        if self is ShiftType.ABSOLUTE:
            return value + shift
        return value * (1.0 + shift)


@dataclass(frozen=True)
class CurveParallelShifts(ScenarioPerturbation):
    """
    Parallel shift of every node of a curve, one amount per scenario.

    Attributes:
        shift_type: Absolute or relative shift
        shifts: Shift amount for each scenario
    """
    shift_type: ShiftType
    shifts: Tuple[float, ...]

    def __post_init__(self):
        object.__setattr__(self, "shifts", tuple(float(s) for s in self.shifts))
        if not self.shifts:
            raise ValueError("At least one shift is required")

    @classmethod
    def absolute(cls, *shifts: float) -> "CurveParallelShifts":
        return cls(ShiftType.ABSOLUTE, shifts)

    @classmethod
    def relative(cls, *shifts: float) -> "CurveParallelShifts":
        return cls(ShiftType.RELATIVE, shifts)

    @property
    def scenario_count(self) -> int:
        return len(self.shifts)

    def perturb(self, value: Curve, scenario_index: int) -> Curve:
        curve = value.to_nodal_curve()
        y = np.asarray(curve.y_values, dtype=float)
        return curve.with_y_values(self.shift_type.apply_shift(y, self.shifts[scenario_index]))


@dataclass(frozen=True)
class CurvePointShifts(ScenarioPerturbation):
    """
    Shifts of individual curve nodes, identified by their parameter label.

    Nodes whose label has no shift are unchanged. A label missing from the
    curve is ignored, so the same shifts can be applied to several curves.

    Attributes:
        shift_type: Absolute or relative shift
        shifts: Per scenario mapping of node label to shift amount
    """
    shift_type: ShiftType
    shifts: Tuple[Mapping[str, float], ...]

    def __post_init__(self):
        object.__setattr__(self, "shifts", tuple(dict(s) for s in self.shifts))
        if not self.shifts:
            raise ValueError("At least one scenario of shifts is required")

    @classmethod
    def of(cls, shift_type: ShiftType, shifts: Sequence[Mapping[str, float]]) -> "CurvePointShifts":
        return cls(shift_type, tuple(shifts))

    @property
    def scenario_count(self) -> int:
        return len(self.shifts)

    def perturb(self, value: Curve, scenario_index: int) -> Curve:
        curve = value.to_nodal_curve()
        shifts: Dict[str, float] = self.shifts[scenario_index]
        labels = [p.label for p in curve.metadata.parameter_metadata]
        y = np.array(curve.y_values, dtype=float)
        for i, label in enumerate(labels):
            if label in shifts:
                y[i] = self.shift_type.apply_shift(y[i], shifts[label])
        return curve.with_y_values(y)

    def __hash__(self):
        return hash((self.shift_type, tuple(tuple(sorted(s.items())) for s in self.shifts)))


__all__ = [
    "ShiftType",
    "CurveParallelShifts",
    "CurvePointShifts",
]
