"""
Curves package - nodal curves, interpolation and curve metadata.

Provides:
- InterpolatedNodalCurve / ConstantNodalCurve: curves defined by node values
- CurveMetadata: value types, parameter labels and calibration info
- JacobianCalibrationMatrix: parameter to market quote Jacobian of a calibration
"""

from .metadata import (
    CurveName,
    ValueType,
    CurveInfoType,
    CurveParameterMetadata,
    CurveParameterSize,
    JacobianCalibrationMatrix,
    CurveMetadata,
    Curves,
)
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    CubicSplineInterpolator,
    create_interpolator,
)
from .curves import (
    Curve,
    NodalCurve,
    InterpolatedNodalCurve,
    ConstantNodalCurve,
    node_metadata,
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
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
    "Curve",
    "NodalCurve",
    "InterpolatedNodalCurve",
    "ConstantNodalCurve",
    "node_metadata",
]
