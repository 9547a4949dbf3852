"""
Generation of rates providers from curve parameters.

The calibrator works on a flat vector holding the parameters of every curve
of a group, concatenated in definition order. The generator turns such a
vector back into a rates provider: each curve is built from its slice and
installed for every currency it discounts and every index it forecasts, on
top of a provider of already known curves.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional, Set

import numpy as np

from ...basics.currency import Currency
from ...basics.index import IborIndex
from ...errors import ParameterCountMismatchError
from ...market.curve.curves import Curve
from ...market.curve.metadata import CurveInfoType, CurveName, JacobianCalibrationMatrix
from ...market.definition import CurveGroupDefinition, NodalCurveDefinition
from ..rates_provider import ImmutableRatesProvider


class RatesProviderGenerator(ABC):
    """Creates a rates provider from a parameter vector."""

    @abstractmethod
    def generate(
        self,
        parameters,
        jacobians: Optional[Mapping[CurveName, JacobianCalibrationMatrix]] = None,
    ) -> ImmutableRatesProvider:
        """
        Args:
            parameters: Parameters of all curves, concatenated in definition order
            jacobians: Calibration Jacobian by curve name, attached to curve metadata
        """


class ImmutableRatesProviderGenerator(RatesProviderGenerator):
    """
    Generator installing calibrated curves on top of a known provider.

    Attributes:
        known_provider: Provider with the curves that are not calibrated
        curve_definitions: Definitions of the calibrated curves, in parameter order
        discount_currencies: Currencies discounted by each curve
        forward_indices: Indices forecast by each curve
    """

    def __init__(
        self,
        known_provider: ImmutableRatesProvider,
        curve_definitions: List[NodalCurveDefinition],
        discount_currencies: Mapping[CurveName, Set[Currency]],
        forward_indices: Mapping[CurveName, Set[IborIndex]],
    ):
        self.known_provider = known_provider
        self.curve_definitions = tuple(curve_definitions)
        self.discount_currencies = {k: frozenset(v) for k, v in discount_currencies.items()}
        self.forward_indices = {k: frozenset(v) for k, v in forward_indices.items()}

    @classmethod
    def of(cls, known_provider: ImmutableRatesProvider, group: CurveGroupDefinition) -> "ImmutableRatesProviderGenerator":
        definitions = []
        discount: Dict[CurveName, Set[Currency]] = {}
        forward: Dict[CurveName, Set[IborIndex]] = {}
        for definition in group.curve_definitions:
            definitions.append(definition)
            # a group has an entry for every definition
            entry = group.find_entry(definition.name)
            discount.setdefault(definition.name, set()).update(entry.discount_currencies)
            forward.setdefault(definition.name, set()).update(entry.indices)
        return cls(known_provider, definitions, discount, forward)

    @property
    def total_parameter_count(self) -> int:
        return sum(d.parameter_count for d in self.curve_definitions)

    def generate(
        self,
        parameters,
        jacobians: Optional[Mapping[CurveName, JacobianCalibrationMatrix]] = None,
    ) -> ImmutableRatesProvider:
        """
        Build the child provider; the known provider is not modified.

        Raises:
            ParameterCountMismatchError: If the vector length differs from the
                total parameter count of the definitions
        """
        parameters = np.asarray(parameters, dtype=float)
        if parameters.ndim != 1 or parameters.size != self.total_parameter_count:
            raise ParameterCountMismatchError(
                f"Expected {self.total_parameter_count} parameters for curves "
                f"{[str(d.name) for d in self.curve_definitions]}, got {parameters.size}")
        jacobians = jacobians or {}
        valuation_date = self.known_provider.valuation_date

        discount_curves: Dict[Currency, Curve] = {}
        index_curves: Dict[IborIndex, Curve] = {}
        start = 0
        for definition in self.curve_definitions:
            count = definition.parameter_count
            curve_params = parameters[start:start + count]
            start += count
            info = {}
            if definition.name in jacobians:
                info[CurveInfoType.JACOBIAN] = jacobians[definition.name]
            curve = definition.curve(valuation_date, curve_params, info)
            for currency in self.discount_currencies.get(definition.name, ()):
                discount_curves[currency] = curve
            for index in self.forward_indices.get(definition.name, ()):
                index_curves[index] = curve
        return self.known_provider.with_curves(discount_curves, index_curves)


__all__ = [
    "RatesProviderGenerator",
    "ImmutableRatesProviderGenerator",
]
