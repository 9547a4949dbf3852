"""
Calibrated curve groups.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from ...basics.currency import Currency
from ...basics.index import IborIndex
from .curves import Curve


@dataclass(frozen=True)
class CurveGroup:
    """
    The curves of a calibrated group, by what they are used for.

    Attributes:
        name: Group name
        discount_curves: Discount curve by currency
        forward_curves: Forward curve by index
    """
    name: str
    discount_curves: Mapping[Currency, Curve] = field(default_factory=dict)
    forward_curves: Mapping[IborIndex, Curve] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "discount_curves", dict(self.discount_curves))
        object.__setattr__(self, "forward_curves", dict(self.forward_curves))

    __hash__ = None

    @classmethod
    def of_provider(cls, definition, provider) -> "CurveGroup":
        """Curves of the group definition taken from a calibrated rates provider."""
        discount: Dict[Currency, Curve] = {}
        forward: Dict[IborIndex, Curve] = {}
        for entry in definition.entries:
            for currency in entry.discount_currencies:
                discount[currency] = provider.discount_curve(currency)
            for index in entry.indices:
                forward[index] = provider.index_curve(index)
        return cls(definition.name, discount, forward)

    def find_discount_curve(self, currency: Currency) -> Optional[Curve]:
        return self.discount_curves.get(currency)

    def find_forward_curve(self, index: IborIndex) -> Optional[Curve]:
        return self.forward_curves.get(index)

    def __repr__(self) -> str:
        return (f"CurveGroup({self.name}, discount={sorted(str(c) for c in self.discount_curves)}, "
                f"forward={sorted(str(i) for i in self.forward_curves)})")


__all__ = ["CurveGroup"]
