"""
Curve group definitions used for calibration.

Provides:
- CurveNode: an instrument whose market quote pins one curve parameter
  - TermDepositCurveNode: deposit starting on the valuation date
  - FraCurveNode: FRA starting after a period from the valuation date
- NodalCurveDefinition: how to build a nodal curve from its parameters
- CurveGroupDefinition: the curves calibrated together and what they are used for

Quotes are read from a MarketData snapshot keyed by QuoteKey.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np

from ..basics.conventions import DayCount
from ..basics.currency import Currency
from ..basics.dates import add_tenor
from ..basics.index import IborIndex
from ..errors import ParameterCountMismatchError
from ..product.common import BuySell
from ..product.deposit import TermDeposit, TermDepositTrade
from ..product.fra import Fra, FraTrade
from .curve.curves import ConstantNodalCurve, InterpolatedNodalCurve, NodalCurve
from .curve.metadata import (
    CurveInfoType,
    CurveMetadata,
    CurveName,
    CurveParameterMetadata,
    CurveParameterSize,
    ValueType,
)
from .data import MarketData
from .keys import QuoteKey


class CurveNode(ABC):
    """A calibration instrument attached to one curve node."""

    quote_key: QuoteKey
    additional_spread: float

    @property
    @abstractmethod
    def label(self) -> str:
        pass

    @abstractmethod
    def date(self, valuation_date: date) -> date:
        """Date of the curve node."""

    @abstractmethod
    def trade(self, valuation_date: date, market_data: MarketData):
        """The calibration trade, priced at the market quote."""

    def requirements(self) -> Set[QuoteKey]:
        return {self.quote_key}

    def metadata(self, valuation_date: date) -> CurveParameterMetadata:
        return CurveParameterMetadata(self.label, self.date(valuation_date))

    def rate(self, market_data: MarketData) -> float:
        return float(market_data.get_value(self.quote_key)) + self.additional_spread

    def initial_guess(self, valuation_date: date, market_data: MarketData, value_type: ValueType) -> float:
        """
        Starting value of the node parameter for the solver.

        Zero rate curves start from the quote; discount factor curves from the
        discount factor implied by the quote.
        """
        rate = self.rate(market_data)
        if value_type == ValueType.DISCOUNT_FACTOR:
            t = DayCount.ACT_365.year_fraction(valuation_date, self.date(valuation_date))
            return float(np.exp(-rate * t))
        if value_type == ValueType.ZERO_RATE:
            return rate
        return 0.0


@dataclass(frozen=True)
class TermDepositCurveNode(CurveNode):
    """
    Node priced by a term deposit starting on the valuation date.

    Attributes:
        tenor: Deposit tenor, e.g. "3M"
        currency: Deposit currency
        quote_key: Key of the deposit rate quote
        day_count: Deposit day count
        additional_spread: Added to the quote
        node_label: Label of the node, defaults to the tenor
    """
    tenor: str
    currency: Currency
    quote_key: QuoteKey
    day_count: DayCount = DayCount.ACT_360
    additional_spread: float = 0.0
    node_label: Optional[str] = None

    @property
    def label(self) -> str:
        return self.node_label or self.tenor

    def date(self, valuation_date: date) -> date:
        return add_tenor(valuation_date, self.tenor)

    def trade(self, valuation_date: date, market_data: MarketData) -> TermDepositTrade:
        deposit = TermDeposit(
            BuySell.BUY,
            self.currency,
            1.0,
            valuation_date,
            self.date(valuation_date),
            self.rate(market_data),
            self.day_count,
        )
        return TermDepositTrade(f"{self.label}-Deposit", deposit)


@dataclass(frozen=True)
class FraCurveNode(CurveNode):
    """
    Node priced by a FRA on an Ibor index.

    Attributes:
        period_to_start: Period from the valuation date to the FRA start, e.g. "3M"
        index: The index of the FRA
        quote_key: Key of the FRA rate quote
        additional_spread: Added to the quote
        node_label: Label of the node, defaults to "<start>x<end>"
    """
    period_to_start: str
    index: IborIndex
    quote_key: QuoteKey
    additional_spread: float = 0.0
    node_label: Optional[str] = None

    @property
    def label(self) -> str:
        return self.node_label or f"{self.period_to_start}x{self.index.tenor}"

    def start_date(self, valuation_date: date) -> date:
        return add_tenor(valuation_date, self.period_to_start)

    def date(self, valuation_date: date) -> date:
        return self.index.maturity_date(self.start_date(valuation_date))

    def trade(self, valuation_date: date, market_data: MarketData) -> FraTrade:
        start = self.start_date(valuation_date)
        fra = Fra(
            BuySell.BUY,
            self.index.currency,
            1.0,
            start,
            self.index.maturity_date(start),
            self.rate(market_data),
            self.index,
        )
        return FraTrade(f"{self.label}-Fra", fra)


@dataclass(frozen=True)
class NodalCurveDefinition:
    """
    Definition of a nodal curve calibrated from market quotes.

    Attributes:
        name: Curve name
        y_value_type: ZERO_RATE or DISCOUNT_FACTOR
        day_count: Day count converting node dates to x values
        nodes: Calibration nodes, one parameter each, in increasing date order
        interpolator: Interpolation method name
    """
    name: CurveName
    y_value_type: ValueType
    day_count: DayCount
    nodes: Tuple[CurveNode, ...]
    interpolator: str = "linear"

    def __post_init__(self):
        if isinstance(self.name, str):
            object.__setattr__(self, "name", CurveName(self.name))
        object.__setattr__(self, "nodes", tuple(self.nodes))
        if not self.nodes:
            raise ValueError(f"Curve definition '{self.name}' has no nodes")
        if self.y_value_type not in (ValueType.ZERO_RATE, ValueType.DISCOUNT_FACTOR):
            raise ValueError(f"Unsupported y value type for curve definition: {self.y_value_type.value}")

    @property
    def parameter_count(self) -> int:
        return len(self.nodes)

    def to_curve_parameter_size(self) -> CurveParameterSize:
        return CurveParameterSize(self.name, self.parameter_count)

    def metadata(self, valuation_date: date) -> CurveMetadata:
        return CurveMetadata(
            curve_name=self.name,
            x_value_type=ValueType.YEAR_FRACTION,
            y_value_type=self.y_value_type,
            day_count=self.day_count,
            parameter_metadata=tuple(n.metadata(valuation_date) for n in self.nodes),
        )

    def node_times(self, valuation_date: date) -> np.ndarray:
        return np.array([self.day_count.year_fraction(valuation_date, n.date(valuation_date)) for n in self.nodes])

    def curve(self, valuation_date: date, parameters: Sequence[float], info: Optional[Dict] = None) -> NodalCurve:
        """
        Build the curve from its parameters.

        Args:
            valuation_date: Valuation date
            parameters: Node values, one per node
            info: Extra metadata info (e.g. the calibration Jacobian)

        Raises:
            ParameterCountMismatchError: If the number of parameters is wrong
        """
        parameters = np.asarray(parameters, dtype=float)
        if parameters.shape != (self.parameter_count,):
            raise ParameterCountMismatchError(
                f"Curve '{self.name}' expects {self.parameter_count} parameters, "
                f"got {parameters.size}")
        metadata = self.metadata(valuation_date)
        for info_type, value in (info or {}).items():
            metadata = metadata.with_info(info_type, value)
        if self.parameter_count == 1:
            return ConstantNodalCurve(metadata, parameters[0])
        return InterpolatedNodalCurve(metadata, self.node_times(valuation_date), parameters, self.interpolator)

    def initial_guess(self, valuation_date: date, market_data: MarketData) -> List[float]:
        return [n.initial_guess(valuation_date, market_data, self.y_value_type) for n in self.nodes]

    def requirements(self) -> Set[QuoteKey]:
        keys: Set[QuoteKey] = set()
        for n in self.nodes:
            keys |= n.requirements()
        return keys


@dataclass(frozen=True)
class CurveGroupEntry:
    """
    What one curve of a group is used for.

    Attributes:
        curve_name: Name of the curve
        discount_currencies: Currencies discounted with the curve
        indices: Indices forecast with the curve
    """
    curve_name: CurveName
    discount_currencies: FrozenSet[Currency] = frozenset()
    indices: FrozenSet[IborIndex] = frozenset()

    def __post_init__(self):
        if isinstance(self.curve_name, str):
            object.__setattr__(self, "curve_name", CurveName(self.curve_name))
        object.__setattr__(self, "discount_currencies", frozenset(self.discount_currencies))
        object.__setattr__(self, "indices", frozenset(self.indices))


@dataclass(frozen=True)
class CurveGroupDefinition:
    """
    Curves calibrated together.

    Attributes:
        name: Group name
        entries: Usage of each curve
        curve_definitions: Definitions in calibration order
    """
    name: str
    entries: Tuple[CurveGroupEntry, ...]
    curve_definitions: Tuple[NodalCurveDefinition, ...]

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "curve_definitions", tuple(self.curve_definitions))
        entry_names = {e.curve_name for e in self.entries}
        missing = [str(d.name) for d in self.curve_definitions if d.name not in entry_names]
        if missing:
            raise ValueError(f"Curve group '{self.name}' has no entries for curve definitions: {missing}")
        names = [d.name for d in self.curve_definitions]
        if len(set(names)) != len(names):
            raise ValueError(f"Curve group '{self.name}' defines a curve more than once")

    def find_entry(self, curve_name: CurveName) -> Optional[CurveGroupEntry]:
        return next((e for e in self.entries if e.curve_name == curve_name), None)

    def find_definition(self, curve_name: CurveName) -> Optional[NodalCurveDefinition]:
        return next((d for d in self.curve_definitions if d.name == curve_name), None)

    @property
    def total_parameter_count(self) -> int:
        return sum(d.parameter_count for d in self.curve_definitions)

    def requirements(self) -> Set[QuoteKey]:
        keys: Set[QuoteKey] = set()
        for d in self.curve_definitions:
            keys |= d.requirements()
        return keys


__all__ = [
    "CurveNode",
    "TermDepositCurveNode",
    "FraCurveNode",
    "NodalCurveDefinition",
    "CurveGroupEntry",
    "CurveGroupDefinition",
]
