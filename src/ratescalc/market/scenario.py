"""
Scenario market data built by perturbing a base set of market data.

A ScenarioDefinition holds PerturbationMappings. Each mapping pairs a
MarketDataFilter, which selects values by identifier and value, with a
ScenarioPerturbation, which turns the selected value into one value per
scenario. Applying the definition to base market data gives an
ImmutableScenarioMarketData:

    definition = ScenarioDefinition.of_mappings(
        PerturbationMapping(AnyDiscountCurveFilter(), CurveParallelShifts.absolute(0.0, 0.001, -0.001)))
    scenarios = definition.apply_to(base_market_data)

The first mapping whose filter matches a value is used; values matched by
no mapping and all time series are copied unchanged.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Type, Union

from .data import ImmutableScenarioMarketData, MarketData, MarketDataBox, ScenarioMarketData
from .keys import DiscountCurveKey, IborIndexCurveKey

logger = logging.getLogger(__name__)


class MarketDataFilter(ABC):
    """Selects the market data values a perturbation applies to."""

    @property
    @abstractmethod
    def identifier_type(self) -> Type:
        """Type of identifier the filter can match."""

    @abstractmethod
    def matches(self, identifier, box: MarketDataBox) -> bool:
        """Whether the value with this identifier is selected."""

    def accepts(self, identifier, box: MarketDataBox) -> bool:
        return isinstance(identifier, self.identifier_type) and self.matches(identifier, box)


class AnyDiscountCurveFilter(MarketDataFilter):
    """Matches every discount curve."""

    @property
    def identifier_type(self) -> Type:
        return DiscountCurveKey

    def matches(self, identifier, box: MarketDataBox) -> bool:
        return True

    def __eq__(self, other) -> bool:
        return isinstance(other, AnyDiscountCurveFilter)

    def __hash__(self):
        return hash(AnyDiscountCurveFilter)

    def __repr__(self) -> str:
        return "AnyDiscountCurveFilter()"


class AnyIndexCurveFilter(MarketDataFilter):
    """Matches every Ibor index forward curve."""

    @property
    def identifier_type(self) -> Type:
        return IborIndexCurveKey

    def matches(self, identifier, box: MarketDataBox) -> bool:
        return True

    def __eq__(self, other) -> bool:
        return isinstance(other, AnyIndexCurveFilter)

    def __hash__(self):
        return hash(AnyIndexCurveFilter)

    def __repr__(self) -> str:
        return "AnyIndexCurveFilter()"


@dataclass(frozen=True)
class CurveNameFilter(MarketDataFilter):
    """
    Matches discount and forward curves with the given name.

    The name is read from the first scenario value of the box.
    """
    curve_name: Any

    @property
    def identifier_type(self) -> Type:
        return (DiscountCurveKey, IborIndexCurveKey)

    def matches(self, identifier, box: MarketDataBox) -> bool:
        return str(box.get_value(0).name) == str(self.curve_name)


@dataclass(frozen=True)
class IdentifierFilter(MarketDataFilter):
    """Matches the value with exactly this identifier."""
    identifier: Any

    @property
    def identifier_type(self) -> Type:
        return type(self.identifier)

    def matches(self, identifier, box: MarketDataBox) -> bool:
        return identifier == self.identifier


class ScenarioPerturbation(ABC):
    """Turns a market data value into one value per scenario."""

    @property
    @abstractmethod
    def scenario_count(self) -> int:
        pass

    @abstractmethod
    def perturb(self, value: Any, scenario_index: int) -> Any:
        """The value for one scenario."""

    def apply_to(self, box: MarketDataBox) -> MarketDataBox:
        """
        Perturb every scenario of the box.

        A single value box is perturbed once per scenario; a scenario box
        must have a value for every scenario of the perturbation.

        Raises:
            ValueError: If the box has a different number of scenarios
        """
        if not box.is_single_value and box.scenario_count != self.scenario_count:
            raise ValueError(
                f"Perturbation has {self.scenario_count} scenarios, "
                f"market data has {box.scenario_count}")
        return MarketDataBox.of_scenario_values(
            [self.perturb(box.get_value(i), i) for i in range(self.scenario_count)])


@dataclass(frozen=True)
class PerturbationMapping:
    """A filter and the perturbation applied to the values it matches."""
    filter: MarketDataFilter
    perturbation: ScenarioPerturbation

    def matches(self, identifier, box: MarketDataBox) -> bool:
        return self.filter.accepts(identifier, box)

    def apply_to(self, box: MarketDataBox) -> MarketDataBox:
        return self.perturbation.apply_to(box)


@dataclass(frozen=True)
class ScenarioDefinition:
    """
    Perturbations defining a set of scenarios.

    Attributes:
        mappings: Mappings in priority order, all with the same scenario count
        scenario_names: Optional name of each scenario
    """
    mappings: Tuple[PerturbationMapping, ...]
    scenario_names: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "mappings", tuple(self.mappings))
        if not self.mappings:
            raise ValueError("A scenario definition needs at least one perturbation mapping")
        counts = {m.perturbation.scenario_count for m in self.mappings}
        if len(counts) != 1:
            raise ValueError(f"All perturbations must have the same scenario count, found {sorted(counts)}")
        if self.scenario_names is not None:
            object.__setattr__(self, "scenario_names", tuple(self.scenario_names))
            if len(self.scenario_names) != self.scenario_count:
                raise ValueError(
                    f"{len(self.scenario_names)} scenario names given for {self.scenario_count} scenarios")

    @classmethod
    def of_mappings(cls, *mappings: PerturbationMapping) -> "ScenarioDefinition":
        return cls(tuple(mappings))

    @property
    def scenario_count(self) -> int:
        return self.mappings[0].perturbation.scenario_count

    def find_mapping(self, identifier, box: MarketDataBox) -> Optional[PerturbationMapping]:
        return next((m for m in self.mappings if m.matches(identifier, box)), None)

    def apply_to(self, market_data: Union[MarketData, ScenarioMarketData]) -> ImmutableScenarioMarketData:
        """
        Build scenario market data from the base market data.

        Args:
            market_data: A single snapshot, or scenario market data whose
                scenario values line up with the scenarios of this definition
        """
        builder = ImmutableScenarioMarketData.builder(market_data.valuation_date).scenario_count(self.scenario_count)
        perturbed = 0
        for identifier in market_data.identifiers():
            box = _box_of(market_data, identifier)
            mapping = self.find_mapping(identifier, box)
            if mapping is not None:
                box = mapping.apply_to(box)
                perturbed += 1
            builder.add_box(identifier, box)
        for identifier in market_data.time_series_identifiers():
            builder.add_time_series(identifier, market_data.get_time_series(identifier))
        logger.debug("Built %d scenarios, %d market data values perturbed", self.scenario_count, perturbed)
        return builder.build()


def _box_of(market_data, identifier) -> MarketDataBox:
    if isinstance(market_data, ScenarioMarketData):
        return market_data.get_value(identifier)
    return MarketDataBox.of_single_value(market_data.get_value(identifier))


__all__ = [
    "MarketDataFilter",
    "AnyDiscountCurveFilter",
    "AnyIndexCurveFilter",
    "CurveNameFilter",
    "IdentifierFilter",
    "ScenarioPerturbation",
    "PerturbationMapping",
    "ScenarioDefinition",
]
