"""
Mapping of market data keys to identifiers.

MarketDataRules choose the MarketDataMappings for a target; the mappings
then turn the keys a function asks for into identifiers in the market data
container. CalculationMarketData exposes scenario market data by key to
calculation functions.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Sequence, Set, Tuple, Type

import pandas as pd

from ..errors import MarketDataNotFoundError
from ..market.data import MarketData, MarketDataBox, ScenarioMarketData
from ..market.keys import MarketDataFeed, ObservableKey


class MarketDataMappings:
    """
    Resolves market data keys to identifiers.

    Key-specific mappings are functions taking a key and returning an
    identifier, registered by key type. Observable keys without a specific
    mapping are paired with the feed; any other key is its own identifier.
    """

    def __init__(
        self,
        feed: MarketDataFeed = MarketDataFeed.NONE,
        mappings: Optional[Dict[Type, Callable[[Any], Any]]] = None,
    ):
        self.feed = feed
        self._mappings = dict(mappings or {})

    @classmethod
    def of(cls, feed: MarketDataFeed = MarketDataFeed.NONE, mappings=None) -> "MarketDataMappings":
        return cls(feed, mappings)

    @classmethod
    def empty(cls) -> "MarketDataMappings":
        return cls()

    def get_id_for_key(self, key) -> Any:
        mapping = self._mappings.get(type(key))
        if mapping is not None:
            return mapping(key)
        if isinstance(key, ObservableKey):
            return key.to_market_data_id(self.feed)
        return key

    def __eq__(self, other) -> bool:
        if not isinstance(other, MarketDataMappings):
            return NotImplemented
        return self.feed == other.feed and self._mappings == other._mappings

    def __hash__(self):
        return hash(self.feed)

    def __repr__(self) -> str:
        return f"MarketDataMappings(feed={self.feed}, mappings={len(self._mappings)})"


class MarketDataRules(ABC):
    """Chooses the market data mappings for a calculation target."""

    @abstractmethod
    def mappings(self, target) -> Optional[MarketDataMappings]:
        """Mappings for the target, None if no rule applies."""

    def composed_with(self, other: "MarketDataRules") -> "MarketDataRules":
        return CompositeMarketDataRules((self, other))

    @staticmethod
    def of(*rules: "MarketDataRule") -> "MarketDataRules":
        if len(rules) == 1:
            return rules[0]
        return CompositeMarketDataRules(rules)


class MarketDataRule(MarketDataRules):
    """Applies one set of mappings to targets of the given types."""

    def __init__(self, mappings: MarketDataMappings, *target_types: Type):
        self._mappings = mappings
        self._target_types: Tuple[Type, ...] = tuple(target_types)

    @classmethod
    def of(cls, mappings: MarketDataMappings, *target_types: Type) -> "MarketDataRule":
        return cls(mappings, *target_types)

    @classmethod
    def any_target(cls, mappings: MarketDataMappings) -> "MarketDataRule":
        return cls(mappings)

    def mappings(self, target) -> Optional[MarketDataMappings]:
        if not self._target_types or isinstance(target, self._target_types):
            return self._mappings
        return None


class CompositeMarketDataRules(MarketDataRules):
    """Tries member rules in order and returns the first mappings found."""

    def __init__(self, rules: Sequence[MarketDataRules]):
        self._rules = tuple(rules)

    def mappings(self, target) -> Optional[MarketDataMappings]:
        for rule in self._rules:
            result = rule.mappings(target)
            if result is not None:
                return result
        return None


class _EmptyMarketDataRules(MarketDataRules):

    def mappings(self, target) -> Optional[MarketDataMappings]:
        return None

    def composed_with(self, other: MarketDataRules) -> MarketDataRules:
        return other


MarketDataRules.EMPTY = _EmptyMarketDataRules()


class CalculationMarketData:
    """
    Scenario market data looked up by key.

    Keys are resolved to identifiers with the mappings of the task before
    the lookup.
    """

    def __init__(self, market_data: ScenarioMarketData, mappings: MarketDataMappings):
        self._market_data = market_data
        self._mappings = mappings

    @property
    def valuation_date(self):
        return self._market_data.valuation_date

    @property
    def scenario_count(self) -> int:
        return self._market_data.scenario_count

    @property
    def mappings(self) -> MarketDataMappings:
        return self._mappings

    def find_value(self, key) -> Optional[MarketDataBox]:
        return self._market_data.find_value(self._mappings.get_id_for_key(key))

    def get_value(self, key) -> MarketDataBox:
        """
        Box for the key.

        Raises:
            MarketDataNotFoundError: If no value is available
        """
        box = self.find_value(key)
        if box is None:
            raise MarketDataNotFoundError(key)
        return box

    def contains_value(self, key) -> bool:
        return self.find_value(key) is not None

    def identifiers(self) -> Set[Any]:
        """Identifiers of the underlying market data, after key mapping."""
        return self._market_data.identifiers()

    def time_series_identifiers(self) -> Set[Any]:
        return self._market_data.time_series_identifiers()

    def find_time_series(self, key) -> Optional[pd.Series]:
        return self._market_data.find_time_series(self._mappings.get_id_for_key(key))

    def get_time_series(self, key) -> pd.Series:
        return self._market_data.get_time_series(self._mappings.get_id_for_key(key))

    def scenario(self, scenario_index: int) -> MarketData:
        """Single scenario view, looked up by key."""
        if not 0 <= scenario_index < self.scenario_count:
            raise IndexError(
                f"Scenario index {scenario_index} out of range, scenario count is {self.scenario_count}")
        return SingleCalculationMarketData(self, scenario_index)

    def scenarios(self):
        return (self.scenario(i) for i in range(self.scenario_count))


class SingleCalculationMarketData(MarketData):
    """One scenario of a CalculationMarketData."""

    def __init__(self, market_data: CalculationMarketData, scenario_index: int):
        self._market_data = market_data
        self._scenario_index = scenario_index

    @property
    def scenario_index(self) -> int:
        return self._scenario_index

    @property
    def valuation_date(self):
        return self._market_data.valuation_date

    def find_value(self, key) -> Optional[Any]:
        box = self._market_data.find_value(key)
        return None if box is None else box.get_value(self._scenario_index)

    def identifiers(self) -> Set[Any]:
        return self._market_data.identifiers()

    def find_time_series(self, key) -> Optional[pd.Series]:
        return self._market_data.find_time_series(key)

    def time_series_identifiers(self) -> Set[Any]:
        return self._market_data.time_series_identifiers()


__all__ = [
    "MarketDataMappings",
    "MarketDataRules",
    "MarketDataRule",
    "CompositeMarketDataRules",
    "CalculationMarketData",
    "SingleCalculationMarketData",
]
