"""
Market data containers.

Provides:
- MarketDataBox: a value shared by all scenarios or one value per scenario
- MarketData / ImmutableMarketData: a single snapshot of market data
- ScenarioMarketData / ImmutableScenarioMarketData: market data for N scenarios
- SingleScenarioMarketData: view of one scenario of a ScenarioMarketData

Containers are indexed by market data identifiers (see keys.py). Time series
are pandas Series indexed by date; a missing series is returned as an empty
Series rather than raising.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Set

import pandas as pd

from ..errors import MarketDataNotFoundError


def empty_time_series() -> pd.Series:
    return pd.Series(dtype=float)


class MarketDataBox:
    """
    A market data value for all scenarios of a calculation.

    A box holds either a single value used by every scenario or one value
    per scenario.
    """

    __slots__ = ("_single", "_values")

    def __init__(self, single: Any = None, values: Optional[Sequence[Any]] = None):
        self._single = single
        self._values = None if values is None else tuple(values)

    @classmethod
    def of_single_value(cls, value: Any) -> "MarketDataBox":
        return cls(single=value)

    @classmethod
    def of_scenario_values(cls, values: Iterable[Any]) -> "MarketDataBox":
        values = tuple(values)
        if not values:
            raise ValueError("A scenario box needs at least one value")
        return cls(values=values)

    @property
    def is_single_value(self) -> bool:
        return self._values is None

    @property
    def scenario_count(self) -> int:
        """Number of scenario values, -1 for a single value box."""
        return -1 if self._values is None else len(self._values)

    @property
    def single_value(self) -> Any:
        if self._values is not None:
            raise ValueError("Box holds scenario values, not a single value")
        return self._single

    def get_value(self, scenario_index: int) -> Any:
        if self._values is None:
            return self._single
        if not 0 <= scenario_index < len(self._values):
            raise IndexError(
                f"Scenario index {scenario_index} out of range for box with "
                f"{len(self._values)} scenarios")
        return self._values[scenario_index]

    def map(self, fn: Callable[[Any], Any]) -> "MarketDataBox":
        if self._values is None:
            return MarketDataBox.of_single_value(fn(self._single))
        return MarketDataBox.of_scenario_values([fn(v) for v in self._values])

    def __eq__(self, other) -> bool:
        if not isinstance(other, MarketDataBox):
            return NotImplemented
        return self._single == other._single and self._values == other._values

    def __repr__(self) -> str:
        if self._values is None:
            return f"MarketDataBox({self._single!r})"
        return f"MarketDataBox(scenarios={len(self._values)})"


# ----------------------------------------------------------------------------
# Single snapshot
# ----------------------------------------------------------------------------

class MarketData(ABC):
    """A read-only snapshot of market data for one valuation date."""

    @property
    @abstractmethod
    def valuation_date(self) -> date:
        pass

    @abstractmethod
    def find_value(self, identifier) -> Optional[Any]:
        """Value for the identifier, or None if not available."""

    @abstractmethod
    def identifiers(self) -> Set[Any]:
        pass

    @abstractmethod
    def find_time_series(self, identifier) -> Optional[pd.Series]:
        pass

    def time_series_identifiers(self) -> Set[Any]:
        return set()

    def contains_value(self, identifier) -> bool:
        return self.find_value(identifier) is not None

    def get_value(self, identifier) -> Any:
        """
        Value for the identifier.

        Raises:
            MarketDataNotFoundError: If there is no value for the identifier
        """
        value = self.find_value(identifier)
        if value is None:
            raise MarketDataNotFoundError(identifier)
        return value

    def get_time_series(self, identifier) -> pd.Series:
        """Time series for the identifier, empty if not available."""
        series = self.find_time_series(identifier)
        return empty_time_series() if series is None else series

    def combined_with(self, other: "MarketData") -> "MarketData":
        """
        Combine two snapshots with the same valuation date.

        Raises:
            ValueError: If the snapshots share any value or time series identifier
        """
        _check_combinable(self, other)
        values = {i: self.get_value(i) for i in self.identifiers()}
        values.update({i: other.get_value(i) for i in other.identifiers()})
        time_series = dict(_time_series_of(self))
        time_series.update(_time_series_of(other))
        return ImmutableMarketData.of(self.valuation_date, values, time_series)


class ImmutableMarketData(MarketData):
    """Market data held in dictionaries."""

    def __init__(
        self,
        valuation_date: date,
        values: Optional[Mapping[Any, Any]] = None,
        time_series: Optional[Mapping[Any, pd.Series]] = None,
    ):
        self._valuation_date = valuation_date
        self._values: Dict[Any, Any] = dict(values or {})
        self._time_series: Dict[Any, pd.Series] = dict(time_series or {})

    @classmethod
    def of(cls, valuation_date: date, values=None, time_series=None) -> "ImmutableMarketData":
        return cls(valuation_date, values, time_series)

    @property
    def valuation_date(self) -> date:
        return self._valuation_date

    def find_value(self, identifier) -> Optional[Any]:
        return self._values.get(identifier)

    def identifiers(self) -> Set[Any]:
        return set(self._values)

    def find_time_series(self, identifier) -> Optional[pd.Series]:
        return self._time_series.get(identifier)

    def time_series_identifiers(self) -> Set[Any]:
        return set(self._time_series)

    def __repr__(self) -> str:
        return f"ImmutableMarketData({self._valuation_date}, values={len(self._values)})"


def _time_series_of(data: MarketData) -> Dict[Any, pd.Series]:
    return {i: data.get_time_series(i) for i in data.time_series_identifiers()}


def _describe(identifiers) -> str:
    return ", ".join(sorted(str(i) for i in identifiers))


def _check_combinable(data, other) -> None:
    if data.valuation_date != other.valuation_date:
        raise ValueError(f"Valuation dates differ: {data.valuation_date} and {other.valuation_date}")
    overlap = data.identifiers() & other.identifiers()
    if overlap:
        raise ValueError(f"Market data cannot be combined, duplicate identifiers: {_describe(overlap)}")
    overlap = data.time_series_identifiers() & other.time_series_identifiers()
    if overlap:
        raise ValueError(
            f"Market data cannot be combined, duplicate time series identifiers: {_describe(overlap)}")


# ----------------------------------------------------------------------------
# Scenarios
# ----------------------------------------------------------------------------

class ScenarioMarketData(ABC):
    """
    Market data for a fixed number of scenarios.

    Lookups return MarketDataBox instances; scenario(i) gives a MarketData
    view of a single scenario.
    """

    @property
    @abstractmethod
    def valuation_date(self) -> date:
        pass

    @property
    @abstractmethod
    def scenario_count(self) -> int:
        pass

    @abstractmethod
    def find_value(self, identifier) -> Optional[MarketDataBox]:
        pass

    @abstractmethod
    def identifiers(self) -> Set[Any]:
        pass

    @abstractmethod
    def find_time_series(self, identifier) -> Optional[pd.Series]:
        pass

    def time_series_identifiers(self) -> Set[Any]:
        return set()

    def contains_value(self, identifier) -> bool:
        return self.find_value(identifier) is not None

    def get_value(self, identifier) -> MarketDataBox:
        """
        Box for the identifier.

        Raises:
            MarketDataNotFoundError: If there is no value for the identifier
        """
        box = self.find_value(identifier)
        if box is None:
            raise MarketDataNotFoundError(identifier)
        return box

    def get_time_series(self, identifier) -> pd.Series:
        series = self.find_time_series(identifier)
        return empty_time_series() if series is None else series

    def scenario(self, scenario_index: int) -> MarketData:
        if not 0 <= scenario_index < self.scenario_count:
            raise IndexError(
                f"Scenario index {scenario_index} out of range, scenario count is {self.scenario_count}")
        return SingleScenarioMarketData(self, scenario_index)

    def scenarios(self):
        return (self.scenario(i) for i in range(self.scenario_count))

    def combined_with(self, other: "ScenarioMarketData") -> "ScenarioMarketData":
        """
        Combine two sets of scenario market data.

        Raises:
            ValueError: On overlapping identifiers or incompatible scenario counts
        """
        _check_combinable(self, other)
        builder = ImmutableScenarioMarketData.builder(self.valuation_date)
        for source in (self, other):
            for identifier in source.identifiers():
                builder.add_box(identifier, source.get_value(identifier))
            for identifier in source.time_series_identifiers():
                builder.add_time_series(identifier, source.get_time_series(identifier))
        if self.scenario_count > 1 or other.scenario_count > 1:
            builder.scenario_count(max(self.scenario_count, other.scenario_count))
        return builder.build()


class ImmutableScenarioMarketData(ScenarioMarketData):
    """Scenario market data held in dictionaries of boxes."""

    def __init__(
        self,
        valuation_date: date,
        scenario_count: int,
        values: Mapping[Any, MarketDataBox],
        time_series: Mapping[Any, pd.Series],
    ):
        if scenario_count < 1:
            raise ValueError(f"Scenario count must be at least 1, was {scenario_count}")
        for identifier, box in values.items():
            if not box.is_single_value and box.scenario_count != scenario_count:
                raise ValueError(
                    f"Value for {identifier} has {box.scenario_count} scenarios, "
                    f"expected {scenario_count}")
        self._valuation_date = valuation_date
        self._scenario_count = scenario_count
        self._values = dict(values)
        self._time_series = dict(time_series)

    @staticmethod
    def builder(valuation_date: date) -> "ImmutableScenarioMarketDataBuilder":
        return ImmutableScenarioMarketDataBuilder(valuation_date)

    @classmethod
    def of(cls, valuation_date: date, values: Mapping[Any, Any], time_series=None) -> "ImmutableScenarioMarketData":
        """Single scenario market data from plain values."""
        builder = cls.builder(valuation_date)
        for identifier, value in values.items():
            builder.add_value(identifier, value)
        for identifier, series in (time_series or {}).items():
            builder.add_time_series(identifier, series)
        return builder.build()

    @property
    def valuation_date(self) -> date:
        return self._valuation_date

    @property
    def scenario_count(self) -> int:
        return self._scenario_count

    def find_value(self, identifier) -> Optional[MarketDataBox]:
        return self._values.get(identifier)

    def identifiers(self) -> Set[Any]:
        return set(self._values)

    def find_time_series(self, identifier) -> Optional[pd.Series]:
        return self._time_series.get(identifier)

    def time_series_identifiers(self) -> Set[Any]:
        return set(self._time_series)

    def __repr__(self) -> str:
        return (f"ImmutableScenarioMarketData({self._valuation_date}, "
                f"scenarios={self._scenario_count}, values={len(self._values)})")


class ImmutableScenarioMarketDataBuilder:
    """
    Builder for ImmutableScenarioMarketData.

    The scenario count is taken from the scenario boxes added, or set
    explicitly; all scenario boxes must agree on it.
    """

    def __init__(self, valuation_date: date):
        self._valuation_date = valuation_date
        self._scenario_count: Optional[int] = None
        self._values: Dict[Any, MarketDataBox] = {}
        self._time_series: Dict[Any, pd.Series] = {}

    def scenario_count(self, count: int) -> "ImmutableScenarioMarketDataBuilder":
        self._check_count(count, "scenario count")
        self._scenario_count = count
        return self

    def add_value(self, identifier, value) -> "ImmutableScenarioMarketDataBuilder":
        return self.add_box(identifier, MarketDataBox.of_single_value(value))

    def add_scenario_values(self, identifier, values: Iterable[Any]) -> "ImmutableScenarioMarketDataBuilder":
        return self.add_box(identifier, MarketDataBox.of_scenario_values(values))

    def add_box(self, identifier, box: MarketDataBox) -> "ImmutableScenarioMarketDataBuilder":
        if not box.is_single_value:
            self._check_count(box.scenario_count, str(identifier))
            self._scenario_count = box.scenario_count
        self._values[identifier] = box
        return self

    def add_time_series(self, identifier, series: pd.Series) -> "ImmutableScenarioMarketDataBuilder":
        self._time_series[identifier] = series
        return self

    def _check_count(self, count: int, what: str) -> None:
        if self._scenario_count is not None and count != self._scenario_count:
            raise ValueError(
                f"Scenario count mismatch for {what}: {count} scenarios, "
                f"expected {self._scenario_count}")

    def build(self) -> ImmutableScenarioMarketData:
        return ImmutableScenarioMarketData(
            self._valuation_date,
            self._scenario_count or 1,
            self._values,
            self._time_series,
        )


class SingleScenarioMarketData(MarketData):
    """MarketData view of one scenario of a ScenarioMarketData."""

    def __init__(self, market_data: ScenarioMarketData, scenario_index: int):
        self._market_data = market_data
        self._scenario_index = scenario_index

    @property
    def scenario_index(self) -> int:
        return self._scenario_index

    @property
    def valuation_date(self) -> date:
        return self._market_data.valuation_date

    def find_value(self, identifier) -> Optional[Any]:
        box = self._market_data.find_value(identifier)
        return None if box is None else box.get_value(self._scenario_index)

    def identifiers(self) -> Set[Any]:
        return self._market_data.identifiers()

    def find_time_series(self, identifier) -> Optional[pd.Series]:
        return self._market_data.find_time_series(identifier)

    def time_series_identifiers(self) -> Set[Any]:
        return self._market_data.time_series_identifiers()


__all__ = [
    "MarketDataBox",
    "MarketData",
    "ImmutableMarketData",
    "ScenarioMarketData",
    "ImmutableScenarioMarketData",
    "ImmutableScenarioMarketDataBuilder",
    "SingleScenarioMarketData",
    "empty_time_series",
]
