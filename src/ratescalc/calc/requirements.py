"""
Market data requirements.

FunctionRequirements are expressed by calculation functions in terms of
market data keys. MarketDataRequirements are the same requirements after
resolving keys to identifiers with MarketDataMappings, split into
observable and non-observable identifiers.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from ..basics.currency import Currency
from ..market.keys import ObservableId


@dataclass(frozen=True)
class FunctionRequirements:
    """
    Market data needed by a function for a target and set of measures.

    Attributes:
        single_values: Keys of single values (curves, quotes, FX rates)
        time_series: Keys of time series (index fixings)
        output_currencies: Currencies in which the function reports values
    """
    single_values: FrozenSet = frozenset()
    time_series: FrozenSet = frozenset()
    output_currencies: FrozenSet[Currency] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "single_values", frozenset(self.single_values))
        object.__setattr__(self, "time_series", frozenset(self.time_series))
        object.__setattr__(self, "output_currencies", frozenset(self.output_currencies))

    @classmethod
    def empty(cls) -> "FunctionRequirements":
        return cls()

    @classmethod
    def of(
        cls,
        single_values: Iterable = (),
        time_series: Iterable = (),
        output_currencies: Iterable[Currency] = (),
    ) -> "FunctionRequirements":
        return cls(frozenset(single_values), frozenset(time_series), frozenset(output_currencies))

    def combined_with(self, other: "FunctionRequirements") -> "FunctionRequirements":
        return FunctionRequirements(
            self.single_values | other.single_values,
            self.time_series | other.time_series,
            self.output_currencies | other.output_currencies,
        )


@dataclass(frozen=True)
class MarketDataRequirements:
    """Market data identifiers needed to run a set of calculations."""
    observables: FrozenSet = frozenset()
    non_observables: FrozenSet = frozenset()
    time_series: FrozenSet = frozenset()
    output_currencies: FrozenSet[Currency] = frozenset()

    @classmethod
    def empty(cls) -> "MarketDataRequirements":
        return cls()

    @classmethod
    def of(cls, requirements: FunctionRequirements, mappings) -> "MarketDataRequirements":
        """Resolve function requirements to identifiers using mappings."""
        ids = [mappings.get_id_for_key(k) for k in requirements.single_values]
        return cls(
            observables=frozenset(i for i in ids if isinstance(i, ObservableId)),
            non_observables=frozenset(i for i in ids if not isinstance(i, ObservableId)),
            time_series=frozenset(mappings.get_id_for_key(k) for k in requirements.time_series),
            output_currencies=requirements.output_currencies,
        )

    def combined_with(self, other: "MarketDataRequirements") -> "MarketDataRequirements":
        return MarketDataRequirements(
            self.observables | other.observables,
            self.non_observables | other.non_observables,
            self.time_series | other.time_series,
            self.output_currencies | other.output_currencies,
        )

    @classmethod
    def combine(cls, requirements: Iterable["MarketDataRequirements"]) -> "MarketDataRequirements":
        result = cls.empty()
        for r in requirements:
            result = result.combined_with(r)
        return result


__all__ = [
    "FunctionRequirements",
    "MarketDataRequirements",
]
