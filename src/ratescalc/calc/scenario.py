"""
Scenario results: the values of one measure for every scenario.

Provides:
- ScenarioResult: base class, one value per scenario
- DefaultScenarioResult: arbitrary values
- ValuesArray: plain numbers (par rates, spreads)
- CurrencyValuesArray: amounts in one currency
- MultiCurrencyValuesArray: amounts in several currencies
- FxConvertibleList: values that convert to a currency individually
- ScenarioFxRateProvider: per-scenario FX rates read from market data

The three currency-bearing types implement ScenarioFxConvertible so the
calculation task can convert them into a reporting currency.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence

import numpy as np

from ..basics.currency import (
    Currency,
    CurrencyAmount,
    FxConvertible,
    FxRateProvider,
    MultiCurrencyAmount,
)
from ..errors import MarketDataNotFoundError
from ..market.keys import FxRateKey


class ScenarioResult(ABC):
    """Values of a calculation for each scenario."""

    @property
    @abstractmethod
    def scenario_count(self) -> int:
        pass

    @abstractmethod
    def get(self, scenario_index: int) -> Any:
        pass

    def __len__(self) -> int:
        return self.scenario_count

    def __iter__(self) -> Iterator[Any]:
        return (self.get(i) for i in range(self.scenario_count))

    def to_list(self) -> List[Any]:
        return list(self)


class ScenarioFxConvertible(ABC):
    """Scenario values that can be converted into a single currency."""

    @abstractmethod
    def convert_to(self, currency: Currency, fx_provider: "ScenarioFxRateProvider") -> ScenarioResult:
        pass


class DefaultScenarioResult(ScenarioResult):
    """Scenario result holding arbitrary values."""

    def __init__(self, values: Iterable[Any]):
        self._values = tuple(values)

    @classmethod
    def of(cls, *values: Any) -> "DefaultScenarioResult":
        return cls(values)

    @property
    def scenario_count(self) -> int:
        return len(self._values)

    def get(self, scenario_index: int) -> Any:
        return self._values[scenario_index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, DefaultScenarioResult):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"DefaultScenarioResult({list(self._values)!r})"


class ValuesArray(ScenarioResult):
    """Scenario result of plain numbers."""

    def __init__(self, values: Sequence[float]):
        self.values = np.asarray(values, dtype=float)

    @classmethod
    def of(cls, *values: float) -> "ValuesArray":
        return cls(values)

    @property
    def scenario_count(self) -> int:
        return len(self.values)

    def get(self, scenario_index: int) -> float:
        return float(self.values[scenario_index])

    def __eq__(self, other) -> bool:
        if not isinstance(other, ValuesArray):
            return NotImplemented
        return np.array_equal(self.values, other.values)

    def __repr__(self) -> str:
        return f"ValuesArray({self.values.tolist()})"


class CurrencyValuesArray(ScenarioResult, ScenarioFxConvertible):
    """Scenario result of amounts in a single currency."""

    def __init__(self, currency: Currency, values: Sequence[float]):
        self.currency = currency
        self.values = np.asarray(values, dtype=float)

    @classmethod
    def of(cls, currency: Currency, values: Sequence[float]) -> "CurrencyValuesArray":
        return cls(currency, values)

    @classmethod
    def from_amounts(cls, amounts: Sequence[CurrencyAmount]) -> "CurrencyValuesArray":
        """
        Build from one CurrencyAmount per scenario.

        Raises:
            ValueError: If the amounts are empty or in different currencies
        """
        if not amounts:
            raise ValueError("Cannot create a CurrencyValuesArray from no amounts")
        currency = amounts[0].currency
        if any(a.currency != currency for a in amounts):
            raise ValueError("All amounts must be in the same currency")
        return cls(currency, [a.amount for a in amounts])

    @property
    def scenario_count(self) -> int:
        return len(self.values)

    def get(self, scenario_index: int) -> CurrencyAmount:
        return CurrencyAmount(self.currency, float(self.values[scenario_index]))

    def convert_to(self, currency: Currency, fx_provider: "ScenarioFxRateProvider") -> "CurrencyValuesArray":
        if currency == self.currency:
            return self
        rates = np.array([
            fx_provider.fx_rate(self.currency, currency, i) for i in range(self.scenario_count)
        ])
        return CurrencyValuesArray(currency, self.values * rates)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CurrencyValuesArray):
            return NotImplemented
        return self.currency == other.currency and np.array_equal(self.values, other.values)

    def __repr__(self) -> str:
        return f"CurrencyValuesArray({self.currency}, {self.values.tolist()})"


class MultiCurrencyValuesArray(ScenarioResult, ScenarioFxConvertible):
    """Scenario result of multi-currency amounts, stored as one array per currency."""

    def __init__(self, values: Mapping[Currency, Sequence[float]]):
        arrays = {c: np.asarray(v, dtype=float) for c, v in values.items()}
        sizes = {len(a) for a in arrays.values()}
        if len(sizes) > 1:
            raise ValueError(f"Arrays must all have the same size, found sizes {sorted(sizes)}")
        self.values: Dict[Currency, np.ndarray] = arrays
        self._size = sizes.pop() if sizes else 0

    @classmethod
    def of(cls, amounts: Sequence[MultiCurrencyAmount]) -> "MultiCurrencyValuesArray":
        """Build from one MultiCurrencyAmount per scenario."""
        currencies = sorted({c for a in amounts for c in a.currencies})
        values = {c: [a.amounts.get(c, 0.0) for a in amounts] for c in currencies}
        result = cls(values)
        result._size = len(amounts)
        return result

    @property
    def currencies(self):
        return set(self.values)

    @property
    def scenario_count(self) -> int:
        return self._size

    def get(self, scenario_index: int) -> MultiCurrencyAmount:
        return MultiCurrencyAmount({c: float(v[scenario_index]) for c, v in self.values.items()})

    def get_values(self, currency: Currency) -> np.ndarray:
        if currency not in self.values:
            raise ValueError(f"No values available for currency {currency}")
        return self.values[currency]

    def convert_to(self, currency: Currency, fx_provider: "ScenarioFxRateProvider") -> CurrencyValuesArray:
        total = np.zeros(self.scenario_count)
        for ccy, values in self.values.items():
            rates = np.array([fx_provider.fx_rate(ccy, currency, i) for i in range(self.scenario_count)])
            total = total + values * rates
        return CurrencyValuesArray(currency, total)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MultiCurrencyValuesArray):
            return NotImplemented
        return (self._size == other._size
                and self.values.keys() == other.values.keys()
                and all(np.array_equal(v, other.values[c]) for c, v in self.values.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{c}: {v.tolist()}" for c, v in sorted(self.values.items()))
        return f"MultiCurrencyValuesArray({{{inner}}})"


class FxConvertibleList(ScenarioResult, ScenarioFxConvertible):
    """Scenario result of values that each implement FxConvertible."""

    def __init__(self, values: Iterable[FxConvertible]):
        self._values = tuple(values)

    @property
    def scenario_count(self) -> int:
        return len(self._values)

    def get(self, scenario_index: int) -> FxConvertible:
        return self._values[scenario_index]

    def convert_to(self, currency: Currency, fx_provider: "ScenarioFxRateProvider") -> "FxConvertibleList":
        return FxConvertibleList(
            v.convert_to(currency, fx_provider.for_scenario(i)) for i, v in enumerate(self._values)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, FxConvertibleList):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"FxConvertibleList({list(self._values)!r})"


class ScenarioFxRateProvider:
    """
    FX rates for each scenario, read from scenario market data.

    Rates are stored under FxRateKey(base, counter) as FxRate values. The
    inverse pair is used when the direct pair is not present.
    """

    def __init__(self, market_data):
        self._market_data = market_data

    @property
    def scenario_count(self) -> int:
        return self._market_data.scenario_count

    def fx_rate(self, base: Currency, counter: Currency, scenario_index: int) -> float:
        """
        Rate converting base into counter in one scenario.

        Raises:
            MarketDataNotFoundError: If neither direction of the pair is available
        """
        if base == counter:
            return 1.0
        box = self._market_data.find_value(FxRateKey(base, counter))
        if box is None:
            box = self._market_data.find_value(FxRateKey(counter, base))
        if box is None:
            raise MarketDataNotFoundError(
                FxRateKey(base, counter), f"No FX rate available for {base}/{counter}")
        return box.get_value(scenario_index).fx_rate(base, counter)

    def for_scenario(self, scenario_index: int) -> FxRateProvider:
        return _SingleScenarioFxRateProvider(self, scenario_index)


class _SingleScenarioFxRateProvider(FxRateProvider):

    def __init__(self, provider: ScenarioFxRateProvider, scenario_index: int):
        self._provider = provider
        self._scenario_index = scenario_index

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        return self._provider.fx_rate(base, counter, self._scenario_index)


__all__ = [
    "ScenarioResult",
    "ScenarioFxConvertible",
    "DefaultScenarioResult",
    "ValuesArray",
    "CurrencyValuesArray",
    "MultiCurrencyValuesArray",
    "FxConvertibleList",
    "ScenarioFxRateProvider",
]
