"""
Currencies, amounts and FX rates.

Provides:
- Currency: ISO-4217 style three letter code
- CurrencyAmount / MultiCurrencyAmount: amounts in one or several currencies
- FxRate / FxMatrix: rates between currency pairs
- FxConvertible: capability of values that can be converted to a currency

Conventions:
    An FxRate(base, counter, rate) means 1 unit of base = rate units of counter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True, order=True)
class Currency:
    """A three letter currency code."""
    code: str

    def __post_init__(self):
        if len(self.code) != 3 or not self.code.isalpha() or not self.code.isupper():
            raise ValueError(f"Invalid currency code: {self.code!r}")

    @classmethod
    def of(cls, code: str) -> "Currency":
        return cls(code.upper())

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code})"


Currency.USD = Currency("USD")
Currency.EUR = Currency("EUR")
Currency.GBP = Currency("GBP")
Currency.JPY = Currency("JPY")
Currency.CHF = Currency("CHF")

# Market ordering of currencies in conventional pairs, highest priority first.
# Currencies not listed rank after these, alphabetically.
_PAIR_PRIORITY = ("EUR", "GBP", "AUD", "NZD", "USD", "CAD", "CHF", "NOK", "SEK", "JPY")


def _priority(currency: Currency) -> Tuple[int, str]:
    try:
        return _PAIR_PRIORITY.index(currency.code), currency.code
    except ValueError:
        return len(_PAIR_PRIORITY), currency.code


@dataclass(frozen=True)
class CurrencyPair:
    """An ordered pair of currencies, quoted as base/counter."""
    base: Currency
    counter: Currency

    @classmethod
    def of(cls, base: Currency, counter: Currency) -> "CurrencyPair":
        return cls(base, counter)

    @property
    def is_conventional(self) -> bool:
        """Whether the pair is quoted in market order, e.g. EUR/USD rather than USD/EUR."""
        return _priority(self.base) <= _priority(self.counter)

    def inverse(self) -> "CurrencyPair":
        return CurrencyPair(self.counter, self.base)

    def to_conventional(self) -> "CurrencyPair":
        return self if self.is_conventional else self.inverse()

    def __str__(self) -> str:
        return f"{self.base}/{self.counter}"


class FxRateProvider(ABC):
    """Source of FX rates."""

    @abstractmethod
    def fx_rate(self, base: Currency, counter: Currency) -> float:
        """
        Rate converting one unit of base into counter.

        Implementations return 1 when base equals counter.
        """

    def convert(self, amount: float, from_currency: Currency, to_currency: Currency) -> float:
        """Convert an amount between currencies."""
        return amount * self.fx_rate(from_currency, to_currency)


class FxConvertible(ABC):
    """A value that can be expressed in a single target currency."""

    @abstractmethod
    def convert_to(self, currency: Currency, fx_provider: FxRateProvider):
        """Return a copy of this value converted into the currency."""


@dataclass(frozen=True)
class FxRate:
    """Rate between a pair of currencies."""
    base: Currency
    counter: Currency
    rate: float

    def __post_init__(self):
        if self.rate <= 0:
            raise ValueError(f"FX rate must be positive, was {self.rate}")
        if self.base == self.counter and self.rate != 1.0:
            raise ValueError("FX rate for identical currencies must be 1")

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        """
        Rate for the requested direction of this pair.

        Raises:
            ValueError: If the currencies are not this pair
        """
        if base == counter:
            return 1.0
        if base == self.base and counter == self.counter:
            return self.rate
        if base == self.counter and counter == self.base:
            return 1.0 / self.rate
        raise ValueError(f"FxRate {self} cannot provide rate for {base}/{counter}")

    def inverse(self) -> "FxRate":
        return FxRate(self.counter, self.base, 1.0 / self.rate)

    def __str__(self) -> str:
        return f"{self.base}/{self.counter} {self.rate}"


class FxMatrix(FxRateProvider):
    """
    Collection of FX rates with direct and inverse lookup.

    No triangulation is attempted; every pair used must be supplied.
    """

    def __init__(self, rates: Iterable[FxRate] = ()):
        self._rates: Dict[Tuple[Currency, Currency], float] = {}
        for r in rates:
            self._rates[(r.base, r.counter)] = r.rate
            self._rates[(r.counter, r.base)] = 1.0 / r.rate

    @classmethod
    def empty(cls) -> "FxMatrix":
        return cls()

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        if base == counter:
            return 1.0
        try:
            return self._rates[(base, counter)]
        except KeyError:
            raise ValueError(f"No FX rate found for {base}/{counter}") from None

    def currencies(self):
        return {c for pair in self._rates for c in pair}

    def __repr__(self) -> str:
        return f"FxMatrix(pairs={len(self._rates) // 2})"


@dataclass(frozen=True)
class CurrencyAmount(FxConvertible):
    """An amount of money in a single currency."""
    currency: Currency
    amount: float

    def plus(self, other: "CurrencyAmount") -> "CurrencyAmount":
        if other.currency != self.currency:
            raise ValueError(f"Currency mismatch: {self.currency} and {other.currency}")
        return CurrencyAmount(self.currency, self.amount + other.amount)

    def multiplied_by(self, factor: float) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, self.amount * factor)

    def convert_to(self, currency: Currency, fx_provider: FxRateProvider) -> "CurrencyAmount":
        if currency == self.currency:
            return self
        return CurrencyAmount(currency, fx_provider.convert(self.amount, self.currency, currency))

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"


@dataclass(frozen=True)
class MultiCurrencyAmount(FxConvertible):
    """Amounts in several currencies, at most one amount per currency."""
    amounts: Mapping[Currency, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "amounts", dict(self.amounts))

    @classmethod
    def of(cls, *amounts: CurrencyAmount) -> "MultiCurrencyAmount":
        result = cls()
        for a in amounts:
            result = result.plus(a)
        return result

    def plus(self, other) -> "MultiCurrencyAmount":
        """Add a CurrencyAmount or another MultiCurrencyAmount."""
        merged = dict(self.amounts)
        if isinstance(other, CurrencyAmount):
            items = [(other.currency, other.amount)]
        else:
            items = list(other.amounts.items())
        for ccy, amount in items:
            merged[ccy] = merged.get(ccy, 0.0) + amount
        return MultiCurrencyAmount(merged)

    def multiplied_by(self, factor: float) -> "MultiCurrencyAmount":
        return MultiCurrencyAmount({c: a * factor for c, a in self.amounts.items()})

    def get_amount(self, currency: Currency) -> CurrencyAmount:
        if currency not in self.amounts:
            raise ValueError(f"No amount for currency {currency}")
        return CurrencyAmount(currency, self.amounts[currency])

    @property
    def currencies(self):
        return set(self.amounts)

    def size(self) -> int:
        return len(self.amounts)

    def convert_to(self, currency: Currency, fx_provider: FxRateProvider) -> CurrencyAmount:
        total = 0.0
        for ccy, amount in self.amounts.items():
            total += fx_provider.convert(amount, ccy, currency)
        return CurrencyAmount(currency, total)

    def __str__(self) -> str:
        return "[" + ", ".join(f"{c} {a}" for c, a in sorted(self.amounts.items())) + "]"


__all__ = [
    "Currency",
    "CurrencyPair",
    "CurrencyAmount",
    "MultiCurrencyAmount",
    "FxRate",
    "FxMatrix",
    "FxRateProvider",
    "FxConvertible",
]
