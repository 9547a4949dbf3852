"""
Single FX transactions.

An FxSingle exchanges an amount of one currency for an amount of another on
a payment date. The amounts have opposite signs: a positive amount is
received, a negative amount is paid. The base currency is the first
currency of the conventional pair of the two currencies.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..basics.currency import CurrencyAmount, CurrencyPair, FxRate
from ..calc.target import CalculationTarget


@dataclass(frozen=True)
class FxSingle:
    """
    A single FX exchange.

    Attributes:
        base_currency_amount: Amount in the base currency of the conventional pair
        counter_currency_amount: Amount in the counter currency, opposite sign
        payment_date: Date both amounts are paid
    """
    base_currency_amount: CurrencyAmount
    counter_currency_amount: CurrencyAmount
    payment_date: date

    def __post_init__(self):
        base = self.base_currency_amount
        counter = self.counter_currency_amount
        if base.currency == counter.currency:
            raise ValueError(f"FX amounts must be in different currencies, both were {base.currency}")
        if base.amount != 0.0 and counter.amount != 0.0 and (base.amount > 0) == (counter.amount > 0):
            raise ValueError(f"FX amounts must have opposite signs: {base} and {counter}")
        if not CurrencyPair(base.currency, counter.currency).is_conventional:
            object.__setattr__(self, "base_currency_amount", counter)
            object.__setattr__(self, "counter_currency_amount", base)

    @classmethod
    def of(cls, amount: CurrencyAmount, fx_rate: FxRate, payment_date: date) -> "FxSingle":
        """
        Exchange of the amount at the rate.

        Receiving 1m EUR at EUR/USD 1.10 pays 1.1m USD.
        """
        if amount.currency not in (fx_rate.base, fx_rate.counter):
            raise ValueError(f"FX rate {fx_rate} does not contain the currency {amount.currency}")
        other = fx_rate.counter if amount.currency == fx_rate.base else fx_rate.base
        counter_amount = CurrencyAmount(other, -amount.amount * fx_rate.fx_rate(amount.currency, other))
        return cls(amount, counter_amount, payment_date)

    @property
    def currency_pair(self) -> CurrencyPair:
        return CurrencyPair(self.base_currency_amount.currency, self.counter_currency_amount.currency)

    @property
    def rate(self) -> float:
        """Agreed rate, counter currency units per base currency unit."""
        return abs(self.counter_currency_amount.amount / self.base_currency_amount.amount)


@dataclass(frozen=True)
class FxSingleTrade(CalculationTarget):
    """A trade in a single FX exchange."""
    trade_id: str
    product: FxSingle
    trade_date: Optional[date] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"FxSingleTrade[{self.trade_id}]"


__all__ = ["FxSingle", "FxSingleTrade"]
