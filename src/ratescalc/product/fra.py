"""
Forward rate agreements.

A FRA exchanges a fixed rate against an Ibor index rate over one accrual
period. Settlement is on the start date at the discounted difference
(ISDA FRA discounting):

    payoff = notional * tau * (F - K) / (1 + tau * F)

A bought FRA pays the fixed rate and receives the index rate.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..basics.conventions import DayCount
from ..basics.currency import Currency
from ..basics.index import IborIndex
from ..calc.target import CalculationTarget
from .common import BuySell


@dataclass(frozen=True)
class Fra:
    """
    A forward rate agreement.

    Attributes:
        buy_sell: BUY pays fixed and receives the index rate
        currency: Settlement currency
        notional: Notional amount, positive
        start_date: Start of the accrual period, also the fixing and payment date
        end_date: End of the accrual period
        fixed_rate: The agreed fixed rate
        index: The index that is fixed
        day_count: Accrual day count, defaults to the index day count
    """
    buy_sell: BuySell
    currency: Currency
    notional: float
    start_date: date
    end_date: date
    fixed_rate: float
    index: IborIndex
    day_count: Optional[DayCount] = None

    def __post_init__(self):
        if self.end_date <= self.start_date:
            raise ValueError(f"FRA end date {self.end_date} must be after start date {self.start_date}")
        if self.notional < 0:
            raise ValueError(f"FRA notional must not be negative, was {self.notional}")
        if self.day_count is None:
            object.__setattr__(self, "day_count", self.index.day_count)

    @property
    def payment_date(self) -> date:
        return self.start_date

    @property
    def fixing_date(self) -> date:
        return self.start_date

    @property
    def year_fraction(self) -> float:
        return self.day_count.year_fraction(self.start_date, self.end_date)

    @property
    def signed_notional(self) -> float:
        return self.buy_sell.normalize(self.notional)


@dataclass(frozen=True)
class FraTrade(CalculationTarget):
    """A trade in a FRA."""
    trade_id: str
    product: Fra
    trade_date: Optional[date] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"FraTrade[{self.trade_id}]"


__all__ = ["Fra", "FraTrade"]
