"""
Term deposits.

A fixed rate deposit: the notional is exchanged on the start date and
repaid with interest on the end date. A BUY deposit lends the notional,
receiving notional * (1 + rate * tau) at the end.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..basics.conventions import DayCount
from ..basics.currency import Currency
from ..calc.target import CalculationTarget
from .common import BuySell


@dataclass(frozen=True)
class TermDeposit:
    """
    A term deposit.

    Attributes:
        buy_sell: BUY lends money, SELL borrows
        currency: Currency of the deposit
        notional: Notional amount, positive
        start_date: Date the notional is exchanged
        end_date: Date the notional and interest are repaid
        rate: Fixed interest rate
        day_count: Accrual day count
    """
    buy_sell: BuySell
    currency: Currency
    notional: float
    start_date: date
    end_date: date
    rate: float
    day_count: DayCount = DayCount.ACT_360

    def __post_init__(self):
        if self.end_date <= self.start_date:
            raise ValueError(f"Deposit end date {self.end_date} must be after start date {self.start_date}")
        if self.notional < 0:
            raise ValueError(f"Deposit notional must not be negative, was {self.notional}")

    @property
    def year_fraction(self) -> float:
        return self.day_count.year_fraction(self.start_date, self.end_date)

    @property
    def signed_notional(self) -> float:
        return self.buy_sell.normalize(self.notional)

    @property
    def interest(self) -> float:
        return self.signed_notional * self.rate * self.year_fraction


@dataclass(frozen=True)
class TermDepositTrade(CalculationTarget):
    """A trade in a term deposit."""
    trade_id: str
    product: TermDeposit
    trade_date: Optional[date] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"TermDepositTrade[{self.trade_id}]"


__all__ = ["TermDeposit", "TermDepositTrade"]
