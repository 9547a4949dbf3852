"""
Ibor indices.

Fixing, effective and accrual start dates coincide; no spot lag or holiday
calendar is applied.
"""

from dataclasses import dataclass
from datetime import date

from .conventions import DayCount
from .currency import Currency
from .dates import add_tenor


@dataclass(frozen=True)
class IborIndex:
    """
    A term rate index such as USD-LIBOR-3M.

    Attributes:
        name: Index name
        currency: Currency of the index
        tenor: Index tenor (e.g., "3M")
        day_count: Accrual day count of the index rate
    """
    name: str
    currency: Currency
    tenor: str
    day_count: DayCount = DayCount.ACT_360

    def maturity_date(self, fixing_date: date) -> date:
        """End of the accrual period fixed on fixing_date."""
        return add_tenor(fixing_date, self.tenor)

    def __str__(self) -> str:
        return self.name


USD_LIBOR_3M = IborIndex("USD-LIBOR-3M", Currency.USD, "3M", DayCount.ACT_360)
USD_LIBOR_6M = IborIndex("USD-LIBOR-6M", Currency.USD, "6M", DayCount.ACT_360)
GBP_LIBOR_3M = IborIndex("GBP-LIBOR-3M", Currency.GBP, "3M", DayCount.ACT_365)
EUR_EURIBOR_3M = IborIndex("EUR-EURIBOR-3M", Currency.EUR, "3M", DayCount.ACT_360)


__all__ = [
    "IborIndex",
    "USD_LIBOR_3M",
    "USD_LIBOR_6M",
    "GBP_LIBOR_3M",
    "EUR_EURIBOR_3M",
]
