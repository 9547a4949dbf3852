"""
Day count conventions.

Supported Day Counts:
- ACT/360: Actual days / 360 (money markets, Libor)
- ACT/365: Actual days / 365 (curve time measure)
- ACT/ACT: ISDA actual/actual, split at year boundaries
- 30/360: 30 days per month / 360 (US bond basis)
"""

import calendar
from datetime import date
from enum import Enum


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        key = s.upper().replace(" ", "").replace("/", "")
        for dc in cls:
            if dc.value.replace("/", "") == key:
                return dc
        raise ValueError(f"Unknown day count convention: {s}")

    def year_fraction(self, start: date, end: date) -> float:
        """Year fraction between two dates, negative if end is before start."""
        if end < start:
            return -year_fraction(end, start, self)
        return year_fraction(start, end, self)

    def __str__(self) -> str:
        return self.value


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction as float, zero when end is not after start
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    if day_count == DayCount.ACT_365:
        return actual_days / 365.0

    if day_count == DayCount.ACT_ACT:
        if start.year == end.year:
            return actual_days / _days_in_year(start.year)
        total = (date(start.year + 1, 1, 1) - start).days / _days_in_year(start.year)
        total += end.year - start.year - 1
        total += (end - date(end.year, 1, 1)).days / _days_in_year(end.year)
        return total

    if day_count == DayCount.THIRTY_360:
        d1 = min(start.day, 30)
        d2 = min(end.day, 30) if d1 == 30 else end.day
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    raise ValueError(f"Unknown day count: {day_count}")


def _days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


__all__ = [
    "DayCount",
    "year_fraction",
]
