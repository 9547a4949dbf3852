"""
Tenor arithmetic.

Tenors are strings of the form <amount><unit> with unit in D/W/M/Y,
e.g. "1D", "2W", "3M", "10Y". Month and year tenors keep the day of month
where possible and clamp to month end otherwise.
"""

import calendar
import re
from datetime import date, timedelta
from typing import Tuple

TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)


def parse_tenor(tenor: str) -> Tuple[int, str]:
    """
    Parse a tenor string into (amount, unit).

    Raises:
        ValueError: If tenor format is invalid
    """
    match = TENOR_PATTERN.match(tenor.upper().strip())
    if not match:
        raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")
    return int(match.group(1)), match.group(2).upper()


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    year = start.year + (start.month + months - 1) // 12
    month = (start.month + months - 1) % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_tenor(start: date, tenor: str) -> date:
    """
    Add a tenor to a date.

    Args:
        start: Starting date
        tenor: Tenor string (e.g., "1D", "3M", "2Y")

    Returns:
        End date
    """
    amount, unit = parse_tenor(tenor)
    if unit == 'D':
        return start + timedelta(days=amount)
    if unit == 'W':
        return start + timedelta(weeks=amount)
    return add_months(start, tenor_to_months(tenor))


def tenor_to_months(tenor: str) -> int:
    """Number of months in a month or year tenor."""
    amount, unit = parse_tenor(tenor)
    if unit == 'M':
        return amount
    if unit == 'Y':
        return 12 * amount
    raise ValueError(f"Tenor {tenor} is not expressed in months or years")


__all__ = [
    "parse_tenor",
    "add_months",
    "add_tenor",
    "tenor_to_months",
]
