"""Shared product enumerations."""

from enum import Enum


class BuySell(Enum):
    """Direction of a trade from the point of view of the holder."""
    BUY = "Buy"
    SELL = "Sell"

    def normalize(self, amount: float) -> float:
        """Positive amount for BUY, negative for SELL."""
        return abs(amount) if self is BuySell.BUY else -abs(amount)

    @property
    def is_buy(self) -> bool:
        return self is BuySell.BUY


__all__ = ["BuySell"]
