"""
Market data keys and identifiers.

Keys are what calculation functions ask for; identifiers are what market
data containers are indexed by. Two kinds of key exist:
- Non-observable keys (curves, FX rates) are their own identifiers.
- Observable keys (quotes, index fixings) are resolved to an ObservableId
  by attaching the market data feed configured for the calculation.
"""

from dataclasses import dataclass

from ..basics.currency import Currency
from ..basics.index import IborIndex


class MarketDataKey:
    """A key for market data that is also its own identifier."""

    def to_market_data_id(self, feed: "MarketDataFeed" = None):
        return self


class ObservableKey:
    """A key for market data observed from a feed."""

    def to_market_data_id(self, feed: "MarketDataFeed") -> "ObservableId":
        return ObservableId(self, feed)


@dataclass(frozen=True)
class MarketDataFeed:
    """Source of observable market data."""
    name: str

    def __str__(self) -> str:
        return self.name


MarketDataFeed.NONE = MarketDataFeed("None")


@dataclass(frozen=True)
class ObservableId:
    """Identifier of an observable value: the key plus the feed it comes from."""
    key: ObservableKey
    feed: MarketDataFeed = MarketDataFeed.NONE

    def __str__(self) -> str:
        return f"{self.key}@{self.feed}"


@dataclass(frozen=True)
class DiscountCurveKey(MarketDataKey):
    """The discount curve of a currency."""
    currency: Currency

    def __str__(self) -> str:
        return f"DiscountCurve[{self.currency}]"


@dataclass(frozen=True)
class IborIndexCurveKey(MarketDataKey):
    """The forward curve of an Ibor index."""
    index: IborIndex

    def __str__(self) -> str:
        return f"IborIndexCurve[{self.index}]"


@dataclass(frozen=True)
class FxRateKey(MarketDataKey):
    """The FX rate for a currency pair. Values are FxRate instances."""
    base: Currency
    counter: Currency

    def __str__(self) -> str:
        return f"FxRate[{self.base}/{self.counter}]"


@dataclass(frozen=True)
class CurveGroupKey(MarketDataKey):
    """A calibrated curve group. Values are CurveGroup instances."""
    group_name: str

    def __str__(self) -> str:
        return f"CurveGroup[{self.group_name}]"


@dataclass(frozen=True)
class QuoteKey(ObservableKey):
    """A market quote, such as the par rate of a calibration instrument."""
    name: str

    def __str__(self) -> str:
        return f"Quote[{self.name}]"


@dataclass(frozen=True)
class IndexRateKey(ObservableKey):
    """The fixings of an index. Used as a time series key."""
    index: IborIndex

    def __str__(self) -> str:
        return f"IndexRate[{self.index}]"


__all__ = [
    "MarketDataKey",
    "ObservableKey",
    "MarketDataFeed",
    "ObservableId",
    "DiscountCurveKey",
    "IborIndexCurveKey",
    "FxRateKey",
    "CurveGroupKey",
    "QuoteKey",
    "IndexRateKey",
]
