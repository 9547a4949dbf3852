"""
Measures: names of the analytic outputs that can be requested for a target.
"""

import re
from dataclasses import dataclass

_NAME_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_\-]*$')


@dataclass(frozen=True, order=True)
class Measure:
    """A named analytic output, e.g. PresentValue or PV01."""
    name: str

    def __post_init__(self):
        if not _NAME_PATTERN.match(self.name):
            raise ValueError(f"Invalid measure name: {self.name!r}")

    @classmethod
    def of(cls, name: str) -> "Measure":
        return cls(name)

    def __str__(self) -> str:
        return self.name


Measure.PRESENT_VALUE = Measure("PresentValue")
Measure.EXPLAIN_PRESENT_VALUE = Measure("ExplainPresentValue")
Measure.PAR_RATE = Measure("ParRate")
Measure.PAR_SPREAD = Measure("ParSpread")
Measure.PV01 = Measure("PV01")
Measure.BUCKETED_PV01 = Measure("BucketedPV01")
Measure.BUCKETED_GAMMA_PV01 = Measure("BucketedGammaPV01")
Measure.PV01_MARKET_QUOTE_BUCKETED = Measure("PV01MarketQuoteBucketed")
Measure.CURRENT_CASH = Measure("CurrentCash")
Measure.FORWARD_FX_RATE = Measure("ForwardFxRate")


__all__ = ["Measure"]
