"""
Products and trades that calculations can be run on.
"""

from .common import BuySell
from .fra import Fra, FraTrade
from .deposit import TermDeposit, TermDepositTrade
from .fx import FxSingle, FxSingleTrade

__all__ = [
    "BuySell",
    "Fra",
    "FraTrade",
    "TermDeposit",
    "TermDepositTrade",
    "FxSingle",
    "FxSingleTrade",
]
