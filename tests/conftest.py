"""
Shared fixtures for the ratescalc tests.
"""

from datetime import date

import pytest

from ratescalc.basics.conventions import DayCount
from ratescalc.basics.currency import Currency
from ratescalc.basics.index import USD_LIBOR_3M
from ratescalc.market.curve.curves import InterpolatedNodalCurve, node_metadata
from ratescalc.market.curve.metadata import CurveName, Curves, ValueType
from ratescalc.market.data import ImmutableMarketData
from ratescalc.market.definition import (
    CurveGroupDefinition,
    CurveGroupEntry,
    FraCurveNode,
    NodalCurveDefinition,
    TermDepositCurveNode,
)
from ratescalc.market.keys import QuoteKey
from ratescalc.pricer.rates_provider import ImmutableRatesProvider
from ratescalc.product.common import BuySell
from ratescalc.product.deposit import TermDeposit, TermDepositTrade
from ratescalc.product.fra import Fra, FraTrade

USD = Currency.USD
VAL_DATE = date(2024, 1, 15)


@pytest.fixture
def valuation_date():
    return VAL_DATE


@pytest.fixture
def usd_curve():
    """Upward sloping USD zero rate curve used for discounting and forwarding."""
    labels = ["3M", "6M", "1Y", "2Y", "5Y"]
    times = [0.25, 0.5, 1.0, 2.0, 5.0]
    rates = [0.050, 0.049, 0.047, 0.044, 0.042]
    metadata = Curves.zero_rates("USD-Curve", DayCount.ACT_365, node_metadata(labels))
    return InterpolatedNodalCurve(metadata, times, rates)


@pytest.fixture
def usd_provider(usd_curve):
    return ImmutableRatesProvider(
        VAL_DATE,
        discount_curves={USD: usd_curve},
        index_curves={USD_LIBOR_3M: usd_curve},
    )


@pytest.fixture
def fra():
    """Bought 3x6 FRA on USD-LIBOR-3M."""
    return Fra(
        BuySell.BUY,
        USD,
        1_000_000.0,
        date(2024, 4, 15),
        date(2024, 7, 15),
        0.048,
        USD_LIBOR_3M,
    )


@pytest.fixture
def fra_trade(fra):
    return FraTrade("FRA-1", fra, date(2024, 1, 10))


@pytest.fixture
def deposit():
    """Six month forward starting deposit."""
    return TermDeposit(
        BuySell.BUY,
        USD,
        5_000_000.0,
        date(2024, 2, 15),
        date(2024, 8, 15),
        0.05,
    )


@pytest.fixture
def deposit_trade(deposit):
    return TermDepositTrade("DEP-1", deposit, date(2024, 1, 10))


# ----------------------------------------------------------------------------
# Calibration
# ----------------------------------------------------------------------------

SINGLE_CURVE_QUOTES = {
    "USD-DEP-1M": 0.0530,
    "USD-DEP-3M": 0.0535,
    "USD-FRA-3x6": 0.0520,
    "USD-FRA-6x9": 0.0505,
    "USD-FRA-9x12": 0.0490,
}


@pytest.fixture
def single_curve_quotes():
    return dict(SINGLE_CURVE_QUOTES)


def quote_market_data(quotes, valuation_date=VAL_DATE):
    return ImmutableMarketData.of(valuation_date, {QuoteKey(name): value for name, value in quotes.items()})


@pytest.fixture
def single_curve_market_data(single_curve_quotes):
    return quote_market_data(single_curve_quotes)


@pytest.fixture
def single_curve_group():
    """One zero rate curve discounting USD and forecasting USD-LIBOR-3M."""
    nodes = (
        TermDepositCurveNode("1M", USD, QuoteKey("USD-DEP-1M")),
        TermDepositCurveNode("3M", USD, QuoteKey("USD-DEP-3M")),
        FraCurveNode("3M", USD_LIBOR_3M, QuoteKey("USD-FRA-3x6")),
        FraCurveNode("6M", USD_LIBOR_3M, QuoteKey("USD-FRA-6x9")),
        FraCurveNode("9M", USD_LIBOR_3M, QuoteKey("USD-FRA-9x12")),
    )
    name = CurveName("USD-Single")
    definition = NodalCurveDefinition(name, ValueType.ZERO_RATE, DayCount.ACT_365, nodes)
    entry = CurveGroupEntry(name, {USD}, {USD_LIBOR_3M})
    return CurveGroupDefinition("USD-SingleCurve", [entry], [definition])


TWO_CURVE_QUOTES = {
    "USD-DSC-1M": 0.0525,
    "USD-DSC-3M": 0.0527,
    "USD-DSC-6M": 0.0522,
    "USD-FWD-0x3": 0.0540,
    "USD-FWD-3x6": 0.0532,
    "USD-FWD-6x9": 0.0518,
}


@pytest.fixture
def two_curve_quotes():
    return dict(TWO_CURVE_QUOTES)


@pytest.fixture
def two_curve_group():
    """Discount curve from deposits and a separate LIBOR 3M forward curve from FRAs."""
    dsc_name = CurveName("USD-DSC")
    fwd_name = CurveName("USD-FWD3")
    dsc = NodalCurveDefinition(
        dsc_name,
        ValueType.ZERO_RATE,
        DayCount.ACT_365,
        (
            TermDepositCurveNode("1M", USD, QuoteKey("USD-DSC-1M")),
            TermDepositCurveNode("3M", USD, QuoteKey("USD-DSC-3M")),
            TermDepositCurveNode("6M", USD, QuoteKey("USD-DSC-6M")),
        ),
    )
    fwd = NodalCurveDefinition(
        fwd_name,
        ValueType.ZERO_RATE,
        DayCount.ACT_365,
        (
            FraCurveNode("0M", USD_LIBOR_3M, QuoteKey("USD-FWD-0x3")),
            FraCurveNode("3M", USD_LIBOR_3M, QuoteKey("USD-FWD-3x6")),
            FraCurveNode("6M", USD_LIBOR_3M, QuoteKey("USD-FWD-6x9")),
        ),
    )
    entries = [CurveGroupEntry(dsc_name, {USD}), CurveGroupEntry(fwd_name, indices={USD_LIBOR_3M})]
    return CurveGroupDefinition("USD-TwoCurve", entries, [dsc, fwd])
