"""
Unit tests for serving calibrated curve groups to the calculation engine.
"""

import pytest

from ratescalc.basics.currency import Currency
from ratescalc.basics.index import USD_LIBOR_3M
from ratescalc.calc.config import CalculationRules
from ratescalc.calc.mappings import CalculationMarketData, MarketDataMappings, SingleCalculationMarketData
from ratescalc.calc.measure import Measure
from ratescalc.calc.runner import CalculationRunner, CalculationTasks, Column
from ratescalc.errors import MarketDataNotFoundError
from ratescalc.function.marketdata import CurveGroupMarketDataFunction
from ratescalc.function.standard import standard_pricing_rules
from ratescalc.market.curve.group import CurveGroup
from ratescalc.market.data import ImmutableMarketData, ImmutableScenarioMarketData
from ratescalc.market.keys import (
    CurveGroupKey,
    DiscountCurveKey,
    IborIndexCurveKey,
    MarketDataFeed,
    ObservableId,
    QuoteKey,
)
from ratescalc.pricer.fra import DiscountingFraProductPricer
from ratescalc.pricer.rates_provider import MarketDataRatesProvider
from ratescalc.product.fra import FraTrade

USD = Currency.USD
TOLERANCE_PV = 5e-10


def observable_quotes(quotes, valuation_date, feed=MarketDataFeed.NONE):
    """Single scenario market data with the quotes under their observable ids."""
    return ImmutableScenarioMarketData.of(
        valuation_date, {ObservableId(QuoteKey(name), feed): value for name, value in quotes.items()})


def node_trades(group, quotes, valuation_date):
    snapshot = ImmutableMarketData.of(valuation_date, {QuoteKey(name): value for name, value in quotes.items()})
    return [n.trade(valuation_date, snapshot) for d in group.curve_definitions for n in d.nodes]


@pytest.fixture
def function():
    return CurveGroupMarketDataFunction()


class TestCurveGroupMarketDataFunction:
    """Tests for calibrating curve groups into market data."""

    def test_requirements(self, function, single_curve_group, single_curve_quotes):
        """The quotes of every node, with the feed attached."""
        reqs = function.requirements(single_curve_group)
        assert reqs.observables == frozenset(ObservableId(QuoteKey(n)) for n in single_curve_quotes)
        assert reqs.non_observables == frozenset()

        feed = MarketDataFeed("Vendor")
        reqs = function.requirements(single_curve_group, feed)
        assert ObservableId(QuoteKey("USD-FRA-3x6"), feed) in reqs.observables

    def test_build_curve_keys(self, function, single_curve_group, single_curve_quotes, valuation_date):
        curves = function.build(single_curve_group, observable_quotes(single_curve_quotes, valuation_date))

        assert curves.scenario_count == 1
        assert curves.identifiers() == {
            CurveGroupKey("USD-SingleCurve"), DiscountCurveKey(USD), IborIndexCurveKey(USD_LIBOR_3M)}
        group = curves.get_value(CurveGroupKey("USD-SingleCurve")).single_value
        assert isinstance(group, CurveGroup)
        discount = curves.get_value(DiscountCurveKey(USD)).single_value
        assert discount is group.find_discount_curve(USD)
        assert str(discount.name) == "USD-Single"
        assert curves.get_value(IborIndexCurveKey(USD_LIBOR_3M)).single_value is discount

    def test_round_trip_fra(self, function, single_curve_group, single_curve_quotes, valuation_date):
        """FRA nodes priced with the served curves are at par."""
        curves = function.build(single_curve_group, observable_quotes(single_curve_quotes, valuation_date))
        provider = MarketDataRatesProvider(
            SingleCalculationMarketData(CalculationMarketData(curves, MarketDataMappings.empty()), 0))
        pricer = DiscountingFraProductPricer()

        fras = [t for t in node_trades(single_curve_group, single_curve_quotes, valuation_date)
                if isinstance(t, FraTrade)]

        assert len(fras) == 3
        for trade in fras:
            assert abs(pricer.present_value(trade.product, provider).amount) < TOLERANCE_PV

    def test_node_trades_at_par_through_runner(self, function, single_curve_group, single_curve_quotes, valuation_date):
        """Quotes combined with the calibrated curves price every node at a zero par spread."""
        quotes = observable_quotes(single_curve_quotes, valuation_date)
        market_data = quotes.combined_with(function.build(single_curve_group, quotes))
        trades = node_trades(single_curve_group, single_curve_quotes, valuation_date)
        tasks = CalculationTasks.of(
            trades, [Column(Measure.PAR_SPREAD), Column(Measure.PRESENT_VALUE)], CalculationRules(standard_pricing_rules()))

        results = CalculationRunner().calculate(tasks, market_data)

        for row in range(len(trades)):
            assert abs(results.get(row, 0).value.get(0)) < 1e-9
            assert abs(results.get(row, 1).value.get(0).amount) < TOLERANCE_PV

    def test_scenario_quotes_calibrated_per_scenario(
            self, function, single_curve_group, single_curve_quotes, valuation_date):
        builder = ImmutableScenarioMarketData.builder(valuation_date)
        for name, value in single_curve_quotes.items():
            if name == "USD-FRA-3x6":
                builder.add_scenario_values(ObservableId(QuoteKey(name)), [value, value + 0.001])
            else:
                builder.add_value(ObservableId(QuoteKey(name)), value)

        curves = function.build(single_curve_group, builder.build())

        assert curves.scenario_count == 2
        box = curves.get_value(DiscountCurveKey(USD))
        assert box.scenario_count == 2
        bumped = dict(single_curve_quotes, **{"USD-FRA-3x6": single_curve_quotes["USD-FRA-3x6"] + 0.001})
        fra = [t for t in node_trades(single_curve_group, bumped, valuation_date) if t.trade_id == "3Mx3M-Fra"][0]
        provider = MarketDataRatesProvider(curves.scenario(1))
        assert abs(DiscountingFraProductPricer().par_spread(fra.product, provider)) < 1e-9
        assert box.get_value(0) != box.get_value(1)

    def test_two_curve_group(self, function, two_curve_group, two_curve_quotes, valuation_date):
        curves = function.build(two_curve_group, observable_quotes(two_curve_quotes, valuation_date))

        assert str(curves.get_value(DiscountCurveKey(USD)).single_value.name) == "USD-DSC"
        assert str(curves.get_value(IborIndexCurveKey(USD_LIBOR_3M)).single_value.name) == "USD-FWD3"

    def test_missing_quote(self, function, single_curve_group, single_curve_quotes, valuation_date):
        del single_curve_quotes["USD-FRA-6x9"]
        with pytest.raises(MarketDataNotFoundError, match="USD-FRA-6x9"):
            function.build(single_curve_group, observable_quotes(single_curve_quotes, valuation_date))

    def test_quotes_from_single_snapshot(self, function, single_curve_group, single_curve_quotes, valuation_date):
        snapshot = ImmutableMarketData.of(
            valuation_date, {ObservableId(QuoteKey(n)): v for n, v in single_curve_quotes.items()})

        box = function.build_curve_group(single_curve_group, snapshot)

        assert box.is_single_value
        assert box.single_value.name == "USD-SingleCurve"
