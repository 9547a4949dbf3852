"""
Unit tests for building and running calculation grids.
"""

import pandas as pd
import pytest

from ratescalc.basics.currency import Currency, CurrencyAmount
from ratescalc.basics.index import USD_LIBOR_3M
from ratescalc.calc.config import CalculationRules, PricingRule, PricingRules, ReportingRules
from ratescalc.calc.measure import Measure
from ratescalc.calc.result import FailureReason, Result
from ratescalc.calc.runner import CalculationRunner, CalculationTasks, Column, Results
from ratescalc.function.fra import FraFunctionGroups
from ratescalc.function.standard import standard_pricing_rules
from ratescalc.market.data import ImmutableScenarioMarketData
from ratescalc.market.keys import (
    DiscountCurveKey,
    IborIndexCurveKey,
    IndexRateKey,
    MarketDataFeed,
    ObservableId,
)
from ratescalc.pricer.deposit import DiscountingTermDepositProductPricer
from ratescalc.pricer.fra import DiscountingFraProductPricer
from ratescalc.product.fra import FraTrade
from ratescalc.settings import EngineSettings

USD = Currency.USD


@pytest.fixture
def market_data(valuation_date, usd_curve):
    """Three scenarios: base curve and parallel shifts of +/- 10bp."""
    curves = [usd_curve, usd_curve.with_parallel_shift(0.001), usd_curve.with_parallel_shift(-0.001)]
    return (ImmutableScenarioMarketData.builder(valuation_date)
            .add_scenario_values(DiscountCurveKey(USD), curves)
            .add_scenario_values(IborIndexCurveKey(USD_LIBOR_3M), curves)
            .build())


@pytest.fixture
def rules():
    return CalculationRules(standard_pricing_rules(), reporting_rules=ReportingRules.fixed_currency(USD))


@pytest.fixture
def columns():
    return [Column(Measure.PRESENT_VALUE), Column(Measure.PAR_RATE), Column(Measure.BUCKETED_GAMMA_PV01)]


class TestCalculationTasks:
    """Tests for creating tasks from targets, columns and rules."""

    def test_tasks_and_unconfigured_cells(self, fra_trade, deposit_trade, columns, rules):
        """Cells without a function are NOT_APPLICABLE; the rest become tasks."""
        tasks = CalculationTasks.of([fra_trade, deposit_trade], columns, rules)

        assert len(tasks) == 5
        assert set(tasks.unconfigured) == {(1, 2)}
        failure = tasks.unconfigured[(1, 2)].get_failure()
        assert failure.reason == FailureReason.NOT_APPLICABLE
        assert "BucketedGammaPV01" in failure.message
        assert "TermDepositTrade" in failure.message

    def test_no_rules(self, fra_trade, columns):
        tasks = CalculationTasks.of([fra_trade], columns, CalculationRules(PricingRules.empty()))
        assert len(tasks) == 0
        assert len(tasks.unconfigured) == 3

    def test_requirements(self, fra_trade, deposit_trade, columns, rules):
        """Requirements of all tasks are combined; fixings are requested as observables."""
        reqs = CalculationTasks.of([fra_trade, deposit_trade], columns, rules).requirements()

        assert reqs.non_observables == frozenset({DiscountCurveKey(USD), IborIndexCurveKey(USD_LIBOR_3M)})
        assert reqs.time_series == frozenset({ObservableId(IndexRateKey(USD_LIBOR_3M), MarketDataFeed.NONE)})
        assert reqs.output_currencies == frozenset({USD})

    def test_column_reporting_currency(self, fra_trade, rules):
        tasks = CalculationTasks.of([fra_trade], [Column(Measure.PRESENT_VALUE, Currency.EUR)], rules)
        assert tasks.tasks[0].reporting_currency() == Currency.EUR


class TestCalculationRunner:
    """Tests for running tasks over scenario market data."""

    def test_calculate(self, fra_trade, deposit_trade, columns, rules, market_data, usd_provider):
        """Results match the pricers for every scenario."""
        tasks = CalculationTasks.of([fra_trade, deposit_trade], columns, rules)

        results = CalculationRunner().calculate(tasks, market_data)

        assert (results.row_count, results.column_count) == (2, 3)
        fra_pv = results.get(0, 0).value
        assert fra_pv.scenario_count == 3
        expected = DiscountingFraProductPricer().present_value(fra_trade.product, usd_provider)
        assert abs(fra_pv.get(0).amount - expected.amount) < 1e-8

        deposit_rate = results.get(1, 1).value
        expected_rate = DiscountingTermDepositProductPricer().par_rate(deposit_trade.product, usd_provider)
        assert abs(deposit_rate.get(0) - expected_rate) < 1e-14
        assert deposit_rate.get(1) > deposit_rate.get(0) > deposit_rate.get(2)

        assert results.get(1, 2).get_failure().reason == FailureReason.NOT_APPLICABLE

    def test_threaded_matches_serial(self, fra_trade, deposit_trade, columns, rules, market_data):
        tasks = CalculationTasks.of([fra_trade, deposit_trade], columns, rules)

        serial = CalculationRunner(EngineSettings(max_workers=1)).calculate(tasks, market_data)
        threaded = CalculationRunner(EngineSettings(max_workers=2)).calculate(tasks, market_data)

        assert serial.items == threaded.items

    def test_missing_market_data_fails_cell_only(self, fra_trade, deposit_trade, rules, valuation_date, usd_curve):
        """A target with missing curves fails while the others are calculated."""
        md = ImmutableScenarioMarketData.of(valuation_date, {DiscountCurveKey(USD): usd_curve})
        tasks = CalculationTasks.of([fra_trade, deposit_trade], [Column(Measure.PRESENT_VALUE)], rules)

        results = CalculationRunner().calculate(tasks, md)

        assert results.get(0, 0).get_failure().reason == FailureReason.ERROR
        assert "IborIndexCurve[USD-LIBOR-3M]" in results.get(0, 0).get_failure().message
        assert results.get(1, 0).is_success

    def test_uncalibrated_market_quote_cell_fails_alone(self, fra_trade, deposit_trade, rules, market_data):
        """A curve without calibration Jacobian fails only the market quote cell."""
        columns = [Column(Measure.PRESENT_VALUE), Column(Measure.PV01_MARKET_QUOTE_BUCKETED)]
        tasks = CalculationTasks.of([fra_trade, deposit_trade], columns, rules)

        results = CalculationRunner().calculate(tasks, market_data)

        failure = results.get(0, 1).get_failure()
        assert failure.reason == FailureReason.ERROR
        assert "USD-Curve" in failure.message
        assert results.get(0, 0).is_success
        assert results.get(1, 0).is_success
        assert results.get(1, 1).get_failure().reason == FailureReason.NOT_APPLICABLE

    def test_restricted_pricing_rule(self, fra_trade, market_data):
        """Measures outside a restricted rule are not applicable."""
        rules = CalculationRules(PricingRules.of(
            PricingRule.of(FraTrade, FraFunctionGroups.discounting(), Measure.PAR_RATE)))
        tasks = CalculationTasks.of([fra_trade], [Column(Measure.PAR_RATE), Column(Measure.PV01)], rules)

        results = CalculationRunner().calculate(tasks, market_data)

        assert results.get(0, 0).is_success
        assert results.get(0, 1).get_failure().reason == FailureReason.NOT_APPLICABLE


class TestResults:
    """Tests for the results grid."""

    def test_size_checked(self):
        with pytest.raises(ValueError, match="Expected 4 results"):
            Results(2, 2, [Result.success(1)])

    def test_get_out_of_range(self):
        with pytest.raises(IndexError):
            Results(1, 1, [Result.success(1)]).get(1, 0)

    def test_to_dataframe(self, fra_trade, deposit_trade, columns, rules, market_data):
        tasks = CalculationTasks.of([fra_trade, deposit_trade], columns, rules)
        results = CalculationRunner().calculate(tasks, market_data)

        df = results.to_dataframe(scenario_index=1)

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["PresentValue", "ParRate", "BucketedGammaPV01"]
        assert isinstance(df.iloc[0, 0], CurrencyAmount)
        assert df.iloc[1, 1] == results.get(1, 1).value.get(1)
        assert df.iloc[1, 2].startswith("FAIL: No function configured")
