"""
Unit tests for function configuration and pricing rules.
"""

import pytest

from ratescalc.basics.currency import Currency
from ratescalc.calc.config import (
    CalculationRules,
    DefaultFunctionGroup,
    FunctionConfig,
    PricingRule,
    PricingRules,
    ReportingRules,
)
from ratescalc.calc.function import CalculationFunction
from ratescalc.calc.measure import Measure
from ratescalc.calc.requirements import FunctionRequirements
from ratescalc.calc.result import Result
from ratescalc.function.deposit import TermDepositCalculationFunction
from ratescalc.function.fra import FraCalculationFunction, FraFunctionGroups
from ratescalc.function.standard import standard_pricing_rules
from ratescalc.product.fra import FraTrade


class ScaledFunction(CalculationFunction):
    """Returns a constant scaled value; needs a scale argument."""

    def __init__(self, scale, offset=0.0):
        self.scale = scale
        self.offset = offset

    def supported_measures(self):
        return {Measure.PRESENT_VALUE}

    def requirements(self, target, measures):
        return FunctionRequirements.empty()

    def calculate(self, target, measures, market_data):
        return {m: Result.success(self.scale + self.offset) for m in measures}


class AbstractFunction(CalculationFunction):
    pass


class TestMeasure:
    """Tests for measure names."""

    def test_standard_measures(self):
        assert Measure.PRESENT_VALUE == Measure.of("PresentValue")
        assert str(Measure.PV01_MARKET_QUOTE_BUCKETED) == "PV01MarketQuoteBucketed"

    def test_invalid_name(self):
        with pytest.raises(ValueError, match="Invalid measure name"):
            Measure("Present Value")


class TestFunctionConfig:
    """Tests for creating functions from configuration."""

    def test_create_with_defaults(self):
        function = FunctionConfig.of(FraCalculationFunction).create_function()
        assert isinstance(function, FraCalculationFunction)

    def test_configured_and_supplied_arguments(self):
        """Configured and supplied arguments are both passed to the constructor."""
        config = FunctionConfig.of(ScaledFunction, scale=2.0)
        function = config.create_function({"offset": 0.5})
        assert function.scale == 2.0
        assert function.offset == 0.5

    def test_missing_argument(self):
        with pytest.raises(ValueError, match="No argument found with name 'scale'"):
            FunctionConfig.of(ScaledFunction).create_function()

    def test_overwritten_argument(self):
        """Supplied arguments may not replace configured ones."""
        config = FunctionConfig.of(ScaledFunction, scale=2.0)
        with pytest.raises(ValueError, match="would be overwritten"):
            config.create_function({"scale": 3.0})

    def test_not_a_function(self):
        with pytest.raises(ValueError, match="must be CalculationFunction subclasses"):
            FunctionConfig.of(dict).create_function()

    def test_abstract_function(self):
        with pytest.raises(ValueError, match="must be concrete classes"):
            FunctionConfig.of(AbstractFunction).create_function()


class TestFunctionGroups:
    """Tests for function groups."""

    def test_default_group_by_target_type(self, fra_trade, deposit_trade):
        group = FraFunctionGroups.discounting()
        assert group.name == "FraDiscounting"
        assert group.configured_measures(fra_trade) == FraCalculationFunction().supported_measures()
        assert group.configured_measures(deposit_trade) == set()
        assert group.function_config(deposit_trade, Measure.PRESENT_VALUE) is None

    def test_group_arguments_overridden_by_rule(self, fra_trade):
        """Rule arguments win over group defaults; configured arguments are kept."""
        group = DefaultFunctionGroup(
            "Scaled",
            FraTrade,
            {Measure.PRESENT_VALUE: FunctionConfig.of(ScaledFunction)},
            arguments={"scale": 1.0, "offset": 0.25},
        )
        rule = PricingRule.of(FraTrade, group, scale=5.0)

        function = rule.function_group(fra_trade, Measure.PRESENT_VALUE).create_function(
            fra_trade, Measure.PRESENT_VALUE)

        assert function.scale == 5.0
        assert function.offset == 0.25

    def test_configured_argument_wins(self, fra_trade):
        group = DefaultFunctionGroup(
            "Scaled",
            FraTrade,
            {Measure.PRESENT_VALUE: FunctionConfig.of(ScaledFunction, scale=9.0)},
            arguments={"scale": 1.0},
        )
        configured = PricingRule.of(FraTrade, group).function_group(fra_trade, Measure.PRESENT_VALUE)
        assert configured.create_function(fra_trade, Measure.PRESENT_VALUE).scale == 9.0

    def test_no_function_for_measure(self, fra_trade):
        group = DefaultFunctionGroup("Scaled", FraTrade, {Measure.PRESENT_VALUE: FunctionConfig.of(ScaledFunction)})
        configured = PricingRule.of(FraTrade, group, Measure.PV01).function_group(fra_trade, Measure.PV01)
        assert configured.create_function(fra_trade, Measure.PV01) is None


class TestPricingRules:
    """Tests for pricing rule selection."""

    def test_rule_without_measures_uses_group(self, fra_trade, deposit_trade):
        rule = PricingRule.of(FraTrade, FraFunctionGroups.discounting())
        assert rule.function_group(fra_trade, Measure.PRESENT_VALUE) is not None
        assert rule.function_group(fra_trade, Measure.of("Unknown")) is None
        assert rule.function_group(deposit_trade, Measure.PRESENT_VALUE) is None

    def test_rule_with_measures(self, fra_trade):
        """A rule naming measures only matches those measures."""
        rule = PricingRule.of(FraTrade, FraFunctionGroups.discounting(), Measure.PAR_RATE)
        assert rule.function_group(fra_trade, Measure.PAR_RATE) is not None
        assert rule.function_group(fra_trade, Measure.PRESENT_VALUE) is None
        assert rule.configured_measures(fra_trade) == {Measure.PAR_RATE}

    def test_first_matching_rule_wins(self, fra_trade):
        first = DefaultFunctionGroup("First", FraTrade, {Measure.PRESENT_VALUE: FunctionConfig.of(ScaledFunction)})
        rules = PricingRules.of(
            PricingRule.of(FraTrade, first, scale=1.0),
            PricingRule.of(FraTrade, FraFunctionGroups.discounting()),
        )
        assert rules.function_group(fra_trade, Measure.PRESENT_VALUE).function_group is first
        assert rules.function_group(fra_trade, Measure.PAR_RATE).function_group.name == "FraDiscounting"

    def test_configured_measures_union(self, fra_trade):
        rules = PricingRules.of(PricingRule.of(FraTrade, FraFunctionGroups.discounting(), Measure.PAR_RATE))
        composed = rules.composed_with(standard_pricing_rules())
        assert composed.configured_measures(fra_trade) == FraCalculationFunction().supported_measures()

    def test_no_rule(self, fra_trade):
        """Targets without a matching rule have no configured measures."""
        rules = PricingRules.empty()
        assert rules.configured_measures(fra_trade) == set()
        assert rules.function_group(fra_trade, Measure.PRESENT_VALUE) is None

    def test_standard_rules(self, fra_trade, deposit_trade):
        rules = standard_pricing_rules()
        deposit_group = rules.function_group(deposit_trade, Measure.PRESENT_VALUE)
        function = deposit_group.create_function(deposit_trade, Measure.PRESENT_VALUE)
        assert isinstance(function, TermDepositCalculationFunction)
        assert Measure.BUCKETED_GAMMA_PV01 not in rules.configured_measures(deposit_trade)
        assert Measure.BUCKETED_GAMMA_PV01 in rules.configured_measures(fra_trade)


class TestReportingRules:
    """Tests for reporting currency rules."""

    def test_empty(self, fra_trade):
        assert ReportingRules.empty().reporting_currency(fra_trade) is None

    def test_fixed_currency(self, fra_trade):
        assert ReportingRules.fixed_currency(Currency.EUR).reporting_currency(fra_trade) == Currency.EUR

    def test_calculation_rules_defaults(self):
        rules = CalculationRules(standard_pricing_rules())
        assert rules.reporting_rules.reporting_currency(object()) is None
        assert rules.market_data_rules.mappings(object()) is None
