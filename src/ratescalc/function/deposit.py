"""
Calculation function for term deposit trades.
"""

from typing import Callable, Dict, Optional, Set

from ..basics.currency import Currency
from ..calc.config import DefaultFunctionGroup, FunctionConfig
from ..calc.function import CalculationFunction, unsupported_measure_failure
from ..calc.measure import Measure
from ..calc.requirements import FunctionRequirements
from ..calc.result import Result
from ..calc.scenario import CurrencyValuesArray, FxConvertibleList, MultiCurrencyValuesArray, ValuesArray
from ..market.keys import DiscountCurveKey
from ..pricer.deposit import DiscountingTermDepositProductPricer
from ..pricer.rates_provider import MarketDataRatesProvider
from ..pricer.sensitivity.gamma import ONE_BASIS_POINT
from ..product.deposit import TermDeposit, TermDepositTrade


class TermDepositCalculationFunction(CalculationFunction):
    """Calculates par rate, par spread, present value and PV01 of a term deposit."""

    def __init__(self, pricer: Optional[DiscountingTermDepositProductPricer] = None):
        self.pricer = pricer or DiscountingTermDepositProductPricer()
        self._calculators: Dict[Measure, Callable] = {
            Measure.PAR_RATE: self._par_rate,
            Measure.PAR_SPREAD: self._par_spread,
            Measure.PRESENT_VALUE: self._present_value,
            Measure.PV01: self._pv01,
            Measure.BUCKETED_PV01: self._bucketed_pv01,
        }

    def supported_measures(self) -> Set[Measure]:
        return set(self._calculators)

    def requirements(self, target: TermDepositTrade, measures: Set[Measure]) -> FunctionRequirements:
        deposit = target.product
        return FunctionRequirements.of(
            single_values={DiscountCurveKey(deposit.currency)},
            output_currencies={deposit.currency},
        )

    def default_reporting_currency(self, target: TermDepositTrade) -> Optional[Currency]:
        return target.product.currency

    def calculate(self, target: TermDepositTrade, measures: Set[Measure], market_data) -> Dict[Measure, Result]:
        results = {}
        for measure in measures:
            calculator = self._calculators.get(measure)
            if calculator is None:
                results[measure] = unsupported_measure_failure(measure)
            else:
                results[measure] = Result.of(lambda: calculator(target.product, market_data))
        return results

    @staticmethod
    def _providers(market_data):
        return [MarketDataRatesProvider(md) for md in market_data.scenarios()]

    def _par_rate(self, deposit: TermDeposit, market_data) -> ValuesArray:
        return ValuesArray([self.pricer.par_rate(deposit, p) for p in self._providers(market_data)])

    def _par_spread(self, deposit: TermDeposit, market_data) -> ValuesArray:
        return ValuesArray([self.pricer.par_spread(deposit, p) for p in self._providers(market_data)])

    def _present_value(self, deposit: TermDeposit, market_data) -> CurrencyValuesArray:
        return CurrencyValuesArray.from_amounts(
            [self.pricer.present_value(deposit, p) for p in self._providers(market_data)])

    def _pv01(self, deposit: TermDeposit, market_data) -> MultiCurrencyValuesArray:
        amounts = []
        for provider in self._providers(market_data):
            point_sens = self.pricer.present_value_sensitivity(deposit, provider)
            amounts.append(provider.curve_parameter_sensitivity(point_sens).total().multiplied_by(ONE_BASIS_POINT))
        return MultiCurrencyValuesArray.of(amounts)

    def _bucketed_pv01(self, deposit: TermDeposit, market_data) -> FxConvertibleList:
        values = []
        for provider in self._providers(market_data):
            point_sens = self.pricer.present_value_sensitivity(deposit, provider)
            values.append(provider.curve_parameter_sensitivity(point_sens).multiplied_by(ONE_BASIS_POINT))
        return FxConvertibleList(values)


class TermDepositFunctionGroups:
    """Function groups for term deposit trades."""

    @staticmethod
    def discounting() -> DefaultFunctionGroup:
        config = FunctionConfig.of(TermDepositCalculationFunction)
        measures = TermDepositCalculationFunction().supported_measures()
        return DefaultFunctionGroup("TermDepositDiscounting", TermDepositTrade, {m: config for m in measures})


__all__ = [
    "TermDepositCalculationFunction",
    "TermDepositFunctionGroups",
]
