"""
Calculation function for single FX trades.

Supported measures:
- ParSpread: ValuesArray, forward rate minus agreed rate
- PresentValue: MultiCurrencyValuesArray, one amount per currency
- PV01: MultiCurrencyValuesArray, sum of the bucketed PV01
- BucketedPV01: FxConvertibleList of curve parameter sensitivities x 1bp
- CurrentCash: MultiCurrencyValuesArray of amounts paid on the valuation date
- ForwardFxRate: DefaultScenarioResult of FxRate

Values in both currencies are converted into the reporting currency by the
calculation task. The default reporting currency is the base currency of
the conventional pair.
"""

from typing import Callable, Dict, List, Optional, Set

from ..basics.currency import Currency
from ..calc.config import DefaultFunctionGroup, FunctionConfig
from ..calc.function import CalculationFunction, unsupported_measure_failure
from ..calc.measure import Measure
from ..calc.requirements import FunctionRequirements
from ..calc.result import Result
from ..calc.scenario import DefaultScenarioResult, FxConvertibleList, MultiCurrencyValuesArray, ValuesArray
from ..market.keys import DiscountCurveKey, FxRateKey
from ..pricer.fx import DiscountingFxSingleProductPricer
from ..pricer.rates_provider import MarketDataRatesProvider
from ..pricer.sensitivity.gamma import ONE_BASIS_POINT
from ..product.fx import FxSingle, FxSingleTrade

_SPOT_RATE_MEASURES = frozenset({Measure.PAR_SPREAD, Measure.FORWARD_FX_RATE})


class FxSingleCalculationFunction(CalculationFunction):
    """Calculates the measures of a single FX trade by discounting."""

    def __init__(self, pricer: Optional[DiscountingFxSingleProductPricer] = None):
        self.pricer = pricer or DiscountingFxSingleProductPricer()
        self._calculators: Dict[Measure, Callable] = {
            Measure.PAR_SPREAD: self._par_spread,
            Measure.PRESENT_VALUE: self._present_value,
            Measure.PV01: self._pv01,
            Measure.BUCKETED_PV01: self._bucketed_pv01,
            Measure.CURRENT_CASH: self._current_cash,
            Measure.FORWARD_FX_RATE: self._forward_fx_rate,
        }

    def supported_measures(self) -> Set[Measure]:
        return set(self._calculators)

    def requirements(self, target: FxSingleTrade, measures: Set[Measure]) -> FunctionRequirements:
        """Discount curves of both currencies, and today's rate of the pair when a measure needs it."""
        pair = target.product.currency_pair
        keys = {DiscountCurveKey(pair.base), DiscountCurveKey(pair.counter)}
        if _SPOT_RATE_MEASURES & set(measures):
            keys.add(FxRateKey(pair.base, pair.counter))
        return FunctionRequirements.of(single_values=keys, output_currencies={pair.base, pair.counter})

    def default_reporting_currency(self, target: FxSingleTrade) -> Optional[Currency]:
        return target.product.currency_pair.base

    def calculate(self, target: FxSingleTrade, measures: Set[Measure], market_data) -> Dict[Measure, Result]:
        results = {}
        for measure in measures:
            calculator = self._calculators.get(measure)
            if calculator is None:
                results[measure] = unsupported_measure_failure(measure)
            else:
                results[measure] = Result.of(lambda: calculator(target.product, market_data))
        return results

    @staticmethod
    def _providers(fx: FxSingle, market_data) -> List[MarketDataRatesProvider]:
        pair = fx.currency_pair
        keys = [DiscountCurveKey(pair.base), DiscountCurveKey(pair.counter)]
        return [MarketDataRatesProvider(md, keys) for md in market_data.scenarios()]

    def _par_spread(self, fx: FxSingle, market_data) -> ValuesArray:
        return ValuesArray([self.pricer.par_spread(fx, p) for p in self._providers(fx, market_data)])

    def _present_value(self, fx: FxSingle, market_data) -> MultiCurrencyValuesArray:
        return MultiCurrencyValuesArray.of([self.pricer.present_value(fx, p) for p in self._providers(fx, market_data)])

    def _parameter_sensitivity(self, fx: FxSingle, provider):
        return provider.curve_parameter_sensitivity(self.pricer.present_value_sensitivity(fx, provider))

    def _pv01(self, fx: FxSingle, market_data) -> MultiCurrencyValuesArray:
        return MultiCurrencyValuesArray.of([
            self._parameter_sensitivity(fx, p).total().multiplied_by(ONE_BASIS_POINT)
            for p in self._providers(fx, market_data)
        ])

    def _bucketed_pv01(self, fx: FxSingle, market_data) -> FxConvertibleList:
        return FxConvertibleList([
            self._parameter_sensitivity(fx, p).multiplied_by(ONE_BASIS_POINT)
            for p in self._providers(fx, market_data)
        ])

    def _current_cash(self, fx: FxSingle, market_data) -> MultiCurrencyValuesArray:
        return MultiCurrencyValuesArray.of([self.pricer.current_cash(fx, p) for p in self._providers(fx, market_data)])

    def _forward_fx_rate(self, fx: FxSingle, market_data) -> DefaultScenarioResult:
        return DefaultScenarioResult([self.pricer.forward_fx_rate(fx, p) for p in self._providers(fx, market_data)])


class FxSingleFunctionGroups:
    """Function groups for single FX trades."""

    @staticmethod
    def discounting() -> DefaultFunctionGroup:
        config = FunctionConfig.of(FxSingleCalculationFunction)
        measures = FxSingleCalculationFunction().supported_measures()
        return DefaultFunctionGroup("FxSingleDiscounting", FxSingleTrade, {m: config for m in measures})


__all__ = [
    "FxSingleCalculationFunction",
    "FxSingleFunctionGroups",
]
