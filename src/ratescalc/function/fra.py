"""
Calculation function for FRA trades.

Every measure is calculated for all scenarios at once. Each scenario is
priced with a MarketDataRatesProvider reading that scenario of the market
data, so the values returned here are the pricer's values unchanged.

Supported measures:
- ParRate, ParSpread: ValuesArray
- PresentValue: CurrencyValuesArray
- ExplainPresentValue: DefaultScenarioResult of explain dictionaries
- PV01: MultiCurrencyValuesArray, sum of the bucketed PV01
- BucketedPV01: FxConvertibleList of curve parameter sensitivities x 1bp
- BucketedGammaPV01: DefaultScenarioResult, semi-parallel gamma x 1bp x 1bp
- PV01MarketQuoteBucketed: FxConvertibleList of market quote sensitivities x 1bp
"""

from typing import Callable, Dict, List, Optional, Set

import numpy as np

from ..basics.currency import Currency
from ..calc.config import DefaultFunctionGroup, FunctionConfig
from ..calc.function import CalculationFunction, unsupported_measure_failure
from ..calc.measure import Measure
from ..calc.requirements import FunctionRequirements
from ..calc.result import Result
from ..calc.scenario import (
    CurrencyValuesArray,
    DefaultScenarioResult,
    FxConvertibleList,
    MultiCurrencyValuesArray,
    ValuesArray,
)
from ..market.curve.curves import NodalCurve
from ..market.keys import DiscountCurveKey, IborIndexCurveKey, IndexRateKey
from ..market.sensitivity import CurveCurrencyParameterSensitivities, CurveCurrencyParameterSensitivity
from ..pricer.fra import DiscountingFraProductPricer
from ..pricer.rates_provider import ImmutableRatesProvider, MarketDataRatesProvider, RatesProvider
from ..pricer.sensitivity.gamma import ONE_BASIS_POINT, CurveGammaCalculator
from ..pricer.sensitivity.market_quote import MarketQuoteSensitivityCalculator
from ..product.fra import Fra, FraTrade


class FraCalculationFunction(CalculationFunction):
    """
    Calculates the measures of a FRA trade.

    Args:
        pricer: FRA pricer, defaults to discounting
        gamma_calculator: Calculator for BucketedGammaPV01
        market_quote_calculator: Calculator for PV01MarketQuoteBucketed
    """

    def __init__(
        self,
        pricer: Optional[DiscountingFraProductPricer] = None,
        gamma_calculator: Optional[CurveGammaCalculator] = None,
        market_quote_calculator: Optional[MarketQuoteSensitivityCalculator] = None,
    ):
        self.pricer = pricer or DiscountingFraProductPricer()
        self.gamma_calculator = gamma_calculator or CurveGammaCalculator()
        self.market_quote_calculator = market_quote_calculator or MarketQuoteSensitivityCalculator()
        self._calculators: Dict[Measure, Callable] = {
            Measure.PAR_RATE: self._par_rate,
            Measure.PAR_SPREAD: self._par_spread,
            Measure.PRESENT_VALUE: self._present_value,
            Measure.EXPLAIN_PRESENT_VALUE: self._explain_present_value,
            Measure.PV01: self._pv01,
            Measure.BUCKETED_PV01: self._bucketed_pv01,
            Measure.BUCKETED_GAMMA_PV01: self._bucketed_gamma_pv01,
            Measure.PV01_MARKET_QUOTE_BUCKETED: self._pv01_market_quote_bucketed,
        }

    def supported_measures(self) -> Set[Measure]:
        return set(self._calculators)

    def requirements(self, target: FraTrade, measures: Set[Measure]) -> FunctionRequirements:
        fra = target.product
        return FunctionRequirements.of(
            single_values=self._curve_keys(fra),
            time_series={IndexRateKey(fra.index)},
            output_currencies={fra.currency},
        )

    def default_reporting_currency(self, target: FraTrade) -> Optional[Currency]:
        return target.product.currency

    def calculate(self, target: FraTrade, measures: Set[Measure], market_data) -> Dict[Measure, Result]:
        results = {}
        for measure in measures:
            calculator = self._calculators.get(measure)
            if calculator is None:
                results[measure] = unsupported_measure_failure(measure)
            else:
                results[measure] = Result.of(lambda: calculator(target.product, market_data))
        return results

    @staticmethod
    def _curve_keys(fra: Fra) -> List:
        return [DiscountCurveKey(fra.currency), IborIndexCurveKey(fra.index)]

    def _providers(self, fra: Fra, market_data) -> List[MarketDataRatesProvider]:
        keys = self._curve_keys(fra)
        return [MarketDataRatesProvider(md, keys) for md in market_data.scenarios()]

    # single measures, all scenarios

    def _par_rate(self, fra: Fra, market_data) -> ValuesArray:
        return ValuesArray([self.pricer.par_rate(fra, p) for p in self._providers(fra, market_data)])

    def _par_spread(self, fra: Fra, market_data) -> ValuesArray:
        return ValuesArray([self.pricer.par_spread(fra, p) for p in self._providers(fra, market_data)])

    def _present_value(self, fra: Fra, market_data) -> CurrencyValuesArray:
        return CurrencyValuesArray.from_amounts(
            [self.pricer.present_value(fra, p) for p in self._providers(fra, market_data)])

    def _explain_present_value(self, fra: Fra, market_data) -> DefaultScenarioResult:
        return DefaultScenarioResult(
            [self.pricer.explain_present_value(fra, p) for p in self._providers(fra, market_data)])

    def _parameter_sensitivity(self, fra: Fra, provider: RatesProvider) -> CurveCurrencyParameterSensitivities:
        return provider.curve_parameter_sensitivity(self.pricer.present_value_sensitivity(fra, provider))

    def _pv01(self, fra: Fra, market_data) -> MultiCurrencyValuesArray:
        return MultiCurrencyValuesArray.of([
            self._parameter_sensitivity(fra, p).total().multiplied_by(ONE_BASIS_POINT)
            for p in self._providers(fra, market_data)
        ])

    def _bucketed_pv01(self, fra: Fra, market_data) -> FxConvertibleList:
        return FxConvertibleList([
            self._parameter_sensitivity(fra, p).multiplied_by(ONE_BASIS_POINT)
            for p in self._providers(fra, market_data)
        ])

    def _pv01_market_quote_bucketed(self, fra: Fra, market_data) -> FxConvertibleList:
        values = []
        for provider in self._providers(fra, market_data):
            param_sens = self._parameter_sensitivity(fra, provider)
            values.append(self.market_quote_calculator.sensitivity(param_sens, provider).multiplied_by(ONE_BASIS_POINT))
        return FxConvertibleList(values)

    def _bucketed_gamma_pv01(self, fra: Fra, market_data) -> DefaultScenarioResult:
        return DefaultScenarioResult([self._gamma(fra, p) for p in self._providers(fra, market_data)])

    def _gamma(self, fra: Fra, provider: RatesProvider) -> CurveCurrencyParameterSensitivities:
        currency = fra.currency
        curve = provider.discount_curve(currency)
        if not isinstance(curve, NodalCurve):
            raise ValueError(
                f"Implementation only supports nodal curves; unsupported curve type: {type(curve).__name__}")
        if provider.index_curve(fra.index) != curve:
            raise ValueError(
                "Implementation only supports a single curve, but discounting curve is different from "
                f"index curves for indices: [{IborIndexCurveKey(fra.index)}]")
        fixings = provider.time_series(fra.index)

        def sensitivity(bumped: NodalCurve) -> CurveCurrencyParameterSensitivity:
            bumped_provider = ImmutableRatesProvider(
                provider.valuation_date,
                discount_curves={currency: bumped},
                index_curves={fra.index: bumped},
                index_fixings={fra.index: fixings},
            )
            found = self._parameter_sensitivity(fra, bumped_provider).find_sensitivity(bumped.name, currency)
            if found is None:
                return CurveCurrencyParameterSensitivity(bumped.metadata, currency, np.zeros(bumped.parameter_count))
            return found

        gamma = self.gamma_calculator.calculate_semi_parallel_gamma(curve, currency, sensitivity)
        return CurveCurrencyParameterSensitivities.of(gamma).multiplied_by(ONE_BASIS_POINT * ONE_BASIS_POINT)


class FraFunctionGroups:
    """Function groups for FRA trades."""

    @staticmethod
    def discounting() -> DefaultFunctionGroup:
        """All FRA measures calculated by discounting."""
        config = FunctionConfig.of(FraCalculationFunction)
        measures = FraCalculationFunction().supported_measures()
        return DefaultFunctionGroup("FraDiscounting", FraTrade, {m: config for m in measures})


__all__ = [
    "FraCalculationFunction",
    "FraFunctionGroups",
]
