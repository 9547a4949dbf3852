"""
FRA pricing by discounting.

Settlement uses ISDA FRA discounting: the difference between the index rate
F and the fixed rate K is paid on the start date, discounted over the
accrual period at the index rate.

    forecast value = N * tau * (F - K) / (1 + tau * F)
    present value  = forecast value * DF(payment date)

where N is the signed notional (positive when bought) and tau the accrual
year fraction.
"""

from typing import Any, Dict

from ..basics.currency import CurrencyAmount
from ..market.sensitivity import PointSensitivities
from ..product.fra import Fra
from .rates_provider import RatesProvider


class DiscountingFraProductPricer:
    """Prices FRAs using discount curves and index forward curves."""

    def forward_rate(self, fra: Fra, provider: RatesProvider) -> float:
        return provider.ibor_index_rates(fra.index).rate(fra.fixing_date)

    def _unit_payoff(self, fra: Fra, rate: float) -> float:
        tau = fra.year_fraction
        return tau * (rate - fra.fixed_rate) / (1.0 + tau * rate)

    def _unit_payoff_derivative(self, fra: Fra, rate: float) -> float:
        """d/dF of tau * (F - K) / (1 + tau * F)."""
        tau = fra.year_fraction
        return tau * (1.0 + tau * fra.fixed_rate) / (1.0 + tau * rate) ** 2

    def _is_paid(self, fra: Fra, provider: RatesProvider) -> bool:
        return fra.payment_date < provider.valuation_date

    def forecast_value(self, fra: Fra, provider: RatesProvider) -> CurrencyAmount:
        """Undiscounted settlement amount."""
        if self._is_paid(fra, provider):
            return CurrencyAmount(fra.currency, 0.0)
        rate = self.forward_rate(fra, provider)
        return CurrencyAmount(fra.currency, fra.signed_notional * self._unit_payoff(fra, rate))

    def present_value(self, fra: Fra, provider: RatesProvider) -> CurrencyAmount:
        if self._is_paid(fra, provider):
            return CurrencyAmount(fra.currency, 0.0)
        df = provider.discount_factors(fra.currency).discount_factor(fra.payment_date)
        return self.forecast_value(fra, provider).multiplied_by(df)

    def par_rate(self, fra: Fra, provider: RatesProvider) -> float:
        """Fixed rate giving a present value of zero: the forward rate."""
        return self.forward_rate(fra, provider)

    def par_spread(self, fra: Fra, provider: RatesProvider) -> float:
        """Spread to add to the fixed rate to obtain a present value of zero."""
        return self.par_rate(fra, provider) - fra.fixed_rate

    def present_value_sensitivity(self, fra: Fra, provider: RatesProvider) -> PointSensitivities:
        """Point sensitivities of the present value to the discount and index curves."""
        if self._is_paid(fra, provider):
            return PointSensitivities.empty()
        dfs = provider.discount_factors(fra.currency)
        df = dfs.discount_factor(fra.payment_date)
        rate = self.forward_rate(fra, provider)
        notional = fra.signed_notional

        forecast = notional * self._unit_payoff(fra, rate)
        discount_sens = PointSensitivities.of(
            dfs.zero_rate_point_sensitivity(fra.payment_date, fra.currency)).multiplied_by(forecast)

        rate_sens = provider.ibor_index_rates(fra.index).rate_point_sensitivity(fra.fixing_date, fra.currency)
        index_sens = rate_sens.multiplied_by(notional * df * self._unit_payoff_derivative(fra, rate))
        return discount_sens.combined_with(index_sens)

    def par_spread_sensitivity(self, fra: Fra, provider: RatesProvider) -> PointSensitivities:
        return provider.ibor_index_rates(fra.index).rate_point_sensitivity(fra.fixing_date, fra.currency)

    def explain_present_value(self, fra: Fra, provider: RatesProvider) -> Dict[str, Any]:
        """Breakdown of the present value calculation."""
        explain: Dict[str, Any] = {
            "EntryType": "FRA",
            "PaymentDate": fra.payment_date,
            "StartDate": fra.start_date,
            "EndDate": fra.end_date,
            "AccrualYearFraction": fra.year_fraction,
            "DayCount": str(fra.day_count),
            "PaymentCurrency": fra.currency,
            "Notional": CurrencyAmount(fra.currency, fra.signed_notional),
            "FixedRate": fra.fixed_rate,
            "Index": fra.index.name,
        }
        if self._is_paid(fra, provider):
            explain["CompletedPresentValue"] = CurrencyAmount(fra.currency, 0.0)
            explain["PresentValue"] = CurrencyAmount(fra.currency, 0.0)
            return explain
        df = provider.discount_factors(fra.currency).discount_factor(fra.payment_date)
        rate = self.forward_rate(fra, provider)
        forecast = CurrencyAmount(fra.currency, fra.signed_notional * self._unit_payoff(fra, rate))
        explain.update({
            "FixingDate": fra.fixing_date,
            "IndexRate": rate,
            "DiscountFactor": df,
            "ForecastValue": forecast,
            "PresentValue": forecast.multiplied_by(df),
        })
        return explain


__all__ = ["DiscountingFraProductPricer"]
