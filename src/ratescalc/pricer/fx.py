"""
Single FX pricing by discounting.

Each amount is discounted with the curve of its own currency:

    PV = { base: B * DF_base(T), counter: C * DF_counter(T) }

The forward rate on the payment date follows from covered interest parity:

    F = S * DF_base(T) / DF_counter(T)

where S is today's rate of the pair. Values are zero after the payment date.
"""

from ..basics.currency import CurrencyAmount, FxRate, MultiCurrencyAmount
from ..market.sensitivity import PointSensitivities
from ..product.fx import FxSingle
from .rates_provider import RatesProvider


class DiscountingFxSingleProductPricer:
    """Prices single FX exchanges from the discount curves of both currencies."""

    def present_value(self, fx: FxSingle, provider: RatesProvider) -> MultiCurrencyAmount:
        base = fx.base_currency_amount
        counter = fx.counter_currency_amount
        if provider.valuation_date > fx.payment_date:
            return MultiCurrencyAmount.of(base.multiplied_by(0.0), counter.multiplied_by(0.0))
        return MultiCurrencyAmount.of(
            self._discounted(base, fx, provider),
            self._discounted(counter, fx, provider),
        )

    def _discounted(self, amount: CurrencyAmount, fx: FxSingle, provider: RatesProvider) -> CurrencyAmount:
        df = provider.discount_factors(amount.currency).discount_factor(fx.payment_date)
        return amount.multiplied_by(df)

    def present_value_sensitivity(self, fx: FxSingle, provider: RatesProvider) -> PointSensitivities:
        if provider.valuation_date > fx.payment_date:
            return PointSensitivities.empty()
        result = PointSensitivities.empty()
        for amount in (fx.base_currency_amount, fx.counter_currency_amount):
            dfs = provider.discount_factors(amount.currency)
            point = PointSensitivities.of(dfs.zero_rate_point_sensitivity(fx.payment_date, amount.currency))
            result = result.combined_with(point.multiplied_by(amount.amount))
        return result

    def par_spread(self, fx: FxSingle, provider: RatesProvider) -> float:
        """
        Spread to add to the agreed rate to give a present value of zero.

        Equal to the forward rate minus the agreed rate.
        """
        counter_currency = fx.counter_currency_amount.currency
        pv_counter = self.present_value(fx, provider).convert_to(counter_currency, provider).amount
        df_counter = provider.discount_factors(counter_currency).discount_factor(fx.payment_date)
        return pv_counter / (fx.base_currency_amount.amount * df_counter)

    def forward_fx_rate(self, fx: FxSingle, provider: RatesProvider) -> FxRate:
        pair = fx.currency_pair
        df_base = provider.discount_factors(pair.base).discount_factor(fx.payment_date)
        df_counter = provider.discount_factors(pair.counter).discount_factor(fx.payment_date)
        spot = provider.fx_rate(pair.base, pair.counter)
        return FxRate(pair.base, pair.counter, spot * df_base / df_counter)

    def current_cash(self, fx: FxSingle, provider: RatesProvider) -> MultiCurrencyAmount:
        """Amounts paid on the valuation date, zero on any other date."""
        factor = 1.0 if provider.valuation_date == fx.payment_date else 0.0
        return MultiCurrencyAmount.of(
            fx.base_currency_amount.multiplied_by(factor),
            fx.counter_currency_amount.multiplied_by(factor),
        )


__all__ = ["DiscountingFxSingleProductPricer"]
