"""
Term deposit pricing by discounting.

    PV = N * (1 + r * tau) * DF(end) - N0 * DF(start)

N0 is the notional while the start date is on or after the valuation date
and zero once the initial exchange has happened. Values are zero after the
end date.
"""

from ..basics.currency import CurrencyAmount
from ..market.sensitivity import PointSensitivities
from ..product.deposit import TermDeposit
from .rates_provider import RatesProvider


class DiscountingTermDepositProductPricer:
    """Prices term deposits from the discount curve of their currency."""

    def _initial_amount(self, deposit: TermDeposit, provider: RatesProvider) -> float:
        return 0.0 if provider.valuation_date > deposit.start_date else deposit.signed_notional

    def _final_amount(self, deposit: TermDeposit) -> float:
        return deposit.signed_notional + deposit.interest

    def present_value(self, deposit: TermDeposit, provider: RatesProvider) -> CurrencyAmount:
        if provider.valuation_date > deposit.end_date:
            return CurrencyAmount(deposit.currency, 0.0)
        dfs = provider.discount_factors(deposit.currency)
        pv_end = self._final_amount(deposit) * dfs.discount_factor(deposit.end_date)
        pv_start = self._initial_amount(deposit, provider) * dfs.discount_factor(deposit.start_date)
        return CurrencyAmount(deposit.currency, pv_end - pv_start)

    def par_rate(self, deposit: TermDeposit, provider: RatesProvider) -> float:
        """Deposit rate giving a present value of zero."""
        dfs = provider.discount_factors(deposit.currency)
        df_start = dfs.discount_factor(deposit.start_date)
        df_end = dfs.discount_factor(deposit.end_date)
        return (df_start / df_end - 1.0) / deposit.year_fraction

    def par_spread(self, deposit: TermDeposit, provider: RatesProvider) -> float:
        return self.par_rate(deposit, provider) - deposit.rate

    def present_value_sensitivity(self, deposit: TermDeposit, provider: RatesProvider) -> PointSensitivities:
        if provider.valuation_date > deposit.end_date:
            return PointSensitivities.empty()
        dfs = provider.discount_factors(deposit.currency)
        end = PointSensitivities.of(
            dfs.zero_rate_point_sensitivity(deposit.end_date, deposit.currency)
        ).multiplied_by(self._final_amount(deposit))
        start = PointSensitivities.of(
            dfs.zero_rate_point_sensitivity(deposit.start_date, deposit.currency)
        ).multiplied_by(-self._initial_amount(deposit, provider))
        return end.combined_with(start)

    def par_spread_sensitivity(self, deposit: TermDeposit, provider: RatesProvider) -> PointSensitivities:
        """
        Point sensitivities of the par spread.

        d par / d DF(start) = 1 / (tau * DF(end))
        d par / d DF(end)   = -DF(start) / (tau * DF(end)^2)
        """
        dfs = provider.discount_factors(deposit.currency)
        tau = deposit.year_fraction
        df_start = dfs.discount_factor(deposit.start_date)
        df_end = dfs.discount_factor(deposit.end_date)
        start = PointSensitivities.of(
            dfs.zero_rate_point_sensitivity(deposit.start_date, deposit.currency)
        ).multiplied_by(1.0 / (tau * df_end))
        end = PointSensitivities.of(
            dfs.zero_rate_point_sensitivity(deposit.end_date, deposit.currency)
        ).multiplied_by(-df_start / (tau * df_end ** 2))
        return start.combined_with(end)


__all__ = ["DiscountingTermDepositProductPricer"]
