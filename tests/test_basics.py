"""
Unit tests for day counts, tenors, currencies and FX.
"""

from datetime import date
import pytest

from ratescalc.basics.conventions import DayCount, year_fraction
from ratescalc.basics.currency import (
    Currency,
    CurrencyAmount,
    FxMatrix,
    FxRate,
    MultiCurrencyAmount,
)
from ratescalc.basics.dates import add_months, add_tenor, parse_tenor, tenor_to_months
from ratescalc.basics.index import USD_LIBOR_3M


class TestDayCount:
    """Tests for day count conventions."""

    def test_act_360(self):
        """Test ACT/360 day count."""
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)  # 91 days

        yf = year_fraction(start, end, DayCount.ACT_360)

        assert abs(yf - 91 / 360) < 1e-12

    def test_act_365(self):
        """Test ACT/365 day count."""
        yf = year_fraction(date(2024, 1, 15), date(2024, 4, 15), DayCount.ACT_365)
        assert abs(yf - 91 / 365) < 1e-12

    def test_act_act_across_year_end(self):
        """ACT/ACT splits the period at the year boundary."""
        yf = year_fraction(date(2024, 1, 15), date(2025, 1, 15), DayCount.ACT_ACT)
        expected = 352 / 366 + 14 / 365
        assert abs(yf - expected) < 1e-12

    def test_thirty_360(self):
        """Test 30/360 day count."""
        yf = year_fraction(date(2024, 1, 15), date(2024, 4, 15), DayCount.THIRTY_360)
        assert abs(yf - 90 / 360) < 1e-12

    def test_year_fraction_same_date(self):
        """Test year fraction for same date returns 0."""
        d = date(2024, 1, 15)
        assert year_fraction(d, d, DayCount.ACT_360) == 0.0

    def test_method_is_signed(self):
        """The enum method returns a negative fraction for reversed dates."""
        start, end = date(2024, 1, 15), date(2024, 4, 15)
        assert DayCount.ACT_360.year_fraction(end, start) == -DayCount.ACT_360.year_fraction(start, end)

    def test_from_string(self):
        """Day counts parse from their display names."""
        assert DayCount.from_string("act/360") == DayCount.ACT_360
        assert DayCount.from_string("30/360") == DayCount.THIRTY_360
        with pytest.raises(ValueError, match="Unknown day count"):
            DayCount.from_string("BUS/252")


class TestTenors:
    """Tests for tenor parsing and date arithmetic."""

    def test_parse_tenor(self):
        assert parse_tenor("3M") == (3, "M")
        assert parse_tenor("10y") == (10, "Y")

    def test_invalid_tenor(self):
        """Test invalid tenor raises error."""
        with pytest.raises(ValueError, match="Invalid tenor format"):
            parse_tenor("3X")

    def test_add_tenor(self):
        """Test adding day, week, month and year tenors."""
        start = date(2024, 1, 15)
        assert add_tenor(start, "1D") == date(2024, 1, 16)
        assert add_tenor(start, "2W") == date(2024, 1, 29)
        assert add_tenor(start, "3M") == date(2024, 4, 15)
        assert add_tenor(start, "1Y") == date(2025, 1, 15)

    def test_zero_month_tenor(self):
        """A zero period leaves the date unchanged."""
        assert add_tenor(date(2024, 1, 15), "0M") == date(2024, 1, 15)

    def test_month_end_clamp(self):
        """Month arithmetic clamps to the end of shorter months."""
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_tenor_to_months(self):
        assert tenor_to_months("2Y") == 24
        with pytest.raises(ValueError):
            tenor_to_months("7D")

    def test_index_maturity(self):
        """Index maturity adds the index tenor to the fixing date."""
        assert USD_LIBOR_3M.maturity_date(date(2024, 4, 15)) == date(2024, 7, 15)


class TestCurrency:
    """Tests for currencies and amounts."""

    def test_currency_code(self):
        assert Currency.of("usd") == Currency.USD
        assert str(Currency.GBP) == "GBP"

    def test_invalid_currency(self):
        with pytest.raises(ValueError, match="Invalid currency code"):
            Currency("US")

    def test_amount_plus_currency_mismatch(self):
        """Adding amounts in different currencies raises."""
        with pytest.raises(ValueError, match="Currency mismatch"):
            CurrencyAmount(Currency.USD, 1.0).plus(CurrencyAmount(Currency.EUR, 1.0))

    def test_multi_currency_amount(self):
        """Amounts in the same currency are summed."""
        mca = MultiCurrencyAmount.of(
            CurrencyAmount(Currency.USD, 100.0),
            CurrencyAmount(Currency.EUR, 50.0),
            CurrencyAmount(Currency.USD, 25.0),
        )
        assert mca.size() == 2
        assert mca.get_amount(Currency.USD).amount == 125.0
        assert mca.multiplied_by(2.0).get_amount(Currency.EUR).amount == 100.0


class TestFx:
    """Tests for FX rates and conversion."""

    def test_fx_rate_directions(self):
        """A rate answers both directions of its pair."""
        rate = FxRate(Currency.EUR, Currency.USD, 1.10)
        assert rate.fx_rate(Currency.EUR, Currency.USD) == 1.10
        assert abs(rate.fx_rate(Currency.USD, Currency.EUR) - 1 / 1.10) < 1e-15
        assert rate.fx_rate(Currency.USD, Currency.USD) == 1.0

    def test_fx_rate_inverse(self):
        inverse = FxRate(Currency.EUR, Currency.USD, 1.25).inverse()
        assert inverse.base == Currency.USD
        assert inverse.counter == Currency.EUR
        assert abs(inverse.rate - 0.8) < 1e-15

    def test_fx_rate_wrong_pair(self):
        rate = FxRate(Currency.EUR, Currency.USD, 1.10)
        with pytest.raises(ValueError, match="cannot provide rate"):
            rate.fx_rate(Currency.GBP, Currency.USD)

    def test_fx_rate_must_be_positive(self):
        with pytest.raises(ValueError):
            FxRate(Currency.EUR, Currency.USD, 0.0)

    def test_fx_matrix_lookup(self):
        """The matrix answers direct and inverse pairs but does not triangulate."""
        matrix = FxMatrix([
            FxRate(Currency.EUR, Currency.USD, 1.10),
            FxRate(Currency.GBP, Currency.USD, 1.25),
        ])
        assert matrix.fx_rate(Currency.EUR, Currency.USD) == 1.10
        assert abs(matrix.fx_rate(Currency.USD, Currency.GBP) - 0.8) < 1e-15
        with pytest.raises(ValueError, match="No FX rate found"):
            matrix.fx_rate(Currency.EUR, Currency.GBP)

    def test_multi_currency_convert(self):
        """Converting a multi-currency amount sums every currency in the target."""
        matrix = FxMatrix([FxRate(Currency.EUR, Currency.USD, 1.10)])
        mca = MultiCurrencyAmount.of(
            CurrencyAmount(Currency.USD, 100.0),
            CurrencyAmount(Currency.EUR, 100.0),
        )
        converted = mca.convert_to(Currency.USD, matrix)
        assert converted.currency == Currency.USD
        assert abs(converted.amount - 210.0) < 1e-10

    def test_convert_round_trip(self):
        """Converting there and back recovers the amount."""
        matrix = FxMatrix([FxRate(Currency.GBP, Currency.USD, 1.27)])
        amount = CurrencyAmount(Currency.GBP, 1000.0)
        back = amount.convert_to(Currency.USD, matrix).convert_to(Currency.GBP, matrix)
        assert abs(back.amount - 1000.0) < 1e-9
