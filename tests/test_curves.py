"""
Unit tests for interpolation, curves, curve metadata and discount factor views.
"""

from datetime import date
import numpy as np
import pandas as pd
import pytest

from ratescalc.basics.conventions import DayCount
from ratescalc.basics.currency import Currency
from ratescalc.basics.index import USD_LIBOR_3M
from ratescalc.market.curve.curves import ConstantNodalCurve, InterpolatedNodalCurve, node_metadata
from ratescalc.market.curve.interpolation import (
    CubicSplineInterpolator,
    LinearInterpolator,
    create_interpolator,
)
from ratescalc.market.curve.metadata import (
    CurveInfoType,
    CurveMetadata,
    CurveName,
    CurveParameterSize,
    Curves,
    JacobianCalibrationMatrix,
    ValueType,
)
from ratescalc.market.sensitivity import IborRateSensitivity, ZeroRateSensitivity
from ratescalc.market.view import (
    DiscountFactors,
    DiscountIborIndexRates,
    SimpleDiscountFactors,
    ZeroRateDiscountFactors,
)

VAL_DATE = date(2024, 1, 15)
USD = Currency.USD


class TestInterpolators:
    """Tests for interpolation methods."""

    @pytest.fixture
    def sample_data(self):
        """Sample interpolation data."""
        x = np.array([0.25, 0.5, 1.0, 2.0, 5.0, 10.0])
        y = np.array([0.051, 0.052, 0.053, 0.050, 0.048, 0.045])
        return x, y

    def test_linear_interpolator(self, sample_data):
        """Test linear interpolation."""
        x, y = sample_data
        interp = LinearInterpolator()
        interp.fit(x, y)

        assert abs(interp(1.0) - 0.053) < 1e-12
        assert abs(interp(0.75) - 0.0525) < 1e-12

    def test_flat_extrapolation(self, sample_data):
        """Both interpolators extrapolate flat outside the nodes."""
        x, y = sample_data
        for interp in (LinearInterpolator(), CubicSplineInterpolator()):
            interp.fit(x, y)
            assert interp(0.0) == y[0]
            assert interp(30.0) == y[-1]
            assert interp.derivative(30.0) == 0.0

    def test_cubic_spline_hits_nodes(self, sample_data):
        x, y = sample_data
        interp = CubicSplineInterpolator()
        interp.fit(x, y)
        for xi, yi in zip(x, y):
            assert abs(interp(xi) - yi) < 1e-12

    @pytest.mark.parametrize("method", ["linear", "natural_cubic_spline"])
    def test_node_sensitivity_matches_bump(self, sample_data, method):
        """Node sensitivities agree with bumping each node value."""
        x, y = sample_data
        interp = create_interpolator(method)
        interp.fit(x, y)
        t = 1.7
        sens = interp.node_sensitivity(t)

        eps = 1e-6
        for i in range(len(y)):
            bumped = create_interpolator(method)
            y_up = y.copy()
            y_up[i] += eps
            bumped.fit(x, y_up)
            fd = (bumped(t) - interp(t)) / eps
            assert abs(fd - sens[i]) < 1e-6

    def test_node_sensitivity_sums_to_one(self, sample_data):
        """Shifting every node by the same amount shifts the value by that amount."""
        x, y = sample_data
        interp = CubicSplineInterpolator()
        interp.fit(x, y)
        assert abs(interp.node_sensitivity(3.3).sum() - 1.0) < 1e-12

    def test_times_must_increase(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            LinearInterpolator().fit(np.array([1.0, 1.0]), np.array([0.01, 0.02]))

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown interpolation method"):
            create_interpolator("akima")


class TestNodalCurves:
    """Tests for nodal curves."""

    @pytest.fixture
    def curve(self):
        metadata = Curves.zero_rates("USD-Test", DayCount.ACT_365, node_metadata(["1Y", "2Y", "5Y"]))
        return InterpolatedNodalCurve(metadata, [1.0, 2.0, 5.0], [0.04, 0.045, 0.05])

    def test_parameters(self, curve):
        assert curve.parameter_count == 3
        assert curve.name == CurveName("USD-Test")
        assert abs(curve.y_value(1.5) - 0.0425) < 1e-12

    def test_with_node_returns_copy(self, curve):
        """with_node changes one parameter of a copy."""
        bumped = curve.with_node(1, 0.046)
        assert bumped.y_values.tolist() == [0.04, 0.046, 0.05]
        assert curve.y_values.tolist() == [0.04, 0.045, 0.05]
        assert bumped.metadata == curve.metadata

    def test_parallel_shift(self, curve):
        shifted = curve.with_parallel_shift(0.001)
        np.testing.assert_allclose(shifted.y_values, [0.041, 0.046, 0.051])

    def test_values_are_read_only(self, curve):
        with pytest.raises(ValueError):
            curve.y_values[0] = 1.0

    def test_metadata_size_mismatch(self):
        metadata = Curves.zero_rates("Bad", DayCount.ACT_365, node_metadata(["1Y", "2Y"]))
        with pytest.raises(ValueError, match="Parameter metadata has 2 entries"):
            InterpolatedNodalCurve(metadata, [1.0, 2.0, 3.0], [0.01, 0.02, 0.03])

    def test_constant_curve(self):
        """A constant curve has one parameter and a unit sensitivity everywhere."""
        curve = ConstantNodalCurve(Curves.discount_factors("Flat", DayCount.ACT_360), 0.99)
        assert curve.parameter_count == 1
        assert curve.y_value(7.0) == 0.99
        assert curve.y_value_parameter_sensitivity(3.0).tolist() == [1.0]
        assert curve.with_node(0, 0.98).y_value(0.0) == 0.98
        with pytest.raises(ValueError):
            curve.with_y_values([0.9, 0.8])


class TestCurveMetadata:
    """Tests for metadata info and calibration Jacobians."""

    def test_info(self):
        metadata = Curves.zero_rates("USD-Test", DayCount.ACT_365)
        assert metadata.find_info(CurveInfoType.JACOBIAN) is None
        with pytest.raises(ValueError, match="no metadata info"):
            metadata.get_info(CurveInfoType.JACOBIAN)

        jacobian = JacobianCalibrationMatrix.of([CurveParameterSize(CurveName("USD-Test"), 2)], np.eye(2))
        with_info = metadata.with_info(CurveInfoType.JACOBIAN, jacobian)

        assert with_info.get_info(CurveInfoType.JACOBIAN) is jacobian
        assert metadata.find_info(CurveInfoType.JACOBIAN) is None

    def test_string_name_is_converted(self):
        assert CurveMetadata("A").curve_name == CurveName("A")

    def test_jacobian_split_values(self):
        """Values are split into consecutive blocks in curve order."""
        order = [CurveParameterSize(CurveName("DSC"), 2), CurveParameterSize(CurveName("FWD"), 3)]
        jacobian = JacobianCalibrationMatrix.of(order, np.ones((2, 5)))

        split = jacobian.split_values([1.0, 2.0, 3.0, 4.0, 5.0])

        assert jacobian.total_parameter_count == 5
        assert split[CurveName("DSC")].tolist() == [1.0, 2.0]
        assert split[CurveName("FWD")].tolist() == [3.0, 4.0, 5.0]

    def test_jacobian_split_wrong_length(self):
        jacobian = JacobianCalibrationMatrix.of([CurveParameterSize(CurveName("A"), 2)], np.eye(2))
        with pytest.raises(ValueError, match="cannot be split"):
            jacobian.split_values([1.0, 2.0, 3.0])

    def test_jacobian_shape_checked(self):
        with pytest.raises(ValueError, match="columns"):
            JacobianCalibrationMatrix.of([CurveParameterSize(CurveName("A"), 3)], np.eye(2))


class TestDiscountFactors:
    """Tests for discount factor views of curves."""

    @pytest.fixture
    def zero_curve(self):
        metadata = Curves.zero_rates("USD-Zero", DayCount.ACT_365, node_metadata(["6M", "1Y", "2Y"]))
        return InterpolatedNodalCurve(metadata, [0.5, 1.0, 2.0], [0.05, 0.048, 0.045])

    def test_factory_by_value_type(self, zero_curve):
        assert isinstance(DiscountFactors.of(USD, VAL_DATE, zero_curve), ZeroRateDiscountFactors)
        df_curve = ConstantNodalCurve(Curves.discount_factors("DF", DayCount.ACT_360), 0.99)
        assert isinstance(DiscountFactors.of(USD, VAL_DATE, df_curve), SimpleDiscountFactors)

    def test_unknown_value_type(self):
        curve = ConstantNodalCurve(CurveMetadata("X", day_count=DayCount.ACT_365), 0.01)
        with pytest.raises(ValueError, match="Unable to create discount factors"):
            DiscountFactors.of(USD, VAL_DATE, curve)

    def test_day_count_required(self):
        curve = ConstantNodalCurve(CurveMetadata("X", y_value_type=ValueType.ZERO_RATE), 0.01)
        with pytest.raises(ValueError, match="day count"):
            DiscountFactors.of(USD, VAL_DATE, curve)

    def test_zero_rate_discount_factor(self, zero_curve):
        """DF(t) = exp(-z(t) t) and DF on the valuation date is one."""
        dfs = DiscountFactors.of(USD, VAL_DATE, zero_curve)
        d = date(2025, 1, 14)  # 365 days
        assert abs(dfs.discount_factor(d) - np.exp(-0.048)) < 1e-12
        assert dfs.discount_factor(VAL_DATE) == 1.0

    def test_zero_rate_parameter_sensitivity_matches_bump(self, zero_curve):
        """Curve parameter sensitivity of a zero rate point agrees with bumping nodes."""
        dfs = DiscountFactors.of(USD, VAL_DATE, zero_curve)
        d = date(2024, 10, 15)
        point = dfs.zero_rate_point_sensitivity(d)
        sens = dfs.curve_parameter_sensitivity(point).get_sensitivity(zero_curve.name, USD).sensitivity

        eps = 1e-7
        for i in range(zero_curve.parameter_count):
            bumped = dfs.with_curve(zero_curve.with_node(i, zero_curve.y_values[i] + eps))
            fd = (bumped.discount_factor(d) - dfs.discount_factor(d)) / eps
            assert abs(fd - sens[i]) < 1e-6

    def test_simple_discount_factors_sensitivity(self):
        """For a discount factor curve the parameter sensitivity of DF is dDF/dp."""
        metadata = Curves.discount_factors("USD-DF", DayCount.ACT_365, node_metadata(["1Y", "2Y"]))
        curve = InterpolatedNodalCurve(metadata, [1.0, 2.0], [0.95, 0.90])
        dfs = DiscountFactors.of(USD, VAL_DATE, curve)
        d = date(2025, 7, 15)
        point = dfs.zero_rate_point_sensitivity(d)
        sens = dfs.curve_parameter_sensitivity(point).get_sensitivity(curve.name, USD).sensitivity

        eps = 1e-7
        for i in range(2):
            bumped = dfs.with_curve(curve.with_node(i, curve.y_values[i] + eps))
            fd = (bumped.discount_factor(d) - dfs.discount_factor(d)) / eps
            assert abs(fd - sens[i]) < 1e-6


class TestIborIndexRates:
    """Tests for forward rates and fixings."""

    @pytest.fixture
    def rates(self):
        metadata = Curves.zero_rates("USD-Fwd", DayCount.ACT_365, node_metadata(["3M", "1Y"]))
        curve = InterpolatedNodalCurve(metadata, [0.25, 1.0], [0.05, 0.048])
        dfs = DiscountFactors.of(USD, VAL_DATE, curve)
        fixings = pd.Series({date(2024, 1, 12): 0.0531, date(2024, 1, 15): 0.0533})
        return DiscountIborIndexRates(USD_LIBOR_3M, dfs, fixings)

    def test_forward_rate(self, rates):
        fixing = date(2024, 4, 15)
        end = date(2024, 7, 15)
        dfs = rates.discount_factors
        expected = (dfs.discount_factor(fixing) / dfs.discount_factor(end) - 1.0) / (91 / 360)
        assert abs(rates.rate(fixing) - expected) < 1e-14

    def test_historic_fixing(self, rates):
        """Past fixing dates use the time series."""
        assert rates.rate(date(2024, 1, 12)) == 0.0531
        assert rates.is_historic(date(2024, 1, 12))

    def test_missing_past_fixing_raises(self, rates):
        with pytest.raises(ValueError, match="Unable to get fixing"):
            rates.rate(date(2024, 1, 11))

    def test_fixing_on_valuation_date(self, rates):
        """A fixing on the valuation date is used and has no sensitivity."""
        assert rates.rate(VAL_DATE) == 0.0533
        assert len(rates.rate_point_sensitivity(VAL_DATE)) == 0

    def test_rate_sensitivity_matches_bump(self, rates):
        fixing = date(2024, 4, 15)
        point = IborRateSensitivity(USD_LIBOR_3M, fixing, USD, 1.0)
        curve = rates.discount_factors.curve
        sens = rates.curve_parameter_sensitivity(point).get_sensitivity(curve.name, USD).sensitivity

        eps = 1e-7
        for i in range(curve.parameter_count):
            bumped = rates.with_discount_factors(
                rates.discount_factors.with_curve(curve.with_node(i, curve.y_values[i] + eps)))
            fd = (bumped.rate(fixing) - rates.rate(fixing)) / eps
            assert abs(fd - sens[i]) < 1e-5

    def test_point_sensitivity_grouping(self):
        a = ZeroRateSensitivity(USD, date(2024, 7, 15), USD, 1.0)
        assert a.grouping_key() == ("ZeroRateSensitivity", "USD", date(2024, 7, 15), "USD")
