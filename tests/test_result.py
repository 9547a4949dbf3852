"""
Unit tests for calculation results.
"""

import pytest

from ratescalc.calc.result import Failure, FailureReason, Result
from ratescalc.errors import ConfigurationError, MarketDataNotFoundError, MissingJacobianError


class TestResult:
    """Tests for Result construction and access."""

    def test_success(self):
        result = Result.success(42.0)
        assert result.is_success
        assert not result.is_failure
        assert result.value == 42.0

    def test_failure(self):
        result = Result.failure(FailureReason.MISSING_DATA, "No curve for USD")
        assert result.is_failure
        assert result.get_failure() == Failure(FailureReason.MISSING_DATA, "No curve for USD")

    def test_value_of_failure_raises(self):
        """Reading the value of a failure raises."""
        result = Result.failure(FailureReason.ERROR, "boom")
        with pytest.raises(ValueError, match="failure result"):
            result.value

    def test_failure_of_success_raises(self):
        with pytest.raises(ValueError):
            Result.success(1).get_failure()

    def test_equality(self):
        assert Result.success(1.0) == Result.success(1.0)
        assert Result.success(1.0) != Result.success(2.0)
        assert Result.failure(FailureReason.ERROR, "a") == Result.failure(FailureReason.ERROR, "a")


class TestResultOf:
    """Tests for capturing exceptions into results."""

    def test_of_success(self):
        assert Result.of(lambda: 3 * 2) == Result.success(6)

    def test_of_captures_exception(self):
        """Ordinary exceptions become ERROR failures with the exception message."""
        def fail():
            raise MarketDataNotFoundError("USD-Curve")

        result = Result.of(fail)

        assert result.is_failure
        assert result.get_failure().reason == FailureReason.ERROR
        assert "USD-Curve" in result.get_failure().message

    def test_of_uses_type_name_without_message(self):
        def fail():
            raise KeyError()

        assert Result.of(fail).get_failure().message == "KeyError"

    def test_configuration_error_captured(self):
        """Configuration errors raised inside a calculation fail the result like any other."""
        def fail():
            raise ConfigurationError("bad setup")

        result = Result.of(fail)

        assert result.get_failure() == Failure(FailureReason.ERROR, "bad setup")

    def test_wrap_captures_configuration_error_subclass(self):
        def fail():
            raise MissingJacobianError("no jacobian")

        assert Result.wrap(fail).get_failure().reason == FailureReason.ERROR

    def test_wrap_passes_inner_result_through(self):
        """wrap() does not nest a returned Result."""
        inner = Result.failure(FailureReason.INVALID_INPUT, "Unsupported measure: X")
        assert Result.wrap(lambda: inner) is inner
        assert Result.wrap(lambda: 5) == Result.success(5)


class TestResultMapping:
    """Tests for map and flat_map."""

    def test_map_success(self):
        assert Result.success(2).map(lambda v: v + 1) == Result.success(3)

    def test_map_failure_passes_through(self):
        failure = Result.failure(FailureReason.MISSING_DATA, "missing")
        assert failure.map(lambda v: v + 1) is failure

    def test_map_captures_exception(self):
        result = Result.success(0).map(lambda v: 1 / v)
        assert result.get_failure().reason == FailureReason.ERROR

    def test_flat_map(self):
        """flat_map returns the Result produced by the function."""
        result = Result.success(2).flat_map(
            lambda v: Result.failure(FailureReason.CURRENCY_CONVERSION, f"cannot convert {v}"))
        assert result.get_failure() == Failure(FailureReason.CURRENCY_CONVERSION, "cannot convert 2")

    def test_all_successful(self):
        assert Result.all_successful([Result.success(1), Result.success(2)])
        assert not Result.all_successful([Result.success(1), Result.failure(FailureReason.ERROR, "x")])
