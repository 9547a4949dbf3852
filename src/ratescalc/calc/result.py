"""
Success or failure outcome of a calculation.

A Result either holds a value or a Failure describing why no value could be
produced. Per-cell problems (missing market data, unsupported measures,
currency conversion problems) are carried as failures so that sibling cells
of a calculation keep running.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


class FailureReason(Enum):
    """Category of a calculation failure."""
    ERROR = "ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    MISSING_DATA = "MISSING_DATA"
    CURRENCY_CONVERSION = "CURRENCY_CONVERSION"
    CALCULATION_FAILED = "CALCULATION_FAILED"
    MULTIPLE = "MULTIPLE"
    OTHER = "OTHER"


@dataclass(frozen=True)
class Failure:
    """Reason and message of a failed calculation."""
    reason: FailureReason
    message: str

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.message}"


class Result:
    """
    Outcome of a calculation: a value or a failure.

    Use the factory methods rather than the constructor:
        Result.success(42.0)
        Result.failure(FailureReason.MISSING_DATA, "No curve for USD")
        Result.of(lambda: pricer.present_value(fra, provider))
    """

    __slots__ = ("_value", "_failure")

    def __init__(self, value: Any = None, failure: Optional[Failure] = None):
        self._value = value
        self._failure = failure

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: FailureReason, message: str) -> "Result":
        return cls(failure=Failure(reason, message))

    @classmethod
    def of(cls, fn: Callable[[], Any]) -> "Result":
        """
        Run fn and wrap its return value as a success.

        Any exception raised by fn becomes an ERROR failure.
        """
        try:
            return cls.success(fn())
        except Exception as e:
            logger.debug("Calculation raised %s: %s", type(e).__name__, e)
            return cls.failure(FailureReason.ERROR, str(e) or type(e).__name__)

    @classmethod
    def wrap(cls, fn: Callable[[], Any]) -> "Result":
        """Like of(), but a Result returned by fn is passed through unchanged."""
        result = cls.of(fn)
        if result.is_success and isinstance(result._value, Result):
            return result._value
        return result

    @staticmethod
    def all_successful(results: Iterable["Result"]) -> bool:
        return all(r.is_success for r in results)

    @property
    def is_success(self) -> bool:
        return self._failure is None

    @property
    def is_failure(self) -> bool:
        return self._failure is not None

    @property
    def value(self) -> Any:
        """
        The value of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if self._failure is not None:
            raise ValueError(f"Unable to get a value from a failure result: {self._failure}")
        return self._value

    def get_failure(self) -> Failure:
        if self._failure is None:
            raise ValueError("Unable to get a failure from a success result")
        return self._failure

    def map(self, fn: Callable[[Any], Any]) -> "Result":
        """Apply fn to the value of a success; failures pass through."""
        if self.is_failure:
            return self
        return Result.of(lambda: fn(self._value))

    def flat_map(self, fn: Callable[[Any], "Result"]) -> "Result":
        """Apply a Result-returning fn to the value of a success."""
        if self.is_failure:
            return self
        return Result.wrap(lambda: fn(self._value))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._failure == other._failure and (
            self._failure is not None or _values_equal(self._value, other._value)
        )

    def __hash__(self):
        return hash(self._failure)

    def __repr__(self) -> str:
        if self._failure is not None:
            return f"Result.failure({self._failure.reason.value}, {self._failure.message!r})"
        return f"Result.success({self._value!r})"


def _values_equal(a, b) -> bool:
    eq = a == b
    if isinstance(eq, bool):
        return eq
    # numpy arrays compare elementwise
    return bool(getattr(eq, "all", lambda: eq)())


__all__ = [
    "FailureReason",
    "Failure",
    "Result",
]
