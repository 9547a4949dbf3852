"""
Calculation configuration: which function computes which measure.

Provides:
- FunctionConfig: a function type plus constructor arguments
- FunctionGroup / DefaultFunctionGroup: functions for the measures of a target type
- ConfiguredFunctionGroup: a function group plus arguments from a pricing rule
- PricingRule / PricingRules: ordered selection of function groups
- ReportingRules: the currency results are reported in
- CalculationRules: pricing, market data and reporting rules together

Resolution order:
    Pricing rules are tried in order and the first rule matching the target
    type and measure wins. A rule with no measures applies to every measure
    its function group supports.
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Set, Type

from ..basics.currency import Currency
from .function import CalculationFunction
from .mappings import MarketDataRules
from .measure import Measure


@dataclass(frozen=True)
class FunctionConfig:
    """
    How to create a calculation function.

    Attributes:
        function_type: CalculationFunction subclass to instantiate
        arguments: Constructor arguments fixed by this configuration
    """
    function_type: Type[CalculationFunction]
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "arguments", dict(self.arguments))

    @classmethod
    def of(cls, function_type: Type[CalculationFunction], **arguments) -> "FunctionConfig":
        return cls(function_type, arguments)

    def create_function(self, arguments: Optional[Mapping[str, Any]] = None) -> CalculationFunction:
        """
        Instantiate the function.

        Constructor parameters are filled from the configured arguments and
        the supplied arguments. Parameters with defaults may be omitted.

        Raises:
            ValueError: If a required parameter has no value, or the supplied
                arguments overwrite configured ones
        """
        arguments = dict(arguments or {})
        if not (inspect.isclass(self.function_type) and issubclass(self.function_type, CalculationFunction)):
            raise ValueError(f"Functions must be CalculationFunction subclasses, found {self.function_type!r}")
        if inspect.isabstract(self.function_type):
            raise ValueError(f"Functions must be concrete classes, {self.function_type.__name__} is abstract")

        overwritten = set(arguments) & set(self.arguments)
        if overwritten:
            raise ValueError(
                f"Built-in function arguments {sorted(overwritten)} would be overwritten by "
                f"arguments {sorted(arguments)}")
        available = {**self.arguments, **arguments}

        kwargs = {}
        for name, param in inspect.signature(self.function_type).parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if name in available:
                kwargs[name] = available[name]
            elif param.default is param.empty:
                raise ValueError(f"No argument found with name '{name}'")
        return self.function_type(**kwargs)


class FunctionGroup(ABC):
    """Functions calculating the measures of one target type."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def configured_measures(self, target) -> Set[Measure]:
        """Measures this group can calculate for the target."""

    @abstractmethod
    def function_config(self, target, measure: Measure) -> Optional[FunctionConfig]:
        pass

    @property
    def arguments(self) -> Dict[str, Any]:
        return {}


class DefaultFunctionGroup(FunctionGroup):
    """
    Function group backed by a measure to function mapping.

    Attributes:
        name: Group name
        target_type: Type of target the group applies to
        functions: Function configuration per measure
        arguments: Default constructor arguments for every function
    """

    def __init__(
        self,
        name: str,
        target_type: Type,
        functions: Mapping[Measure, FunctionConfig],
        arguments: Optional[Mapping[str, Any]] = None,
    ):
        self._name = name
        self.target_type = target_type
        self.functions: Dict[Measure, FunctionConfig] = dict(functions)
        self._arguments = dict(arguments or {})

    @property
    def name(self) -> str:
        return self._name

    @property
    def arguments(self) -> Dict[str, Any]:
        return dict(self._arguments)

    def configured_measures(self, target) -> Set[Measure]:
        if not isinstance(target, self.target_type):
            return set()
        return set(self.functions)

    def function_config(self, target, measure: Measure) -> Optional[FunctionConfig]:
        if not isinstance(target, self.target_type):
            return None
        return self.functions.get(measure)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DefaultFunctionGroup):
            return NotImplemented
        return (self._name == other._name and self.target_type == other.target_type
                and self.functions == other.functions and self._arguments == other._arguments)

    def __hash__(self):
        return hash((self._name, self.target_type))

    def __repr__(self) -> str:
        return f"DefaultFunctionGroup({self._name!r}, {self.target_type.__name__})"


@dataclass(frozen=True)
class ConfiguredFunctionGroup:
    """A function group with the arguments supplied by the pricing rule that selected it."""
    function_group: FunctionGroup
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "arguments", dict(self.arguments))

    def __hash__(self):
        return hash(self.function_group)

    def function_config(self, target, measure: Measure) -> Optional[FunctionConfig]:
        return self.function_group.function_config(target, measure)

    def create_function(self, target, measure: Measure) -> Optional[CalculationFunction]:
        """
        Create the function for the measure, None if the group has none.

        Group default arguments are overridden by the rule arguments.
        """
        config = self.function_config(target, measure)
        if config is None:
            return None
        arguments = {**self.function_group.arguments, **self.arguments}
        # arguments fixed by the function config win over group and rule defaults
        for name in config.arguments:
            arguments.pop(name, None)
        return config.create_function(arguments)


class PricingRule:
    """
    Selects a function group for targets of one type.

    Attributes:
        target_type: Type of target the rule applies to
        function_group: Group providing the functions
        measures: Measures the rule applies to, empty for all measures of the group
        arguments: Arguments passed to the functions of the group
    """

    def __init__(
        self,
        target_type: Type,
        function_group: FunctionGroup,
        measures: Iterable[Measure] = (),
        arguments: Optional[Mapping[str, Any]] = None,
    ):
        self.target_type = target_type
        self._function_group = function_group
        self.measures: FrozenSet[Measure] = frozenset(measures)
        self.arguments = dict(arguments or {})

    @classmethod
    def of(cls, target_type: Type, function_group: FunctionGroup, *measures: Measure, **arguments) -> "PricingRule":
        return cls(target_type, function_group, measures, arguments)

    def _applies_to(self, target) -> bool:
        return isinstance(target, self.target_type)

    def function_group(self, target, measure: Measure) -> Optional[ConfiguredFunctionGroup]:
        """The configured group for the target and measure, None if the rule does not match."""
        if not self._applies_to(target):
            return None
        if self.measures:
            matched = measure in self.measures
        else:
            matched = measure in self._function_group.configured_measures(target)
        return ConfiguredFunctionGroup(self._function_group, self.arguments) if matched else None

    def configured_measures(self, target) -> Set[Measure]:
        if not self._applies_to(target):
            return set()
        group_measures = self._function_group.configured_measures(target)
        if not self.measures:
            return set(group_measures)
        return set(self.measures) & set(group_measures)

    def __repr__(self) -> str:
        return (f"PricingRule({self.target_type.__name__}, {self._function_group.name!r}, "
                f"measures={sorted(m.name for m in self.measures)})")


class PricingRules:
    """Ordered pricing rules; the first matching rule wins."""

    def __init__(self, rules: Iterable[PricingRule] = ()):
        self.rules = tuple(rules)

    @classmethod
    def of(cls, *rules: PricingRule) -> "PricingRules":
        return cls(rules)

    @classmethod
    def empty(cls) -> "PricingRules":
        return cls()

    def composed_with(self, other: "PricingRules") -> "PricingRules":
        return PricingRules(self.rules + other.rules)

    def function_group(self, target, measure: Measure) -> Optional[ConfiguredFunctionGroup]:
        for rule in self.rules:
            group = rule.function_group(target, measure)
            if group is not None:
                return group
        return None

    def configured_measures(self, target) -> Set[Measure]:
        """Union of the measures of every rule matching the target."""
        measures: Set[Measure] = set()
        for rule in self.rules:
            measures |= rule.configured_measures(target)
        return measures


class ReportingRules(ABC):
    """Determines the reporting currency of a target."""

    @abstractmethod
    def reporting_currency(self, target) -> Optional[Currency]:
        pass

    @staticmethod
    def empty() -> "ReportingRules":
        return _EMPTY_REPORTING_RULES

    @staticmethod
    def fixed_currency(currency: Currency) -> "ReportingRules":
        return FixedReportingRules(currency)


class _EmptyReportingRules(ReportingRules):

    def reporting_currency(self, target) -> Optional[Currency]:
        return None

    def __repr__(self) -> str:
        return "ReportingRules.empty()"


_EMPTY_REPORTING_RULES = _EmptyReportingRules()


@dataclass(frozen=True)
class FixedReportingRules(ReportingRules):
    """Reports every target in one currency."""
    currency: Currency

    def reporting_currency(self, target) -> Optional[Currency]:
        return self.currency


@dataclass(frozen=True)
class CalculationRules:
    """Rules applied when building calculation tasks."""
    pricing_rules: PricingRules
    market_data_rules: MarketDataRules = MarketDataRules.EMPTY
    reporting_rules: ReportingRules = _EMPTY_REPORTING_RULES


__all__ = [
    "FunctionConfig",
    "FunctionGroup",
    "DefaultFunctionGroup",
    "ConfiguredFunctionGroup",
    "PricingRule",
    "PricingRules",
    "ReportingRules",
    "FixedReportingRules",
    "CalculationRules",
]
