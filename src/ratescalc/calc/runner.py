"""
Running calculations for a grid of targets and columns.

Rows are targets, columns are measures. CalculationTasks builds one task
per configured cell, CalculationRunner executes them against scenario
market data and Results collects the outcome.

Example:
    >>> rules = CalculationRules(standard_pricing_rules(), reporting_rules=ReportingRules.fixed_currency(USD))
    >>> tasks = CalculationTasks.of(trades, [Column(Measure.PRESENT_VALUE)], rules)
    >>> results = CalculationRunner().calculate(tasks, market_data)
    >>> results.to_dataframe()
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..basics.currency import Currency
from ..market.data import ScenarioMarketData
from ..settings import EngineSettings
from .config import CalculationRules, ReportingRules
from .mappings import MarketDataMappings
from .measure import Measure
from .requirements import MarketDataRequirements
from .result import FailureReason, Result
from .scenario import ScenarioResult
from .task import CalculationResult, CalculationTask

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Column:
    """
    A column of the results grid.

    Attributes:
        measure: Measure calculated in the column
        reporting_currency: Overrides the reporting rules for this column
    """
    measure: Measure
    reporting_currency: Optional[Currency] = None

    @property
    def header(self) -> str:
        if self.reporting_currency is None:
            return self.measure.name
        return f"{self.measure.name} ({self.reporting_currency})"


class CalculationTasks:
    """The tasks of a calculation grid plus the cells that have no task."""

    def __init__(
        self,
        targets: Sequence,
        columns: Sequence[Column],
        tasks: Sequence[CalculationTask],
        unconfigured: Optional[Dict[Tuple[int, int], Result]] = None,
    ):
        self.targets = tuple(targets)
        self.columns = tuple(columns)
        self.tasks = tuple(tasks)
        self.unconfigured = dict(unconfigured or {})

    @classmethod
    def of(cls, targets: Sequence, columns: Sequence[Column], rules: CalculationRules) -> "CalculationTasks":
        """
        Create a task for every cell that has a configured function.

        Cells without a function are recorded as NOT_APPLICABLE failures.
        Targets without market data mappings use the default mappings.
        """
        tasks: List[CalculationTask] = []
        unconfigured: Dict[Tuple[int, int], Result] = {}
        for row, target in enumerate(targets):
            mappings = rules.market_data_rules.mappings(target) or MarketDataMappings.empty()
            for col, column in enumerate(columns):
                group = rules.pricing_rules.function_group(target, column.measure)
                function = None if group is None else group.create_function(target, column.measure)
                if function is None:
                    unconfigured[(row, col)] = Result.failure(
                        FailureReason.NOT_APPLICABLE,
                        f"No function configured for measure '{column.measure}' and "
                        f"target type {type(target).__name__}")
                    continue
                reporting_rules = rules.reporting_rules
                if column.reporting_currency is not None:
                    reporting_rules = ReportingRules.fixed_currency(column.reporting_currency)
                tasks.append(CalculationTask(
                    target, column.measure, row, col, function, mappings, reporting_rules))
        logger.debug("Created %d tasks for %d targets and %d columns, %d cells not configured",
                     len(tasks), len(targets), len(columns), len(unconfigured))
        return cls(targets, columns, tasks, unconfigured)

    def requirements(self) -> MarketDataRequirements:
        """Market data needed by all tasks."""
        return MarketDataRequirements.combine(t.requirements() for t in self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)


class Results:
    """
    Results grid, one Result per (row, column) cell.

    Values of successful results are ScenarioResults.
    """

    def __init__(
        self,
        row_count: int,
        column_count: int,
        items: Sequence[Result],
        columns: Optional[Sequence[Column]] = None,
    ):
        if len(items) != row_count * column_count:
            raise ValueError(
                f"Expected {row_count * column_count} results for {row_count} rows and "
                f"{column_count} columns, found {len(items)}")
        self.row_count = row_count
        self.column_count = column_count
        self.items = tuple(items)
        self.columns = tuple(columns) if columns is not None else None

    def get(self, row: int, column: int) -> Result:
        if not (0 <= row < self.row_count and 0 <= column < self.column_count):
            raise IndexError(f"Cell ({row}, {column}) outside results of size "
                             f"{self.row_count}x{self.column_count}")
        return self.items[row * self.column_count + column]

    def to_dataframe(self, scenario_index: int = 0) -> pd.DataFrame:
        """
        Results of one scenario as a DataFrame.

        Failed cells show the failure message.
        """
        headers = ([c.header for c in self.columns] if self.columns is not None
                   else [f"Column{i}" for i in range(self.column_count)])
        rows = []
        for row in range(self.row_count):
            cells = []
            for col in range(self.column_count):
                result = self.get(row, col)
                if result.is_failure:
                    cells.append(f"FAIL: {result.get_failure().message}")
                elif isinstance(result.value, ScenarioResult):
                    cells.append(result.value.get(scenario_index))
                else:
                    cells.append(result.value)
            rows.append(cells)
        return pd.DataFrame(rows, columns=headers)


class CalculationRunner:
    """
    Executes calculation tasks.

    Tasks run in the calling thread unless settings.max_workers > 1, in
    which case a thread pool is used. Each task captures its own failures,
    so every cell of the grid is filled.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    def calculate(self, tasks: CalculationTasks, market_data: ScenarioMarketData) -> Results:
        logger.info("Running %d tasks over %d scenarios", len(tasks), market_data.scenario_count)
        if self.settings.max_workers > 1 and len(tasks) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
                calculated = list(executor.map(lambda t: t.execute(market_data), tasks.tasks))
        else:
            calculated = [t.execute(market_data) for t in tasks.tasks]
        return self._collect(tasks, calculated)

    def calculate_single(self, task: CalculationTask, market_data: ScenarioMarketData) -> CalculationResult:
        return task.execute(market_data)

    @staticmethod
    def _collect(tasks: CalculationTasks, calculated: Iterable[CalculationResult]) -> Results:
        row_count, column_count = len(tasks.targets), len(tasks.columns)
        cells: Dict[Tuple[int, int], Result] = dict(tasks.unconfigured)
        for r in calculated:
            cells[(r.row, r.column)] = r.result
        items = [cells[(row, col)] for row in range(row_count) for col in range(column_count)]
        failures = sum(1 for i in items if i.is_failure)
        if failures:
            logger.info("%d of %d cells failed", failures, len(items))
        return Results(row_count, column_count, items, tasks.columns)


__all__ = [
    "Column",
    "CalculationTasks",
    "CalculationRunner",
    "Results",
]
