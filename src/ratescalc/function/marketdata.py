"""
Market data function building calibrated curves for the calculation engine.

CurveGroupMarketDataFunction calibrates a curve group from the quotes in
scenario market data and returns the curves as market data, keyed the way
calculation functions ask for them:

- CurveGroupKey(group name): the CurveGroup
- DiscountCurveKey(currency): each discount curve of the group
- IborIndexCurveKey(index): each forward curve of the group

Quotes are read under ObservableId(QuoteKey, feed). When every quote is a
single value the group is calibrated once and shared by all scenarios;
otherwise it is calibrated once per scenario.
"""

import logging
from typing import Dict, List, Optional, Union

from ..calc.requirements import MarketDataRequirements
from ..market.curve.group import CurveGroup
from ..market.data import (
    ImmutableMarketData,
    ImmutableScenarioMarketData,
    MarketData,
    MarketDataBox,
    ScenarioMarketData,
)
from ..market.definition import CurveGroupDefinition
from ..market.keys import CurveGroupKey, DiscountCurveKey, IborIndexCurveKey, MarketDataFeed, ObservableId, QuoteKey
from ..pricer.calibration.calibrator import CurveCalibrator

logger = logging.getLogger(__name__)


class CurveGroupMarketDataFunction:
    """
    Builds calibrated curve groups as market data.

    Args:
        calibrator: Calibrator used for every scenario, defaults to par spread calibration
    """

    def __init__(self, calibrator: Optional[CurveCalibrator] = None):
        self.calibrator = calibrator or CurveCalibrator()

    def requirements(
        self,
        group: CurveGroupDefinition,
        feed: MarketDataFeed = MarketDataFeed.NONE,
    ) -> MarketDataRequirements:
        """The quotes of every node of the group, as observable identifiers."""
        return MarketDataRequirements(observables=frozenset(ObservableId(k, feed) for k in group.requirements()))

    def build_curve_group(
        self,
        group: CurveGroupDefinition,
        market_data: Union[MarketData, ScenarioMarketData],
        feed: MarketDataFeed = MarketDataFeed.NONE,
    ) -> MarketDataBox:
        """
        Calibrate the group in every scenario of the market data.

        Raises:
            MarketDataNotFoundError: If a quote is missing
            CalibrationError: If calibration fails in any scenario
        """
        boxes = self._quote_boxes(group, market_data, feed)
        if all(box.is_single_value for box in boxes.values()):
            quotes = {key: box.single_value for key, box in boxes.items()}
            return MarketDataBox.of_single_value(self._calibrate(group, market_data.valuation_date, quotes))

        scenario_count = market_data.scenario_count
        logger.info("Calibrating curve group '%s' in %d scenarios", group.name, scenario_count)
        groups = []
        for i in range(scenario_count):
            quotes = {key: box.get_value(i) for key, box in boxes.items()}
            groups.append(self._calibrate(group, market_data.valuation_date, quotes))
        return MarketDataBox.of_scenario_values(groups)

    def build(
        self,
        group: CurveGroupDefinition,
        market_data: Union[MarketData, ScenarioMarketData],
        feed: MarketDataFeed = MarketDataFeed.NONE,
    ) -> ImmutableScenarioMarketData:
        """
        Calibrated curves of the group as scenario market data.

        The result can be combined with the quote market data and passed to
        the calculation runner.
        """
        box = self.build_curve_group(group, market_data, feed)
        builder = ImmutableScenarioMarketData.builder(market_data.valuation_date)
        builder.add_box(CurveGroupKey(group.name), box)
        first: CurveGroup = box.get_value(0)
        for currency in first.discount_curves:
            builder.add_box(DiscountCurveKey(currency), box.map(lambda g, c=currency: g.discount_curves[c]))
        for index in first.forward_curves:
            builder.add_box(IborIndexCurveKey(index), box.map(lambda g, i=index: g.forward_curves[i]))
        return builder.build()

    def _quote_boxes(self, group, market_data, feed) -> Dict[QuoteKey, MarketDataBox]:
        keys: List[QuoteKey] = sorted(group.requirements(), key=lambda k: k.name)
        if isinstance(market_data, ScenarioMarketData):
            return {k: market_data.get_value(ObservableId(k, feed)) for k in keys}
        return {k: MarketDataBox.of_single_value(market_data.get_value(ObservableId(k, feed))) for k in keys}

    def _calibrate(self, group, valuation_date, quotes) -> CurveGroup:
        provider = self.calibrator.calibrate(group, ImmutableMarketData.of(valuation_date, quotes))
        return CurveGroup.of_provider(group, provider)


__all__ = ["CurveGroupMarketDataFunction"]
