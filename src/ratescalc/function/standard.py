"""
Standard pricing rules for the products of the library.
"""

from ..calc.config import PricingRule, PricingRules
from ..product.deposit import TermDepositTrade
from ..product.fra import FraTrade
from ..product.fx import FxSingleTrade
from .deposit import TermDepositFunctionGroups
from .fra import FraFunctionGroups
from .fx import FxSingleFunctionGroups


def standard_pricing_rules() -> PricingRules:
    """Pricing rules using discounting for FRAs, term deposits and single FX trades."""
    return PricingRules.of(
        PricingRule.of(FraTrade, FraFunctionGroups.discounting()),
        PricingRule.of(TermDepositTrade, TermDepositFunctionGroups.discounting()),
        PricingRule.of(FxSingleTrade, FxSingleFunctionGroups.discounting()),
    )


__all__ = ["standard_pricing_rules"]
