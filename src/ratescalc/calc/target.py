"""Calculation targets."""


class CalculationTarget:
    """
    Marker base class for anything a calculation can be performed on.

    Trades subclass this. Pricing rules select functions by the concrete
    target type.
    """


__all__ = ["CalculationTarget"]
