"""Utility functions for sona application."""

from decimal import Decimal, ROUND_HALF_UP


def round2(value: float) -> float:
    """Round to two decimals, ties away from zero (40.625 -> 40.63)."""
    return float(Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def format_percent(value: float) -> str:
    """Format a percentage for display, e.g. 90.0 -> '90%', 33.33 -> '33.33%'."""
    return f"{value:g}%"
