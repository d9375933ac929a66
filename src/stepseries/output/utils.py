"""Shared helpers for rendering series values."""

from collections.abc import Iterable

VALUE_SEPARATOR = ","


def format_value(value: float) -> str:
    """Format a sample with two decimal digits."""
    return f"{value:.2f}"


def format_values(values: Iterable[float]) -> str:
    """Join formatted samples with commas and no trailing separator."""
    return VALUE_SEPARATOR.join(format_value(float(v)) for v in values)
