"""Text rendering helpers for series diagnostics."""

from .utils import VALUE_SEPARATOR, format_value, format_values

__all__ = [
    "VALUE_SEPARATOR",
    "format_value",
    "format_values",
]
