"""UI helpers for the Streamlit planning page."""

from .formatters import (
    difference_color,
    format_currency,
    format_percent,
    format_units,
    style_difference,
)

__all__ = [
    "difference_color",
    "format_currency",
    "format_percent",
    "format_units",
    "style_difference",
]
