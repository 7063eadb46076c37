"""Analytics helpers for the retail planning dashboard."""

from .roster import planning_summary, sku_category_metrics, store_metrics

__all__ = [
    "store_metrics",
    "sku_category_metrics",
    "planning_summary",
]
