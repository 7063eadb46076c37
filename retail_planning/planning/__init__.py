"""Planning layer exports for the retail planning grid."""

from .metrics import compute_metrics, compute_metrics_frame, validate_units
from .time_axis import (
    generate_weeks,
    group_by_month,
    parse_week_id,
    week_column,
    week_range_label,
    weeks_in_iso_year,
)
from .store import PlanningDataStore
from .rows import (
    filter_rows,
    materialize_long_rows,
    materialize_wide_rows,
    wide_column_groups,
)
from .engine import PlanningEngine

__all__ = [
    "compute_metrics",
    "compute_metrics_frame",
    "validate_units",
    "generate_weeks",
    "group_by_month",
    "parse_week_id",
    "week_column",
    "week_range_label",
    "weeks_in_iso_year",
    "PlanningDataStore",
    "filter_rows",
    "materialize_long_rows",
    "materialize_wide_rows",
    "wide_column_groups",
    "PlanningEngine",
]
