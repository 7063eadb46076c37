"""Core settings for the retail planning grid."""

from .config import CONFIG, DashboardConfig, PlanningConfig, UIConfig

__all__ = ["CONFIG", "DashboardConfig", "PlanningConfig", "UIConfig"]
