"""Application layer package."""

from .aggregation import summarize, total_revenue_by_source
from .dashboard_service import DashboardView, build_dashboard
from .grouping import best_month, group_by_month_source, month_label
from .kpi import KPI_METRICS, compare, percent_change
from .windows import comparison_window, filter_records, resolve_window

__all__ = [
    "KPI_METRICS",
    "DashboardView",
    "best_month",
    "build_dashboard",
    "compare",
    "comparison_window",
    "filter_records",
    "group_by_month_source",
    "month_label",
    "percent_change",
    "resolve_window",
    "summarize",
    "total_revenue_by_source",
]
