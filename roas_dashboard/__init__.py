"""ROAS dashboard data pipeline package."""

from .application import DashboardView, build_dashboard, compare, filter_records, group_by_month_source, summarize
from .domain import DateWindow, KPIResult, MonthSourceSeries, PerformanceRecord, PeriodSummary, RangeSpec
from .ingestion import parse_currency, parse_record_date, parse_row, parse_rows, read_csv_rows

__all__ = [
    "DashboardView",
    "DateWindow",
    "KPIResult",
    "MonthSourceSeries",
    "PerformanceRecord",
    "PeriodSummary",
    "RangeSpec",
    "build_dashboard",
    "compare",
    "filter_records",
    "group_by_month_source",
    "parse_currency",
    "parse_record_date",
    "parse_row",
    "parse_rows",
    "read_csv_rows",
    "summarize",
]
