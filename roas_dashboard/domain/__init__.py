"""Domain layer package."""

from .models import (
    KNOWN_SOURCES,
    UNKNOWN_SOURCE,
    DateWindow,
    KPIResult,
    MonthSourceCell,
    MonthSourceSeries,
    PerformanceRecord,
    PeriodSummary,
    RangeSpec,
)

__all__ = [
    "KNOWN_SOURCES",
    "UNKNOWN_SOURCE",
    "DateWindow",
    "KPIResult",
    "MonthSourceCell",
    "MonthSourceSeries",
    "PerformanceRecord",
    "PeriodSummary",
    "RangeSpec",
]
