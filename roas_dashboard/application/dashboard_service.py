"""Application service for the dashboard KPI + chart use case."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Sequence

from roas_dashboard.application.aggregation import summarize, total_revenue_by_source
from roas_dashboard.application.grouping import best_month, group_by_month_source
from roas_dashboard.application.kpi import compare
from roas_dashboard.application.windows import ALL_SOURCES, comparison_window, filter_records, resolve_window
from roas_dashboard.domain.models import (
    DateWindow,
    KPIResult,
    MonthSourceSeries,
    PerformanceRecord,
    PeriodSummary,
    RangeSpec,
)


@dataclass(frozen=True)
class DashboardView:
    window: DateWindow | None
    comparison: DateWindow | None
    source: str
    records: tuple[PerformanceRecord, ...]
    summary: PeriodSummary
    kpis: Dict[str, KPIResult]
    series: MonthSourceSeries
    revenue_by_source: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        best = best_month(self.series)
        return {
            "window": self.window.to_dict() if self.window else None,
            "comparison_window": self.comparison.to_dict() if self.comparison else None,
            "source": self.source,
            "record_count": len(self.records),
            "summary": self.summary.to_dict(),
            "kpis": {metric: result.to_dict() for metric, result in self.kpis.items()},
            "series": self.series.to_dict(),
            "revenue_by_source": dict(self.revenue_by_source),
            "best_month": {"month": best[0], "revenue": best[1]} if best else None,
        }


def build_dashboard(
    records: Sequence[PerformanceRecord],
    spec: RangeSpec,
    today: date,
    source: str = ALL_SOURCES,
    compare_spec: RangeSpec | None = None,
) -> DashboardView:
    """Filter records into the current and comparison windows and derive every view."""
    window = resolve_window(spec, today)
    previous_window = comparison_window(spec, today, explicit=compare_spec)

    current = filter_records(records, window, source)
    previous = filter_records(records, previous_window, source)

    return DashboardView(
        window=window,
        comparison=previous_window,
        source=str(source or ALL_SOURCES).strip().lower(),
        records=tuple(current),
        summary=summarize(current),
        kpis=compare(current, previous),
        series=group_by_month_source(current),
        revenue_by_source=total_revenue_by_source(current),
    )
