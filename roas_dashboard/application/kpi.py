"""Current vs previous period KPI comparison."""

from __future__ import annotations

from typing import Dict, Iterable

from roas_dashboard.application.aggregation import summarize
from roas_dashboard.application.reporting.metrics import safe_pct_change
from roas_dashboard.domain.models import KPIResult, PerformanceRecord

KPI_METRICS: tuple[str, ...] = ("revenue", "spend", "orders", "roas", "aov", "cac")


def percent_change(curr: float, prev: float) -> float:
    return safe_pct_change(curr, prev)


def compare(
    current: Iterable[PerformanceRecord],
    previous: Iterable[PerformanceRecord],
) -> Dict[str, KPIResult]:
    """Summarize both periods and report each metric with its percent change."""
    curr_summary = summarize(current)
    prev_summary = summarize(previous)
    return {
        metric: KPIResult(
            value=curr_summary.metric(metric),
            change=percent_change(curr_summary.metric(metric), prev_summary.metric(metric)),
        )
        for metric in KPI_METRICS
    }
