"""Period totals and derived ratios over performance records."""

from __future__ import annotations

from typing import Dict, Iterable

from roas_dashboard.domain.models import PerformanceRecord, PeriodSummary, finite_or_zero


def summarize(records: Iterable[PerformanceRecord]) -> PeriodSummary:
    """Sum revenue/spend/orders; ROAS, AOV and CAC come from the combined totals."""
    revenue = 0.0
    spend = 0.0
    orders = 0
    for record in records:
        revenue += record.revenue
        spend += record.spend
        orders += record.orders
    return PeriodSummary.from_totals(revenue=revenue, spend=spend, orders=orders)


def total_revenue_by_source(records: Iterable[PerformanceRecord]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for record in records:
        totals[record.source] = totals.get(record.source, 0.0) + record.revenue
    return {source: finite_or_zero(revenue) for source, revenue in totals.items()}
