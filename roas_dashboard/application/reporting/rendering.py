"""Text rendering helpers for KPI summaries."""

from __future__ import annotations

from typing import List, Mapping

from roas_dashboard.application.reporting.metrics import fmt_count, fmt_money, fmt_pct, fmt_roas, trend
from roas_dashboard.domain.models import KPIResult, MonthSourceSeries

KPI_LABELS: dict[str, str] = {
    "revenue": "Revenue",
    "spend": "Spend",
    "orders": "Orders",
    "roas": "ROAS",
    "aov": "AOV",
    "cac": "CAC",
}


def format_kpi_value(metric: str, value: float) -> str:
    if metric == "roas":
        return fmt_roas(value)
    if metric == "orders":
        return fmt_count(value)
    return fmt_money(value)


def kpi_lines(kpis: Mapping[str, KPIResult]) -> List[str]:
    lines: List[str] = []
    for metric, label in KPI_LABELS.items():
        result = kpis.get(metric)
        if result is None:
            continue
        lines.append(
            f"{label}: {format_kpi_value(metric, result.value)} "
            f"({fmt_pct(result.change)} vs prior, {trend(result.change)})"
        )
    return lines


def series_lines(series: MonthSourceSeries) -> List[str]:
    if not series.months:
        return ["No monthly data in range."]

    lines: List[str] = []
    for month, label in zip(series.months, series.labels):
        total = series.totals[month]
        parts = [
            f"{source} {fmt_money(series.cell(month, source).revenue)}"
            for source in series.slots
            if source in series.cells.get(month, {})
        ]
        breakdown = ", ".join(parts) if parts else "no known sources"
        lines.append(f"{label}: revenue {fmt_money(total.revenue)}, ROAS {fmt_roas(total.roas)} ({breakdown})")
    return lines
