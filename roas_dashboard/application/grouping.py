"""Month x source bucketing for chart series."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Sequence, Tuple

import polars as pl

from roas_dashboard.application.reporting.metrics import safe_ratio_expr
from roas_dashboard.domain.models import (
    KNOWN_SOURCES,
    MonthSourceCell,
    MonthSourceSeries,
    PerformanceRecord,
    finite_or_zero,
)

RECORD_SCHEMA: Dict[str, Any] = {
    "date": pl.Date,
    "source": pl.Utf8,
    "spend": pl.Float64,
    "revenue": pl.Float64,
    "orders": pl.Int64,
}
CELL_METRICS: list[str] = ["revenue", "spend", "orders"]


def records_frame(records: Iterable[PerformanceRecord]) -> pl.DataFrame:
    rows = list(records)
    return pl.DataFrame(
        {
            "date": [record.date for record in rows],
            "source": [record.source for record in rows],
            "spend": [record.spend for record in rows],
            "revenue": [record.revenue for record in rows],
            "orders": [record.orders for record in rows],
        },
        schema=RECORD_SCHEMA,
    )


def month_label(month_key: str) -> str:
    year, month = month_key.split("-")
    return date(int(year), int(month), 1).strftime("%b %Y")


def _sum_aggregations() -> list[pl.Expr]:
    return [pl.col(metric).sum().alias(metric) for metric in CELL_METRICS]


def _to_cell(row: Dict[str, object]) -> MonthSourceCell:
    return MonthSourceCell(
        revenue=finite_or_zero(float(row["revenue"] or 0.0)),
        spend=finite_or_zero(float(row["spend"] or 0.0)),
        orders=int(row["orders"] or 0),
        roas=finite_or_zero(float(row["roas"] or 0.0)),
    )


def group_by_month_source(
    records: Iterable[PerformanceRecord],
    known_sources: Sequence[str] = KNOWN_SOURCES,
) -> MonthSourceSeries:
    """
    Bucket records by calendar month and source.

    Every source tag gets its own cell; ``known_sources`` only fixes the
    slots exposed by :meth:`MonthSourceSeries.slot_values`. ROAS is
    recomputed from each cell's totals, never averaged per record.
    """
    frame = records_frame(records)
    slots = tuple(known_sources)
    if frame.is_empty():
        return MonthSourceSeries(slots=slots)

    keyed = frame.with_columns(pl.col("date").dt.strftime("%Y-%m").alias("month_key"))
    roas = safe_ratio_expr(pl.col("revenue"), pl.col("spend")).alias("roas")

    cell_df = (
        keyed.group_by(["month_key", "source"])
        .agg(_sum_aggregations())
        .with_columns(roas)
        .sort(["month_key", "source"])
    )
    total_df = keyed.group_by("month_key").agg(_sum_aggregations()).with_columns(roas).sort("month_key")

    cells: Dict[str, Dict[str, MonthSourceCell]] = {}
    for row in cell_df.iter_rows(named=True):
        cells.setdefault(row["month_key"], {})[row["source"]] = _to_cell(row)

    totals: Dict[str, MonthSourceCell] = {}
    for row in total_df.iter_rows(named=True):
        totals[row["month_key"]] = _to_cell(row)

    months = tuple(totals.keys())
    return MonthSourceSeries(
        months=months,
        labels=tuple(month_label(month) for month in months),
        cells=cells,
        totals=totals,
        slots=slots,
    )


def best_month(series: MonthSourceSeries) -> Tuple[str, float] | None:
    """Month with the highest cross-source revenue; earliest wins ties."""
    best: Tuple[str, float] | None = None
    for month in series.months:
        revenue = series.totals[month].revenue
        if best is None or revenue > best[1]:
            best = (month, revenue)
    return best
