"""Shared numeric/formatting utilities for dashboard metrics."""

from __future__ import annotations

import math

import polars as pl


def safe_pct_change(curr: float, prev: float) -> float:
    """Percent change against ``prev``; a zero baseline reports 0."""
    if prev == 0:
        return 0.0
    change = (curr - prev) / prev * 100
    if not math.isfinite(change):
        return 0.0
    return change


def safe_ratio_expr(num: pl.Expr, den: pl.Expr) -> pl.Expr:
    safe_den = pl.when(den > 0).then(den).otherwise(None)
    ratio = num / safe_den
    return pl.when(ratio.is_finite()).then(ratio).otherwise(0.0)


def fmt_money(value: float | None) -> str:
    if value is None:
        return "$0"
    abs_value = abs(value)
    sign = "-" if value < 0 else ""
    if abs_value >= 1_000_000:
        return f"{sign}${abs_value / 1_000_000:.1f}M"
    if abs_value >= 1_000:
        return f"{sign}${abs_value / 1_000:.1f}K"
    return f"{sign}${abs_value:,.2f}"


def fmt_count(value: float | None) -> str:
    if value is None:
        return "0"
    return f"{value:,.0f}"


def fmt_pct(value: float | None, signed: bool = True) -> str:
    if value is None:
        return "N/A"
    if signed:
        return f"{value:+.1f}%"
    return f"{value:.1f}%"


def fmt_roas(value: float | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:.2f}x"


def trend(value: float | None, eps: float = 1e-9) -> str:
    if value is None:
        return "unknown"
    if value > eps:
        return "up"
    if value < -eps:
        return "down"
    return "flat"
