"""Domain models for dashboard records, windows and aggregates."""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, Mapping, Tuple

UNKNOWN_SOURCE = "unknown"
KNOWN_SOURCES: Tuple[str, ...] = ("google", "meta", "shopify")
RANGE_KINDS: Tuple[str, ...] = ("relative", "ytd", "custom")

_MONTH_TOKEN = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")
_RELATIVE_TOKEN = re.compile(r"^\s*(\d+)\s*m\s*$", re.IGNORECASE)


def finite_or_zero(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return value


def _zero_guard(num: float, den: float) -> float:
    if den <= 0:
        return 0.0
    return finite_or_zero(num / den)


def normalize_source(value: Any) -> str:
    text = str(value or "").strip().lower()
    return text or UNKNOWN_SOURCE


@dataclass(frozen=True)
class PerformanceRecord:
    """One normalized row of sheet data."""

    date: date
    source: str = UNKNOWN_SOURCE
    spend: float = 0.0
    revenue: float = 0.0
    orders: int = 0

    @property
    def roas(self) -> float:
        return _zero_guard(self.revenue, self.spend)

    @property
    def aov(self) -> float:
        return _zero_guard(self.revenue, self.orders)

    @property
    def cac(self) -> float:
        return _zero_guard(self.spend, self.orders)

    @property
    def month_key(self) -> str:
        return f"{self.date.year:04d}-{self.date.month:02d}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "source": self.source,
            "spend": self.spend,
            "revenue": self.revenue,
            "orders": self.orders,
        }


@dataclass(frozen=True)
class PeriodSummary:
    revenue: float = 0.0
    spend: float = 0.0
    orders: int = 0
    roas: float = 0.0
    aov: float = 0.0
    cac: float = 0.0

    @classmethod
    def from_totals(cls, revenue: float, spend: float, orders: int) -> "PeriodSummary":
        """Build a summary whose ratios are recomputed from the totals."""
        revenue = finite_or_zero(revenue)
        spend = finite_or_zero(spend)
        return cls(
            revenue=revenue,
            spend=spend,
            orders=orders,
            roas=_zero_guard(revenue, spend),
            aov=_zero_guard(revenue, orders),
            cac=_zero_guard(spend, orders),
        )

    def metric(self, name: str) -> float:
        if name not in self.__dataclass_fields__:
            raise KeyError(f"Unknown metric: {name}")
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KPIResult:
    value: float
    change: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthSourceCell:
    revenue: float = 0.0
    spend: float = 0.0
    orders: int = 0
    roas: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthSourceSeries:
    """Chart-ready month x source buckets, months in ascending order."""

    months: Tuple[str, ...] = ()
    labels: Tuple[str, ...] = ()
    cells: Mapping[str, Mapping[str, MonthSourceCell]] = field(default_factory=dict)
    totals: Mapping[str, MonthSourceCell] = field(default_factory=dict)
    slots: Tuple[str, ...] = KNOWN_SOURCES

    def cell(self, month: str, source: str) -> MonthSourceCell:
        return self.cells.get(month, {}).get(source, MonthSourceCell())

    def slot_values(self, source: str, metric: str) -> list[float]:
        """One value per month for ``source``; months without data give 0."""
        return [getattr(self.cell(month, source), metric) for month in self.months]

    def total_values(self, metric: str) -> list[float]:
        return [getattr(self.totals.get(month, MonthSourceCell()), metric) for month in self.months]

    def to_dict(self) -> Dict[str, Any]:
        metrics = ("revenue", "spend", "orders", "roas")
        return {
            "months": list(self.months),
            "labels": list(self.labels),
            "slots": {
                source: {metric: self.slot_values(source, metric) for metric in metrics}
                for source in self.slots
            },
            "totals": {metric: self.total_values(metric) for metric in metrics},
        }


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar-day window."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def month_count(self) -> int:
        return (self.end.year - self.start.year) * 12 + (self.end.month - self.start.month) + 1

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def parse_month_token(value: str | None) -> tuple[int, int] | None:
    """Parse ``"YYYY-MM"`` into ``(year, month)``; ``None`` when absent or invalid."""
    if not value:
        return None
    match = _MONTH_TOKEN.match(str(value))
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return year, month


@dataclass(frozen=True)
class RangeSpec:
    kind: str = "relative"
    months: int = 6
    start_month: str | None = None
    end_month: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in RANGE_KINDS:
            raise ValueError(f"Unsupported range kind: {self.kind}")
        if self.kind == "relative" and self.months < 1:
            raise ValueError(f"Relative range needs at least one month, got {self.months}")

    @classmethod
    def parse(cls, token: str, start_month: str | None = None, end_month: str | None = None) -> "RangeSpec":
        """Parse a range token such as ``"6m"``, ``"ytd"`` or ``"custom"``."""
        text = str(token or "").strip().lower()
        if text == "ytd":
            return cls(kind="ytd")
        if text == "custom":
            return cls(kind="custom", start_month=start_month, end_month=end_month)
        match = _RELATIVE_TOKEN.match(text)
        if match:
            return cls(kind="relative", months=int(match.group(1)))
        raise ValueError(f"Invalid range token: {token!r}")
