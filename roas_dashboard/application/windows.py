"""Date window resolution and record filtering."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List

from dateutil.relativedelta import relativedelta

from roas_dashboard.domain.models import DateWindow, PerformanceRecord, RangeSpec, parse_month_token

ALL_SOURCES = "all"


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day + relativedelta(day=31)


def resolve_window(spec: RangeSpec, today: date) -> DateWindow | None:
    """
    Resolve a ``RangeSpec`` against ``today``.

    Relative and year-to-date windows end on the last day of the current
    month. Custom windows need both bounds; otherwise the window is
    unresolved and ``None`` is returned.
    """
    if spec.kind == "relative":
        start = month_start(today) - relativedelta(months=spec.months - 1)
        return DateWindow(start=start, end=month_end(today))

    if spec.kind == "ytd":
        return DateWindow(start=date(today.year, 1, 1), end=month_end(today))

    start_parts = parse_month_token(spec.start_month)
    end_parts = parse_month_token(spec.end_month)
    if start_parts is None or end_parts is None:
        return None
    start = date(start_parts[0], start_parts[1], 1)
    end = month_end(date(end_parts[0], end_parts[1], 1))
    if end < start:
        return None
    return DateWindow(start=start, end=end)


def previous_window(window: DateWindow) -> DateWindow:
    """The block of the same month length ending the day before ``window`` starts."""
    start = month_start(window.start) - relativedelta(months=window.month_count)
    return DateWindow(start=start, end=window.start - timedelta(days=1))


def comparison_window(
    spec: RangeSpec,
    today: date,
    explicit: RangeSpec | None = None,
) -> DateWindow | None:
    if spec.kind == "custom":
        if explicit is None:
            return None
        return resolve_window(explicit, today)

    current = resolve_window(spec, today)
    if current is None:
        return None
    return previous_window(current)


def filter_records(
    records: Iterable[PerformanceRecord],
    window: DateWindow | None,
    source: str | None = ALL_SOURCES,
) -> List[PerformanceRecord]:
    if window is None:
        return []
    tag = str(source or ALL_SOURCES).strip().lower()
    return [
        record
        for record in records
        if window.contains(record.date) and (tag == ALL_SOURCES or record.source == tag)
    ]
