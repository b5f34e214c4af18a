"""Sheet row normalization into canonical performance records."""

from __future__ import annotations

import logging
import math
import os
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence

import polars as pl
from polars.exceptions import PolarsError

from roas_dashboard.domain.models import PerformanceRecord, normalize_source
from roas_dashboard.exceptions import SheetParseError

logger = logging.getLogger(__name__)

DATE_ALIASES: tuple[str, ...] = ("date", "Date", "DATE", "day", "Day", "month", "Month", "MONTH")
SOURCE_ALIASES: tuple[str, ...] = ("source", "Source", "platform", "Platform", "channel", "Channel")
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "spend": ("spend", "Spend", "Total Spend", "totalSpend", "Ad Spend", "adSpend"),
    "revenue": (
        "revenue",
        "Revenue",
        "Total Revenue",
        "totalRevenue",
        "Conversion Value",
        "conversionValue",
        "Sales",
        "sales",
    ),
    "orders": ("orders", "Orders", "Purchases", "purchases", "Conversions", "conversions"),
}
PLATFORM_COLUMNS: dict[str, dict[str, tuple[str, ...]]] = {
    "meta": {
        "spend": ("Meta Spend", "metaSpend"),
        "revenue": ("Meta Conversion Value", "Meta Conv", "metaConv"),
        "orders": ("Meta Orders", "metaOrders"),
    },
    "google": {
        "spend": ("Google Spend", "googleSpend"),
        "revenue": ("Google Conversion Value", "Google Conv", "googleConv"),
        "orders": ("Google Orders", "googleOrders"),
    },
}
NUMERIC_FIELDS: tuple[str, ...] = ("spend", "revenue", "orders")
STRIP_PATTERN = re.compile(r"[\s,$€£¥₩]")
MAX_COUNT = 2**63 - 1
ISO_DATE_FORMATS: tuple[str, ...] = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%Y-%m", "%Y/%m", "%B %Y", "%b %Y")
BARE_MONTH_FORMATS: tuple[str, ...] = ("%B %d %Y", "%b %d %Y")
ISO_DAY_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def _fallback_year() -> int | None:
    raw = os.getenv("DASHBOARD_FALLBACK_YEAR", "2025").strip()
    if raw.lower() in {"", "none", "off"}:
        return None
    try:
        year = int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid DASHBOARD_FALLBACK_YEAR: {raw}") from exc
    if year < 1 or year > 9999:
        raise ValueError(f"DASHBOARD_FALLBACK_YEAR must be in [1, 9999], got {year}")
    return year


FALLBACK_YEAR = _fallback_year()


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _first_present(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    for key in aliases:
        value = row.get(key)
        if not _is_empty(value):
            return value
    return None


def parse_currency(value: Any) -> float:
    """Parse "$4,321.40"-style values; anything unparseable is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    else:
        cleaned = STRIP_PATTERN.sub("", str(value))
        if not cleaned:
            return 0.0
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_count(value: Any) -> int:
    """Whole, non-negative order counts; values past the int64 range are 0."""
    number = parse_currency(value)
    if number <= 0 or number > MAX_COUNT:
        return 0
    return int(number)


def _parse_iso(text: str) -> date | None:
    candidates = [text]
    if len(text) > 10 and ISO_DAY_PREFIX.match(text):
        candidates.append(text[:10])
    for candidate in candidates:
        try:
            return datetime.fromisoformat(candidate).date()
        except ValueError:
            continue
    for fmt in ISO_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_record_date(value: Any, fallback_year: int | None = FALLBACK_YEAR) -> date | None:
    """
    Parse a sheet date cell.

    Bare month names ("March") are read as day 1 of ``fallback_year``;
    pass ``fallback_year=None`` to reject them instead.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if _is_empty(value) or isinstance(value, (bool, int, float)):
        return None

    text = str(value).strip()
    parsed = _parse_iso(text)
    if parsed is not None or fallback_year is None:
        return parsed

    for fmt in BARE_MONTH_FORMATS:
        try:
            return datetime.strptime(f"{text} 1 {fallback_year}", fmt).date()
        except ValueError:
            continue
    return None


def resolve_amount(row: Mapping[str, Any], field: str) -> float:
    """First generic alias wins; otherwise platform columns are summed."""
    generic = _first_present(row, FIELD_ALIASES[field])
    if generic is not None:
        return parse_currency(generic)

    total = 0.0
    for columns in PLATFORM_COLUMNS.values():
        component = _first_present(row, columns[field])
        if component is not None:
            total += parse_currency(component)
    return total


def parse_row(row: Mapping[str, Any], fallback_year: int | None = FALLBACK_YEAR) -> PerformanceRecord | None:
    record_date = parse_record_date(_first_present(row, DATE_ALIASES), fallback_year=fallback_year)
    if record_date is None:
        return None

    return PerformanceRecord(
        date=record_date,
        source=normalize_source(_first_present(row, SOURCE_ALIASES)),
        spend=max(0.0, resolve_amount(row, "spend")),
        revenue=max(0.0, resolve_amount(row, "revenue")),
        orders=parse_count(resolve_amount(row, "orders")),
    )


def _has_generic_shape(row: Mapping[str, Any]) -> bool:
    if _first_present(row, SOURCE_ALIASES) is not None:
        return True
    return any(_first_present(row, FIELD_ALIASES[field]) is not None for field in NUMERIC_FIELDS)


def split_platform_rows(row: Mapping[str, Any]) -> Iterator[Dict[str, Any]]:
    """Split a legacy wide row (Meta/Google columns) into one row per platform."""
    if _has_generic_shape(row):
        yield dict(row)
        return

    date_value = _first_present(row, DATE_ALIASES)
    emitted = False
    for platform, columns in PLATFORM_COLUMNS.items():
        values = {field: _first_present(row, columns[field]) for field in NUMERIC_FIELDS}
        if all(value is None for value in values.values()):
            continue
        emitted = True
        yield {"date": date_value, "source": platform, **values}

    if not emitted:
        yield dict(row)


def parse_rows(
    rows: Iterable[Mapping[str, Any]],
    fallback_year: int | None = FALLBACK_YEAR,
    split_platforms: bool = False,
) -> List[PerformanceRecord]:
    """Parse rows in order, silently dropping rows without a usable date."""
    records: List[PerformanceRecord] = []
    dropped = 0
    for row in rows:
        candidates = split_platform_rows(row) if split_platforms else (row,)
        for candidate in candidates:
            record = parse_row(candidate, fallback_year=fallback_year)
            if record is None:
                dropped += 1
                continue
            records.append(record)
    if dropped:
        logger.debug("Dropped %d row(s) without a parseable date", dropped)
    return records


def read_csv_rows(text: str) -> List[Dict[str, Any]]:
    """Parse a CSV document into header-keyed rows; every cell stays a string."""
    if not text or not text.strip():
        return []
    try:
        frame = pl.read_csv(
            text.encode("utf-8"),
            infer_schema_length=0,
            raise_if_empty=False,
        )
    except PolarsError as exc:
        raise SheetParseError("Failed to parse CSV data", str(exc)) from exc

    return [row for row in frame.to_dicts() if not all(_is_empty(value) for value in row.values())]
