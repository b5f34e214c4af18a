"""Infrastructure adapter for summary export targets."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import polars as pl
from openpyxl import Workbook

from roas_dashboard.domain.models import MonthSourceSeries

logger = logging.getLogger(__name__)


def series_frame(series: MonthSourceSeries) -> pl.DataFrame:
    """Long month x source frame, one row per populated cell."""
    rows: list[dict[str, Any]] = []
    for month, label in zip(series.months, series.labels):
        for source, cell in series.cells.get(month, {}).items():
            rows.append({"month": month, "label": label, "source": source, **cell.to_dict()})
    schema = {
        "month": pl.Utf8,
        "label": pl.Utf8,
        "source": pl.Utf8,
        "revenue": pl.Float64,
        "spend": pl.Float64,
        "orders": pl.Int64,
        "roas": pl.Float64,
    }
    if not rows:
        return pl.DataFrame(schema=schema)
    return pl.DataFrame(rows, schema=schema)


def save_summary_json(path: Path, summary: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8")


def _excel_cell_value(value: Any) -> Any:
    if isinstance(value, float) and (value != value or value in (float("inf"), float("-inf"))):
        return None
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _write_workbook(path: Path, sheets: Dict[str, pl.DataFrame]) -> None:
    workbook = Workbook()
    workbook.remove(workbook.active)

    for sheet_name, frame in sheets.items():
        worksheet = workbook.create_sheet(title=str(sheet_name)[:31])
        worksheet.append(frame.columns)
        for row in frame.iter_rows(named=False):
            worksheet.append([_excel_cell_value(value) for value in row])

    workbook.save(path)


def save_output_workbook(path: Path, sheets: Dict[str, pl.DataFrame]) -> tuple[bool, str]:
    """Write one worksheet per frame; a locked file is reported, not raised."""
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        _write_workbook(path, sheets)
    except PermissionError as exc:
        logger.warning("Could not write workbook %s: %s", path, exc)
        return False, str(exc)
    return True, ""
