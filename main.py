"""ROAS dashboard entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Sequence

from roas_dashboard.application.dashboard_service import build_dashboard
from roas_dashboard.application.grouping import records_frame
from roas_dashboard.application.reporting.rendering import kpi_lines, series_lines
from roas_dashboard.domain.models import PerformanceRecord, RangeSpec
from roas_dashboard.exceptions import ConfigurationError, SheetError
from roas_dashboard.infrastructure.client_config import ClientRegistry, resolve_sheet
from roas_dashboard.infrastructure.report_exporter import save_output_workbook, save_summary_json, series_frame
from roas_dashboard.infrastructure.sheet_client import SheetLoader
from roas_dashboard.ingestion import parse_rows, read_csv_rows

logger = logging.getLogger(__name__)

SAMPLE_ORIGIN = "sample data"
# Shown when no sheet is selected.
SAMPLE_ROWS: List[Dict[str, Any]] = [
    {"Month": "January", "Meta Spend": 4321.40, "Meta Conv": 9142.30, "Google Spend": 1824.56, "Google Conv": 6276.49},
    {"Month": "February", "Meta Spend": 4115.22, "Meta Conv": 8330.54, "Google Spend": 1645.07, "Google Conv": 3993.68},
    {"Month": "March", "Meta Spend": 5584.94, "Meta Conv": 9612.75, "Google Spend": 1276.88, "Google Conv": 4426.43},
    {"Month": "April", "Meta Spend": 4498.37, "Meta Conv": 11118.25, "Google Spend": 2494.47, "Google Conv": 10119.55},
    {"Month": "May", "Meta Spend": 3709.17, "Meta Conv": 10531.50, "Google Spend": 2428.51, "Google Conv": 6500.10},
    {"Month": "June", "Meta Spend": 3606.99, "Meta Conv": 12979.41, "Google Spend": 2162.32, "Google Conv": 6872.00},
    {"Month": "July", "Meta Spend": 3704.67, "Meta Conv": 17564.88, "Google Spend": 2390.93, "Google Conv": 7625.60},
    {"Month": "August", "Meta Spend": 5755.25, "Meta Conv": 17230.33, "Google Spend": 2410.61, "Google Conv": 10229.51},
    {"Month": "September", "Meta Spend": 4481.91, "Meta Conv": 13483.06, "Google Spend": 3060.60, "Google Conv": 8556.69},
    {"Month": "October", "Meta Spend": 3698.09, "Meta Conv": 14089.72, "Google Spend": 2821.66, "Google Conv": 7558.11},
    {"Month": "November", "Meta Spend": 4251.89, "Meta Conv": 22860.90, "Google Spend": 3707.63, "Google Conv": 17394.08},
    {"Month": "December", "Meta Spend": 4165.59, "Meta Conv": 14419.60, "Google Spend": 2559.59, "Google Conv": 5576.10},
]


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build ROAS dashboard KPIs and monthly series from a sheet export.")
    parser.add_argument("--client", help="Client slug looked up in --clients")
    parser.add_argument("--clients", type=Path, help="JSON file mapping client slugs to sheets")
    parser.add_argument("--sheet", help="Published sheet id")
    parser.add_argument("--gid", default="0", help="Sheet tab id")
    parser.add_argument("--csv", type=Path, help="Local CSV export instead of a published sheet")
    parser.add_argument("--range", dest="range_token", default="6m", help="3m, 6m, 12m, ytd or custom")
    parser.add_argument("--start", help="Custom range start month (YYYY-MM)")
    parser.add_argument("--end", help="Custom range end month (YYYY-MM)")
    parser.add_argument("--compare-start", help="Comparison start month for custom ranges (YYYY-MM)")
    parser.add_argument("--compare-end", help="Comparison end month for custom ranges (YYYY-MM)")
    parser.add_argument("--source", default="all", help="Source tag to keep, or 'all'")
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="Anchor date (YYYY-MM-DD)")
    parser.add_argument("--split-platforms", action="store_true", help="Split Meta/Google columns into sources")
    parser.add_argument("--output-dir", type=Path, default=Path("output"))
    return parser.parse_args(argv)


def _load_records(args: argparse.Namespace) -> tuple[List[PerformanceRecord], str]:
    if args.csv is not None:
        text = args.csv.read_text(encoding="utf-8")
        records = parse_rows(read_csv_rows(text), split_platforms=args.split_platforms)
        return records, str(args.csv)

    registry = ClientRegistry.from_json_file(args.clients) if args.clients else ClientRegistry()
    locator = resolve_sheet(registry, client=args.client, sheet=args.sheet, gid=args.gid)
    if locator.url is None:
        return parse_rows(SAMPLE_ROWS, split_platforms=True), SAMPLE_ORIGIN

    loader = SheetLoader(locator.url, split_platforms=args.split_platforms)
    return loader.load(), locator.client_name or locator.url


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = _parse_args(argv)

    try:
        spec = RangeSpec.parse(args.range_token, start_month=args.start, end_month=args.end)
        compare_spec = None
        if args.compare_start and args.compare_end:
            compare_spec = RangeSpec(kind="custom", start_month=args.compare_start, end_month=args.compare_end)
        records, origin = _load_records(args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except SheetError as exc:
        print(f"Could not load data (retry later): {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Could not read CSV file: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Invalid arguments: {exc}", file=sys.stderr)
        return 2

    logger.info("Loaded %d record(s) from %s", len(records), origin)
    today = args.today or date.today()
    if args.today is None and origin == SAMPLE_ORIGIN and records:
        today = max(record.date for record in records)
    view = build_dashboard(records, spec, today=today, source=args.source, compare_spec=compare_spec)
    summary = view.to_dict()
    summary["origin"] = origin

    output_json_path = args.output_dir / "summary.json"
    output_excel_path = args.output_dir / "summary.xlsx"
    save_summary_json(output_json_path, summary)
    excel_saved, excel_error_message = save_output_workbook(
        output_excel_path,
        {
            "records": records_frame(view.records),
            "monthly": series_frame(view.series),
        },
    )

    for line in kpi_lines(view.kpis):
        print(line)
    for line in series_lines(view.series):
        print(line)
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    print(f"Saved JSON: {output_json_path}")
    if excel_saved:
        print(f"Saved Excel: {output_excel_path}")
    else:
        print(f"Excel save skipped (file may be open/locked): {excel_error_message}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
