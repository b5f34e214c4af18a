"""Infrastructure layer package."""

from .client_config import ClientConfig, ClientRegistry, SheetLocator, resolve_sheet
from .report_exporter import save_output_workbook, save_summary_json, series_frame
from .sheet_client import SheetLoader, build_sheet_url, fetch_csv_text

__all__ = [
    "ClientConfig",
    "ClientRegistry",
    "SheetLoader",
    "SheetLocator",
    "build_sheet_url",
    "fetch_csv_text",
    "resolve_sheet",
    "save_output_workbook",
    "save_summary_json",
    "series_frame",
]
