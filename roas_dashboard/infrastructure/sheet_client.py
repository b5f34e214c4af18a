"""Fetch-and-parse adapter for published Google Sheet CSV exports."""

from __future__ import annotations

import itertools
import logging
import os
from typing import Any, List

import requests

from roas_dashboard.domain.models import PerformanceRecord
from roas_dashboard.exceptions import SheetError, SheetFetchError
from roas_dashboard.ingestion import FALLBACK_YEAR, parse_rows, read_csv_rows

logger = logging.getLogger(__name__)

SHEET_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/e/{sheet_id}/pub?gid={gid}&single=true&output=csv"


def _fetch_timeout() -> float:
    raw = os.getenv("DASHBOARD_FETCH_TIMEOUT", "30")
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid DASHBOARD_FETCH_TIMEOUT: {raw}") from exc
    if timeout <= 0:
        raise ValueError(f"DASHBOARD_FETCH_TIMEOUT must be positive, got {timeout}")
    return timeout


FETCH_TIMEOUT = _fetch_timeout()


def build_sheet_url(sheet_id: str | None, gid: str | int = "0") -> str | None:
    if not sheet_id:
        return None
    return SHEET_URL_TEMPLATE.format(sheet_id=sheet_id, gid=gid or "0")


def fetch_csv_text(url: str, session: Any = None, timeout: float = FETCH_TIMEOUT) -> str:
    """
    Download the CSV export.

    Args:
        url: Published CSV URL
        session: Object with a requests-compatible ``get``; defaults to ``requests``
        timeout: Seconds before the request is abandoned

    Returns:
        Response body as text
    """
    client = session if session is not None else requests
    try:
        response = client.get(url, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        raise SheetFetchError("Failed to fetch data", str(exc)) from exc

    if not 200 <= response.status_code < 300:
        raise SheetFetchError(f"Failed to fetch data: {response.status_code}", status_code=response.status_code)
    return response.text


class SheetLoader:
    """
    Holds the records of the latest completed load.

    Every load takes a ticket; a result is applied only when its ticket is
    newer than the last applied one, so a slow superseded request never
    overwrites fresher data. Failed loads keep the previous records.
    """

    def __init__(
        self,
        url: str,
        session: Any = None,
        timeout: float = FETCH_TIMEOUT,
        fallback_year: int | None = FALLBACK_YEAR,
        split_platforms: bool = False,
    ) -> None:
        self.url = url
        self.session = session
        self.timeout = timeout
        self.fallback_year = fallback_year
        self.split_platforms = split_platforms
        self.records: List[PerformanceRecord] = []
        self.error: SheetError | None = None
        self._tickets = itertools.count(1)
        self._applied_ticket = 0

    def begin(self) -> int:
        return next(self._tickets)

    def complete(self, ticket: int, records: List[PerformanceRecord]) -> bool:
        if ticket <= self._applied_ticket:
            logger.debug("Discarding superseded load %d (applied %d)", ticket, self._applied_ticket)
            return False
        self._applied_ticket = ticket
        self.records = list(records)
        self.error = None
        return True

    def fail(self, ticket: int, error: SheetError) -> None:
        if ticket <= self._applied_ticket:
            return
        logger.warning("Sheet load failed, keeping %d previous record(s): %s", len(self.records), error)
        self.error = error

    def fetch_records(self) -> List[PerformanceRecord]:
        text = fetch_csv_text(self.url, session=self.session, timeout=self.timeout)
        rows = read_csv_rows(text)
        records = parse_rows(rows, fallback_year=self.fallback_year, split_platforms=self.split_platforms)
        logger.info("Loaded %d row(s) into %d record(s) from %s", len(rows), len(records), self.url)
        return records

    def load(self) -> List[PerformanceRecord]:
        """Fetch and parse once; raises on failure after recording the error."""
        ticket = self.begin()
        try:
            records = self.fetch_records()
        except SheetError as exc:
            self.fail(ticket, exc)
            raise
        self.complete(ticket, records)
        return self.records
