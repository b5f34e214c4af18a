"""
Pytest configuration and shared fixtures.
"""
from datetime import date
from typing import Any, Dict, List

import pytest

from roas_dashboard.domain.models import PerformanceRecord


@pytest.fixture
def scenario_rows() -> List[Dict[str, Any]]:
    """Two January rows from different sources, currency-formatted."""
    return [
        {"date": "2024-01-15", "source": "google", "spend": "$100.00", "revenue": "$400", "orders": "4"},
        {"date": "2024-01-20", "source": "meta", "spend": "50", "revenue": "150", "orders": "3"},
    ]


@pytest.fixture
def legacy_rows() -> List[Dict[str, Any]]:
    """Rows in the old wide layout with a bare "Month" column."""
    return [
        {"Month": "January", "Meta Spend": "$4,321.40", "Meta Conv": "9,142.30",
         "Google Spend": "1,824.56", "Google Conv": "6,276.49"},
        {"Month": "February", "Meta Spend": "4115.22", "Meta Conv": "8330.54",
         "Google Spend": "1645.07", "Google Conv": "3993.68"},
        {"Month": "", "Meta Spend": "", "Meta Conv": "", "Google Spend": "", "Google Conv": ""},
    ]


@pytest.fixture
def monthly_records() -> List[PerformanceRecord]:
    """One google and one meta record per month, Jan-May 2024."""
    records = []
    for month in range(1, 6):
        records.append(PerformanceRecord(date=date(2024, month, 10), source="google",
                                         spend=100.0, revenue=300.0 + month, orders=3))
        records.append(PerformanceRecord(date=date(2024, month, 20), source="meta",
                                         spend=50.0, revenue=100.0, orders=2))
    return records


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200):
        self.text = text
        self.status_code = status_code


class FakeSession:
    """Stands in for ``requests``; returns queued responses or raises queued errors."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
