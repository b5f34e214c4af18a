"""
Tests for the dashboard use case.
"""
import json
from datetime import date

import pytest

from roas_dashboard.application.dashboard_service import build_dashboard
from roas_dashboard.domain.models import DateWindow, PerformanceRecord, RangeSpec


@pytest.fixture
def two_period_records():
    return [
        PerformanceRecord(date=date(2023, 12, 15), source="google", spend=100.0, revenue=200.0, orders=2),
        PerformanceRecord(date=date(2024, 1, 15), source="google", spend=100.0, revenue=400.0, orders=4),
        PerformanceRecord(date=date(2024, 2, 15), source="meta", spend=50.0, revenue=150.0, orders=3),
    ]


class TestBuildDashboard:
    """Tests for build_dashboard."""

    def test_current_and_comparison_windows(self, two_period_records):
        view = build_dashboard(two_period_records, RangeSpec.parse("2m"), today=date(2024, 2, 20))
        assert view.window == DateWindow(start=date(2024, 1, 1), end=date(2024, 2, 29))
        assert view.comparison == DateWindow(start=date(2023, 11, 1), end=date(2023, 12, 31))
        assert len(view.records) == 2
        assert view.summary.revenue == 550.0
        assert view.kpis["revenue"].change == pytest.approx(175.0)
        assert view.kpis["spend"].change == pytest.approx(50.0)
        assert view.series.months == ("2024-01", "2024-02")
        assert view.revenue_by_source == {"google": 400.0, "meta": 150.0}

    def test_source_filter_applies_to_both_periods(self, two_period_records):
        view = build_dashboard(two_period_records, RangeSpec.parse("2m"), date(2024, 2, 20), source="Google")
        assert view.source == "google"
        assert view.summary.revenue == 400.0
        assert view.kpis["revenue"].change == pytest.approx(100.0)

    def test_custom_without_comparison_has_zero_change(self, two_period_records):
        spec = RangeSpec.parse("custom", "2024-01", "2024-02")
        view = build_dashboard(two_period_records, spec, today=date(2024, 6, 1))
        assert view.comparison is None
        assert view.summary.spend == 150.0
        assert all(result.change == 0 for result in view.kpis.values())

    def test_custom_with_explicit_comparison(self, two_period_records):
        spec = RangeSpec.parse("custom", "2024-01", "2024-01")
        compare_spec = RangeSpec.parse("custom", "2023-12", "2023-12")
        view = build_dashboard(two_period_records, spec, date(2024, 6, 1), compare_spec=compare_spec)
        assert view.kpis["revenue"].change == pytest.approx(100.0)

    def test_incomplete_custom_range_is_empty(self, two_period_records):
        view = build_dashboard(two_period_records, RangeSpec(kind="custom", start_month="2024-01"), date(2024, 6, 1))
        assert view.window is None
        assert view.records == ()
        assert view.summary.revenue == 0.0
        assert view.series.months == ()

    def test_to_dict_is_json_serializable(self, two_period_records):
        view = build_dashboard(two_period_records, RangeSpec.parse("2m"), today=date(2024, 2, 20))
        payload = json.loads(json.dumps(view.to_dict()))
        assert payload["window"] == {"start": "2024-01-01", "end": "2024-02-29"}
        assert payload["best_month"] == {"month": "2024-01", "revenue": 400.0}
        assert payload["series"]["slots"]["google"]["revenue"] == [400.0, 0.0]
        assert payload["kpis"]["roas"]["value"] == pytest.approx(550 / 150)
