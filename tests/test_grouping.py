"""
Tests for month x source grouping.
"""
import random
from datetime import date

import pytest

from roas_dashboard.application.grouping import best_month, group_by_month_source, month_label, records_frame
from roas_dashboard.domain.models import MonthSourceCell, PerformanceRecord
from roas_dashboard.ingestion import parse_rows


class TestMonthLabel:
    """Tests for display labels."""

    def test_short_month_and_year(self):
        assert month_label("2024-01") == "Jan 2024"
        assert month_label("2023-12") == "Dec 2023"


class TestGroupByMonthSource:
    """Tests for the grouper."""

    def test_scenario(self, scenario_rows):
        series = group_by_month_source(parse_rows(scenario_rows))
        assert series.months == ("2024-01",)
        assert series.labels == ("Jan 2024",)
        google = series.cell("2024-01", "google")
        meta = series.cell("2024-01", "meta")
        assert (google.revenue, google.spend, google.orders, google.roas) == (400.0, 100.0, 4, 4.0)
        assert (meta.revenue, meta.spend, meta.orders, meta.roas) == (150.0, 50.0, 3, 3.0)
        total = series.totals["2024-01"]
        assert total.revenue == 550.0
        assert total.spend == 150.0
        assert total.roas == pytest.approx(550 / 150)

    def test_empty_input(self):
        series = group_by_month_source([])
        assert series.months == ()
        assert series.labels == ()
        assert series.slot_values("google", "revenue") == []
        assert best_month(series) is None

    def test_months_ascending_for_any_order(self, monthly_records):
        shuffled = list(monthly_records)
        random.Random(7).shuffle(shuffled)
        series = group_by_month_source(shuffled)
        assert series.months == ("2024-01", "2024-02", "2024-03", "2024-04", "2024-05")
        assert list(series.months) == sorted(set(series.months))

    def test_months_sort_across_years(self):
        records = [
            PerformanceRecord(date=date(2024, 1, 5), source="meta", revenue=1.0),
            PerformanceRecord(date=date(2023, 11, 5), source="meta", revenue=1.0),
            PerformanceRecord(date=date(2023, 12, 5), source="meta", revenue=1.0),
        ]
        series = group_by_month_source(records)
        assert series.months == ("2023-11", "2023-12", "2024-01")
        assert series.labels == ("Nov 2023", "Dec 2023", "Jan 2024")

    def test_cell_roas_is_recomputed_from_totals(self):
        records = [
            PerformanceRecord(date=date(2024, 3, 1), source="google", spend=100.0, revenue=1000.0),
            PerformanceRecord(date=date(2024, 3, 2), source="google", spend=300.0, revenue=300.0),
        ]
        cell = group_by_month_source(records).cell("2024-03", "google")
        assert cell.revenue == 1300.0
        assert cell.spend == 400.0
        assert cell.roas == pytest.approx(3.25)

    def test_oversized_order_count_groups_cleanly(self):
        series = group_by_month_source(parse_rows([
            {"date": "2024-01-01", "source": "google", "orders": "1e20"},
            {"date": "2024-01-02", "source": "google", "orders": "3"},
        ]))
        assert series.cell("2024-01", "google").orders == 3

    def test_overflowing_revenue_is_zeroed(self):
        records = [
            PerformanceRecord(date=date(2024, 3, 1), source="google", spend=1.0, revenue=1e308),
            PerformanceRecord(date=date(2024, 3, 2), source="google", spend=1.0, revenue=1e308),
        ]
        series = group_by_month_source(records)
        for cell in (series.cell("2024-03", "google"), series.totals["2024-03"]):
            assert cell.revenue == 0.0
            assert cell.spend == 2.0
            assert cell.roas == 0.0

    def test_zero_spend_cell_has_zero_roas(self):
        records = [PerformanceRecord(date=date(2024, 3, 1), source="shopify", revenue=80.0, orders=2)]
        cell = group_by_month_source(records).cell("2024-03", "shopify")
        assert cell.roas == 0.0
        assert cell.orders == 2

    def test_unknown_sources_kept_out_of_slots(self):
        records = [
            PerformanceRecord(date=date(2024, 3, 1), source="google", spend=10.0, revenue=20.0),
            PerformanceRecord(date=date(2024, 3, 1), source="tiktok", spend=5.0, revenue=50.0),
        ]
        series = group_by_month_source(records)
        assert series.cell("2024-03", "tiktok").revenue == 50.0
        assert "tiktok" not in series.slots
        assert "tiktok" not in series.to_dict()["slots"]
        assert series.totals["2024-03"].revenue == 70.0

    def test_slot_values_fill_missing_months(self):
        records = [
            PerformanceRecord(date=date(2024, 1, 1), source="google", revenue=10.0),
            PerformanceRecord(date=date(2024, 2, 1), source="meta", revenue=20.0),
        ]
        series = group_by_month_source(records)
        assert series.slot_values("google", "revenue") == [10.0, 0.0]
        assert series.slot_values("meta", "revenue") == [0.0, 20.0]
        assert series.slot_values("shopify", "revenue") == [0.0, 0.0]
        assert series.cell("2024-01", "meta") == MonthSourceCell()

    def test_best_month(self, monthly_records):
        assert best_month(group_by_month_source(monthly_records)) == ("2024-05", 405.0)


class TestRecordsFrame:
    """Tests for the polars export frame."""

    def test_schema_and_rows(self, monthly_records):
        frame = records_frame(monthly_records)
        assert frame.columns == ["date", "source", "spend", "revenue", "orders"]
        assert frame.height == len(monthly_records)
        assert frame.row(0) == (date(2024, 1, 10), "google", 100.0, 301.0, 3)

    def test_empty(self):
        assert records_frame([]).is_empty()
