from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase

from weekly_records.models import WeeklyRecord
from weekly_records.services.dashboard import (
    HistoryStatus,
    build_chart_series,
    build_dashboard,
    filter_records,
)

from .factories import create_completed_week, create_purchase


class DashboardSnapshotTests(TestCase):
    def setUp(self) -> None:
        self.older = create_completed_week(date(2025, 9, 27), cash_collected=Decimal("9000"))
        self.latest = create_completed_week(date(2025, 10, 4))
        self.pending = create_purchase(date(2025, 10, 11))

    def test_totals_only_include_completed_weeks(self) -> None:
        snapshot = build_dashboard(WeeklyRecord.objects.all())

        self.assertEqual(snapshot.record_count, 3)
        self.assertEqual(snapshot.totals.completed_weeks, 2)
        self.assertEqual(snapshot.totals.revenue, Decimal("23000.00"))
        self.assertEqual(snapshot.totals.net_profit, Decimal("-2150.00") + Decimal("850.00"))
        self.assertEqual(snapshot.totals.meat_sold, Decimal("230.000"))
        self.assertEqual(snapshot.pending_records, [self.pending])

    def test_latest_completed_week_is_displayed_by_default(self) -> None:
        snapshot = build_dashboard(WeeklyRecord.objects.all())

        self.assertEqual(snapshot.display_record, self.latest)
        self.assertEqual(snapshot.completed_records, [self.latest, self.older])

    def test_selected_week_is_displayed(self) -> None:
        snapshot = build_dashboard(WeeklyRecord.objects.all(), self.older.pk)

        self.assertEqual(snapshot.display_record, self.older)

    def test_pending_week_cannot_be_selected(self) -> None:
        snapshot = build_dashboard(WeeklyRecord.objects.all(), self.pending.pk)

        self.assertEqual(snapshot.display_record, self.latest)

    def test_empty_dashboard(self) -> None:
        snapshot = build_dashboard([])

        self.assertIsNone(snapshot.display_record)
        self.assertEqual(snapshot.totals.completed_weeks, 0)
        self.assertEqual(snapshot.chart, [])

    def test_chart_series_is_chronological_and_limited(self) -> None:
        points = build_chart_series(WeeklyRecord.objects.all(), limit=1)
        full = build_chart_series(WeeklyRecord.objects.all())

        self.assertEqual([point.week_date for point in points], [date(2025, 10, 4)])
        self.assertEqual([point.label for point in full], ["27 Sep", "4 Oct"])
        self.assertEqual(full[1].cost, Decimal("12150.00"))


class HistoryFilterTests(TestCase):
    def setUp(self) -> None:
        self.loss = create_completed_week(date(2025, 9, 27))
        self.profit = create_completed_week(date(2025, 10, 4), cash_collected=Decimal("9000"))
        self.pending = create_purchase(date(2025, 10, 11))

    def test_status_filters(self) -> None:
        completed = filter_records(WeeklyRecord.objects.all(), status=HistoryStatus.COMPLETED)
        pending = filter_records(WeeklyRecord.objects.all(), status=HistoryStatus.PENDING)

        self.assertEqual(list(completed), [self.profit, self.loss])
        self.assertEqual(list(pending), [self.pending])

    def test_date_range_is_inclusive(self) -> None:
        records = filter_records(
            WeeklyRecord.objects.all(),
            start_date=date(2025, 10, 4),
            end_date=date(2025, 10, 11),
        )

        self.assertEqual(list(records), [self.pending, self.profit])

    def test_min_profit_keeps_pending_weeks(self) -> None:
        records = filter_records(WeeklyRecord.objects.all(), min_profit=Decimal("0"))

        self.assertEqual(list(records), [self.pending, self.profit])
