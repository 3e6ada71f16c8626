from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase

from weekly_records.models import WeeklyRecord

from .factories import create_completed_week, create_purchase


class RecomputeWeeklyMetricsCommandTests(TestCase):
    def test_repairs_drifted_records(self) -> None:
        record = create_completed_week(date(2025, 10, 4))
        create_purchase(date(2025, 10, 11))
        WeeklyRecord.objects.filter(pk=record.pk).update(net_profit=Decimal("0.00"))
        stdout = StringIO()

        call_command("recompute_weekly_metrics", stdout=stdout)

        record.refresh_from_db()
        self.assertEqual(record.net_profit, Decimal("-2150.00"))
        self.assertIn("Records updated: 1", stdout.getvalue())

    def test_skips_inconsistent_records(self) -> None:
        record = create_purchase(date(2025, 10, 4))
        WeeklyRecord.objects.filter(pk=record.pk).update(selling_price=Decimal("100"))
        stdout = StringIO()
        stderr = StringIO()

        call_command("recompute_weekly_metrics", stdout=stdout, stderr=stderr)

        self.assertIn("Inconsistent records skipped: 1", stdout.getvalue())
        self.assertIn("sales entry is not complete", stderr.getvalue())

    def test_unknown_record_raises(self) -> None:
        with self.assertRaises(CommandError):
            call_command("recompute_weekly_metrics", record=999)
