from __future__ import annotations

from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser
from django.db import transaction

from weekly_records.models import InconsistentRecordState, WeeklyRecord
from weekly_records.services.records import WeeklyRecordService


class Command(BaseCommand):
    help = "Re-runs the metrics derivation on stored weekly records and saves the ones that drifted."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--record",
            type=int,
            help="ID of the weekly record to recompute. All records are processed when omitted.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        record_id: int | None = options.get("record")
        records = WeeklyRecord.objects.order_by("week_date", "pk")
        if record_id:
            records = records.filter(pk=record_id)
            if not records.exists():
                raise CommandError(f"Weekly record {record_id} does not exist.")
        service = WeeklyRecordService(actor=None)
        updated = 0
        skipped = 0
        with transaction.atomic():
            for record in records.select_for_update():
                try:
                    if service.recompute(record):
                        updated += 1
                except InconsistentRecordState as exc:
                    skipped += 1
                    self.stderr.write(self.style.WARNING(str(exc)))
        self.stdout.write(self.style.SUCCESS(f"Records updated: {updated}"))
        if skipped:
            self.stdout.write(self.style.WARNING(f"Inconsistent records skipped: {skipped}"))
