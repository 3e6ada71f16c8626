from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from weekly_records.domain import PurchaseStage, complete_sales, derive_metrics, update_purchase
from weekly_records.models import COMPUTED_FIELDS, SALES_INPUT_FIELDS, WeeklyRecord

from .validation import (
    NON_FIELD,
    RecordStage,
    WeeklyRecordValidationError,
    consistency_warnings,
    validate,
)

logger = logging.getLogger(__name__)

PURCHASE_INPUT_FIELDS: tuple[str, ...] = (
    "week_date",
    "total_hens",
    "total_live_weight",
    "purchase_rate",
)


@dataclass
class SaveOutcome:
    record: WeeklyRecord
    created: bool = False
    warnings: list[str] = field(default_factory=list)


class WeeklyRecordService:
    """Create, update and close weekly records, deriving metrics on every write."""

    def __init__(self, *, actor) -> None:
        self.actor = actor

    def list_records(self) -> QuerySet[WeeklyRecord]:
        return WeeklyRecord.objects.order_by("-week_date")

    def get(self, record_id: int) -> WeeklyRecord:
        try:
            return WeeklyRecord.objects.get(pk=record_id)
        except WeeklyRecord.DoesNotExist as exc:
            raise WeeklyRecordValidationError(
                field_errors={NON_FIELD: ["The selected week does not exist."]}
            ) from exc

    def create_purchase(self, raw: Mapping[str, Any]) -> SaveOutcome:
        result = validate(raw, RecordStage.PURCHASE)
        result.raise_for_errors()
        state = PurchaseStage(purchase=result.purchase)
        with transaction.atomic():
            self._ensure_unique_week(state.purchase.week_date)
            record = WeeklyRecord()
            record.apply_state(state)
            record.apply_metrics(derive_metrics(state))
            record.save()
        logger.info(
            "Purchase entry for week %s created by %s (record %s).",
            record.week_date,
            self._actor_label(),
            record.pk,
        )
        return SaveOutcome(record=record, created=True, warnings=result.warnings)

    def update_purchase(self, record_id: int, raw: Mapping[str, Any]) -> SaveOutcome:
        with transaction.atomic():
            record = self._load_for_update(record_id)
            result = validate(raw, RecordStage.PURCHASE)
            result.raise_for_errors()
            if result.purchase.week_date != record.week_date:
                self._ensure_unique_week(result.purchase.week_date, exclude_id=record.pk)
            state = update_purchase(record.to_state(), result.purchase)
            warnings = list(result.warnings)
            if state.is_sales_entry_complete:
                warnings.extend(self._sales_warnings(state))
            record.apply_state(state)
            record.apply_metrics(derive_metrics(state))
            record.save()
        logger.info("Purchase entry for week %s updated by %s.", record.week_date, self._actor_label())
        return SaveOutcome(record=record, warnings=warnings)

    def complete_sales(self, record_id: int, raw: Mapping[str, Any]) -> SaveOutcome:
        with transaction.atomic():
            record = self._load_for_update(record_id)
            payload = self._merge_purchase_values(record, raw)
            result = validate(payload, RecordStage.SALES)
            result.raise_for_errors()
            if result.purchase.week_date != record.week_date:
                self._ensure_unique_week(result.purchase.week_date, exclude_id=record.pk)
            state = update_purchase(record.to_state(), result.purchase)
            state = complete_sales(
                state,
                result.sales,
                now=timezone.now(),
                preserve_completion_time=getattr(
                    settings, "WEEKLY_RECORDS_PRESERVE_SALES_COMPLETION_TIME", True
                ),
            )
            metrics = derive_metrics(state)
            record.apply_state(state)
            record.apply_metrics(metrics)
            record.save()
        logger.info(
            "Sales entry for week %s saved by %s (net profit %s).",
            record.week_date,
            self._actor_label(),
            record.net_profit,
        )
        if metrics.is_degenerate:
            logger.info(
                "Week %s stored with guarded metrics: %s",
                record.week_date,
                ", ".join(metrics.degenerate_guards),
            )
        return SaveOutcome(record=record, warnings=result.warnings)

    def delete(self, record_id: int) -> WeeklyRecord:
        with transaction.atomic():
            record = self._load_for_update(record_id)
            week_date = record.week_date
            record.delete()
        logger.info("Week %s deleted by %s.", week_date, self._actor_label())
        return record

    def recompute(self, record: WeeklyRecord) -> bool:
        """Re-run the derivation on a stored record, saving only when it drifted."""
        metrics = derive_metrics(record.to_state())
        before = {name: getattr(record, name) for name in COMPUTED_FIELDS}
        record.apply_metrics(metrics)
        changed = [name for name in before if before[name] != getattr(record, name)]
        if not changed:
            return False
        record.save(update_fields=changed + ["updated_at"])
        return True

    def _load_for_update(self, record_id: int) -> WeeklyRecord:
        try:
            return WeeklyRecord.objects.select_for_update().get(pk=record_id)
        except WeeklyRecord.DoesNotExist as exc:
            raise WeeklyRecordValidationError(
                field_errors={NON_FIELD: ["The selected week does not exist."]}
            ) from exc

    def _ensure_unique_week(self, week_date, *, exclude_id: int | None = None) -> None:
        queryset = WeeklyRecord.objects.filter(week_date=week_date)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        if queryset.exists():
            raise WeeklyRecordValidationError(
                field_errors={"week_date": [f"A record for the week of {week_date:%d/%m/%Y} already exists."]}
            )

    def _merge_purchase_values(self, record: WeeklyRecord, raw: Mapping[str, Any]) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "week_date": record.week_date,
            "total_hens": record.total_hens,
            "total_live_weight": record.total_live_weight,
            "purchase_rate": record.purchase_rate,
        }
        for key in PURCHASE_INPUT_FIELDS + SALES_INPUT_FIELDS:
            if key in raw:
                payload[key] = raw[key]
        return payload

    def _sales_warnings(self, state) -> list[str]:
        return consistency_warnings(state.purchase, state.sales)

    def _actor_label(self) -> str:
        if self.actor is None:
            return "system"
        get_username = getattr(self.actor, "get_username", None)
        if callable(get_username):
            return get_username() or "anonymous"
        return str(self.actor)
