from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from django import forms
from django.core.validators import MinValueValidator
from django.forms.models import construct_instance
from django.utils import timezone

from .models import WeeklyRecord
from .services.dashboard import HistoryStatus
from .services.records import SaveOutcome, WeeklyRecordService
from .services.validation import NON_FIELD, RecordStage, WeeklyRecordValidationError, validate


class WeeklyRecordFormMixin:
    input_classes = (
        "block w-full rounded-lg border border-slate-300 bg-white px-3 py-2 text-sm "
        "text-slate-900 transition focus:border-amber-400 focus:outline-none focus:ring-2 "
        "focus:ring-amber-100"
    )
    stage: str = RecordStage.PURCHASE

    def _style_fields(self) -> None:
        for name, form_field in self.fields.items():
            form_field.widget.attrs.setdefault("class", self.input_classes)
            if isinstance(form_field, forms.DecimalField):
                form_field.widget.attrs.setdefault("step", "0.01")
                form_field.widget.attrs.setdefault("min", "0")

    def _apply_business_rules(self, cleaned: Dict[str, Any]) -> None:
        result = validate(cleaned, self.stage)
        self.warnings = result.warnings
        self._add_field_errors(result.errors)

    def _add_field_errors(self, field_errors: dict[str, list[str]]) -> None:
        for field_name, messages in field_errors.items():
            target = field_name if field_name in self.fields else None
            if target and target in self.errors:
                continue
            for message in messages:
                self.add_error(None if field_name == NON_FIELD else target, message)


class PurchaseForm(WeeklyRecordFormMixin, forms.ModelForm):
    stage = RecordStage.PURCHASE

    class Meta:
        model = WeeklyRecord
        fields = ["week_date", "total_hens", "total_live_weight", "purchase_rate"]
        widgets = {
            "week_date": forms.DateInput(attrs={"type": "date"}, format="%Y-%m-%d"),
        }

    def __init__(self, *args: Any, actor=None, **kwargs: Any) -> None:
        self.actor = actor
        self.warnings: list[str] = []
        self.outcome: SaveOutcome | None = None
        super().__init__(*args, **kwargs)
        # Range checks belong to the business rules so every field gets one clear message.
        for name in self.Meta.fields:
            form_field = self.fields[name]
            form_field.validators = [
                validator for validator in form_field.validators if not isinstance(validator, MinValueValidator)
            ]
        self._style_fields()
        week_field = self.fields.get("week_date")
        if week_field is None:
            return
        if not self.is_bound and not getattr(self.instance, "pk", None) and not week_field.initial:
            week_field.initial = timezone.localdate()

    def clean(self) -> Dict[str, Any]:
        cleaned = super().clean()
        self._apply_business_rules(cleaned)
        self._validate_unique_week(cleaned.get("week_date"))
        return cleaned

    def _validate_unique_week(self, week_date) -> None:
        if not week_date:
            return
        duplicates = WeeklyRecord.objects.filter(week_date=week_date)
        if self.instance.pk:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            self.add_error("week_date", f"A record for the week of {week_date:%d/%m/%Y} already exists.")

    def _post_clean(self) -> None:
        # Bound values only; model validation and saving belong to the service.
        opts = self._meta
        self.instance = construct_instance(self, self.instance, opts.fields, opts.exclude)

    @property
    def estimated_cost(self) -> Decimal:
        weight = self._current_decimal("total_live_weight")
        rate = self._current_decimal("purchase_rate")
        return (weight * rate).quantize(Decimal("0.01"))

    def _current_decimal(self, field_name: str) -> Decimal:
        if hasattr(self, "cleaned_data") and self.cleaned_data.get(field_name) is not None:
            return Decimal(self.cleaned_data[field_name])
        value = getattr(self.instance, field_name, None)
        return Decimal(value or 0)

    def save(self, commit: bool = True) -> WeeklyRecord:
        service = WeeklyRecordService(actor=self.actor)
        payload = {name: self.cleaned_data.get(name) for name in self.Meta.fields}
        try:
            if self.instance.pk:
                self.outcome = service.update_purchase(self.instance.pk, payload)
            else:
                self.outcome = service.create_purchase(payload)
        except WeeklyRecordValidationError as exc:
            self._add_field_errors(exc.field_errors)
            raise
        self.instance = self.outcome.record
        self.warnings = self.outcome.warnings
        return self.instance


class SalesForm(PurchaseForm):
    stage = RecordStage.SALES

    class Meta(PurchaseForm.Meta):
        fields = [
            "total_hens",
            "total_live_weight",
            "purchase_rate",
            "selling_price",
            "cash_collected",
            "upi_collected",
            "expense_tea",
            "expense_fuel",
        ]
        widgets = {}

    def __init__(self, *args: Any, actor=None, **kwargs: Any) -> None:
        super().__init__(*args, actor=actor, **kwargs)
        self.fields["selling_price"].required = True
        for name in ("cash_collected", "upi_collected", "expense_tea", "expense_fuel"):
            self.fields[name].widget.attrs.setdefault("placeholder", "0")

    def clean(self) -> Dict[str, Any]:
        cleaned = forms.ModelForm.clean(self)
        payload = dict(cleaned)
        payload["week_date"] = self.instance.week_date
        self._apply_business_rules(payload)
        return cleaned

    @property
    def estimated_meat_sold(self) -> Decimal:
        price = self._current_decimal("selling_price")
        if price <= 0:
            return Decimal("0.000")
        revenue = self._current_decimal("cash_collected") + self._current_decimal("upi_collected")
        return (revenue / price).quantize(Decimal("0.001"))

    def save(self, commit: bool = True) -> WeeklyRecord:
        service = WeeklyRecordService(actor=self.actor)
        payload = {name: self.cleaned_data.get(name) for name in self.Meta.fields}
        try:
            self.outcome = service.complete_sales(self.instance.pk, payload)
        except WeeklyRecordValidationError as exc:
            self._add_field_errors(exc.field_errors)
            raise
        self.instance = self.outcome.record
        self.warnings = self.outcome.warnings
        return self.instance


class HistoryFilterForm(forms.Form):
    input_classes = WeeklyRecordFormMixin.input_classes

    status = forms.ChoiceField(choices=HistoryStatus.choices, required=False, initial=HistoryStatus.ALL)
    start_date = forms.DateField(required=False, widget=forms.DateInput(attrs={"type": "date"}))
    end_date = forms.DateField(required=False, widget=forms.DateInput(attrs={"type": "date"}))
    min_profit = forms.DecimalField(required=False, decimal_places=2, max_digits=14)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        for form_field in self.fields.values():
            form_field.widget.attrs.setdefault("class", self.input_classes)

    def clean(self) -> Dict[str, Any]:
        cleaned = super().clean()
        start_date = cleaned.get("start_date")
        end_date = cleaned.get("end_date")
        if start_date and end_date and start_date > end_date:
            self.add_error("end_date", "The end date must be on or after the start date.")
        return cleaned

    @property
    def has_active_filters(self) -> bool:
        if not self.is_bound or not hasattr(self, "cleaned_data"):
            return False
        data = self.cleaned_data
        return bool(
            (data.get("status") or HistoryStatus.ALL) != HistoryStatus.ALL
            or data.get("start_date")
            or data.get("end_date")
            or data.get("min_profit") is not None
        )

    def filter_kwargs(self) -> Dict[str, Any]:
        if not self.is_valid():
            return {}
        data = self.cleaned_data
        return {
            "status": data.get("status") or HistoryStatus.ALL,
            "start_date": data.get("start_date"),
            "end_date": data.get("end_date"),
            "min_profit": data.get("min_profit"),
        }
