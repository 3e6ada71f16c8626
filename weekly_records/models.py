from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .domain import (
    PurchaseFields,
    PurchaseStage,
    RecordMetrics,
    RecordState,
    SalesCompleteStage,
    SalesFields,
)


SALES_INPUT_FIELDS: tuple[str, ...] = (
    "selling_price",
    "cash_collected",
    "upi_collected",
    "expense_tea",
    "expense_fuel",
)

SALES_METRIC_FIELDS: tuple[str, ...] = (
    "total_revenue",
    "meat_sold",
    "wastage",
    "wastage_percentage",
    "total_expenses",
    "net_profit",
    "profit_per_hen",
    "profit_per_kg",
)

COMPUTED_FIELDS: tuple[str, ...] = ("total_purchase_cost",) + SALES_METRIC_FIELDS


class InconsistentRecordState(ValueError):
    """Stored sales columns disagree with the completion flag."""


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField("Created at", auto_now_add=True)
    updated_at = models.DateTimeField("Updated at", auto_now=True)

    class Meta:
        abstract = True


def _money_field(verbose_name: str, **kwargs) -> models.DecimalField:
    return models.DecimalField(verbose_name, max_digits=14, decimal_places=2, null=True, blank=True, **kwargs)


class WeeklyRecord(TimeStampedModel):
    week_date = models.DateField("Week date", unique=True, help_text="Saturday that anchors the week.")
    sales_completed_at = models.DateTimeField("Sales completed at", null=True, blank=True)

    total_hens = models.PositiveIntegerField("Hens bought")
    total_live_weight = models.DecimalField(
        "Live weight (kg)",
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0.001"))],
    )
    purchase_rate = models.DecimalField(
        "Purchase rate (per kg)",
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    is_sales_entry_complete = models.BooleanField("Sales entry complete", default=False)
    selling_price = _money_field("Selling price (per kg)", validators=[MinValueValidator(0)])
    cash_collected = _money_field("Cash collected", validators=[MinValueValidator(0)])
    upi_collected = _money_field("UPI collected", validators=[MinValueValidator(0)])
    expense_tea = _money_field("Tea expense", validators=[MinValueValidator(0)])
    expense_fuel = _money_field("Fuel expense", validators=[MinValueValidator(0)])

    total_purchase_cost = models.DecimalField(
        "Purchase cost",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    total_expenses = _money_field("Expenses")
    total_revenue = _money_field("Revenue")
    meat_sold = models.DecimalField("Meat sold (kg)", max_digits=12, decimal_places=3, null=True, blank=True)
    wastage = models.DecimalField("Wastage (kg)", max_digits=12, decimal_places=3, null=True, blank=True)
    wastage_percentage = models.DecimalField(
        "Wastage (%)",
        max_digits=9,
        decimal_places=2,
        null=True,
        blank=True,
    )
    net_profit = _money_field("Net profit")
    profit_per_hen = _money_field("Profit per hen")
    profit_per_kg = _money_field("Profit per kg")

    class Meta:
        verbose_name = "Weekly record"
        verbose_name_plural = "Weekly records"
        ordering = ("-week_date",)

    def __str__(self) -> str:
        return f"Week of {self.week_date:%d/%m/%Y}"

    @property
    def has_sales_values(self) -> bool:
        return any(getattr(self, field_name) is not None for field_name in SALES_INPUT_FIELDS)

    @property
    def is_oversold(self) -> bool:
        return self.wastage is not None and self.wastage < Decimal("0")

    @property
    def total_cost(self) -> Decimal | None:
        if not self.is_sales_entry_complete:
            return None
        return Decimal(self.total_purchase_cost or 0) + Decimal(self.total_expenses or 0)

    def purchase_fields(self) -> PurchaseFields:
        return PurchaseFields(
            week_date=self.week_date,
            total_hens=self.total_hens,
            total_live_weight=Decimal(self.total_live_weight),
            purchase_rate=Decimal(self.purchase_rate),
        )

    def sales_fields(self) -> SalesFields:
        return SalesFields(**{field_name: getattr(self, field_name) for field_name in SALES_INPUT_FIELDS})

    def to_state(self) -> RecordState:
        if not self.is_sales_entry_complete:
            if self.has_sales_values:
                raise InconsistentRecordState(
                    f"{self} carries sales figures but its sales entry is not complete."
                )
            return PurchaseStage(purchase=self.purchase_fields())
        if not self.has_sales_values:
            raise InconsistentRecordState(f"{self} is marked complete but has no sales figures.")
        return SalesCompleteStage(
            purchase=self.purchase_fields(),
            sales=self.sales_fields(),
            completed_at=self.sales_completed_at,
        )

    def apply_state(self, state: RecordState) -> None:
        purchase = state.purchase
        self.week_date = purchase.week_date
        self.total_hens = purchase.total_hens
        self.total_live_weight = purchase.total_live_weight
        self.purchase_rate = purchase.purchase_rate
        if isinstance(state, SalesCompleteStage):
            self.is_sales_entry_complete = True
            self.sales_completed_at = state.completed_at
            for field_name in SALES_INPUT_FIELDS:
                setattr(self, field_name, getattr(state.sales, field_name))
        else:
            self.is_sales_entry_complete = False
            self.sales_completed_at = None
            for field_name in SALES_INPUT_FIELDS:
                setattr(self, field_name, None)

    def apply_metrics(self, metrics: RecordMetrics) -> None:
        self.total_purchase_cost = metrics.total_purchase_cost
        for field_name in SALES_METRIC_FIELDS:
            value = getattr(metrics.sales, field_name) if metrics.sales is not None else None
            setattr(self, field_name, value)

    def clean(self) -> None:
        super().clean()
        if self.total_live_weight is None or self.purchase_rate is None or self.week_date is None:
            return
        try:
            self.to_state()
        except InconsistentRecordState as exc:
            raise ValidationError(str(exc)) from exc
