from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from django.core.exceptions import ValidationError
from django.core.validators import DecimalValidator
from django.db import models
from django.utils.dateparse import parse_date

from weekly_records.domain import (
    DECIMAL_ZERO,
    PurchaseFields,
    SalesCompleteStage,
    SalesFields,
    derive_metrics,
)
from weekly_records.models import WeeklyRecord

logger = logging.getLogger(__name__)

NON_FIELD = "non_field"


class RecordStage(models.TextChoices):
    PURCHASE = "purchase", "Purchase entry"
    SALES = "sales", "Sales entry"


class WeeklyRecordValidationError(Exception):
    def __init__(self, *, field_errors: dict[str, list[str]] | None = None) -> None:
        super().__init__("Invalid weekly record payload")
        self.field_errors = field_errors or {}


@dataclass
class ValidationResult:
    stage: str
    errors: dict[str, list[str]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    purchase: Optional[PurchaseFields] = None
    sales: Optional[SalesFields] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise WeeklyRecordValidationError(field_errors=self.errors)


class _MissingValue(Exception):
    pass


def validate(raw: Mapping[str, Any], stage: str) -> ValidationResult:
    """Check raw purchase (and sales) input before derivation or storage.

    Values coming from form posts arrive as strings; numbers are accepted as
    they are. Typed fields are only returned when no error was found.
    """
    result = ValidationResult(stage=stage)
    errors = result.errors

    week_date = _validate_week_date(raw.get("week_date"), errors)
    total_hens = _validate_hens(raw.get("total_hens"), errors)
    total_live_weight = _validate_positive(
        raw.get("total_live_weight"), "total_live_weight", "Live weight must be greater than 0.", errors
    )
    purchase_rate = _validate_positive(
        raw.get("purchase_rate"), "purchase_rate", "Purchase rate must be greater than 0.", errors
    )

    sales: Optional[SalesFields] = None
    if stage == RecordStage.SALES:
        sales = _validate_sales(raw, errors)

    if errors:
        return result

    result.purchase = PurchaseFields(
        week_date=week_date,
        total_hens=total_hens,
        total_live_weight=total_live_weight,
        purchase_rate=purchase_rate,
    )
    if sales is not None:
        result.sales = sales
        result.warnings.extend(consistency_warnings(result.purchase, sales))
    return result


def consistency_warnings(purchase: PurchaseFields, sales: SalesFields) -> list[str]:
    """Run a trial derivation and report figures that look implausible."""
    metrics = derive_metrics(SalesCompleteStage(purchase=purchase, sales=sales))
    warnings: list[str] = []
    if metrics.sales is not None and metrics.sales.meat_sold > purchase.total_live_weight:
        warnings.append(
            f"Meat sold ({metrics.sales.meat_sold} kg) exceeds the live weight bought "
            f"({purchase.total_live_weight} kg). Check the collections and the selling price."
        )
    if metrics.has_orphaned_revenue:
        warnings.append("Revenue was collected but no meat sold could be derived from the selling price.")
    if warnings:
        logger.warning("Weekly record %s failed plausibility checks: %s", purchase.week_date, " ".join(warnings))
    return warnings


def _validate_sales(raw: Mapping[str, Any], errors: dict[str, list[str]]) -> Optional[SalesFields]:
    selling_price = _validate_positive(
        raw.get("selling_price"), "selling_price", "Selling price must be greater than 0.", errors
    )
    cash = _validate_non_negative(raw.get("cash_collected"), "cash_collected", errors)
    upi = _validate_non_negative(raw.get("upi_collected"), "upi_collected", errors)
    expense_tea = _validate_non_negative(raw.get("expense_tea"), "expense_tea", errors)
    expense_fuel = _validate_non_negative(raw.get("expense_fuel"), "expense_fuel", errors)

    if (
        selling_price is not None
        and selling_price > DECIMAL_ZERO
        and cash is not None
        and upi is not None
        and cash + upi <= DECIMAL_ZERO
    ):
        errors.setdefault(NON_FIELD, []).append("Total revenue (cash + UPI) must be greater than 0.")

    if errors:
        return None
    return SalesFields(
        selling_price=selling_price,
        cash_collected=cash,
        upi_collected=upi,
        expense_tea=expense_tea,
        expense_fuel=expense_fuel,
    )


def _validate_week_date(value: Any, errors: dict[str, list[str]]) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value in (None, ""):
        errors.setdefault("week_date", []).append("Week date is required.")
        return None
    parsed = None
    try:
        parsed = parse_date(str(value).strip())
    except ValueError:
        parsed = None
    if parsed is None:
        errors.setdefault("week_date", []).append("Enter a valid date.")
    return parsed


def _validate_hens(value: Any, errors: dict[str, list[str]]) -> Optional[int]:
    message = "Hens must be a positive whole number."
    try:
        number = _to_decimal(value)
    except (_MissingValue, InvalidOperation, TypeError, ValueError):
        errors.setdefault("total_hens", []).append(message)
        return None
    if number <= DECIMAL_ZERO or number != number.to_integral_value():
        errors.setdefault("total_hens", []).append(message)
        return None
    return int(number)


def _validate_positive(
    value: Any,
    field_name: str,
    message: str,
    errors: dict[str, list[str]],
) -> Optional[Decimal]:
    try:
        number = _to_decimal(value)
    except _MissingValue:
        errors.setdefault(field_name, []).append(message)
        return None
    except (InvalidOperation, TypeError, ValueError):
        errors.setdefault(field_name, []).append("Enter a valid number.")
        return None
    if number <= DECIMAL_ZERO:
        errors.setdefault(field_name, []).append(message)
        return None
    return _check_precision(number, field_name, errors)


def _validate_non_negative(value: Any, field_name: str, errors: dict[str, list[str]]) -> Optional[Decimal]:
    try:
        number = _to_decimal(value)
    except _MissingValue:
        return DECIMAL_ZERO
    except (InvalidOperation, TypeError, ValueError):
        errors.setdefault(field_name, []).append("Enter a valid number.")
        return None
    if number < DECIMAL_ZERO:
        errors.setdefault(field_name, []).append("Cannot be negative.")
        return None
    return _check_precision(number, field_name, errors)


def _check_precision(number: Decimal, field_name: str, errors: dict[str, list[str]]) -> Optional[Decimal]:
    """Reject values the column would round, so stored inputs match what was derived."""
    model_field = WeeklyRecord._meta.get_field(field_name)
    validator = DecimalValidator(model_field.max_digits, model_field.decimal_places)
    try:
        validator(number)
    except ValidationError as exc:
        errors.setdefault(field_name, []).extend(exc.messages)
        return None
    return number


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        raise _MissingValue
    if isinstance(value, bool):
        raise TypeError("Booleans are not numbers.")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            raise _MissingValue
        number = Decimal(text)
    if not number.is_finite():
        raise InvalidOperation("Non-finite value.")
    return number
