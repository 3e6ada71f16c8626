from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from weekly_records.services.validation import (
    NON_FIELD,
    RecordStage,
    WeeklyRecordValidationError,
    validate,
)


def purchase_payload(**overrides):
    payload = {
        "week_date": "2025-10-04",
        "total_hens": "100",
        "total_live_weight": "150",
        "purchase_rate": "80",
    }
    payload.update(overrides)
    return payload


def sales_payload(**overrides):
    payload = purchase_payload()
    payload.update(
        {
            "selling_price": "100",
            "cash_collected": "6000",
            "upi_collected": "4000",
            "expense_tea": "50",
            "expense_fuel": "100",
        }
    )
    payload.update(overrides)
    return payload


class PurchaseValidationTests(SimpleTestCase):
    def test_valid_purchase_returns_typed_fields(self) -> None:
        result = validate(purchase_payload(), RecordStage.PURCHASE)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.purchase.week_date, date(2025, 10, 4))
        self.assertEqual(result.purchase.total_hens, 100)
        self.assertEqual(result.purchase.total_live_weight, Decimal("150"))
        self.assertIsNone(result.sales)

    def test_hens_must_be_a_positive_whole_number(self) -> None:
        for value in ("0", "2.5", "-3", "", None, "many"):
            with self.subTest(value=value):
                result = validate(purchase_payload(total_hens=value), RecordStage.PURCHASE)
                self.assertEqual(result.errors["total_hens"], ["Hens must be a positive whole number."])

    def test_hens_accepts_integral_decimal(self) -> None:
        result = validate(purchase_payload(total_hens=Decimal("40.0")), RecordStage.PURCHASE)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.purchase.total_hens, 40)

    def test_weight_and_rate_must_be_positive(self) -> None:
        result = validate(purchase_payload(total_live_weight="0", purchase_rate="-1"), RecordStage.PURCHASE)

        self.assertEqual(result.errors["total_live_weight"], ["Live weight must be greater than 0."])
        self.assertEqual(result.errors["purchase_rate"], ["Purchase rate must be greater than 0."])
        self.assertIsNone(result.purchase)

    def test_non_numeric_values_are_reported(self) -> None:
        result = validate(purchase_payload(total_live_weight="abc", purchase_rate="NaN"), RecordStage.PURCHASE)

        self.assertEqual(result.errors["total_live_weight"], ["Enter a valid number."])
        self.assertEqual(result.errors["purchase_rate"], ["Enter a valid number."])

    def test_week_date_is_required_and_parsed(self) -> None:
        missing = validate(purchase_payload(week_date=""), RecordStage.PURCHASE)
        invalid = validate(purchase_payload(week_date="2025-13-40"), RecordStage.PURCHASE)

        self.assertEqual(missing.errors["week_date"], ["Week date is required."])
        self.assertEqual(invalid.errors["week_date"], ["Enter a valid date."])

    def test_raise_for_errors_carries_field_errors(self) -> None:
        result = validate(purchase_payload(total_hens="0"), RecordStage.PURCHASE)

        with self.assertRaises(WeeklyRecordValidationError) as captured:
            result.raise_for_errors()

        self.assertIn("total_hens", captured.exception.field_errors)


class SalesValidationTests(SimpleTestCase):
    def test_valid_sales_entry(self) -> None:
        result = validate(sales_payload(), RecordStage.SALES)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.sales.cash_collected, Decimal("6000"))
        self.assertEqual(result.warnings, [])

    def test_negative_amounts_are_rejected(self) -> None:
        result = validate(sales_payload(cash_collected="-1", expense_fuel="-5"), RecordStage.SALES)

        self.assertEqual(result.errors["cash_collected"], ["Cannot be negative."])
        self.assertEqual(result.errors["expense_fuel"], ["Cannot be negative."])
        self.assertIsNone(result.sales)

    def test_blank_amounts_default_to_zero(self) -> None:
        result = validate(sales_payload(upi_collected="", expense_tea=None, expense_fuel=""), RecordStage.SALES)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.sales.upi_collected, Decimal("0"))
        self.assertEqual(result.sales.expense_tea, Decimal("0"))

    def test_selling_price_is_required(self) -> None:
        result = validate(sales_payload(selling_price="0"), RecordStage.SALES)

        self.assertEqual(result.errors["selling_price"], ["Selling price must be greater than 0."])

    def test_zero_revenue_is_rejected(self) -> None:
        result = validate(sales_payload(cash_collected="0", upi_collected="0"), RecordStage.SALES)

        self.assertEqual(result.errors[NON_FIELD], ["Total revenue (cash + UPI) must be greater than 0."])

    def test_oversold_week_only_warns(self) -> None:
        payload = sales_payload(
            total_live_weight="50",
            selling_price="10",
            cash_collected="600",
            upi_collected="0",
        )

        with self.assertLogs("weekly_records.services.validation", level="WARNING"):
            result = validate(payload, RecordStage.SALES)

        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("exceeds the live weight", result.warnings[0])


class StoredPrecisionValidationTests(SimpleTestCase):
    def test_live_weight_beyond_gram_precision_is_rejected(self) -> None:
        result = validate(purchase_payload(total_live_weight="0.0004"), RecordStage.PURCHASE)

        self.assertEqual(
            result.errors["total_live_weight"],
            ["Ensure that there are no more than 3 decimal places."],
        )
        self.assertIsNone(result.purchase)

    def test_money_beyond_paise_precision_is_rejected(self) -> None:
        result = validate(
            sales_payload(selling_price="0.004", cash_collected="100.125", purchase_rate="80.555"),
            RecordStage.SALES,
        )

        for field_name in ("selling_price", "cash_collected", "purchase_rate"):
            with self.subTest(field=field_name):
                self.assertEqual(
                    result.errors[field_name],
                    ["Ensure that there are no more than 2 decimal places."],
                )
        self.assertIsNone(result.sales)

    def test_values_wider_than_the_column_are_rejected(self) -> None:
        result = validate(sales_payload(upi_collected="1234567890123.00"), RecordStage.SALES)

        self.assertIn("upi_collected", result.errors)

    def test_values_at_column_precision_are_accepted(self) -> None:
        result = validate(
            sales_payload(total_live_weight="150.125", selling_price="99.99", cash_collected="6000.50"),
            RecordStage.SALES,
        )

        self.assertTrue(result.is_valid, result.errors)
        self.assertEqual(result.purchase.total_live_weight, Decimal("150.125"))
