from __future__ import annotations

from decimal import Decimal

from django.template import Context, Template
from django.test import SimpleTestCase

from weekly_records.templatetags.records_extras import inr, number_format


class RecordsExtrasTests(SimpleTestCase):
    def test_inr_groups_lakhs_and_crores(self) -> None:
        self.assertEqual(inr(Decimal("100000")), "Rs. 1,00,000")
        self.assertEqual(inr(Decimal("12345678.60")), "Rs. 1,23,45,679")
        self.assertEqual(inr(Decimal("950")), "Rs. 950")

    def test_inr_formats_losses(self) -> None:
        self.assertEqual(inr(Decimal("-2150.00")), "-Rs. 2,150")

    def test_missing_values_render_as_dash(self) -> None:
        self.assertEqual(inr(None), "-")
        self.assertEqual(number_format(None), "-")
        self.assertEqual(number_format("abc"), "-")

    def test_number_format_rounds_half_up(self) -> None:
        self.assertEqual(number_format(Decimal("33.335")), "33.34")
        self.assertEqual(number_format(Decimal("123456.5"), 1), "1,23,456.5")
        self.assertEqual(number_format(Decimal("-10"), 3), "-10.000")

    def test_filters_are_registered(self) -> None:
        template = Template("{% load records_extras %}{{ value|inr }} {{ value|number_format:0 }}")

        self.assertEqual(template.render(Context({"value": Decimal("1500")})), "Rs. 1,500 1,500")
