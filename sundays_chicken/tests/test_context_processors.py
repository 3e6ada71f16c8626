from __future__ import annotations

from django.test import RequestFactory, SimpleTestCase, override_settings

from sundays_chicken.context_processors import business_settings


class ContextProcessorTests(SimpleTestCase):
    @override_settings(BUSINESS_NAME="Sunday Chicken Corner")
    def test_business_settings(self) -> None:
        request = RequestFactory().get("/")

        self.assertEqual(business_settings(request), {"BUSINESS_NAME": "Sunday Chicken Corner"})
