from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse


class PortalLoginViewTests(TestCase):
    def setUp(self) -> None:
        self.user = get_user_model().objects.create_user(
            username="operator",
            password="secret-pass",  # noqa: S106 - test credential
            is_staff=True,
        )

    def test_login_page_renders(self) -> None:
        response = self.client.get(reverse("users:login"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Sign in")

    def test_valid_credentials_open_dashboard(self) -> None:
        response = self.client.post(
            reverse("users:login"),
            data={"username": "operator", "password": "secret-pass"},
        )

        self.assertRedirects(response, reverse("weekly_records:dashboard"))

    def test_invalid_credentials_show_error(self) -> None:
        response = self.client.post(
            reverse("users:login"),
            data={"username": "operator", "password": "wrong"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Incorrect username or password.")

    def test_authenticated_user_skips_login(self) -> None:
        self.client.force_login(self.user)

        response = self.client.get(reverse("users:login"))

        self.assertRedirects(response, reverse("weekly_records:dashboard"))

    def test_logout_accepts_get(self) -> None:
        self.client.force_login(self.user)

        response = self.client.get(reverse("users:logout"))

        self.assertRedirects(response, reverse("users:login"))
        self.assertNotIn("_auth_user_id", self.client.session)
