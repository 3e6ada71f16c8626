"""Template context helpers for exposing global application settings."""

from __future__ import annotations

from django.conf import settings


def business_settings(request):
    return {
        "BUSINESS_NAME": getattr(settings, "BUSINESS_NAME", "Sunday's Chicken"),
    }
