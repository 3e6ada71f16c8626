from __future__ import annotations

from django import forms
from django.contrib.auth.forms import AuthenticationForm

INPUT_CLASSES = (
    "block w-full rounded border border-slate-300 px-3 py-2 text-slate-900 "
    "focus:border-amber-400 focus:outline-none focus:ring-1 focus:ring-amber-400"
)


class PortalAuthenticationForm(AuthenticationForm):
    username = forms.CharField(
        label="Username",
        widget=forms.TextInput(
            attrs={
                "autofocus": True,
                "autocomplete": "username",
                "class": INPUT_CLASSES,
                "placeholder": "Enter your username",
            }
        ),
    )
    password = forms.CharField(
        label="Password",
        strip=False,
        widget=forms.PasswordInput(
            attrs={
                "autocomplete": "current-password",
                "class": INPUT_CLASSES,
                "placeholder": "Enter your password",
            }
        ),
    )

    error_messages = {
        "invalid_login": "Incorrect username or password.",
        "inactive": "This account is inactive. Contact the administrator.",
    }
