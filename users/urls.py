from __future__ import annotations

from django.urls import path

from .views import PortalLoginView, PortalLogoutView


app_name = "users"

urlpatterns = [
    path("login/", PortalLoginView.as_view(), name="login"),
    path("logout/", PortalLogoutView.as_view(), name="logout"),
]
