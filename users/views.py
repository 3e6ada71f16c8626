from __future__ import annotations

from django.contrib.auth.mixins import LoginRequiredMixin
from django.contrib.auth.views import LoginView, LogoutView
from django.urls import reverse, reverse_lazy

from .forms import PortalAuthenticationForm


class PortalLoginView(LoginView):
    template_name = "users/login.html"
    form_class = PortalAuthenticationForm
    redirect_authenticated_user = True

    def get_success_url(self):
        return self.get_redirect_url() or reverse("weekly_records:dashboard")


class PortalLogoutView(LoginRequiredMixin, LogoutView):
    # Explicitly allow GET requests; Django 5 restricts logout to POST by default.
    http_method_names = ["get", "head", "options", "post"]
    next_page = reverse_lazy("users:login")

    def get(self, request, *args, **kwargs):
        """Allow GET requests to trigger the logout flow."""
        return self.post(request, *args, **kwargs)
