from __future__ import annotations

from typing import Any, Dict, Optional

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect
from django.urls import reverse, reverse_lazy
from django.utils import timezone
from django.views import generic

from sundays_chicken.mixins import StaffRequiredMixin

from .forms import HistoryFilterForm, PurchaseForm, SalesForm
from .models import WeeklyRecord
from .services.dashboard import build_dashboard, filter_records
from .services.export import REPORT_FILENAME, build_records_workbook, workbook_to_bytes
from .services.records import WeeklyRecordService
from .services.validation import WeeklyRecordValidationError


def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value else None
    except (TypeError, ValueError):
        return None


class DashboardView(StaffRequiredMixin, generic.TemplateView):
    template_name = "weekly_records/dashboard.html"

    def get_context_data(self, **kwargs: Any) -> Dict[str, Any]:
        context = super().get_context_data(**kwargs)
        service = WeeklyRecordService(actor=self.request.user)
        snapshot = build_dashboard(service.list_records(), _parse_int(self.request.GET.get("week")))
        context.update(
            {
                "snapshot": snapshot,
                "record": snapshot.display_record,
                "active_tab": "dashboard",
            }
        )
        return context


class HistoryView(StaffRequiredMixin, generic.TemplateView):
    template_name = "weekly_records/history.html"

    def get_filter_form(self) -> HistoryFilterForm:
        return HistoryFilterForm(data=self.request.GET or None)

    def get_context_data(self, **kwargs: Any) -> Dict[str, Any]:
        context = super().get_context_data(**kwargs)
        filter_form = self.get_filter_form()
        service = WeeklyRecordService(actor=self.request.user)
        records = filter_records(service.list_records(), **filter_form.filter_kwargs())
        context.update(
            {
                "filter_form": filter_form,
                "records": records,
                "export_query": self.request.GET.urlencode(),
                "active_tab": "history",
            }
        )
        return context

    def post(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        if request.POST.get("intent") == "delete":
            return self._handle_delete(request)
        messages.error(request, "The submitted action is not available.")
        return redirect("weekly_records:history")

    def _handle_delete(self, request: HttpRequest) -> HttpResponse:
        record_id = _parse_int(request.POST.get("record_id"))
        if record_id is None:
            messages.error(request, "Select the week you want to delete.")
            return redirect("weekly_records:history")
        service = WeeklyRecordService(actor=request.user)
        try:
            record = service.delete(record_id)
        except WeeklyRecordValidationError as exc:
            messages.error(request, _first_error_message(exc.field_errors))
            return redirect("weekly_records:history")
        messages.success(request, f"The week of {record.week_date:%d/%m/%Y} was deleted.")
        return redirect("weekly_records:history")


class HistoryExportView(StaffRequiredMixin, generic.View):
    http_method_names = ["get"]

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        filter_form = HistoryFilterForm(data=request.GET or None)
        service = WeeklyRecordService(actor=request.user)
        records = filter_records(service.list_records(), **filter_form.filter_kwargs())
        workbook = build_records_workbook(records, generated_at=timezone.now())
        response = HttpResponse(
            workbook_to_bytes(workbook),
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        response["Content-Disposition"] = f'attachment; filename="{REPORT_FILENAME}"'
        return response


class RecordFormMixin(StaffRequiredMixin):
    model = WeeklyRecord
    success_url = reverse_lazy("weekly_records:dashboard")
    success_message = "Week saved."
    page_title = ""
    submit_label = "Save"

    def get_form_kwargs(self) -> Dict[str, Any]:
        kwargs = super().get_form_kwargs()
        kwargs["actor"] = self.request.user
        return kwargs

    def form_valid(self, form):
        try:
            self.object = form.save()
        except WeeklyRecordValidationError:
            return self.form_invalid(form)
        messages.success(self.request, self.get_success_message(self.object))
        for warning in form.warnings:
            messages.warning(self.request, warning)
        return redirect(self.get_success_url())

    def get_success_message(self, record: WeeklyRecord) -> str:
        return self.success_message.format(week=f"{record.week_date:%d/%m/%Y}")

    def get_context_data(self, **kwargs: Any) -> Dict[str, Any]:
        context = super().get_context_data(**kwargs)
        context.update({"page_title": self.page_title, "submit_label": self.submit_label})
        return context


class PurchaseCreateView(RecordFormMixin, generic.CreateView):
    form_class = PurchaseForm
    template_name = "weekly_records/purchase_form.html"
    success_message = "Purchase for the week of {week} saved."
    page_title = "Purchase entry"
    submit_label = "Save purchase"

    def get_context_data(self, **kwargs: Any) -> Dict[str, Any]:
        context = super().get_context_data(**kwargs)
        context["active_tab"] = "purchase"
        return context


class PurchaseUpdateView(RecordFormMixin, generic.UpdateView):
    form_class = PurchaseForm
    template_name = "weekly_records/purchase_form.html"
    success_message = "Purchase for the week of {week} updated."
    page_title = "Edit purchase"
    submit_label = "Update purchase"


class SalesEntryView(RecordFormMixin, generic.UpdateView):
    form_class = SalesForm
    template_name = "weekly_records/sales_form.html"
    success_message = "Sales for the week of {week} saved."
    page_title = "Sold entry"
    submit_label = "Save sales"

    def get_context_data(self, **kwargs: Any) -> Dict[str, Any]:
        context = super().get_context_data(**kwargs)
        context.update({"record": self.object, "active_tab": "sales"})
        return context


class SalesPendingRedirectView(StaffRequiredMixin, generic.View):
    """Send the operator to the oldest week still waiting for its sales entry."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        pending = WeeklyRecord.objects.filter(is_sales_entry_complete=False).order_by("week_date").first()
        if pending is None:
            messages.info(request, "Every week already has its sales entry. Record a purchase first.")
            return redirect("weekly_records:purchase-create")
        return redirect(reverse("weekly_records:sales-entry", kwargs={"pk": pending.pk}))


def _first_error_message(field_errors: dict[str, list[str]]) -> str:
    for messages_list in field_errors.values():
        if messages_list:
            return messages_list[0]
    return "The request could not be processed."
