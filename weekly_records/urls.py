from django.urls import path

from .views import (
    DashboardView,
    HistoryExportView,
    HistoryView,
    PurchaseCreateView,
    PurchaseUpdateView,
    SalesEntryView,
    SalesPendingRedirectView,
)

app_name = "weekly_records"

urlpatterns = [
    path("", DashboardView.as_view(), name="dashboard"),
    path("history/", HistoryView.as_view(), name="history"),
    path("history/export/", HistoryExportView.as_view(), name="history-export"),
    path("purchase/new/", PurchaseCreateView.as_view(), name="purchase-create"),
    path("purchase/<int:pk>/edit/", PurchaseUpdateView.as_view(), name="purchase-update"),
    path("sales/", SalesPendingRedirectView.as_view(), name="sales-pending"),
    path("sales/<int:pk>/", SalesEntryView.as_view(), name="sales-entry"),
]
