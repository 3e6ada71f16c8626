from __future__ import annotations

from django.contrib import admin

from .models import COMPUTED_FIELDS, WeeklyRecord


@admin.register(WeeklyRecord)
class WeeklyRecordAdmin(admin.ModelAdmin):
    list_display = (
        "week_date",
        "total_hens",
        "total_live_weight",
        "total_purchase_cost",
        "is_sales_entry_complete",
        "total_revenue",
        "net_profit",
    )
    list_filter = ("is_sales_entry_complete",)
    date_hierarchy = "week_date"
    ordering = ("-week_date",)
    readonly_fields = ("created_at", "updated_at", "sales_completed_at", "is_sales_entry_complete") + COMPUTED_FIELDS
    fieldsets = (
        ("Week", {"fields": ("week_date", "created_at", "updated_at")}),
        ("Purchase", {"fields": ("total_hens", "total_live_weight", "purchase_rate")}),
        (
            "Sales",
            {
                "fields": (
                    "is_sales_entry_complete",
                    "sales_completed_at",
                    "selling_price",
                    "cash_collected",
                    "upi_collected",
                    "expense_tea",
                    "expense_fuel",
                )
            },
        ),
        ("Derived metrics", {"fields": COMPUTED_FIELDS}),
    )

    def has_add_permission(self, request) -> bool:
        # Weeks are created through the purchase entry so metrics are always derived.
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False
