"""URL configuration for the sundays_chicken project."""
from django.contrib import admin
from django.urls import include, path

admin.site.site_header = "Sunday's Chicken administration"
admin.site.site_title = "Sunday's Chicken administration"
admin.site.index_title = "Weekly records"

urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/", include("users.urls", namespace="users")),
    path("", include("weekly_records.urls", namespace="weekly_records")),
]
