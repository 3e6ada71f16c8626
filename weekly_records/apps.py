from django.apps import AppConfig


class WeeklyRecordsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "weekly_records"
    label = "weekly_records"
    verbose_name = "Weekly records"
