from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="WeeklyRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "week_date",
                    models.DateField(help_text="Saturday that anchors the week.", unique=True, verbose_name="Week date"),
                ),
                ("sales_completed_at", models.DateTimeField(blank=True, null=True, verbose_name="Sales completed at")),
                ("total_hens", models.PositiveIntegerField(verbose_name="Hens bought")),
                (
                    "total_live_weight",
                    models.DecimalField(
                        decimal_places=3,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.001"))],
                        verbose_name="Live weight (kg)",
                    ),
                ),
                (
                    "purchase_rate",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                        verbose_name="Purchase rate (per kg)",
                    ),
                ),
                ("is_sales_entry_complete", models.BooleanField(default=False, verbose_name="Sales entry complete")),
                (
                    "selling_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=14,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="Selling price (per kg)",
                    ),
                ),
                (
                    "cash_collected",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=14,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="Cash collected",
                    ),
                ),
                (
                    "upi_collected",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=14,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="UPI collected",
                    ),
                ),
                (
                    "expense_tea",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=14,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="Tea expense",
                    ),
                ),
                (
                    "expense_fuel",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=14,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="Fuel expense",
                    ),
                ),
                (
                    "total_purchase_cost",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=14,
                        verbose_name="Purchase cost",
                    ),
                ),
                (
                    "total_expenses",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="Expenses"),
                ),
                (
                    "total_revenue",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="Revenue"),
                ),
                (
                    "meat_sold",
                    models.DecimalField(
                        blank=True, decimal_places=3, max_digits=12, null=True, verbose_name="Meat sold (kg)"
                    ),
                ),
                (
                    "wastage",
                    models.DecimalField(
                        blank=True, decimal_places=3, max_digits=12, null=True, verbose_name="Wastage (kg)"
                    ),
                ),
                (
                    "wastage_percentage",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=9, null=True, verbose_name="Wastage (%)"),
                ),
                (
                    "net_profit",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="Net profit"),
                ),
                (
                    "profit_per_hen",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="Profit per hen"
                    ),
                ),
                (
                    "profit_per_kg",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="Profit per kg"
                    ),
                ),
            ],
            options={
                "verbose_name": "Weekly record",
                "verbose_name_plural": "Weekly records",
                "ordering": ("-week_date",),
            },
        ),
    ]
