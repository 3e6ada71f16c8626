from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from io import BytesIO
from typing import Any, Iterable, Optional

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from weekly_records.models import WeeklyRecord


REPORT_TITLE = "Sunday's Chicken - Business Report"
REPORT_FILENAME = "SundaysChicken_Report.xlsx"
REPORT_HEADERS: tuple[str, ...] = (
    "Date",
    "Entry time",
    "Sold time",
    "Live Wt (kg)",
    "Hens",
    "Purchase",
    "Price/kg",
    "Meat Sold (kg)",
    "Wastage (kg)",
    "Expenses",
    "Revenue",
    "Profit",
)
HEADER_FILL = PatternFill(start_color="F59E0B", end_color="F59E0B", fill_type="solid")


def build_records_workbook(
    records: Iterable[WeeklyRecord],
    *,
    generated_at: Optional[datetime] = None,
) -> Workbook:
    """Lay out stored weekly records as a spreadsheet report.

    Only persisted figures are written; nothing is derived here.
    """
    generated_at = timezone.localtime(generated_at or timezone.now())
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Weeks"
    sheet.append([REPORT_TITLE])
    sheet["A1"].font = Font(bold=True, size=14, color="F59E0B")
    sheet.append([f"Generated on: {generated_at:%d/%m/%Y} at {generated_at:%I:%M %p}"])
    sheet.append([])
    sheet.append(list(REPORT_HEADERS))
    header_row = sheet.max_row
    for cell in sheet[header_row]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = HEADER_FILL
    for record in records:
        sheet.append([_normalize_export_value(value) for value in _record_row(record)])
    return workbook


def workbook_to_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    buffer.seek(0)
    return buffer.read()


def _record_row(record: WeeklyRecord) -> list[Any]:
    completed = record.is_sales_entry_complete
    return [
        record.week_date,
        _format_time(record.created_at),
        _format_time(record.sales_completed_at),
        record.total_live_weight,
        record.total_hens,
        record.total_purchase_cost,
        record.selling_price if completed else None,
        record.meat_sold if completed else None,
        record.wastage if completed else None,
        record.total_expenses if completed else None,
        record.total_revenue if completed else None,
        record.net_profit if completed else None,
    ]


def _format_time(value: Optional[datetime]) -> str:
    if not value:
        return ""
    return f"{timezone.localtime(value):%I:%M %p}"


def _normalize_export_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return float(value)
    return value
