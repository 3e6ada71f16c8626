from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from django.db.models import Q, QuerySet

from weekly_records.models import WeeklyRecord


DECIMAL_ZERO = Decimal("0.00")
DEFAULT_CHART_WEEKS = 8


class HistoryStatus:
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"

    choices = (
        (ALL, "All weeks"),
        (COMPLETED, "Sales completed"),
        (PENDING, "Waiting for sales"),
    )


@dataclass(frozen=True)
class LifetimeTotals:
    revenue: Decimal = DECIMAL_ZERO
    net_profit: Decimal = DECIMAL_ZERO
    meat_sold: Decimal = DECIMAL_ZERO
    completed_weeks: int = 0


@dataclass(frozen=True)
class ChartPoint:
    week_date: date
    label: str
    profit: Decimal
    revenue: Decimal
    cost: Decimal
    wastage_percentage: Decimal


@dataclass(frozen=True)
class DashboardSnapshot:
    record_count: int
    totals: LifetimeTotals
    display_record: Optional[WeeklyRecord]
    completed_records: list[WeeklyRecord] = field(default_factory=list)
    chart: list[ChartPoint] = field(default_factory=list)
    pending_records: list[WeeklyRecord] = field(default_factory=list)


def completed_newest_first(records: Iterable[WeeklyRecord]) -> list[WeeklyRecord]:
    completed = [record for record in records if record.is_sales_entry_complete]
    completed.sort(key=lambda record: (record.week_date, record.pk or 0), reverse=True)
    return completed


def build_lifetime_totals(records: Iterable[WeeklyRecord]) -> LifetimeTotals:
    revenue = DECIMAL_ZERO
    profit = DECIMAL_ZERO
    meat = Decimal("0.000")
    weeks = 0
    for record in records:
        if not record.is_sales_entry_complete:
            continue
        weeks += 1
        revenue += Decimal(record.total_revenue or 0)
        profit += Decimal(record.net_profit or 0)
        meat += Decimal(record.meat_sold or 0)
    return LifetimeTotals(revenue=revenue, net_profit=profit, meat_sold=meat, completed_weeks=weeks)


def build_chart_series(records: Iterable[WeeklyRecord], limit: int = DEFAULT_CHART_WEEKS) -> list[ChartPoint]:
    """Latest completed weeks in chronological order for the trend charts."""
    latest = completed_newest_first(records)[:limit]
    latest.reverse()
    return [
        ChartPoint(
            week_date=record.week_date,
            label=f"{record.week_date.day} {record.week_date:%b}",
            profit=Decimal(record.net_profit or 0),
            revenue=Decimal(record.total_revenue or 0),
            cost=Decimal(record.total_purchase_cost or 0) + Decimal(record.total_expenses or 0),
            wastage_percentage=Decimal(record.wastage_percentage or 0),
        )
        for record in latest
    ]


def select_display_record(
    records: Sequence[WeeklyRecord],
    record_id: Optional[int] = None,
) -> Optional[WeeklyRecord]:
    completed = completed_newest_first(records)
    if not completed:
        return None
    if record_id is not None:
        for record in completed:
            if record.pk == record_id:
                return record
    return completed[0]


def filter_records(
    queryset: QuerySet[WeeklyRecord],
    *,
    status: str = HistoryStatus.ALL,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    min_profit: Optional[Decimal] = None,
) -> QuerySet[WeeklyRecord]:
    if status == HistoryStatus.COMPLETED:
        queryset = queryset.filter(is_sales_entry_complete=True)
    elif status == HistoryStatus.PENDING:
        queryset = queryset.filter(is_sales_entry_complete=False)
    if start_date:
        queryset = queryset.filter(week_date__gte=start_date)
    if end_date:
        queryset = queryset.filter(week_date__lte=end_date)
    if min_profit is not None:
        # Pending weeks have no profit yet and are never hidden by this filter.
        queryset = queryset.filter(Q(is_sales_entry_complete=False) | Q(net_profit__gte=min_profit))
    return queryset.order_by("-week_date")


def build_dashboard(records: Sequence[WeeklyRecord], selected_id: Optional[int] = None) -> DashboardSnapshot:
    records = list(records)
    return DashboardSnapshot(
        record_count=len(records),
        totals=build_lifetime_totals(records),
        display_record=select_display_record(records, selected_id),
        completed_records=completed_newest_first(records),
        chart=build_chart_series(records),
        pending_records=[record for record in records if not record.is_sales_entry_complete],
    )
