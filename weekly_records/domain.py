"""Weekly record states and the metrics derived from their raw fields.

A week starts with the Saturday purchase and is closed by the Sunday sales
entry. Both stages are modelled as explicit variants so a record can never
carry sales figures without being marked as complete.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

logger = logging.getLogger(__name__)

DECIMAL_ZERO = Decimal("0")
MONEY_QUANTIZE = Decimal("0.01")
WEIGHT_QUANTIZE = Decimal("0.001")
PERCENT_QUANTIZE = Decimal("0.01")

GUARD_MEAT_SOLD = "meat_sold"
GUARD_WASTAGE_PERCENTAGE = "wastage_percentage"
GUARD_PROFIT_PER_HEN = "profit_per_hen"
GUARD_PROFIT_PER_KG = "profit_per_kg"


@dataclass(frozen=True)
class PurchaseFields:
    week_date: date
    total_hens: int
    total_live_weight: Decimal
    purchase_rate: Decimal


@dataclass(frozen=True)
class SalesFields:
    selling_price: Optional[Decimal] = None
    cash_collected: Optional[Decimal] = None
    upi_collected: Optional[Decimal] = None
    expense_tea: Optional[Decimal] = None
    expense_fuel: Optional[Decimal] = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.selling_price,
                self.cash_collected,
                self.upi_collected,
                self.expense_tea,
                self.expense_fuel,
            )
        )


@dataclass(frozen=True)
class PurchaseStage:
    purchase: PurchaseFields

    is_sales_entry_complete = False


@dataclass(frozen=True)
class SalesCompleteStage:
    purchase: PurchaseFields
    sales: SalesFields
    completed_at: Optional[datetime] = None

    is_sales_entry_complete = True


RecordState = Union[PurchaseStage, SalesCompleteStage]


@dataclass(frozen=True)
class SalesMetrics:
    total_revenue: Decimal
    meat_sold: Decimal
    wastage: Decimal
    wastage_percentage: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    profit_per_hen: Decimal
    profit_per_kg: Decimal


@dataclass(frozen=True)
class RecordMetrics:
    total_purchase_cost: Decimal
    sales: Optional[SalesMetrics] = None
    degenerate_guards: tuple[str, ...] = ()

    @property
    def is_degenerate(self) -> bool:
        return bool(self.degenerate_guards)

    @property
    def has_orphaned_revenue(self) -> bool:
        """Revenue was collected but no meat could be accounted for it."""
        if self.sales is None:
            return False
        return GUARD_MEAT_SOLD in self.degenerate_guards and self.sales.total_revenue > DECIMAL_ZERO

    @property
    def is_oversold(self) -> bool:
        return self.sales is not None and self.sales.wastage < DECIMAL_ZERO


def complete_sales(
    state: RecordState,
    sales: SalesFields,
    *,
    now: datetime,
    preserve_completion_time: bool = True,
) -> SalesCompleteStage:
    """Attach the sales entry to a week, moving it to the completed stage.

    Re-submitting sales for a completed week overwrites the figures. The first
    completion time is kept unless ``preserve_completion_time`` is false.
    """
    completed_at = now
    if isinstance(state, SalesCompleteStage) and preserve_completion_time and state.completed_at:
        completed_at = state.completed_at
    return SalesCompleteStage(purchase=state.purchase, sales=sales, completed_at=completed_at)


def update_purchase(state: RecordState, purchase: PurchaseFields) -> RecordState:
    return replace(state, purchase=purchase)


def derive_metrics(state: RecordState) -> RecordMetrics:
    purchase = state.purchase
    live_weight = _amount(purchase.total_live_weight)
    total_purchase_cost = live_weight * _amount(purchase.purchase_rate)

    if not isinstance(state, SalesCompleteStage):
        return RecordMetrics(total_purchase_cost=_quantize(total_purchase_cost, MONEY_QUANTIZE))

    sales = state.sales
    guards: list[str] = []
    selling_price = _amount(sales.selling_price)

    total_revenue = _amount(sales.cash_collected) + _amount(sales.upi_collected)

    if selling_price > DECIMAL_ZERO:
        meat_sold = total_revenue / selling_price
    else:
        meat_sold = DECIMAL_ZERO
        guards.append(GUARD_MEAT_SOLD)

    # Negative wastage means more meat was sold than was bought live.
    wastage = live_weight - meat_sold

    if live_weight > DECIMAL_ZERO:
        wastage_percentage = wastage / live_weight * Decimal("100")
    else:
        wastage_percentage = DECIMAL_ZERO
        guards.append(GUARD_WASTAGE_PERCENTAGE)

    total_expenses = _amount(sales.expense_tea) + _amount(sales.expense_fuel)
    net_profit = total_revenue - (total_purchase_cost + total_expenses)

    total_hens = int(purchase.total_hens or 0)
    if total_hens > 0:
        profit_per_hen = net_profit / Decimal(total_hens)
    else:
        profit_per_hen = DECIMAL_ZERO
        guards.append(GUARD_PROFIT_PER_HEN)

    if meat_sold > DECIMAL_ZERO:
        profit_per_kg = net_profit / meat_sold
    else:
        profit_per_kg = DECIMAL_ZERO
        guards.append(GUARD_PROFIT_PER_KG)

    if guards:
        logger.debug(
            "Derivation guards applied for week %s: %s",
            purchase.week_date,
            ", ".join(guards),
        )

    return RecordMetrics(
        total_purchase_cost=_quantize(total_purchase_cost, MONEY_QUANTIZE),
        sales=SalesMetrics(
            total_revenue=_quantize(total_revenue, MONEY_QUANTIZE),
            meat_sold=_quantize(meat_sold, WEIGHT_QUANTIZE),
            wastage=_quantize(wastage, WEIGHT_QUANTIZE),
            wastage_percentage=_quantize(wastage_percentage, PERCENT_QUANTIZE),
            total_expenses=_quantize(total_expenses, MONEY_QUANTIZE),
            net_profit=_quantize(net_profit, MONEY_QUANTIZE),
            profit_per_hen=_quantize(profit_per_hen, MONEY_QUANTIZE),
            profit_per_kg=_quantize(profit_per_kg, MONEY_QUANTIZE),
        ),
        degenerate_guards=tuple(guards),
    )


def _amount(value: Optional[Decimal]) -> Decimal:
    if value is None:
        return DECIMAL_ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _quantize(value: Decimal, exponent: Decimal) -> Decimal:
    return value.quantize(exponent, rounding=ROUND_HALF_UP)
