from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django import template

register = template.Library()

EMPTY_VALUE = "-"


def _to_decimal(value: object) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None


def _group_indian(digits: str) -> str:
    """Group an integer string as lakhs and crores: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def _format_indian(value: Decimal, decimals: int) -> str:
    decimals = max(decimals, 0)
    quantum = Decimal(1).scaleb(-decimals)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    formatted = f"{abs(rounded):.{decimals}f}"
    if decimals:
        integer_part, fraction_part = formatted.split(".")
        return f"{sign}{_group_indian(integer_part)}.{fraction_part}"
    return f"{sign}{_group_indian(formatted)}"


@register.filter(name="number_format")
def number_format(value: object, decimals: int = 2) -> str:
    try:
        decimals_int = int(decimals)
    except (TypeError, ValueError):
        decimals_int = 2
    number = _to_decimal(value)
    if number is None:
        return EMPTY_VALUE
    return _format_indian(number, decimals_int)


@register.filter(name="inr")
def inr(value: object) -> str:
    """Format amounts as whole rupees."""
    number = _to_decimal(value)
    if number is None:
        return EMPTY_VALUE
    formatted = _format_indian(number, 0)
    if formatted.startswith("-"):
        return f"-Rs. {formatted[1:]}"
    return f"Rs. {formatted}"
