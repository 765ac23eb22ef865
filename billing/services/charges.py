"""GST and fuel-surcharge arithmetic.

All amounts are :class:`~decimal.Decimal`; missing or blank inputs count as
zero and results are rounded half-up to whole paise/cents.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")
DEFAULT_GST_PERCENT = Decimal("18")


def to_decimal(value: object) -> Decimal:
    """Coerce request input to Decimal; ``None``, blanks and garbage become 0."""

    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)
    text = str(value).strip()
    if not text:
        return ZERO
    try:
        return Decimal(text)
    except InvalidOperation:
        return ZERO


def money(value: object) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(base: object, percent: object) -> Decimal:
    return money(to_decimal(base) * to_decimal(percent) / HUNDRED)


def resolve_gst_percent(value: object, default: Decimal = DEFAULT_GST_PERCENT) -> Decimal:
    """Return the requested GST percent, or ``default`` when it was left blank."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return to_decimal(value)


def fuel_surcharge_total(subtotal: object, fuel_surcharge_percent: object) -> Decimal:
    return percent_of(subtotal, fuel_surcharge_percent)


def gst_amount(net_amount: object, gst_percent: object) -> Decimal:
    return percent_of(net_amount, gst_percent)


@dataclass(frozen=True, slots=True)
class BatchTotals:
    subtotal: Decimal
    gst_percent: Decimal
    gst_amount: Decimal
    net_amount: Decimal


def batch_totals(booking_totals: Iterable[object], gst_percent: object) -> BatchTotals:
    """Totals for an invoice built from bookings: GST is charged on the bookings' sum."""

    subtotal = money(sum((to_decimal(total) for total in booking_totals), ZERO))
    percent = to_decimal(gst_percent)
    gst = percent_of(subtotal, percent)
    return BatchTotals(subtotal=subtotal, gst_percent=percent, gst_amount=gst, net_amount=subtotal + gst)
