"""Pluggable rules deciding whether a payment update is acceptable."""
from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

from billing.db.models import Invoice, PaymentStatus

from .exceptions import PaymentPolicyError

PaymentPolicy = Callable[[Invoice, PaymentStatus, Decimal], None]


def permissive_policy(invoice: Invoice, payment_status: PaymentStatus, paid_amount: Decimal) -> None:
    """Accept every update, including overpayments and status regressions."""


def strict_policy(invoice: Invoice, payment_status: PaymentStatus, paid_amount: Decimal) -> None:
    net_amount = Decimal(invoice.net_amount)
    if paid_amount < 0:
        raise PaymentPolicyError("Paid amount cannot be negative")
    if paid_amount > net_amount:
        raise PaymentPolicyError("Paid amount cannot exceed the invoice net amount")
    if payment_status is PaymentStatus.PAID and paid_amount != net_amount:
        raise PaymentPolicyError("A paid invoice must be settled in full")
    if payment_status is PaymentStatus.UNPAID and paid_amount != 0:
        raise PaymentPolicyError("An unpaid invoice cannot carry a paid amount")


POLICIES: dict[str, PaymentPolicy] = {
    "permissive": permissive_policy,
    "strict": strict_policy,
}


def resolve_payment_policy(name: str) -> PaymentPolicy:
    try:
        return POLICIES[name]
    except KeyError as exc:
        raise ValueError(f"Unknown payment policy {name!r}") from exc
