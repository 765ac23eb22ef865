"""Request and response schemas for the invoice generation endpoints.

Required fields are validated by the invoice writer rather than by pydantic so
that a missing customer or period is reported as a 400 with a business
message. Blank strings are accepted wherever a value is optional and are
treated as absent.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

_OPTIONAL_FIELDS = (
    "customer_id",
    "booking_id",
    "invoice_no",
    "consignment_no",
    "address",
    "invoice_date",
    "period_from",
    "period_to",
    "gst_percent",
    "fuel_surcharge_tax_percent",
    "total",
    "subtotal",
    "royalty_charge",
    "docket_charge",
    "other_charge",
    "net_amount",
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ChargeFields(BaseModel):
    """Amounts and flags shared by the single-invoice generation variants."""

    address: str | None = Field(default=None, max_length=500)
    invoice_date: date | None = None
    invoice_discount: bool = False
    reverse_charge: bool = False
    total: Decimal | None = None
    subtotal: Decimal | None = None
    royalty_charge: Decimal | None = None
    docket_charge: Decimal | None = None
    other_charge: Decimal | None = None
    net_amount: Decimal | None = None

    @field_validator(*_OPTIONAL_FIELDS, mode="before", check_fields=False)
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        return _blank_to_none(value)


class InvoiceGenerateRequest(ChargeFields):
    """Invoice covering an explicit list of bookings."""

    customer_id: str | None = None
    invoice_no: str | None = Field(default=None, max_length=64)
    period_from: date | None = None
    period_to: date | None = None
    gst_percent: Decimal | None = None
    fuel_surcharge_tax_percent: Decimal | None = None
    bookings: list[str] = Field(default_factory=list)


class SingleInvoiceGenerateRequest(ChargeFields):
    """Invoice for exactly one booking (single consignment)."""

    customer_id: str | None = None
    booking_id: str | None = None
    invoice_no: str | None = Field(default=None, max_length=64)
    consignment_no: str | None = Field(default=None, max_length=64)
    period_from: date | None = None
    period_to: date | None = None
    gst_percent: Decimal | None = None
    fuel_surcharge_tax_percent: Decimal | None = None


class InvoiceWithoutGstRequest(ChargeFields):
    """Invoice in the WG series; GST and fuel surcharge are always zero."""

    customer_id: str | None = None
    period_from: date | None = None
    period_to: date | None = None
    bookings: list[str] = Field(default_factory=list)


class BatchInvoiceGenerateRequest(BaseModel):
    """One invoice per customer, built from the customer's bookings in the period."""

    customers: list[str] = Field(default_factory=list)
    invoice_date: date | None = None
    period_from: date | None = None
    period_to: date | None = None
    gst_percent: Decimal | None = None

    @field_validator("invoice_date", "period_from", "period_to", "gst_percent", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        return _blank_to_none(value)


class GeneratedInvoice(BaseModel):
    id: str
    invoice_number: str


class InvoiceGenerateResponse(BaseModel):
    success: bool = True
    message: str
    data: GeneratedInvoice


class BatchInvoiceGenerateResponse(BaseModel):
    success: bool = True
    message: str
    count: int
