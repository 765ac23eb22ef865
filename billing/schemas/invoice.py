"""Pydantic schemas for invoice listing, detail and payment endpoints."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from billing.db.models import InvoiceStatus, PaymentStatus


class InvoiceFilterParams(BaseModel):
    """Query parameters for invoice listing."""

    status: PaymentStatus | None = None
    search: str | None = None
    company_name: str | None = None
    invoice_number: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    type: str | None = Field(default=None, description='"single" restricts to single-consignment invoices')
    without_gst: bool = False

    @property
    def single_only(self) -> bool:
        return self.type == "single"


class Pagination(BaseModel):
    """Page metadata returned alongside invoice lists."""

    model_config = ConfigDict(populate_by_name=True)

    total: NonNegativeInt
    page: int
    limit: int
    total_pages: NonNegativeInt = Field(alias="totalPages")


class InvoiceRead(BaseModel):
    """Invoice representation returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    franchise_id: str
    invoice_number: str
    invoice_date: date
    customer_id: str
    address: str | None
    period_from: date | None
    period_to: date | None
    consignment_no: str | None
    invoice_discount: bool
    reverse_charge: bool
    fuel_surcharge_percent: float
    fuel_surcharge_total: float
    gst_percent: float
    gst_amount: float
    other_charge: float
    royalty_charge: float
    docket_charge: float
    subtotal_amount: float
    total_amount: float
    net_amount: float
    payment_status: PaymentStatus
    paid_amount: float
    balance_amount: float
    status: InvoiceStatus
    created_at: datetime


class InvoiceListResponse(BaseModel):
    """Paginated invoice list."""

    success: bool = True
    data: list[InvoiceRead]
    pagination: Pagination


class InvoiceSummary(BaseModel):
    paid_amount: float
    unpaid_amount: float
    total_sale: float
    partial_paid: float


class InvoiceSummaryResponse(BaseModel):
    success: bool = True
    data: InvoiceSummary


class InvoiceItemRead(BaseModel):
    """Invoice line joined with the consignment number of its booking."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    invoice_id: str
    booking_id: str | None
    description: str
    quantity: int
    unit_price: float
    amount: float
    consignment_no: str | None = None


class InvoiceDetail(InvoiceRead):
    items: list[InvoiceItemRead]


class InvoiceDetailResponse(BaseModel):
    success: bool = True
    data: InvoiceDetail


class RecycledInvoiceRead(BaseModel):
    """Cancelled invoice row; ``net_amount`` carries the invoice's total amount."""

    id: str
    invoice_number: str
    customer_id: str
    invoice_date: date
    net_amount: float


class RecycledPagination(BaseModel):
    total: NonNegativeInt
    page: int
    limit: int
    pages: NonNegativeInt


class RecycledInvoicePage(BaseModel):
    invoices: list[RecycledInvoiceRead]
    pagination: RecycledPagination


class RecycledInvoiceListResponse(BaseModel):
    success: bool = True
    data: RecycledInvoicePage


class InvoicePaymentUpdate(BaseModel):
    """Payment status change; ``paid_amount`` defaults to 0 when omitted."""

    payment_status: PaymentStatus
    paid_amount: Decimal | None = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
