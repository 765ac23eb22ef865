"""Invoice REST endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from billing.api.dependencies import get_invoice_filters, get_invoice_service, get_invoice_writer
from billing.api.errors import map_service_error
from billing.schemas.invoice import (
    InvoiceDetailResponse,
    InvoiceFilterParams,
    InvoiceListResponse,
    InvoicePaymentUpdate,
    InvoiceSummaryResponse,
    MessageResponse,
    RecycledInvoiceListResponse,
)
from billing.schemas.invoice_generation import (
    BatchInvoiceGenerateRequest,
    BatchInvoiceGenerateResponse,
    InvoiceGenerateRequest,
    InvoiceGenerateResponse,
    InvoiceWithoutGstRequest,
    SingleInvoiceGenerateRequest,
)
from billing.services.exceptions import ServiceError
from billing.services.invoice_service import DEFAULT_PAGE_SIZE, DEFAULT_RECYCLED_PAGE_SIZE, InvoiceService
from billing.services.invoice_writer import InvoiceWriter

router = APIRouter(prefix="/franchises/{franchise_id}/invoices", tags=["invoices"])

MAX_PAGE_SIZE = 500


@router.get("", response_model=InvoiceListResponse)
def list_invoices(
    filters: InvoiceFilterParams = Depends(get_invoice_filters),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceListResponse:
    """List invoices with optional filters."""

    return service.list(filters, page=page, limit=limit)


@router.get("/summary", response_model=InvoiceSummaryResponse)
def invoice_summary(service: InvoiceService = Depends(get_invoice_service)) -> InvoiceSummaryResponse:
    """Net amounts of all invoices grouped by payment status."""

    return InvoiceSummaryResponse(data=service.summary())


@router.get("/single-summary", response_model=InvoiceSummaryResponse)
def single_invoice_summary(service: InvoiceService = Depends(get_invoice_service)) -> InvoiceSummaryResponse:
    """Same aggregates as the summary, restricted to single-consignment invoices."""

    return InvoiceSummaryResponse(data=service.single_summary())


@router.get("/recycled", response_model=RecycledInvoiceListResponse)
def list_recycled_invoices(
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_RECYCLED_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: InvoiceService = Depends(get_invoice_service),
) -> RecycledInvoiceListResponse:
    """List cancelled invoices."""

    return RecycledInvoiceListResponse(data=service.list_recycled(search=search, page=page, limit=limit))


@router.post("/generate", response_model=InvoiceGenerateResponse, status_code=status.HTTP_201_CREATED)
def generate_invoice(
    payload: InvoiceGenerateRequest,
    writer: InvoiceWriter = Depends(get_invoice_writer),
) -> InvoiceGenerateResponse:
    """Generate one invoice covering the selected bookings."""

    try:
        invoice = writer.generate(payload)
    except ServiceError as exc:
        raise map_service_error(exc) from exc
    return InvoiceGenerateResponse(message="Invoice generated successfully", data=invoice)


@router.post(
    "/generate-multiple",
    response_model=BatchInvoiceGenerateResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_invoices(
    payload: BatchInvoiceGenerateRequest,
    writer: InvoiceWriter = Depends(get_invoice_writer),
) -> BatchInvoiceGenerateResponse:
    """Generate one invoice per customer from their bookings in the period."""

    try:
        count = writer.generate_batch(payload)
    except ServiceError as exc:
        raise map_service_error(exc) from exc
    return BatchInvoiceGenerateResponse(message=f"Successfully generated {count} invoices", count=count)


@router.post("/generate-single", response_model=InvoiceGenerateResponse, status_code=status.HTTP_201_CREATED)
def generate_single_invoice(
    payload: SingleInvoiceGenerateRequest,
    writer: InvoiceWriter = Depends(get_invoice_writer),
) -> InvoiceGenerateResponse:
    """Generate an invoice for a single booking."""

    try:
        invoice = writer.generate_single(payload)
    except ServiceError as exc:
        raise map_service_error(exc) from exc
    return InvoiceGenerateResponse(message="Single invoice generated successfully", data=invoice)


@router.post(
    "/generate-without-gst",
    response_model=InvoiceGenerateResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_invoice_without_gst(
    payload: InvoiceWithoutGstRequest,
    writer: InvoiceWriter = Depends(get_invoice_writer),
) -> InvoiceGenerateResponse:
    """Generate an invoice in the WG series without GST or fuel surcharge."""

    try:
        invoice = writer.generate_without_gst(payload)
    except ServiceError as exc:
        raise map_service_error(exc) from exc
    return InvoiceGenerateResponse(message="Invoice without GST generated successfully", data=invoice)


@router.get("/{invoice_id}", response_model=InvoiceDetailResponse)
def get_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceDetailResponse:
    """Fetch an invoice with its items."""

    try:
        return InvoiceDetailResponse(data=service.get(invoice_id))
    except ServiceError as exc:
        raise map_service_error(exc) from exc


@router.put("/{invoice_id}", response_model=MessageResponse)
def update_invoice(
    invoice_id: str,
    payload: InvoicePaymentUpdate,
    service: InvoiceService = Depends(get_invoice_service),
) -> MessageResponse:
    """Record a payment status change."""

    try:
        service.update_payment(invoice_id, payload)
    except ServiceError as exc:
        raise map_service_error(exc) from exc
    return MessageResponse(message="Invoice updated successfully")


@router.delete("/{invoice_id}", response_model=MessageResponse)
def delete_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> MessageResponse:
    """Delete an invoice and its items."""

    try:
        service.delete(invoice_id)
    except ServiceError as exc:
        raise map_service_error(exc) from exc
    return MessageResponse(message="Invoice deleted successfully")
