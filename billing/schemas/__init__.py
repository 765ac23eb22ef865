"""Pydantic schemas exposed by the API layer."""
from .franchise import FranchiseCreate, FranchiseRead
from .invoice import (
    InvoiceDetail,
    InvoiceDetailResponse,
    InvoiceFilterParams,
    InvoiceItemRead,
    InvoiceListResponse,
    InvoicePaymentUpdate,
    InvoiceRead,
    InvoiceSummary,
    InvoiceSummaryResponse,
    MessageResponse,
    Pagination,
    RecycledInvoiceListResponse,
    RecycledInvoicePage,
    RecycledInvoiceRead,
    RecycledPagination,
)
from .invoice_generation import (
    BatchInvoiceGenerateRequest,
    BatchInvoiceGenerateResponse,
    GeneratedInvoice,
    InvoiceGenerateRequest,
    InvoiceGenerateResponse,
    InvoiceWithoutGstRequest,
    SingleInvoiceGenerateRequest,
)

__all__ = [
    "FranchiseCreate",
    "FranchiseRead",
    "InvoiceDetail",
    "InvoiceDetailResponse",
    "InvoiceFilterParams",
    "InvoiceItemRead",
    "InvoiceListResponse",
    "InvoicePaymentUpdate",
    "InvoiceRead",
    "InvoiceSummary",
    "InvoiceSummaryResponse",
    "MessageResponse",
    "Pagination",
    "RecycledInvoiceListResponse",
    "RecycledInvoicePage",
    "RecycledInvoiceRead",
    "RecycledPagination",
    "BatchInvoiceGenerateRequest",
    "BatchInvoiceGenerateResponse",
    "GeneratedInvoice",
    "InvoiceGenerateRequest",
    "InvoiceGenerateResponse",
    "InvoiceWithoutGstRequest",
    "SingleInvoiceGenerateRequest",
]
