"""Strawberry GraphQL schema definition."""
from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import TypeVar

import strawberry
from graphql import GraphQLError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from strawberry.types import Info

from billing.api.errors import INTERNAL_ERROR_DETAIL
from billing.core.franchise import FranchiseContext
from billing.db.models import InvoiceStatus, PaymentStatus
from billing.graphql.context import FRANCHISE_HEADER, GraphQLContext
from billing.schemas.franchise import FranchiseCreate, FranchiseRead
from billing.schemas.invoice import (
    InvoiceDetail,
    InvoiceFilterParams,
    InvoiceListResponse,
    InvoicePaymentUpdate,
    InvoiceRead,
    InvoiceSummary,
    RecycledInvoicePage,
)
from billing.schemas.invoice_generation import (
    BatchInvoiceGenerateRequest,
    GeneratedInvoice,
    InvoiceGenerateRequest,
)
from billing.services.exceptions import ServiceError
from billing.services.franchise_service import FranchiseService
from billing.services.invoice_service import InvoiceService
from billing.services.invoice_writer import InvoiceWriter

logger = logging.getLogger(__name__)

ServiceType = TypeVar("ServiceType")
ResultType = TypeVar("ResultType")


PaymentStatusEnum = strawberry.enum(PaymentStatus, name="PaymentStatus")
InvoiceStatusEnum = strawberry.enum(InvoiceStatus, name="InvoiceStatus")


@contextmanager
def _session_scope(context: GraphQLContext):
    session = context.get_session()
    try:
        yield session
    finally:
        session.close()


def _require_franchise(context: GraphQLContext) -> FranchiseContext:
    if context.franchise is None:
        raise GraphQLError(f"Missing {FRANCHISE_HEADER} header")
    return context.franchise


def _execute_with_service(
    info: Info[GraphQLContext, None],
    builder: Callable[[Session, GraphQLContext], ServiceType],
    executor: Callable[[ServiceType], ResultType],
) -> ResultType:
    context = info.context
    with _session_scope(context) as session:
        service = builder(session, context)
        try:
            return executor(service)
        except ServiceError as exc:
            raise GraphQLError(str(exc)) from exc
        except SQLAlchemyError as exc:
            logger.exception("GraphQL operation failed on the database")
            raise GraphQLError(INTERNAL_ERROR_DETAIL) from exc


@strawberry.type
class HealthCheck:
    """Simple health payload for initial schema bootstrap."""

    status: str


@strawberry.type
class FranchiseType:
    id: strawberry.ID
    name: str
    created_at: datetime
    invoice_count: int
    booking_count: int
    outstanding_balance: float


@strawberry.type
class InvoiceItemType:
    id: strawberry.ID
    booking_id: strawberry.ID | None
    description: str
    quantity: int
    unit_price: float
    amount: float
    consignment_no: str | None


@strawberry.type
class InvoiceType:
    id: strawberry.ID
    franchise_id: strawberry.ID
    invoice_number: str
    invoice_date: date
    customer_id: str
    address: str | None
    period_from: date | None
    period_to: date | None
    consignment_no: str | None
    fuel_surcharge_percent: float
    fuel_surcharge_total: float
    gst_percent: float
    gst_amount: float
    subtotal_amount: float
    total_amount: float
    net_amount: float
    payment_status: PaymentStatusEnum
    paid_amount: float
    balance_amount: float
    status: InvoiceStatusEnum
    created_at: datetime
    items: list[InvoiceItemType] = strawberry.field(default_factory=list)


@strawberry.type
class PaginationType:
    total: int
    page: int
    limit: int
    total_pages: int


@strawberry.type
class InvoiceListType:
    items: list[InvoiceType]
    pagination: PaginationType


@strawberry.type
class InvoiceSummaryType:
    paid_amount: float
    unpaid_amount: float
    total_sale: float
    partial_paid: float


@strawberry.type
class RecycledInvoiceType:
    id: strawberry.ID
    invoice_number: str
    customer_id: str
    invoice_date: date
    net_amount: float


@strawberry.type
class RecycledInvoiceListType:
    invoices: list[RecycledInvoiceType]
    total: int
    page: int
    limit: int
    pages: int


@strawberry.type
class GeneratedInvoiceType:
    id: strawberry.ID
    invoice_number: str


@strawberry.type
class BatchGenerationResult:
    count: int


@strawberry.type
class SuccessResult:
    success: bool


@strawberry.input
class InvoiceFilterInput:
    status: PaymentStatusEnum | None = None
    search: str | None = None
    company_name: str | None = None
    invoice_number: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    single_only: bool = False
    without_gst: bool = False


@strawberry.input
class InvoiceGenerateInput:
    customer_id: str
    period_from: date
    period_to: date
    bookings: list[strawberry.ID] = strawberry.field(default_factory=list)
    invoice_no: str | None = None
    invoice_date: date | None = None
    address: str | None = None
    gst_percent: float | None = None
    fuel_surcharge_tax_percent: float | None = None
    total: float | None = None
    subtotal: float | None = None
    net_amount: float | None = None
    royalty_charge: float | None = None
    docket_charge: float | None = None
    other_charge: float | None = None
    invoice_discount: bool = False
    reverse_charge: bool = False


@strawberry.input
class BatchInvoiceGenerateInput:
    customers: list[str]
    period_from: date
    period_to: date
    invoice_date: date | None = None
    gst_percent: float | None = None


def _decimal(value: float | None) -> Decimal | None:
    return None if value is None else Decimal(str(value))


def _to_franchise_type(franchise: FranchiseRead) -> FranchiseType:
    return FranchiseType(
        id=franchise.id,
        name=franchise.name,
        created_at=franchise.created_at,
        invoice_count=franchise.invoice_count,
        booking_count=franchise.booking_count,
        outstanding_balance=franchise.outstanding_balance,
    )


def _to_invoice_type(invoice: InvoiceRead) -> InvoiceType:
    items = []
    if isinstance(invoice, InvoiceDetail):
        items = [
            InvoiceItemType(
                id=item.id,
                booking_id=item.booking_id,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                amount=item.amount,
                consignment_no=item.consignment_no,
            )
            for item in invoice.items
        ]
    return InvoiceType(
        id=invoice.id,
        franchise_id=invoice.franchise_id,
        invoice_number=invoice.invoice_number,
        invoice_date=invoice.invoice_date,
        customer_id=invoice.customer_id,
        address=invoice.address,
        period_from=invoice.period_from,
        period_to=invoice.period_to,
        consignment_no=invoice.consignment_no,
        fuel_surcharge_percent=invoice.fuel_surcharge_percent,
        fuel_surcharge_total=invoice.fuel_surcharge_total,
        gst_percent=invoice.gst_percent,
        gst_amount=invoice.gst_amount,
        subtotal_amount=invoice.subtotal_amount,
        total_amount=invoice.total_amount,
        net_amount=invoice.net_amount,
        payment_status=PaymentStatusEnum(invoice.payment_status),
        paid_amount=invoice.paid_amount,
        balance_amount=invoice.balance_amount,
        status=InvoiceStatusEnum(invoice.status),
        created_at=invoice.created_at,
        items=items,
    )


def _to_invoice_list(response: InvoiceListResponse) -> InvoiceListType:
    pagination = response.pagination
    return InvoiceListType(
        items=[_to_invoice_type(item) for item in response.data],
        pagination=PaginationType(
            total=pagination.total,
            page=pagination.page,
            limit=pagination.limit,
            total_pages=pagination.total_pages,
        ),
    )


def _to_summary_type(summary: InvoiceSummary) -> InvoiceSummaryType:
    return InvoiceSummaryType(
        paid_amount=summary.paid_amount,
        unpaid_amount=summary.unpaid_amount,
        total_sale=summary.total_sale,
        partial_paid=summary.partial_paid,
    )


def _to_recycled_list(page: RecycledInvoicePage) -> RecycledInvoiceListType:
    return RecycledInvoiceListType(
        invoices=[
            RecycledInvoiceType(
                id=row.id,
                invoice_number=row.invoice_number,
                customer_id=row.customer_id,
                invoice_date=row.invoice_date,
                net_amount=row.net_amount,
            )
            for row in page.invoices
        ],
        total=page.pagination.total,
        page=page.pagination.page,
        limit=page.pagination.limit,
        pages=page.pagination.pages,
    )


def _to_generated_type(invoice: GeneratedInvoice) -> GeneratedInvoiceType:
    return GeneratedInvoiceType(id=invoice.id, invoice_number=invoice.invoice_number)


def _build_invoice_filters(filters: InvoiceFilterInput | None) -> InvoiceFilterParams:
    if filters is None:
        return InvoiceFilterParams()
    return InvoiceFilterParams(
        status=filters.status,
        search=filters.search,
        company_name=filters.company_name,
        invoice_number=filters.invoice_number,
        from_date=filters.from_date,
        to_date=filters.to_date,
        type="single" if filters.single_only else None,
        without_gst=filters.without_gst,
    )


def _build_generate_request(payload: InvoiceGenerateInput) -> InvoiceGenerateRequest:
    return InvoiceGenerateRequest(
        customer_id=payload.customer_id,
        period_from=payload.period_from,
        period_to=payload.period_to,
        bookings=[str(booking_id) for booking_id in payload.bookings],
        invoice_no=payload.invoice_no,
        invoice_date=payload.invoice_date,
        address=payload.address,
        gst_percent=_decimal(payload.gst_percent),
        fuel_surcharge_tax_percent=_decimal(payload.fuel_surcharge_tax_percent),
        total=_decimal(payload.total),
        subtotal=_decimal(payload.subtotal),
        net_amount=_decimal(payload.net_amount),
        royalty_charge=_decimal(payload.royalty_charge),
        docket_charge=_decimal(payload.docket_charge),
        other_charge=_decimal(payload.other_charge),
        invoice_discount=payload.invoice_discount,
        reverse_charge=payload.reverse_charge,
    )


def _build_batch_request(payload: BatchInvoiceGenerateInput) -> BatchInvoiceGenerateRequest:
    return BatchInvoiceGenerateRequest(
        customers=list(payload.customers),
        period_from=payload.period_from,
        period_to=payload.period_to,
        invoice_date=payload.invoice_date,
        gst_percent=_decimal(payload.gst_percent),
    )


def _invoice_service(session: Session, context: GraphQLContext) -> InvoiceService:
    return InvoiceService(session, _require_franchise(context))


def _invoice_writer(session: Session, context: GraphQLContext) -> InvoiceWriter:
    return InvoiceWriter(session, _require_franchise(context))


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field(description="Basic service liveness check")
    def health(self) -> HealthCheck:
        return HealthCheck(status="ok")

    @strawberry.field(description="List all franchises")
    def franchises(self, info: Info[GraphQLContext, None]) -> list[FranchiseType]:
        result = _execute_with_service(
            info,
            lambda session, _context: FranchiseService(session),
            lambda service: service.list(),
        )
        return [_to_franchise_type(item) for item in result]

    @strawberry.field(description="Franchise with its invoice and booking activity")
    def franchise(self, info: Info[GraphQLContext, None], id: strawberry.ID) -> FranchiseType:
        result = _execute_with_service(
            info,
            lambda session, _context: FranchiseService(session),
            lambda service: service.get(str(id)),
        )
        return _to_franchise_type(result)

    @strawberry.field(description="List franchise invoices with optional filters")
    def invoices(
        self,
        info: Info[GraphQLContext, None],
        filters: InvoiceFilterInput | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> InvoiceListType:
        if page < 1 or limit < 1:
            raise GraphQLError("page and limit must be positive")
        response = _execute_with_service(
            info,
            _invoice_service,
            lambda service: service.list(_build_invoice_filters(filters), page=page, limit=limit),
        )
        return _to_invoice_list(response)

    @strawberry.field(description="Fetch one invoice with its items")
    def invoice(self, info: Info[GraphQLContext, None], invoice_id: strawberry.ID) -> InvoiceType:
        detail = _execute_with_service(
            info,
            _invoice_service,
            lambda service: service.get(str(invoice_id)),
        )
        return _to_invoice_type(detail)

    @strawberry.field(description="Net amounts grouped by payment status")
    def invoice_summary(self, info: Info[GraphQLContext, None]) -> InvoiceSummaryType:
        summary = _execute_with_service(info, _invoice_service, lambda service: service.summary())
        return _to_summary_type(summary)

    @strawberry.field(description="Net amounts of single-consignment invoices grouped by payment status")
    def single_invoice_summary(self, info: Info[GraphQLContext, None]) -> InvoiceSummaryType:
        summary = _execute_with_service(info, _invoice_service, lambda service: service.single_summary())
        return _to_summary_type(summary)

    @strawberry.field(description="List cancelled invoices")
    def recycled_invoices(
        self,
        info: Info[GraphQLContext, None],
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> RecycledInvoiceListType:
        if page < 1 or limit < 1:
            raise GraphQLError("page and limit must be positive")
        result = _execute_with_service(
            info,
            _invoice_service,
            lambda service: service.list_recycled(search=search, page=page, limit=limit),
        )
        return _to_recycled_list(result)


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(description="Register a new franchise")
    def create_franchise(self, info: Info[GraphQLContext, None], name: str) -> FranchiseType:
        franchise = _execute_with_service(
            info,
            lambda session, _context: FranchiseService(session),
            lambda service: service.create(FranchiseCreate(name=name)),
        )
        return _to_franchise_type(franchise)

    @strawberry.mutation(description="Generate an invoice for the selected bookings")
    def generate_invoice(
        self,
        info: Info[GraphQLContext, None],
        payload: InvoiceGenerateInput,
    ) -> GeneratedInvoiceType:
        invoice = _execute_with_service(
            info,
            _invoice_writer,
            lambda writer: writer.generate(_build_generate_request(payload)),
        )
        return _to_generated_type(invoice)

    @strawberry.mutation(description="Generate one invoice per customer for the period")
    def generate_invoices(
        self,
        info: Info[GraphQLContext, None],
        payload: BatchInvoiceGenerateInput,
    ) -> BatchGenerationResult:
        count = _execute_with_service(
            info,
            _invoice_writer,
            lambda writer: writer.generate_batch(_build_batch_request(payload)),
        )
        return BatchGenerationResult(count=count)

    @strawberry.mutation(description="Record a payment status change")
    def update_invoice_payment(
        self,
        info: Info[GraphQLContext, None],
        invoice_id: strawberry.ID,
        payment_status: PaymentStatusEnum,
        paid_amount: float | None = None,
    ) -> InvoiceType:
        invoice = _execute_with_service(
            info,
            _invoice_service,
            lambda service: service.update_payment(
                str(invoice_id),
                InvoicePaymentUpdate(
                    payment_status=PaymentStatus(payment_status.value),
                    paid_amount=_decimal(paid_amount),
                ),
            ),
        )
        return _to_invoice_type(invoice)

    @strawberry.mutation(description="Delete an invoice and its items")
    def delete_invoice(self, info: Info[GraphQLContext, None], invoice_id: strawberry.ID) -> SuccessResult:
        _execute_with_service(
            info,
            _invoice_service,
            lambda service: service.delete(str(invoice_id)),
        )
        return SuccessResult(success=True)


schema = strawberry.Schema(query=Query, mutation=Mutation)
