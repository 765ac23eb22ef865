"""Invoice service exposing franchise-scoped reads, payment updates and deletes."""
from __future__ import annotations

import logging
import math
from decimal import Decimal

from sqlalchemy.orm import Session

from billing.core.database import transactional
from billing.core.franchise import FranchiseContext
from billing.core.settings import get_settings
from billing.db.models import Invoice
from billing.repositories.invoice import InvoiceRepository
from billing.schemas.invoice import (
    InvoiceDetail,
    InvoiceFilterParams,
    InvoiceItemRead,
    InvoiceListResponse,
    InvoicePaymentUpdate,
    InvoiceRead,
    InvoiceSummary,
    Pagination,
    RecycledInvoicePage,
    RecycledInvoiceRead,
    RecycledPagination,
)

from .charges import money
from .exceptions import NotFoundError
from .payment_policy import PaymentPolicy, resolve_payment_policy

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
DEFAULT_RECYCLED_PAGE_SIZE = 10


def _page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


class InvoiceService:
    """Franchise-scoped invoice operations."""

    def __init__(
        self,
        session: Session,
        franchise: FranchiseContext,
        payment_policy: PaymentPolicy | None = None,
    ) -> None:
        self.session = session
        self.franchise = franchise
        self.invoices = InvoiceRepository(session)
        self.payment_policy = payment_policy or resolve_payment_policy(get_settings().payment_policy)

    def list(
        self,
        filters: InvoiceFilterParams,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> InvoiceListResponse:
        criteria = {
            "status": filters.status,
            "search": filters.search,
            "company_name": filters.company_name,
            "invoice_number": filters.invoice_number,
            "from_date": filters.from_date,
            "to_date": filters.to_date,
            "single_only": filters.single_only,
            "without_gst": filters.without_gst,
        }
        statement = self.invoices.build_filter_query(
            self.franchise,
            offset=(page - 1) * limit,
            limit=limit,
            **criteria,
        )
        rows = self.session.scalars(statement).all()
        total = self.invoices.count_filtered(self.franchise, **criteria)
        return InvoiceListResponse(
            data=[InvoiceRead.model_validate(row) for row in rows],
            pagination=Pagination(total=total, page=page, limit=limit, total_pages=_page_count(total, limit)),
        )

    def summary(self) -> InvoiceSummary:
        return InvoiceSummary(**self.invoices.summarize(self.franchise))

    def single_summary(self) -> InvoiceSummary:
        return InvoiceSummary(**self.invoices.summarize(self.franchise, single_only=True))

    def get(self, invoice_id: str) -> InvoiceDetail:
        invoice = self._get_or_raise(invoice_id)
        items = [
            InvoiceItemRead.model_validate(item).model_copy(update={"consignment_no": consignment_no})
            for item, consignment_no in self.invoices.list_items(invoice.id)
        ]
        return InvoiceDetail(**InvoiceRead.model_validate(invoice).model_dump(), items=items)

    def list_recycled(
        self,
        search: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_RECYCLED_PAGE_SIZE,
    ) -> RecycledInvoicePage:
        statement = self.invoices.build_recycled_query(
            self.franchise,
            search=search,
            offset=(page - 1) * limit,
            limit=limit,
        )
        rows = self.session.scalars(statement).all()
        total = self.invoices.count_recycled(self.franchise, search=search)
        return RecycledInvoicePage(
            invoices=[
                RecycledInvoiceRead(
                    id=row.id,
                    invoice_number=row.invoice_number,
                    customer_id=row.customer_id,
                    invoice_date=row.invoice_date,
                    net_amount=float(row.total_amount),
                )
                for row in rows
            ],
            pagination=RecycledPagination(total=total, page=page, limit=limit, pages=_page_count(total, limit)),
        )

    def update_payment(self, invoice_id: str, payload: InvoicePaymentUpdate) -> InvoiceRead:
        invoice = self._get_or_raise(invoice_id)
        paid_amount = money(payload.paid_amount)

        with transactional(self.session):
            self.payment_policy(invoice, payload.payment_status, paid_amount)
            invoice.payment_status = payload.payment_status
            invoice.paid_amount = paid_amount
            invoice.balance_amount = money(Decimal(invoice.net_amount) - paid_amount)

        self.session.refresh(invoice)
        logger.info(
            "Invoice %s marked %s (paid %s, balance %s)",
            invoice.invoice_number,
            invoice.payment_status.value,
            invoice.paid_amount,
            invoice.balance_amount,
        )
        return InvoiceRead.model_validate(invoice)

    def delete(self, invoice_id: str) -> None:
        invoice = self._get_or_raise(invoice_id)
        with transactional(self.session):
            self.invoices.delete(invoice)
        logger.info("Deleted invoice %s for franchise %s", invoice_id, self.franchise.franchise_id)

    def _get_or_raise(self, invoice_id: str) -> Invoice:
        invoice = self.invoices.get_for_franchise(self.franchise, invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        return invoice
