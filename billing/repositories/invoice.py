"""Invoice repository handling franchise-scoped queries."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import ColumnElement, Select, case, func, or_, select

from billing.core.franchise import FranchiseContext
from billing.db.models import Booking, Invoice, InvoiceItem, InvoiceStatus, PaymentStatus

from .base import FranchiseScopedRepository

CENT = Decimal("0.01")
SUMMARY_KEYS = ("paid_amount", "unpaid_amount", "total_sale", "partial_paid")


class InvoiceRepository(FranchiseScopedRepository[Invoice]):
    """Invoice repository with filtering, aggregate and detail helpers."""

    model = Invoice

    def _filter_criteria(
        self,
        franchise: FranchiseContext,
        status: PaymentStatus | None = None,
        search: str | None = None,
        company_name: str | None = None,
        invoice_number: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        single_only: bool = False,
        without_gst: bool = False,
    ) -> list[ColumnElement[bool]]:
        criteria: list[ColumnElement[bool]] = [self.model.franchise_id == franchise.franchise_id]
        if status is not None:
            criteria.append(self.model.payment_status == status)
        if search:
            criteria.append(
                or_(
                    self.model.invoice_number.contains(search, autoescape=True),
                    self.model.customer_id.contains(search, autoescape=True),
                )
            )
        if company_name:
            criteria.append(self.model.customer_id.contains(company_name, autoescape=True))
        if invoice_number:
            criteria.append(self.model.invoice_number.contains(invoice_number, autoescape=True))
        if from_date:
            criteria.append(self.model.invoice_date >= from_date)
        if to_date:
            criteria.append(self.model.invoice_date <= to_date)
        if single_only:
            criteria.append(self.model.consignment_no.is_not(None))
        if without_gst:
            criteria.append(self.model.gst_percent == 0)
        return criteria

    def build_filter_query(
        self,
        franchise: FranchiseContext,
        status: PaymentStatus | None = None,
        search: str | None = None,
        company_name: str | None = None,
        invoice_number: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        single_only: bool = False,
        without_gst: bool = False,
        offset: int = 0,
        limit: int = 20,
    ) -> Select[tuple[Invoice]]:
        criteria = self._filter_criteria(
            franchise,
            status=status,
            search=search,
            company_name=company_name,
            invoice_number=invoice_number,
            from_date=from_date,
            to_date=to_date,
            single_only=single_only,
            without_gst=without_gst,
        )
        return (
            self._base_query()
            .where(*criteria)
            .order_by(self.model.invoice_date.desc(), self.model.created_at.desc())
            .offset(offset)
            .limit(limit)
        )

    def count_filtered(
        self,
        franchise: FranchiseContext,
        status: PaymentStatus | None = None,
        search: str | None = None,
        company_name: str | None = None,
        invoice_number: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        single_only: bool = False,
        without_gst: bool = False,
    ) -> int:
        criteria = self._filter_criteria(
            franchise,
            status=status,
            search=search,
            company_name=company_name,
            invoice_number=invoice_number,
            from_date=from_date,
            to_date=to_date,
            single_only=single_only,
            without_gst=without_gst,
        )
        statement = select(func.count()).select_from(self.model).where(*criteria)
        return int(self.session.scalar(statement) or 0)

    def summarize(self, franchise: FranchiseContext, single_only: bool = False) -> dict[str, Decimal]:
        """Sum net amounts per payment status; every figure is 0 when nothing matches."""

        def _sum_for(payment_status: PaymentStatus | None):
            amount = self.model.net_amount
            if payment_status is not None:
                amount = case((self.model.payment_status == payment_status, self.model.net_amount), else_=0)
            return func.coalesce(func.sum(amount), 0)

        statement = select(
            _sum_for(PaymentStatus.PAID).label("paid_amount"),
            _sum_for(PaymentStatus.UNPAID).label("unpaid_amount"),
            _sum_for(None).label("total_sale"),
            _sum_for(PaymentStatus.PARTIAL).label("partial_paid"),
        ).where(self.model.franchise_id == franchise.franchise_id)
        if single_only:
            statement = statement.where(self.model.consignment_no.is_not(None))

        row = self.session.execute(statement).one()
        return {key: Decimal(str(value or 0)).quantize(CENT) for key, value in zip(SUMMARY_KEYS, row)}

    def count_for_year(self, franchise: FranchiseContext, year: int) -> int:
        """Count the franchise's invoices dated within the calendar year."""

        statement = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.franchise_id == franchise.franchise_id)
            .where(self.model.invoice_date.between(date(year, 1, 1), date(year, 12, 31)))
        )
        return int(self.session.scalar(statement) or 0)

    def list_items(self, invoice_id: str) -> list[tuple[InvoiceItem, str | None]]:
        """Return items with the consignment number of their booking, if it still exists."""

        statement = (
            select(InvoiceItem, Booking.consignment_no)
            .outerjoin(Booking, InvoiceItem.booking_id == Booking.id)
            .where(InvoiceItem.invoice_id == invoice_id)
            .order_by(InvoiceItem.created_at)
        )
        return [(item, consignment_no) for item, consignment_no in self.session.execute(statement).all()]

    def _recycled_criteria(self, franchise: FranchiseContext, search: str | None) -> list[ColumnElement[bool]]:
        criteria: list[ColumnElement[bool]] = [
            self.model.franchise_id == franchise.franchise_id,
            self.model.status == InvoiceStatus.CANCELLED,
        ]
        if search:
            criteria.append(
                or_(
                    self.model.invoice_number.contains(search, autoescape=True),
                    self.model.customer_id.contains(search, autoescape=True),
                )
            )
        return criteria

    def build_recycled_query(
        self,
        franchise: FranchiseContext,
        search: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Select[tuple[Invoice]]:
        return (
            self._base_query()
            .where(*self._recycled_criteria(franchise, search))
            .order_by(self.model.invoice_date.desc(), self.model.created_at.desc())
            .offset(offset)
            .limit(limit)
        )

    def count_recycled(self, franchise: FranchiseContext, search: str | None = None) -> int:
        statement = select(func.count()).select_from(self.model).where(*self._recycled_criteria(franchise, search))
        return int(self.session.scalar(statement) or 0)
