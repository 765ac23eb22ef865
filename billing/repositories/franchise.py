"""Repository for franchises and their billing activity."""
from __future__ import annotations

from sqlalchemy import Row, Select, func, select

from billing.db.models import Booking, Franchise, Invoice, InvoiceStatus

from .base import Repository


class FranchiseRepository(Repository[Franchise]):
    """Franchise lookups; franchises are the root of every scoped query."""

    model = Franchise

    def get_by_name(self, name: str) -> Franchise | None:
        return self.session.scalar(select(self.model).where(self.model.name == name))

    def _activity_statement(self) -> Select:
        invoice_count = (
            select(func.count(Invoice.id))
            .where(Invoice.franchise_id == self.model.id)
            .correlate(self.model)
            .scalar_subquery()
        )
        booking_count = (
            select(func.count(Booking.id))
            .where(Booking.franchise_id == self.model.id)
            .correlate(self.model)
            .scalar_subquery()
        )
        # cancelled invoices no longer count as receivable
        outstanding = (
            select(func.coalesce(func.sum(Invoice.balance_amount), 0))
            .where(Invoice.franchise_id == self.model.id)
            .where(Invoice.status == InvoiceStatus.ACTIVE)
            .correlate(self.model)
            .scalar_subquery()
        )
        return select(
            self.model,
            invoice_count.label("invoice_count"),
            booking_count.label("booking_count"),
            outstanding.label("outstanding_balance"),
        )

    def list_with_activity(self) -> list[Row]:
        statement = self._activity_statement().order_by(self.model.name)
        return list(self.session.execute(statement).all())

    def activity_for(self, franchise_id: str) -> Row | None:
        statement = self._activity_statement().where(self.model.id == franchise_id)
        return self.session.execute(statement).first()
