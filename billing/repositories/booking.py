"""Read-only repository over bookings owned by the bookings subsystem."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from billing.core.franchise import FranchiseContext
from billing.db.models import Booking

from .base import FranchiseScopedRepository


class BookingRepository(FranchiseScopedRepository[Booking]):
    """Booking queries used when copying bookings onto invoices."""

    model = Booking

    def get_many(self, franchise: FranchiseContext, booking_ids: Iterable[str]) -> dict[str, Booking]:
        ids = {booking_id for booking_id in booking_ids if booking_id}
        if not ids:
            return {}
        statement = self._scoped_query(franchise).where(self.model.id.in_(ids))
        return {row.id: row for row in self.session.scalars(statement).all()}

    def list_for_customer_in_period(
        self,
        franchise: FranchiseContext,
        customer_id: str,
        period_from: date,
        period_to: date,
    ) -> list[Booking]:
        """Return a customer's bookings dated within the inclusive period."""

        statement = (
            self._scoped_query(franchise)
            .where(self.model.customer_id == customer_id)
            .where(self.model.booking_date.between(period_from, period_to))
            .order_by(self.model.booking_date, self.model.created_at)
        )
        return list(self.session.scalars(statement).all())
