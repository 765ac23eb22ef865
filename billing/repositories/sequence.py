"""Repository for per-franchise invoice number counters."""
from __future__ import annotations

from sqlalchemy import select

from billing.core.franchise import FranchiseContext
from billing.db.models import InvoiceSequence

from .base import Repository


class InvoiceSequenceRepository(Repository[InvoiceSequence]):
    """Row-locked access to the invoice counter of a franchise and year."""

    model = InvoiceSequence

    def lock_for_year(self, franchise: FranchiseContext, year: int) -> InvoiceSequence | None:
        statement = (
            select(self.model)
            .where(self.model.franchise_id == franchise.franchise_id)
            .where(self.model.year == year)
            .with_for_update()
        )
        return self.session.scalar(statement)

    def create(self, franchise: FranchiseContext, year: int, current_number: int) -> InvoiceSequence:
        sequence = self.add(self.model(franchise_id=franchise.franchise_id, year=year, current_number=current_number))
        self.session.flush()
        return sequence
