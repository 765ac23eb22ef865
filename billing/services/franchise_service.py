"""Franchise service handling provisioning and lookups."""
from __future__ import annotations

import logging

from sqlalchemy import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from billing.repositories.franchise import FranchiseRepository
from billing.schemas.franchise import FranchiseCreate, FranchiseRead

from .exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "Franchise name already exists"


class FranchiseService:
    """Service responsible for franchise lifecycle actions."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.franchises = FranchiseRepository(session)

    def create(self, payload: FranchiseCreate) -> FranchiseRead:
        name = payload.name.strip()
        if self.franchises.get_by_name(name) is not None:
            raise ConflictError(DUPLICATE_NAME)

        franchise = self.franchises.add(self.franchises.model(name=name))
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError(DUPLICATE_NAME) from exc
        self.session.refresh(franchise)
        logger.info("Registered franchise %s (%s)", franchise.name, franchise.id)
        return FranchiseRead.model_validate(franchise)

    def list(self) -> list[FranchiseRead]:
        return [_to_read(row) for row in self.franchises.list_with_activity()]

    def get(self, franchise_id: str) -> FranchiseRead:
        row = self.franchises.activity_for(franchise_id)
        if row is None:
            raise NotFoundError("Franchise not found")
        return _to_read(row)


def _to_read(row: Row) -> FranchiseRead:
    franchise, invoice_count, booking_count, outstanding_balance = row
    return FranchiseRead(
        id=franchise.id,
        name=franchise.name,
        created_at=franchise.created_at,
        invoice_count=invoice_count,
        booking_count=booking_count,
        outstanding_balance=float(outstanding_balance or 0),
    )
