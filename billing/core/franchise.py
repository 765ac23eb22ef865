"""Franchise context utilities and multi-tenancy guardrails."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from billing.db.models import Franchise


class FranchiseAccessError(RuntimeError):
    """Base error for franchise access violations."""


class FranchiseNotFoundError(FranchiseAccessError):
    """Raised when a franchise cannot be located."""


class FranchiseMismatchError(FranchiseAccessError):
    """Raised when data access crosses franchise boundaries."""


@dataclass(slots=True, frozen=True)
class FranchiseContext:
    """Binds every billing operation of a request to one franchise."""

    franchise_id: str
    franchise_name: str

    def ensure_matches(self, franchise_id: str | None) -> None:
        if franchise_id is None or franchise_id != self.franchise_id:
            raise FranchiseMismatchError(
                f"Franchise mismatch: expected {self.franchise_id}, received {franchise_id}"
            )

    def ensure_entity_belongs(self, entity: Any) -> None:
        """Ensure a franchise-scoped ORM entity is owned by this franchise."""

        owner = getattr(entity, "franchise_id", None)
        if owner is not None:
            owner = str(owner)
        self.ensure_matches(owner)


def load_franchise_context(session: Session, franchise_id: str) -> FranchiseContext:
    """Load a franchise from persistence and return a context wrapper."""

    franchise = session.get(Franchise, franchise_id)
    if franchise is None:
        raise FranchiseNotFoundError(f"Franchise {franchise_id} not found")
    return FranchiseContext(franchise_id=str(franchise.id), franchise_name=franchise.name)
