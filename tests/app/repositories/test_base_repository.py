"""Unit tests for repository abstractions."""
from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from billing.core.franchise import FranchiseContext
from billing.db.models import Booking, Franchise
from billing.repositories.booking import BookingRepository
from billing.repositories.franchise import FranchiseRepository


def test_repository_crud_and_listing(session: Session) -> None:
    repo = FranchiseRepository(session)

    alpha = repo.add(Franchise(name="Alpha"))
    bravo = repo.add(Franchise(name="Bravo"))
    session.commit()

    alpha_id = alpha.id
    bravo_id = bravo.id

    fetched = repo.get(alpha_id)
    assert fetched is not None
    assert fetched.id == alpha_id

    assert repo.get("missing-id") is None

    assert {franchise.id for franchise in repo.list()} == {alpha_id, bravo_id}
    assert len(repo.list(limit=1)) == 1
    assert repo.list(offset=10) == []

    repo.delete(alpha)
    session.commit()

    assert repo.get(alpha_id) is None
    assert {franchise.id for franchise in repo.list()} == {bravo_id}


def test_franchise_scoped_repository_filters_by_franchise(session: Session) -> None:
    franchise_repo = FranchiseRepository(session)
    franchise_a = franchise_repo.add(Franchise(name="Franchise A"))
    franchise_b = franchise_repo.add(Franchise(name="Franchise B"))
    session.commit()

    booking_repo = BookingRepository(session)
    booking_a = booking_repo.add(
        Booking(franchise_id=franchise_a.id, customer_id="C-1", booking_date=date(2025, 1, 1))
    )
    booking_b = booking_repo.add(
        Booking(franchise_id=franchise_b.id, customer_id="C-1", booking_date=date(2025, 1, 1))
    )
    session.commit()

    context_a = FranchiseContext(franchise_id=str(franchise_a.id), franchise_name=franchise_a.name)

    assert booking_repo.get_for_franchise(context_a, booking_a.id) is not None
    assert booking_repo.get_for_franchise(context_a, booking_b.id) is None
