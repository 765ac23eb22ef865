"""Shared pytest fixtures for franchise billing tests."""
from __future__ import annotations

import os
from collections.abc import Generator
from datetime import date
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from billing.core.database import get_db_session
from billing.core.franchise import FranchiseContext
from billing.db.base import Base
from billing.db.models import Booking, Franchise
from billing.main import create_app


@pytest.fixture()
def engine() -> Generator:
    engine = create_engine(
        "sqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session(engine) -> Generator[Session, None, None]:
    SessionLocal = sessionmaker(bind=engine, class_=Session, autoflush=False, autocommit=False)
    db_session = SessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()


@pytest.fixture()
def franchise(session: Session) -> Franchise:
    franchise = Franchise(name="Test Franchise")
    session.add(franchise)
    session.commit()
    session.refresh(franchise)
    return franchise


@pytest.fixture()
def franchise_context(franchise: Franchise) -> FranchiseContext:
    return FranchiseContext(franchise_id=franchise.id, franchise_name=franchise.name)


@pytest.fixture()
def make_booking(session: Session, franchise: Franchise):
    """Persist a booking for the test franchise."""

    def _make(
        customer_id: str = "CUST-1",
        total: str = "100.00",
        booking_date: date = date(2025, 3, 10),
        consignment_no: str | None = "CN-1",
        franchise_id: str | None = None,
    ) -> Booking:
        booking = Booking(
            franchise_id=franchise_id or franchise.id,
            customer_id=customer_id,
            consignment_no=consignment_no,
            booking_date=booking_date,
            total=Decimal(total),
        )
        session.add(booking)
        session.commit()
        session.refresh(booking)
        return booking

    return _make


@pytest.fixture()
def client(session: Session) -> Generator[TestClient, None, None]:
    application = create_app()

    def override_get_db_session() -> Generator[Session, None, None]:
        try:
            yield session
        finally:
            session.rollback()

    application.dependency_overrides[get_db_session] = override_get_db_session

    with TestClient(application) as test_client:
        yield test_client

    application.dependency_overrides.clear()
