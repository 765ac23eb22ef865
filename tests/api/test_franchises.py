"""Unit tests for franchise REST endpoints."""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import status
from fastapi.testclient import TestClient

from billing.api.dependencies import get_franchise_service
from billing.main import create_app
from billing.schemas.franchise import FranchiseCreate, FranchiseRead
from billing.services.exceptions import ConflictError, NotFoundError

FRANCHISE_ID = "3f2b7c1e-9a44-4c1b-8d2e-5b6f7a8c9d01"


def _client_with_service(service) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_franchise_service] = lambda: service
    try:
        client = TestClient(app)
    except Exception:
        app.dependency_overrides.clear()
        raise
    return client


def _as_json(franchise: FranchiseRead) -> dict[str, object]:
    return {
        "id": franchise.id,
        "name": franchise.name,
        "created_at": franchise.created_at.isoformat().replace("+00:00", "Z"),
        "invoice_count": franchise.invoice_count,
        "booking_count": franchise.booking_count,
        "outstanding_balance": franchise.outstanding_balance,
    }


def test_register_franchise_success() -> None:
    created_at = datetime.now(timezone.utc)
    expected = FranchiseRead(id="franchise-1", name="North Hub", created_at=created_at)

    class RecordingFranchiseService:
        def __init__(self) -> None:
            self.received: FranchiseCreate | None = None

        def create(self, payload: FranchiseCreate) -> FranchiseRead:
            self.received = payload
            return expected

    service = RecordingFranchiseService()
    client = _client_with_service(service)

    try:
        response = client.post("/api/franchises", json={"name": "North Hub"})
    finally:
        client.app.dependency_overrides.clear()
        client.close()

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body == _as_json(expected)
    assert body["invoice_count"] == 0
    assert body["outstanding_balance"] == 0.0
    assert service.received == FranchiseCreate(name="North Hub")


def test_register_franchise_conflict_error() -> None:
    class ConflictFranchiseService:
        def create(self, payload: FranchiseCreate) -> FranchiseRead:
            raise ConflictError("Franchise name already exists")

    client = _client_with_service(ConflictFranchiseService())

    try:
        response = client.post("/api/franchises", json={"name": "Existing Franchise"})
    finally:
        client.app.dependency_overrides.clear()
        client.close()

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"detail": "Franchise name already exists"}


def test_register_franchise_rejects_blank_name() -> None:
    class UnusedFranchiseService:
        def create(self, payload: FranchiseCreate) -> FranchiseRead:  # pragma: no cover - not used here
            raise AssertionError("create should not be called")

    client = _client_with_service(UnusedFranchiseService())

    try:
        response = client.post("/api/franchises", json={"name": ""})
    finally:
        client.app.dependency_overrides.clear()
        client.close()

    assert response.status_code == 422


def test_list_franchises_includes_activity() -> None:
    created_at = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
    franchises = [
        FranchiseRead(
            id="franchise-1",
            name="North Hub",
            created_at=created_at,
            invoice_count=4,
            booking_count=9,
            outstanding_balance=1250.5,
        ),
        FranchiseRead(id="franchise-2", name="South Hub", created_at=created_at),
    ]

    class ListingFranchiseService:
        def list(self) -> list[FranchiseRead]:
            return franchises

    client = _client_with_service(ListingFranchiseService())

    try:
        response = client.get("/api/franchises")
    finally:
        client.app.dependency_overrides.clear()
        client.close()

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == [_as_json(item) for item in franchises]


def test_get_franchise_overview_success() -> None:
    created_at = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
    overview = FranchiseRead(
        id=FRANCHISE_ID,
        name="North Hub",
        created_at=created_at,
        invoice_count=2,
        booking_count=3,
        outstanding_balance=680.0,
    )

    class OverviewFranchiseService:
        def __init__(self) -> None:
            self.requested: str | None = None

        def get(self, franchise_id: str) -> FranchiseRead:
            self.requested = franchise_id
            return overview

    service = OverviewFranchiseService()
    client = _client_with_service(service)

    try:
        response = client.get(f"/api/franchises/{FRANCHISE_ID}")
    finally:
        client.app.dependency_overrides.clear()
        client.close()

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == _as_json(overview)
    assert service.requested == FRANCHISE_ID


def test_get_franchise_overview_not_found() -> None:
    class MissingFranchiseService:
        def get(self, franchise_id: str) -> FranchiseRead:
            raise NotFoundError("Franchise not found")

    client = _client_with_service(MissingFranchiseService())

    try:
        response = client.get(f"/api/franchises/{FRANCHISE_ID}")
    finally:
        client.app.dependency_overrides.clear()
        client.close()

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Franchise not found"}


def test_get_franchise_overview_rejects_malformed_id() -> None:
    class UnusedFranchiseService:
        def get(self, franchise_id: str) -> FranchiseRead:  # pragma: no cover - not used here
            raise AssertionError("get should not be called")

    client = _client_with_service(UnusedFranchiseService())

    try:
        response = client.get("/api/franchises/not-a-uuid")
    finally:
        client.app.dependency_overrides.clear()
        client.close()

    assert response.status_code == 422
