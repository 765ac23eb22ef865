"""Unit tests for invoice REST endpoints."""
from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from billing.api.dependencies import get_invoice_service, get_invoice_writer
from billing.api.endpoints import invoices
from billing.db.models import InvoiceStatus, PaymentStatus
from billing.schemas.invoice import (
    InvoiceDetail,
    InvoiceFilterParams,
    InvoiceListResponse,
    InvoicePaymentUpdate,
    InvoiceRead,
    InvoiceSummary,
    Pagination,
    RecycledInvoicePage,
    RecycledInvoiceRead,
    RecycledPagination,
)
from billing.schemas.invoice_generation import GeneratedInvoice
from billing.services.exceptions import (
    ConflictError,
    MissingBookingError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

FRANCHISE_ID = "franchise-123"
BASE_URL = f"/franchises/{FRANCHISE_ID}/invoices"


class ServiceStub:
    """Collects calls while returning configured results."""

    def __init__(self) -> None:
        self.list_calls: list[tuple[InvoiceFilterParams, int, int]] = []
        self.recycled_calls: list[tuple[str | None, int, int]] = []
        self.update_calls: list[tuple[str, InvoicePaymentUpdate]] = []
        self.delete_calls: list[str] = []
        self.list_return = InvoiceListResponse(
            data=[], pagination=Pagination(total=0, page=1, limit=20, total_pages=0)
        )
        self.summary_return = InvoiceSummary(paid_amount=0, unpaid_amount=0, total_sale=0, partial_paid=0)
        self.detail_return: InvoiceDetail | None = None
        self.get_exception: Exception | None = None
        self.update_exception: Exception | None = None
        self.delete_exception: Exception | None = None

    def list(self, filters: InvoiceFilterParams, page: int = 1, limit: int = 20) -> InvoiceListResponse:
        self.list_calls.append((filters, page, limit))
        return self.list_return

    def summary(self) -> InvoiceSummary:
        return self.summary_return

    def single_summary(self) -> InvoiceSummary:
        return self.summary_return

    def list_recycled(self, search: str | None = None, page: int = 1, limit: int = 10) -> RecycledInvoicePage:
        self.recycled_calls.append((search, page, limit))
        return RecycledInvoicePage(
            invoices=[
                RecycledInvoiceRead(
                    id="inv-9",
                    invoice_number="INV/2025/0009",
                    customer_id="CUST-1",
                    invoice_date=date(2025, 3, 31),
                    net_amount=500,
                )
            ],
            pagination=RecycledPagination(total=1, page=page, limit=limit, pages=1),
        )

    def get(self, invoice_id: str) -> InvoiceDetail:
        if self.get_exception is not None:
            raise self.get_exception
        assert self.detail_return is not None, "detail_return must be set for successful calls"
        return self.detail_return

    def update_payment(self, invoice_id: str, payload: InvoicePaymentUpdate) -> None:
        self.update_calls.append((invoice_id, payload))
        if self.update_exception is not None:
            raise self.update_exception

    def delete(self, invoice_id: str) -> None:
        self.delete_calls.append(invoice_id)
        if self.delete_exception is not None:
            raise self.delete_exception


class WriterStub:
    """Records generation payloads and returns a fixed invoice."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.exception: Exception | None = None
        self.batch_count = 0
        self.result = GeneratedInvoice(id="inv-1", invoice_number="INV/2025/0001")

    def _record(self, name: str, payload: object) -> None:
        self.calls.append((name, payload))
        if self.exception is not None:
            raise self.exception

    def generate(self, payload) -> GeneratedInvoice:
        self._record("generate", payload)
        return self.result

    def generate_batch(self, payload) -> int:
        self._record("generate_batch", payload)
        return self.batch_count

    def generate_single(self, payload) -> GeneratedInvoice:
        self._record("generate_single", payload)
        return self.result

    def generate_without_gst(self, payload) -> GeneratedInvoice:
        self._record("generate_without_gst", payload)
        return self.result


@pytest.fixture()
def api_client() -> tuple[TestClient, FastAPI]:
    app = FastAPI()
    app.include_router(invoices.router)

    with TestClient(app) as client:
        yield client, app
        app.dependency_overrides.clear()


@pytest.fixture()
def service(api_client) -> ServiceStub:
    _, app = api_client
    stub = ServiceStub()
    app.dependency_overrides[get_invoice_service] = lambda: stub
    return stub


@pytest.fixture()
def writer(api_client) -> WriterStub:
    _, app = api_client
    stub = WriterStub()
    app.dependency_overrides[get_invoice_writer] = lambda: stub
    return stub


def make_invoice_read(**overrides: object) -> InvoiceRead:
    base = {
        "id": "inv-1",
        "franchise_id": FRANCHISE_ID,
        "invoice_number": "INV/2025/0001",
        "invoice_date": date(2025, 3, 31),
        "customer_id": "CUST-1",
        "address": None,
        "period_from": date(2025, 3, 1),
        "period_to": date(2025, 3, 31),
        "consignment_no": None,
        "invoice_discount": False,
        "reverse_charge": False,
        "fuel_surcharge_percent": 2,
        "fuel_surcharge_total": 20,
        "gst_percent": 18,
        "gst_amount": 212.4,
        "other_charge": 0,
        "royalty_charge": 0,
        "docket_charge": 0,
        "subtotal_amount": 1000,
        "total_amount": 1000,
        "net_amount": 1180,
        "payment_status": PaymentStatus.UNPAID,
        "paid_amount": 0,
        "balance_amount": 1180,
        "status": InvoiceStatus.ACTIVE,
        "created_at": datetime(2025, 3, 31, tzinfo=timezone.utc),
    }
    base.update(overrides)
    return InvoiceRead(**base)


def test_list_invoices_passes_filters_and_pagination(api_client, service: ServiceStub) -> None:
    client, _ = api_client
    invoice = make_invoice_read()
    service.list_return = InvoiceListResponse(
        data=[invoice], pagination=Pagination(total=11, page=2, limit=5, total_pages=3)
    )

    response = client.get(
        BASE_URL,
        params={
            "status": "partial",
            "search": "CUST",
            "from_date": "2025-03-01",
            "to_date": "2025-03-31",
            "type": "single",
            "page": 2,
            "limit": 5,
        },
    )

    assert response.status_code == 200
    filters, page, limit = service.list_calls[0]
    assert isinstance(filters, InvoiceFilterParams)
    assert filters.status is PaymentStatus.PARTIAL
    assert filters.search == "CUST"
    assert filters.from_date == date(2025, 3, 1)
    assert filters.single_only is True
    assert (page, limit) == (2, 5)

    body = response.json()
    assert body["success"] is True
    assert body["data"][0]["invoice_number"] == "INV/2025/0001"
    assert body["pagination"] == {"total": 11, "page": 2, "limit": 5, "totalPages": 3}


def test_list_invoices_uses_default_page_size(api_client, service: ServiceStub) -> None:
    client, _ = api_client

    response = client.get(BASE_URL)

    assert response.status_code == 200
    _, page, limit = service.list_calls[0]
    assert (page, limit) == (1, 20)


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 501}, {"status": "settled"}])
def test_list_invoices_rejects_invalid_query(api_client, service: ServiceStub, params) -> None:
    client, _ = api_client

    response = client.get(BASE_URL, params=params)

    assert response.status_code == 422
    assert service.list_calls == []


@pytest.mark.parametrize("path", ["/summary", "/single-summary"])
def test_summary_endpoints_wrap_aggregates(api_client, service: ServiceStub, path: str) -> None:
    client, _ = api_client
    service.summary_return = InvoiceSummary(
        paid_amount=100, unpaid_amount=250.5, total_sale=400.5, partial_paid=50
    )

    response = client.get(BASE_URL + path)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"paid_amount": 100.0, "unpaid_amount": 250.5, "total_sale": 400.5, "partial_paid": 50.0},
    }


def test_list_recycled_invoices_defaults_to_ten_per_page(api_client, service: ServiceStub) -> None:
    client, _ = api_client

    response = client.get(BASE_URL + "/recycled", params={"search": "0009"})

    assert response.status_code == 200
    assert service.recycled_calls == [("0009", 1, 10)]
    body = response.json()
    assert body["data"]["invoices"][0]["net_amount"] == 500.0
    assert body["data"]["pagination"] == {"total": 1, "page": 1, "limit": 10, "pages": 1}


def test_generate_invoice_returns_created(api_client, writer: WriterStub) -> None:
    client, _ = api_client

    response = client.post(
        BASE_URL + "/generate",
        json={
            "customer_id": "CUST-1",
            "period_from": "2025-03-01",
            "period_to": "2025-03-31",
            "gst_percent": "",
            "net_amount": "1180",
            "bookings": ["b-1", "b-2"],
        },
    )

    assert response.status_code == 201
    assert response.json() == {
        "success": True,
        "message": "Invoice generated successfully",
        "data": {"id": "inv-1", "invoice_number": "INV/2025/0001"},
    }
    name, payload = writer.calls[0]
    assert name == "generate"
    assert payload.gst_percent is None
    assert payload.bookings == ["b-1", "b-2"]


def test_generate_invoice_maps_validation_error(api_client, writer: WriterStub) -> None:
    client, _ = api_client
    writer.exception = ValidationError("Customer ID, Period From, and Period To are required")

    response = client.post(BASE_URL + "/generate", json={})

    assert response.status_code == 400
    assert response.json() == {"detail": "Customer ID, Period From, and Period To are required"}


def test_generate_invoice_maps_missing_booking_to_bad_request(api_client, writer: WriterStub) -> None:
    client, _ = api_client
    writer.exception = MissingBookingError("Booking b-9 not found")

    response = client.post(BASE_URL + "/generate", json={"customer_id": "CUST-1"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Booking b-9 not found"}


def test_generate_invoice_maps_conflict(api_client, writer: WriterStub) -> None:
    client, _ = api_client
    writer.exception = ConflictError("Invoice number already exists")

    response = client.post(BASE_URL + "/generate", json={"customer_id": "CUST-1", "invoice_no": "X-1"})

    assert response.status_code == 409
    assert response.json() == {"detail": "Invoice number already exists"}


def test_generate_invoice_hides_internal_failures(api_client, writer: WriterStub) -> None:
    client, _ = api_client
    writer.exception = ServiceError("Failed to generate invoice")

    response = client.post(BASE_URL + "/generate", json={"customer_id": "CUST-1"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal service error"}


def test_generate_multiple_reports_count(api_client, writer: WriterStub) -> None:
    client, _ = api_client
    writer.batch_count = 2

    response = client.post(
        BASE_URL + "/generate-multiple",
        json={"customers": ["CUST-1", "CUST-2"], "period_from": "2025-03-01", "period_to": "2025-03-31"},
    )

    assert response.status_code == 201
    assert response.json() == {"success": True, "message": "Successfully generated 2 invoices", "count": 2}
    name, payload = writer.calls[0]
    assert name == "generate_batch"
    assert payload.customers == ["CUST-1", "CUST-2"]


def test_generate_single_invoice(api_client, writer: WriterStub) -> None:
    client, _ = api_client

    response = client.post(BASE_URL + "/generate-single", json={"customer_id": "CUST-1", "booking_id": "b-1"})

    assert response.status_code == 201
    assert response.json()["message"] == "Single invoice generated successfully"
    assert writer.calls[0][0] == "generate_single"


def test_generate_invoice_without_gst(api_client, writer: WriterStub) -> None:
    client, _ = api_client
    writer.result = GeneratedInvoice(id="inv-2", invoice_number="INV/2025/WG/0002")

    response = client.post(
        BASE_URL + "/generate-without-gst",
        json={"customer_id": "CUST-1", "period_from": "2025-03-01", "period_to": "2025-03-31"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Invoice without GST generated successfully"
    assert body["data"]["invoice_number"] == "INV/2025/WG/0002"
    assert writer.calls[0][0] == "generate_without_gst"


def test_get_invoice_returns_detail(api_client, service: ServiceStub) -> None:
    client, _ = api_client
    service.detail_return = InvoiceDetail(**make_invoice_read().model_dump(), items=[])

    response = client.get(BASE_URL + "/inv-1")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["id"] == "inv-1"
    assert body["data"]["items"] == []


def test_get_invoice_maps_not_found(api_client, service: ServiceStub) -> None:
    client, _ = api_client
    service.get_exception = NotFoundError("Invoice not found")

    response = client.get(BASE_URL + "/missing")

    assert response.status_code == 404
    assert response.json() == {"detail": "Invoice not found"}


def test_update_invoice_records_payment(api_client, service: ServiceStub) -> None:
    client, _ = api_client

    response = client.put(BASE_URL + "/inv-1", json={"payment_status": "partial", "paid_amount": "250.50"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Invoice updated successfully"}
    invoice_id, payload = service.update_calls[0]
    assert invoice_id == "inv-1"
    assert payload.payment_status is PaymentStatus.PARTIAL
    assert str(payload.paid_amount) == "250.50"


def test_update_invoice_requires_payment_status(api_client, service: ServiceStub) -> None:
    client, _ = api_client

    response = client.put(BASE_URL + "/inv-1", json={"paid_amount": 10})

    assert response.status_code == 422
    assert service.update_calls == []


def test_update_invoice_maps_policy_rejection(api_client, service: ServiceStub) -> None:
    client, _ = api_client
    service.update_exception = ValidationError("Paid amount cannot exceed the invoice net amount")

    response = client.put(BASE_URL + "/inv-1", json={"payment_status": "partial", "paid_amount": 9999})

    assert response.status_code == 400
    assert response.json() == {"detail": "Paid amount cannot exceed the invoice net amount"}


def test_delete_invoice_returns_message(api_client, service: ServiceStub) -> None:
    client, _ = api_client

    response = client.delete(BASE_URL + "/inv-123")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Invoice deleted successfully"}
    assert service.delete_calls == ["inv-123"]


def test_delete_invoice_maps_not_found(api_client, service: ServiceStub) -> None:
    client, _ = api_client
    service.delete_exception = NotFoundError("Invoice not found")

    response = client.delete(BASE_URL + "/missing")

    assert response.status_code == 404
    assert response.json() == {"detail": "Invoice not found"}
