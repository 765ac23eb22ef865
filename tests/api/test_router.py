"""Unit tests for the root API router configuration."""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from billing.api.endpoints import franchises, invoices
from billing.api.router import router


def _create_test_client() -> TestClient:
    app = FastAPI()
    app.include_router(router, prefix="/api")
    return TestClient(app)


def test_health_check_returns_ok() -> None:
    client = _create_test_client()
    try:
        response = client.get("/api/health")
    finally:
        client.close()

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_route_metadata() -> None:
    health_route = next(route for route in router.routes if route.path == "/health")

    assert health_route.summary == "Health check"
    assert health_route.tags == ["health"]


def test_router_includes_all_endpoint_modules() -> None:
    endpoints = {route.endpoint for route in router.routes}

    assert franchises.register_franchise in endpoints
    assert franchises.get_franchise_overview in endpoints
    assert franchises.list_franchises in endpoints
    assert invoices.list_invoices in endpoints
    assert invoices.invoice_summary in endpoints
    assert invoices.single_invoice_summary in endpoints
    assert invoices.list_recycled_invoices in endpoints
    assert invoices.generate_invoice in endpoints
    assert invoices.generate_invoices in endpoints
    assert invoices.generate_single_invoice in endpoints
    assert invoices.generate_invoice_without_gst in endpoints
    assert invoices.get_invoice in endpoints
    assert invoices.update_invoice in endpoints
    assert invoices.delete_invoice in endpoints


def test_static_invoice_routes_precede_invoice_id_route() -> None:
    paths = [route.path for route in router.routes]
    detail = paths.index("/franchises/{franchise_id}/invoices/{invoice_id}")

    assert paths.index("/franchises/{franchise_id}/invoices/summary") < detail
    assert paths.index("/franchises/{franchise_id}/invoices/recycled") < detail
