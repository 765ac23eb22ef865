"""Root API router for REST endpoints."""
from fastapi import APIRouter

from billing.api.endpoints import franchises, invoices

router = APIRouter()


@router.get("/health", tags=["health"], summary="Health check")
def health_check() -> dict[str, str]:
    """Return basic service health information."""

    return {"status": "ok"}


router.include_router(franchises.router)
router.include_router(invoices.router)
