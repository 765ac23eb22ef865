"""FastAPI dependency utilities for franchise-scoped access."""
from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from billing.core.database import get_db_session
from billing.core.franchise import FranchiseContext, FranchiseNotFoundError, load_franchise_context
from billing.schemas.invoice import InvoiceFilterParams
from billing.services.franchise_service import FranchiseService
from billing.services.invoice_service import InvoiceService
from billing.services.invoice_writer import InvoiceWriter


def franchise_id_path(franchise_id: UUID = Path(..., description="Franchise identifier")) -> str:
    """Validate franchise identifier extracted from path."""

    return str(franchise_id)


def get_franchise_context(
    franchise_id: str = Depends(franchise_id_path),
    session: Session = Depends(get_db_session),
) -> FranchiseContext:
    """Resolve a franchise context for the request."""

    try:
        return load_franchise_context(session, franchise_id)
    except FranchiseNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


def get_franchise_service(session: Session = Depends(get_db_session)) -> FranchiseService:
    """Provide franchise service with database session."""

    return FranchiseService(session)


def get_invoice_service(
    franchise: FranchiseContext = Depends(get_franchise_context),
    session: Session = Depends(get_db_session),
) -> InvoiceService:
    """Provide invoice service bound to franchise context."""

    return InvoiceService(session, franchise)


def get_invoice_writer(
    franchise: FranchiseContext = Depends(get_franchise_context),
    session: Session = Depends(get_db_session),
) -> InvoiceWriter:
    """Provide invoice writer bound to franchise context."""

    return InvoiceWriter(session, franchise)


def get_invoice_filters(params: InvoiceFilterParams = Depends()) -> InvoiceFilterParams:
    """Expose invoice filters via dependency injection."""

    return params
