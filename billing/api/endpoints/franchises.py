"""Franchise registration and billing overview endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from billing.api.dependencies import franchise_id_path, get_franchise_service
from billing.api.errors import map_service_error
from billing.schemas.franchise import FranchiseCreate, FranchiseRead
from billing.services.exceptions import ServiceError
from billing.services.franchise_service import FranchiseService

router = APIRouter(prefix="/franchises", tags=["franchises"])


@router.post("", response_model=FranchiseRead, status_code=status.HTTP_201_CREATED)
def register_franchise(
    payload: FranchiseCreate,
    service: FranchiseService = Depends(get_franchise_service),
) -> FranchiseRead:
    """Register a franchise; names are unique after trimming."""

    try:
        return service.create(payload)
    except ServiceError as exc:
        raise map_service_error(exc) from exc


@router.get("", response_model=list[FranchiseRead])
def list_franchises(
    service: FranchiseService = Depends(get_franchise_service),
) -> list[FranchiseRead]:
    """Franchises ordered by name, with invoice and booking counts."""

    return service.list()


@router.get("/{franchise_id}", response_model=FranchiseRead)
def get_franchise_overview(
    franchise_id: str = Depends(franchise_id_path),
    service: FranchiseService = Depends(get_franchise_service),
) -> FranchiseRead:
    try:
        return service.get(franchise_id)
    except ServiceError as exc:
        raise map_service_error(exc) from exc
