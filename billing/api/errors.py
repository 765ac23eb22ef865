"""HTTP exception helpers for service-layer errors."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from billing.services.exceptions import ConflictError, NotFoundError, ServiceError, ValidationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal service error"


def map_service_error(exc: ServiceError) -> HTTPException:
    """Translate service-layer errors into HTTP exceptions."""

    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.error("Unhandled service error: %s", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR_DETAIL)
