"""Pydantic schemas for franchise provisioning."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class FranchiseCreate(BaseModel):
    """Payload to register a new franchise."""

    name: str = Field(..., min_length=1, max_length=255)


class FranchiseRead(BaseModel):
    """Franchise with its invoice and booking volume.

    ``outstanding_balance`` sums the balance of active invoices only.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: datetime
    invoice_count: NonNegativeInt = 0
    booking_count: NonNegativeInt = 0
    outstanding_balance: float = 0.0
