"""REST endpoint routers exposed by the API."""
from . import franchises, invoices

__all__ = [
    "franchises",
    "invoices",
]
