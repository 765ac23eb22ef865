"""Database package exposing the declarative base and billing ORM models."""

from .base import Base, TimestampMixin, table_name_for
from . import models

__all__ = ["Base", "TimestampMixin", "models", "table_name_for"]
