"""SQLAlchemy Declarative base and common mixins."""
from __future__ import annotations

import re
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def table_name_for(class_name: str) -> str:
    """Derive a plural snake_case table name, e.g. ``InvoiceItem`` -> ``invoice_items``."""

    snake = _CAMEL_BOUNDARY.sub("_", class_name).lower()
    if snake.endswith(("s", "x", "ch", "sh")):
        return f"{snake}es"
    return f"{snake}s"


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return table_name_for(cls.__name__)


class TimestampMixin:
    """Mixin adding creation timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
