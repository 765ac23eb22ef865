"""Repository abstractions for database access."""
from __future__ import annotations

from typing import Generic, Sequence, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from billing.core.franchise import FranchiseContext
from billing.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Base repository providing CRUD convenience helpers."""

    model: type[ModelT]

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, instance: ModelT) -> ModelT:
        self.session.add(instance)
        return instance

    def get(self, obj_id: str) -> ModelT | None:
        statement = self._base_query().where(self.model.id == obj_id)  # type: ignore[attr-defined]
        return self.session.scalar(statement)

    def list(self, offset: int = 0, limit: int = 100) -> Sequence[ModelT]:
        statement = self._base_query().offset(offset).limit(limit)
        return self.session.scalars(statement).all()

    def delete(self, instance: ModelT) -> None:
        self.session.delete(instance)

    def _base_query(self) -> Select[tuple[ModelT]]:
        return select(self.model)


class FranchiseScopedRepository(Repository[ModelT]):
    """Repository whose reads never cross the franchise boundary."""

    def _scoped_query(self, franchise: FranchiseContext) -> Select[tuple[ModelT]]:
        return self._base_query().where(self.model.franchise_id == franchise.franchise_id)  # type: ignore[attr-defined]

    def get_for_franchise(self, franchise: FranchiseContext, obj_id: str) -> ModelT | None:
        statement = self._scoped_query(franchise).where(self.model.id == obj_id)  # type: ignore[attr-defined]
        return self.session.scalar(statement)
