"""GraphQL context utilities for franchise-aware operations."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Request, status
from sqlalchemy.orm import Session, sessionmaker
from strawberry.fastapi import BaseContext

from billing.core.database import SessionLocal
from billing.core.franchise import FranchiseContext, FranchiseNotFoundError, load_franchise_context

FRANCHISE_HEADER = "x-franchise-id"


@dataclass(slots=True)
class GraphQLContext(BaseContext):
    """GraphQL-specific request context containing franchise and DB session.

    ``franchise`` is ``None`` when the request carried no franchise header;
    only franchise-scoped resolvers require it.
    """

    franchise: FranchiseContext | None
    session_factory: sessionmaker[Session]

    def get_session(self) -> Session:
        """Return a new SQLAlchemy session for resolver use."""

        return self.session_factory()


def build_context(franchise_id: str | None) -> GraphQLContext:
    """Construct a GraphQL context, resolving the franchise when one was given."""

    if not franchise_id:
        return GraphQLContext(franchise=None, session_factory=SessionLocal)
    with SessionLocal() as session:
        franchise_context = load_franchise_context(session, franchise_id)
    return GraphQLContext(franchise=franchise_context, session_factory=SessionLocal)


def context_getter(request: Request) -> GraphQLContext:
    """FastAPI-compatible context getter for Strawberry GraphQL router."""

    franchise_id = request.headers.get(FRANCHISE_HEADER)
    try:
        return build_context(franchise_id)
    except FranchiseNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
