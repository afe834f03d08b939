"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from retail_api.api.http.app_data import ApplicationDependencies
from retail_api.core.services.database import DbSessionService
from retail_api.core.services.product_service import ProductService


def get_database_service(request: Request) -> DbSessionService:
    """Get the process-wide database service created at startup."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Check out one pooled connection for the duration of the request."""
    with database_service.session_scope() as session:
        yield session


def get_product_service(session: Session = Depends(get_session)) -> ProductService:
    return ProductService(session)
