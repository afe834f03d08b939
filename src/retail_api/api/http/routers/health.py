"""Health check endpoint reporting store connectivity."""

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from retail_api.api.http.deps import get_database_service
from retail_api.api.http.responses import HealthResponse
from retail_api.core.services.database import DbSessionService

router = APIRouter(prefix="/api/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    responses={500: {"model": HealthResponse, "description": "Store unreachable"}},
)
def health(
    database_service: DbSessionService = Depends(get_database_service),
) -> HealthResponse | JSONResponse:
    """Liveness probe that also runs a trivial query against the store."""
    try:
        timestamp = database_service.ping()
    except (SQLAlchemyError, OSError) as e:
        logger.bind(error_type=type(e).__name__).error("Health check failed: {}", e)
        return JSONResponse(
            status_code=500,
            content=HealthResponse(
                success=False, status="unhealthy", error=str(e)
            ).model_dump(mode="json", exclude_none=True),
        )
    return HealthResponse(status="healthy", timestamp=timestamp)
