"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from retail_api.api.http.app_data import ApplicationDependencies
from retail_api.api.http.responses import ErrorResponse
from retail_api.api.http.routers.health import router as health_router
from retail_api.api.http.routers.service.product import router as product_router
from retail_api.api.utils.app_startup import configure_logging
from retail_api.core.errors import ProductServiceError
from retail_api.core.services.database import DbSessionService
from retail_api.runtime.context import get_config

configure_logging()

__all__ = ["app", "create_app"]


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    details: list | None = None,
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    body = ErrorResponse(error=error, details=details, request_id=request_id)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


async def handle_service_error(request: Request, exc: ProductServiceError) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.message)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.bind(errors=len(exc.errors())).info("request.validation_error")
    return _error_response(
        request, 400, "Invalid request", details=jsonable_encoder(exc.errors())
    )


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            response = _error_response(request, 500, "Internal server error")
        else:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

        response.headers.setdefault("X-Request-ID", request_id)
        return response


def create_app(database_service: DbSessionService | None = None) -> FastAPI:
    """Build the API application.

    Args:
        database_service: Service to use instead of one built from config at
            startup. Disposed at shutdown either way.
    """
    config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app, database_service)
        try:
            yield
        finally:
            await shutdown(app)

    is_production = config.app.environment == "production"
    app = FastAPI(
        title=config.app.title,
        version=config.app.version,
        description="API for managing products in the Online Retail database",
        lifespan=lifespan,
        docs_url=None if is_production else "/api-docs",
        openapi_url=None if is_production else "/api-docs/openapi.json",
        redoc_url=None,
    )

    app.add_exception_handler(ProductServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    app.include_router(product_router)
    app.include_router(health_router)
    return app


# --- Lifecycle hooks ---
async def startup(app: FastAPI, database_service: DbSessionService | None = None) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)
    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service or DbSessionService(),
    )


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies = app.state.app_dependencies
    app_dependencies.database_service.dispose()


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # request logging middleware covers access logs
    )
