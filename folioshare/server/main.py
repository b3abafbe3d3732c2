"""FastAPI application entry point.

This module initializes the FastAPI application with middleware,
routers, error handlers and core endpoints.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from folioshare.server import __version__
from folioshare.server.api.v1.router import router as v1_router
from folioshare.server.config import settings
from folioshare.server.database.session import check_database_connection
from folioshare.server.dependencies import close_services, init_services
from folioshare.server.exceptions import PortfolioShareError
from folioshare.server.models.common import ErrorResponse, HealthResponse
from folioshare.server.storage.backends import DatabaseBackend

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

HTTP_ERROR_NAMES = {
    status.HTTP_404_NOT_FOUND: "NotFoundError",
    status.HTTP_405_METHOD_NOT_ALLOWED: "MethodNotAllowedError",
}

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Create shareable portfolio links with separate view and edit access",
    version=__version__,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def answer_preflight(request: Request, call_next):
    """Answer every OPTIONS request with 200 and an empty body.

    Registered after CORSMiddleware, so it runs first.
    """
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=PREFLIGHT_HEADERS)
    return await call_next(request)


app.include_router(v1_router)


@app.on_event("startup")
async def startup_event():
    """Build the portfolio store and services."""
    logger.info(f"Starting {settings.app_name} v{__version__}")
    logger.info(f"Debug mode: {settings.debug}")
    init_services(app, settings)


@app.on_event("shutdown")
async def shutdown_event():
    """Close outbound HTTP sessions."""
    logger.info(f"Shutting down {settings.app_name}")
    close_services(app)


@app.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["health"],
    summary="Health check endpoint",
)
async def health_check(request: Request) -> HealthResponse:
    """Report service health and the configured storage tiers.

    A configured database tier is pinged; when it does not answer the
    status is "degraded".

    Example:
        >>> GET /health
        >>> {
        >>>     "status": "healthy",
        >>>     "timestamp": "2026-02-01T10:00:00Z",
        >>>     "backends": ["memory", "database"],
        >>>     "database_connected": true
        >>> }
    """
    store = getattr(request.app.state, "store", None)
    backends = store.backend_names if store is not None else []

    database_connected = None
    secondary = getattr(store, "secondary", None)
    if isinstance(secondary, DatabaseBackend):
        database_connected = check_database_connection(secondary.engine)

    return HealthResponse(
        status="degraded" if database_connected is False else "healthy",
        backends=backends,
        database_connected=database_connected,
    )


@app.get(
    "/",
    status_code=status.HTTP_200_OK,
    tags=["root"],
    summary="Root endpoint",
)
async def root():
    """Basic API information and links to documentation."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "api": "/api/v1/info",
    }


def _error_response(status_code: int, error: str, details, headers=None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(mode="json"), headers=headers
    )


@app.exception_handler(PortfolioShareError)
async def portfolio_error_handler(request: Request, exc: PortfolioShareError):
    """Map domain errors to their status with an {error, details} body."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    return _error_response(exc.status_code, type(exc).__name__, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and disallowed methods use the same error body."""
    error = HTTP_ERROR_NAMES.get(exc.status_code, "HTTPError")
    return _error_response(exc.status_code, error, exc.detail, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed or incomplete request bodies are client errors (400)."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _error_response(status.HTTP_400_BAD_REQUEST, "ValidationError", errors)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalServerError",
        str(exc) if settings.debug else "An unexpected error occurred",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "folioshare.server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
