"""Application configuration and router setup."""

import fastapi
from fastapi import Request
from fastapi.middleware import cors
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.config import get_settings
from components.core.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from components.core.logging import get_logger, setup_logging
from restapi.endpoints import cash_bill, health_check, loan, member

logger = get_logger(__name__)

TITLE = "Lending Pool Admin"
DESCRIPTION = "Members, loans, payment ledger and cash bill statements"


def register_exception_handlers(app: fastapi.FastAPI) -> None:
    """Map domain errors to HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    app = fastapi.FastAPI(
        title=TITLE,
        description=DESCRIPTION,
        version="1.0.0",
        debug=settings.DEBUG,
    )

    # Initialize database
    init_db.init_db(app)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_check.router)
    app.include_router(member.router)
    app.include_router(loan.router)
    app.include_router(cash_bill.router)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        openapi_schema = get_openapi(
            title=TITLE,
            version="1.0.0",
            description=DESCRIPTION,
            routes=app.routes,
        )
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app
