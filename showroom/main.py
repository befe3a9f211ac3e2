"""ASGI app for the showroom catalog.

Run with ``uvicorn showroom.main:app``. Mounts the public catalog, contact
and health routes plus the cookie-gated admin back office.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from showroom import __version__
from showroom.config import settings
from showroom.core.errors import ShowroomError, ValidationError
from showroom.infra.database import close_db_engine, verify_db_connection
from showroom.infra.logging import get_logger, setup_logging
from showroom.infra.mailer import build_mail_transport
from showroom.schemas.common import ErrorResponse

from showroom.api.routes.admin_auth import router as admin_auth_router
from showroom.api.routes.admin_categories import router as admin_categories_router
from showroom.api.routes.admin_products import router as admin_products_router
from showroom.api.routes.contact import router as contact_router
from showroom.api.routes.health import router as health_router
from showroom.api.routes.products import router as products_router

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Check the database and open the mail transport; release both on exit.

    An unreachable database does not stop startup. Requests fail until it
    comes back and /health/ready reports it as degraded meanwhile.
    """
    logger.info("Showroom API starting", environment=settings.environment)

    db_ok = await verify_db_connection()
    if not db_ok:
        logger.warning("Starting without database", reason="startup probe failed")

    app.state.mailer = build_mail_transport(settings)

    yield

    logger.info("Showroom API shutting down")
    await app.state.mailer.close()
    await close_db_engine()
    logger.info("Showroom API stopped")


app = FastAPI(
    title="Showroom Catalog API",
    description="Bilingual (EN/VI) furniture catalog and admin back office",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url=None,
)

# Credentialed CORS needs explicit origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every error leaves as an ErrorResponse envelope.


def _error_response(
    status_code: int,
    error: str,
    error_type: str,
    detail: dict | None = None,
    errors: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        error_type=error_type,
        detail=detail,
        errors=errors,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(ShowroomError)
async def showroom_exception_handler(request: Request, exc: ShowroomError) -> JSONResponse:
    """Render domain errors with their status code."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed",
        error=exc.message,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return _error_response(
        exc.status_code,
        exc.message,
        type(exc).__name__,
        detail=exc.detail,
        errors=getattr(exc, "errors", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render malformed request bodies and parameters as 400."""
    problems = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in exc.errors()
    ]
    logger.info("Request validation failed", path=request.url.path, problems=len(problems))
    return _error_response(
        400,
        "Invalid request",
        ValidationError.__name__,
        detail={"errors": problems},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions without leaking internals."""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return _error_response(500, "Internal server error", type(exc).__name__)


app.include_router(health_router, tags=["Health"])
app.include_router(products_router, tags=["Catalog"])
app.include_router(contact_router, tags=["Contact"])
app.include_router(admin_auth_router, prefix="/admin/auth", tags=["Admin Auth"])
app.include_router(admin_products_router, prefix="/admin/products", tags=["Admin Products"])
app.include_router(
    admin_categories_router,
    prefix="/admin/categories",
    tags=["Admin Categories"],
)


@app.get("/")
async def root() -> dict:
    """Root endpoint with service info."""
    return {
        "service": "Showroom Catalog API",
        "version": __version__,
        "environment": settings.environment,
        "docs": "/docs" if settings.environment == "dev" else None,
    }
