# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .routes import audit, checklist_items, checklists, health, public
from .schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    from db import get_db_service

    from .services.activation import clear_activation_listeners, init_activation_listeners
    from .services.storage import init_storage_service

    init_storage_service(settings)
    init_activation_listeners(settings)
    if settings.AUTH_DISABLED:
        logger.warning("AUTH_DISABLED is set -- every request runs as the dev admin user")
    yield
    clear_activation_listeners()
    await get_db_service().dispose()


app = FastAPI(
    title="Onboarding Checklist API",
    description="Employee onboarding checklist generation and progress tracking",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

_HTTP_STATUS_TITLES: dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    413: "Payload Too Large",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def _build_error(status_code: int, detail: str, request_id: str) -> ErrorResponse:
    return ErrorResponse(
        type="about:blank",
        title=_HTTP_STATUS_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        request_id=request_id,
    )


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", str(uuid.uuid4()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Convert HTTPException to RFC 7807 Problem Details."""
    body = _build_error(exc.status_code, str(exc.detail), _request_id(request))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Convert Pydantic validation errors to RFC 7807 Problem Details."""
    body = _build_error(422, str(exc.errors()), _request_id(request))
    return JSONResponse(status_code=422, content=body.model_dump())


@app.exception_handler(DBAPIError)
async def database_exception_handler(request: Request, exc: DBAPIError):
    """Store failures: constraint races are conflicts, everything else is retryable."""
    request_id = _request_id(request)
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error (request_id=%s): %s", request_id, exc.orig)
        body = _build_error(409, "The request conflicts with existing data.", request_id)
        return JSONResponse(status_code=409, content=body.model_dump())
    logger.error("Database unavailable (request_id=%s): %s", request_id, exc.orig)
    body = _build_error(503, "The checklist store is temporarily unavailable. Retry later.", request_id)
    return JSONResponse(status_code=503, content=body.model_dump(), headers={"Retry-After": "5"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    request_id = _request_id(request)
    logger.exception("Unhandled exception (request_id=%s)", request_id)
    body = _build_error(500, "An unexpected error occurred.", request_id)
    return JSONResponse(status_code=500, content=body.model_dump())


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(public.router, prefix="/api/public", tags=["public"])
app.include_router(checklists.router, prefix="/api/checklists", tags=["checklists"])
app.include_router(checklist_items.router, prefix="/api/checklist-items", tags=["checklist-items"])
app.include_router(audit.router, prefix="/api/audit", tags=["audit"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": "Welcome to the Onboarding Checklist API"}
