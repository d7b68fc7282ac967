"""Main FastAPI Application

ASGI app for the resume ingestion service. This module wires middleware,
global exception handlers, and includes API routers from `presentation`.

Run locally for development with:

    uvicorn main:app --reload

Keep application logic in `application`, `core`, and
`infrastructure` to preserve a clean architecture.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.database import init_db, close_db
from core.logging_config import configure_logging
from core.exceptions import (
    DomainException,
    AuthenticationException,
    AuthorizationException,
    ValidationException,
    ResourceNotFoundException,
    InvalidStateTransitionException,
    VersionConflictException,
)
from presentation.api.v1.endpoints import (
    health_router,
    resume_router,
    results_router,
    versions_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"🚀 Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    await init_db()
    logger.info("✅ Database initialized")

    yield

    # Shutdown
    logger.info("👋 Shutting down gracefully...")
    await close_db()
    logger.info("✅ Database connections closed")


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Resume ingestion service: submission, extraction callbacks and CV versioning",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
        headers=headers,
    )


def status_code_for(exc: DomainException) -> int:
    if isinstance(exc, ValidationException):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, AuthenticationException):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationException):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, ResourceNotFoundException):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (InvalidStateTransitionException, VersionConflictException)):
        return status.HTTP_409_CONFLICT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# Global Exception Handlers
@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Handle domain-level exceptions"""
    status_code = status_code_for(exc)

    if status_code >= 500:
        # Detail stays in the log
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
        return error_response(status_code, "Internal error while processing the request")

    logger.warning(f"Domain exception ({status_code}): {str(exc)}")
    return error_response(status_code, str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid {location or 'request'}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    logger.warning(f"Request validation failed on {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Include API routes
app.include_router(
    health_router,
    prefix="/api/v1",
    tags=["Health"]
)

# Extraction pipeline callbacks (declared before the resume routes)
app.include_router(
    results_router,
    prefix="/api/v1",
    tags=["Extraction Results"]
)

app.include_router(
    resume_router,
    prefix="/api/v1",
    tags=["Resume"]
)

app.include_router(
    versions_router,
    prefix="/api/v1",
    tags=["Resume Versions"]
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
