from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.api.router import api_router
from app.core.logging import configure_logging, get_logger
from app.services.message_store import message_store

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger.info(
        "Starting %s %s (key version %s)",
        settings.app_name,
        settings.app_version,
        settings.default_key_version.value,
    )
    yield
    logger.info("Shutting down %s (%d messages in log)", settings.app_name, len(message_store))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Flatten error bodies to ``{"detail": ..., "code": ...}``."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"detail": exc.detail, "code": "http_error"}
    return JSONResponse(content, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as 400 with the same flat error body."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ())]
    field = ".".join(part for part in loc if part not in ("body", "query", "path"))

    code = "invalid_key_version" if loc and loc[-1] == "key_version" else "invalid_request"
    message = first.get("msg", "Invalid request")
    detail = f"{field}: {message}" if field else message
    return JSONResponse({"detail": detail, "code": code}, status_code=status.HTTP_400_BAD_REQUEST)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Password-obfuscated chat messages over a shared, append-only log",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include routers
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app


# Create app instance
app = create_app()
