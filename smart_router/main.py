# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .core.config import settings
from .core.exceptions import SmartRouterError
from .inference.client import log_provider_status
from .inference.config import get_router_config
from .routes import answer, chat, health, models
from .schemas.error import ErrorResponse
from .services.smart_router import shutdown_smart_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    # Fails startup when models.yaml is missing or invalid.
    log_provider_status(get_router_config())
    yield
    await shutdown_smart_router()


app = FastAPI(
    title="Smart Router",
    description="OpenAI-compatible router that picks a fast or capable model per query",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", str(uuid.uuid4()))


def _error_response(status_code: int, message: str, request_id: str) -> JSONResponse:
    body = ErrorResponse(error=message, request_id=request_id)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(SmartRouterError)
async def smart_router_exception_handler(request: Request, exc: SmartRouterError):
    """Map pipeline errors to their status with a short, client-safe message."""
    request_id = _request_id(request)
    if exc.status_code >= 500:
        logger.error("Request failed (request_id=%s): %s", request_id, exc.message)
    else:
        logger.info("Rejected request (request_id=%s): %s", request_id, exc.message)
    return _error_response(exc.status_code, exc.message, request_id)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail), _request_id(request))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors (400), same as a missing user message."""
    request_id = _request_id(request)
    logger.info("Invalid request body (request_id=%s): %s", request_id, exc.errors())
    return _error_response(400, "Invalid request body", request_id)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    request_id = _request_id(request)
    logger.exception("Unhandled exception (request_id=%s)", request_id)
    return _error_response(500, "An internal error occurred.", request_id)


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(chat.router, prefix="/v1", tags=["chat"])
app.include_router(models.router, prefix="/v1", tags=["models"])
app.include_router(answer.router, prefix="/api", tags=["answer"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": "Smart Router is running. Chat completions at /v1/chat/completions"}
