"""Pairgate FastAPI Application."""

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from pairgate.config import settings
from pairgate.errors import GatewayError, InvalidInput
from pairgate.logging_config import get_logger, setup_logging
from pairgate.middleware import (
    CorrelationIdMiddleware,
    SecurityHeadersMiddleware,
    limiter,
    rate_limit_exceeded_handler,
)
from pairgate.routers import chat, health, pairing, posts, relay, stats
from pairgate.services.posts import default_posts
from pairgate.store import PAIRS, POSTS, VISITS, get_store

setup_logging(
    log_format=settings.log_format,
    log_level=settings.log_level,
    service_name=settings.service_name,
)
logger = get_logger(__name__)

VERSION = "0.1.0"


async def seed_collections() -> None:
    """Create any missing collection with its initial contents."""
    store = get_store()
    await store.seed(PAIRS, [])
    await store.seed(POSTS, default_posts())
    await store.seed(
        VISITS,
        {"count": 0, "lastVisit": datetime.now(UTC).isoformat()},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    await seed_collections()
    logger.info("Pairgate API started", data_dir=settings.data_dir)

    yield

    logger.info("Pairgate API shutdown complete")


app = FastAPI(
    title="Pairgate API",
    description="Pair-code issuance and thin third-party API gateway",
    version=VERSION,
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            error=exc.message,
            cause=str(exc.__cause__) if exc.__cause__ else None,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug("Request validation failed", path=request.url.path, errors=exc.errors())
    return JSONResponse(
        status_code=InvalidInput.status_code,
        content={"error": InvalidInput.default_message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Middleware (order matters: first added = last executed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(health.router)
app.include_router(pairing.router)
app.include_router(posts.router)
app.include_router(stats.router)
app.include_router(chat.router)
app.include_router(relay.router)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint."""
    return {
        "name": "Pairgate API",
        "version": VERSION,
        "docs": "/docs",
    }
