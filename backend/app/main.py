"""
GabAi FastAPI Application Entry Point.

Run with: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import (
    auth,
    calendar,
    categorize,
    chat,
    contacts,
    conversations,
    list_items,
    reminders,
    shared,
    smart_lists,
    users,
)
from app.config import get_settings, sanitize_error
from app.errors import GabAiError
from app.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    logger.info("%s starting (environment=%s)", settings.app_name, settings.environment)
    yield
    logger.info("%s shutting down", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Personal voice assistant API: chat, smart lists, reminders and contacts",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or incomplete requests are 400s."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": f"{location}: {message}" if location else message,
            "errors": jsonable_encoder(errors, exclude={"ctx", "url"}),
        },
    )


@app.exception_handler(GabAiError)
async def gabai_exception_handler(request: Request, exc: GabAiError) -> JSONResponse:
    """Service-layer errors keep their status; internals are hidden outside development."""
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s (provider=%s): %s",
            type(exc).__name__, request.method, request.url.path, exc.provider, exc.message,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": sanitize_error(exc, generic_message=exc.public_message),
            "code": exc.error_code,
        },
    )


# Include routers
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(users.router, prefix=API_PREFIX)
app.include_router(conversations.router, prefix=API_PREFIX)
app.include_router(chat.router, prefix=API_PREFIX)
app.include_router(categorize.router, prefix=API_PREFIX)
app.include_router(smart_lists.router, prefix=API_PREFIX)
app.include_router(shared.router, prefix=API_PREFIX)
app.include_router(list_items.router, prefix=API_PREFIX)
app.include_router(reminders.router, prefix=API_PREFIX)
app.include_router(contacts.router, prefix=API_PREFIX)
app.include_router(calendar.router, prefix=API_PREFIX)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
