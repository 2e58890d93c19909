"""
Event AV Assistant Backend - Main FastAPI Application.

This is the entry point for the event AV assistant API.
It provides a property-grounded chat endpoint that recommends rental AV
equipment from a venue's inventory, rooms and labor rules.

Run with:
    uvicorn eventav.main:app --reload
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from supabase import acreate_client

from eventav.agents.orchestrator import ChatOrchestrator
from eventav.api.v1.chat import router as chat_router
from eventav.api.v1.properties import router as properties_router
from eventav.config import get_settings
from eventav.constants import API_TITLE, API_VERSION
from eventav.logging_config import setup_logging
from eventav.middleware import RequestContextMiddleware
from eventav.services.openai_client import get_openai_client
from eventav.services.property_repository import (
    InMemoryPropertyRepository,
    PropertyRepository,
    SupabasePropertyRepository,
)

# Get settings before logging setup so we know the debug flag
settings = get_settings()

# Propagate LangSmith settings into os.environ so the SDK can find them.
# pydantic-settings reads .env into the Settings model but does NOT inject
# values into os.environ, which is where langsmith and openai_client.py look.
if settings.langchain_tracing_v2 and settings.langsmith_api_key:
    os.environ["LANGCHAIN_TRACING_V2"] = "true"
    os.environ["LANGSMITH_API_KEY"] = settings.langsmith_api_key
    os.environ["LANGSMITH_PROJECT"] = settings.langsmith_project

setup_logging(settings.debug)

logger = structlog.get_logger(__name__)


async def _create_repository() -> PropertyRepository:
    """Supabase-backed repository when configured, otherwise an empty in-memory one."""
    if not (settings.supabase_url and settings.supabase_service_role_key):
        logger.warning(
            "supabase_not_configured",
            detail="Using an empty in-memory property store",
        )
        return InMemoryPropertyRepository()

    try:
        client = await acreate_client(settings.supabase_url, settings.supabase_service_role_key)
    except Exception as e:
        logger.warning("supabase_init_failed", error=str(e))
        return InMemoryPropertyRepository()

    logger.info("supabase_configured")
    return SupabasePropertyRepository(client)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan event handler for startup and shutdown."""
    logger.info("api_startup", cors_origins=settings.cors_origins)

    if not settings.openai_api_key:
        logger.warning("openai_key_missing", detail="Chat will not work")
    else:
        logger.info("openai_configured", model=settings.orchestrator.model)

    repository = await _create_repository()
    orchestrator = ChatOrchestrator(
        get_openai_client(settings.openai_api_key),
        repository,
        settings.orchestrator,
    )

    _app.state.repository = repository
    _app.state.orchestrator = orchestrator

    logger.info(
        "services_initialized",
        max_function_calls=settings.orchestrator.max_function_calls,
    )

    yield

    await orchestrator.client.close()
    logger.info("api_shutdown")


app = FastAPI(
    title=API_TITLE,
    description=(
        "Chat assistant for event AV rentals. Recommends equipment from a venue's "
        "available inventory, checks room capabilities, validates orders and "
        "estimates labor."
    ),
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Request context middleware must come before CORS so every response gets
# the X-Request-ID header (including preflight OPTIONS responses).
app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router, prefix="/api/v1")
app.include_router(properties_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": "Chat assistant for event AV rentals",
        "docs": "/docs",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}
