"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolloop_server import __version__
from toolloop_server.config import ToolLoopSettings
from toolloop_server.ollama import OllamaClient
from toolloop_server.routers import ask, health, tools
from toolloop_server.tools import ToolDispatcher, build_registry
from toolloop_server.tools.builtin import WeatherLookup, builtin_tools

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    This function handles startup and shutdown logic for the application.
    Shared objects (the Ollama client, the HTTP client used by tools, the
    frozen tool registry and the dispatcher) are created once at startup and
    stored in app.state for reuse across all requests.

    A malformed tool catalog raises here and aborts startup.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ToolLoopSettings = app.state.settings

    # Startup: HTTP client for tools that call external services
    app.state.http_client = httpx.AsyncClient()

    weather = WeatherLookup(
        http_client=app.state.http_client,
        api_key=settings.weather_api_key,
        base_url=settings.weather_base_url,
        timeout_seconds=settings.weather_timeout_seconds,
    )
    if not settings.weather_api_key:
        logger.warning("No weather API key configured; get_current_weather will fail")

    try:
        app.state.tool_registry = build_registry(builtin_tools(weather))
    except Exception:
        await app.state.http_client.aclose()
        raise
    app.state.tool_dispatcher = ToolDispatcher(
        app.state.tool_registry, timeout_seconds=settings.tool_timeout_seconds
    )

    # Startup: Initialize Ollama client
    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    # Check initial connectivity
    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    try:
        yield
    finally:
        # Shutdown: Clean up resources
        try:
            if hasattr(app.state, "ollama_client"):
                await app.state.ollama_client.close()
                logger.info("Ollama client closed")
        finally:
            await app.state.http_client.aclose()
            logger.info("HTTP client closed")


def create_app(settings: ToolLoopSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional ToolLoopSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from toolloop_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="toolloop-server",
        description="FastAPI server that answers questions with an Ollama model and local tools",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Configure CORS
    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(tools.router)
    app.include_router(ask.router)

    return app
