"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and services.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from toolloop_server.config import ToolLoopSettings
from toolloop_server.conversation import ConversationLoop
from toolloop_server.ollama import OllamaClient, OllamaCompletionService
from toolloop_server.tools import ToolDispatcher, ToolRegistry


def _not_initialized(component: str) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={
            "error": {
                "code": "service_unavailable",
                "message": f"{component} not initialized",
                "details": {},
            }
        },
    )


@lru_cache
def get_settings() -> ToolLoopSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the TOOLLOOP_ prefix.

    Returns:
        ToolLoopSettings: The application configuration settings.
    """
    return ToolLoopSettings()


def get_ollama_client(request: Request) -> OllamaClient:
    """Get the Ollama client from app state.

    Raises:
        HTTPException: If the Ollama client is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "ollama_client"):
        raise _not_initialized("Ollama client")
    return request.app.state.ollama_client


def get_tool_registry(request: Request) -> ToolRegistry:
    """Get the frozen tool registry built at startup.

    Raises:
        HTTPException: If the registry is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "tool_registry"):
        raise _not_initialized("Tool registry")
    return request.app.state.tool_registry


def get_tool_dispatcher(request: Request) -> ToolDispatcher:
    """Get the shared tool dispatcher from app state.

    Raises:
        HTTPException: If the dispatcher is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "tool_dispatcher"):
        raise _not_initialized("Tool dispatcher")
    return request.app.state.tool_dispatcher


def get_conversation_loop(request: Request) -> ConversationLoop:
    """Create a fresh ConversationLoop for this request.

    Each request gets its own loop and message history; the client,
    registry and dispatcher are shared from app state.

    Raises:
        HTTPException: If a shared component is missing (503 Service Unavailable).
    """
    # Use settings from app.state instead of cached get_settings()
    # This ensures tests can use their own isolated settings
    settings: ToolLoopSettings = request.app.state.settings

    return ConversationLoop(
        completion=OllamaCompletionService(get_ollama_client(request)),
        registry=get_tool_registry(request),
        dispatcher=get_tool_dispatcher(request),
        model=settings.model,
        max_iterations=settings.max_iterations,
        system_prompt=settings.system_prompt,
    )
