"""Pytest configuration and shared fixtures for toolloop-server tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup and a scripted
completion service for driving the conversation loop.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from toolloop_server import create_app
from toolloop_server.config import ToolLoopSettings
from toolloop_server.conversation import Answer, ToolCallRequest, ToolCalls
from toolloop_server.tools import ToolDispatcher, build_registry
from toolloop_server.tools.builtin import (
    CURRENCY_CONVERSION,
    EVEN_ODD_CHECK,
    PRIME_NUMBER_CHECK,
    SUM_OF_TWO_NUMBERS,
    UNIT_CONVERSION,
)


class ScriptedCompletion:
    """Completion service that replays a fixed list of results.

    Every call records a copy of the messages it was given. When the script
    runs out, the last result is repeated.
    """

    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    async def complete(self, messages, tools, model, tool_mode=None):
        self.calls.append(
            {
                "messages": list(messages),
                "tools": tools,
                "model": model,
                "tool_mode": tool_mode,
            }
        )
        index = min(len(self.calls), len(self.results)) - 1
        result = self.results[index]
        if isinstance(result, Exception):
            raise result
        return result


def tool_call(name, **arguments):
    """Build a single-call ToolCalls result."""
    return ToolCalls(calls=(ToolCallRequest(tool_name=name, raw_arguments=arguments),))


@pytest.fixture
def make_completion():
    """Factory for ScriptedCompletion instances."""
    return ScriptedCompletion


@pytest.fixture
def answer():
    return Answer


@pytest.fixture
def call():
    return tool_call


@pytest.fixture
def registry():
    """A frozen registry with the pure builtin tools."""
    return build_registry(
        [
            SUM_OF_TWO_NUMBERS,
            EVEN_ODD_CHECK,
            PRIME_NUMBER_CHECK,
            UNIT_CONVERSION,
            CURRENCY_CONVERSION,
        ]
    )


@pytest.fixture
def dispatcher(registry):
    return ToolDispatcher(registry, timeout_seconds=1.0)


@pytest.fixture
def test_settings():
    """Create test settings.

    Returns:
        ToolLoopSettings: Settings instance configured for testing.
    """
    return ToolLoopSettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        model="test-model:latest",
        max_iterations=3,
        tool_timeout_seconds=1.0,
        weather_api_key=None,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
