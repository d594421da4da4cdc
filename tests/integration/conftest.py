"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that replace the
Ollama client with a mock and script the chunks it streams back.
"""

from unittest.mock import AsyncMock, patch

import pytest


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    """
    with patch("toolloop_server.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.check_connection.return_value = True

        # Return the mock instance when OllamaClient is instantiated
        mock_client_class.return_value = mock_instance

        yield mock_instance


def answer_chunks(text):
    """Streamed chunks for a plain text answer."""
    return [
        {"model": "test-model:latest", "message": {"role": "assistant", "content": text}, "done": False},
        {"model": "test-model:latest", "message": {"role": "assistant", "content": ""}, "done": True},
    ]


def tool_call_chunks(name, arguments):
    """Streamed chunks for a single tool call."""
    return [
        {
            "model": "test-model:latest",
            "message": {
                "role": "assistant",
                "content": "",
                "tool_calls": [{"function": {"name": name, "arguments": arguments}}],
            },
            "done": False,
        },
        {"model": "test-model:latest", "message": {"role": "assistant", "content": ""}, "done": True},
    ]


@pytest.fixture
def script_ollama(mock_ollama_client):
    """Script the responses of successive chat_stream calls.

    Each item is a list of chunks for one call, or an exception to raise.
    The last item repeats once the script runs out. Returns the list of
    recorded request kwargs.
    """

    def _script(*responses):
        requests = []

        async def mock_chat_stream(**kwargs):
            requests.append(kwargs)
            response = responses[min(len(requests), len(responses)) - 1]
            if isinstance(response, Exception):
                raise response
            for chunk in response:
                yield chunk

        mock_ollama_client.chat_stream = mock_chat_stream
        return requests

    return _script


@pytest.fixture
def ollama_answer():
    return answer_chunks


@pytest.fixture
def ollama_call():
    return tool_call_chunks
