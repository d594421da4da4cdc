"""Ollama client wrapper and completion service.

This package provides the async client for the Ollama API and the completion
service the conversation loop uses. All Ollama interactions are async and
use streaming.
"""

from toolloop_server.ollama.client import OllamaClient
from toolloop_server.ollama.completion import OllamaCompletionService

__all__ = ["OllamaClient", "OllamaCompletionService"]
