"""toolloop-server: FastAPI server that answers questions with local tools.

This package exposes an HTTP endpoint that forwards a question to an Ollama
model offered a catalog of local tools, executes the tools the model
requests, and returns the model's final answer.
"""

__version__ = "0.1.0"

from toolloop_server.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
