"""CLI entry point for toolloop-server.

This module provides the command-line interface for starting the toolloop-server.
It can be invoked as `toolloop-server` (via the script entry point) or
`python -m toolloop_server`.
"""

import argparse
import logging
import os
import sys

import uvicorn

from toolloop_server import __version__, create_app
from toolloop_server.config import ToolLoopSettings


def main() -> None:
    """Main entry point for the toolloop-server CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="toolloop-server",
        description="FastAPI server that answers questions with an Ollama model and local tools",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"toolloop-server {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via TOOLLOOP_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via TOOLLOOP_PORT)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via TOOLLOOP_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model used for completions (can be set via TOOLLOOP_MODEL)",
    )

    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Maximum tool round trips per question (default: 10, can be set via TOOLLOOP_MAX_ITERATIONS)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via TOOLLOOP_LOG_LEVEL)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    args = parser.parse_args()

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.model is not None:
        settings_kwargs["model"] = args.model
    if args.max_iterations is not None:
        settings_kwargs["max_iterations"] = args.max_iterations
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = ToolLoopSettings(**settings_kwargs)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.reload:
        # The reloader re-imports the app in a child process, which only sees
        # CLI overrides through the environment
        for key, value in settings_kwargs.items():
            os.environ[f"TOOLLOOP_{key.upper()}"] = str(value)
        uvicorn.run(
            "toolloop_server.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            reload=True,
        )
        return

    # Create the FastAPI app
    app = create_app(settings=settings)

    # Start uvicorn
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
