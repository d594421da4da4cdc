"""Unit tests for the command-line entry point."""

import os
import sys
from unittest.mock import patch

from fastapi import FastAPI

from toolloop_server.__main__ import main


def test_main_runs_app_object(monkeypatch):
    """Without --reload the configured app is passed to uvicorn directly."""
    monkeypatch.setattr(sys, "argv", ["toolloop-server", "--port", "9001"])

    with patch("toolloop_server.__main__.uvicorn.run") as mock_run:
        main()

    app = mock_run.call_args.args[0]
    assert isinstance(app, FastAPI)
    assert app.state.settings.port == 9001
    assert mock_run.call_args.kwargs["port"] == 9001
    assert "reload" not in mock_run.call_args.kwargs


def test_main_reload_uses_app_factory(monkeypatch):
    """--reload hands uvicorn an import string and forwards CLI overrides."""
    monkeypatch.setenv("TOOLLOOP_MODEL", "env-model")
    monkeypatch.setattr(
        sys, "argv", ["toolloop-server", "--reload", "--model", "cli-model"]
    )

    with patch("toolloop_server.__main__.uvicorn.run") as mock_run:
        main()

    assert mock_run.call_args.args[0] == "toolloop_server.app:create_app"
    assert mock_run.call_args.kwargs["factory"] is True
    assert mock_run.call_args.kwargs["reload"] is True
    assert os.environ["TOOLLOOP_MODEL"] == "cli-model"
