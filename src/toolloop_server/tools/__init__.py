"""Tool contracts, registry, argument validation and dispatch.

This package provides the typed tool catalog offered to the model, strict
validation of model-supplied arguments, and failure-capturing execution.
"""

from toolloop_server.tools.dispatcher import ToolDispatcher
from toolloop_server.tools.registry import ToolRegistry, build_registry
from toolloop_server.tools.types import (
    ParameterSchema,
    ParameterType,
    ToolContract,
    ToolFailure,
    ToolResult,
    ToolSuccess,
)
from toolloop_server.tools.validation import validate_arguments

__all__ = [
    "ParameterSchema",
    "ParameterType",
    "ToolContract",
    "ToolDispatcher",
    "ToolFailure",
    "ToolRegistry",
    "ToolResult",
    "ToolSuccess",
    "build_registry",
    "validate_arguments",
]
