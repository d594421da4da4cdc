"""Data types for the tool system.

This module defines the tool contract (schema plus handler), the parameter
schema with its closed set of types, and the result of a tool invocation.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from toolloop_server.errors import ToolLoopError

# Handlers receive validated arguments as keyword arguments.
# Both plain functions and coroutine functions are accepted.
ToolHandler = Callable[..., Any]


class ParameterType(str, Enum):
    """The closed set of argument types a tool can declare."""

    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    ENUM = "enum"


@dataclass(frozen=True)
class ParameterSchema:
    """Schema for a single tool argument."""

    type: ParameterType
    description: str = ""
    enum: tuple[str, ...] | None = None

    def to_json_schema(self) -> dict[str, Any]:
        """Render the parameter as a JSON schema property."""
        if self.type is ParameterType.ENUM:
            schema: dict[str, Any] = {"type": "string", "enum": list(self.enum or ())}
        else:
            schema = {"type": self.type.value}
        if self.description:
            schema["description"] = self.description
        return schema


@dataclass(frozen=True)
class ToolContract:
    """Complete tool definition: schema + implementation.

    The schema half is sent to the model for function calling, the handler
    is invoked by the dispatcher once the model's arguments are validated.

    Attributes:
        name: Unique tool identifier
        description: Human-readable description shown to the model
        parameters: Ordered mapping of argument name to schema
        required: Names of the arguments the model must supply
        handler: Callable invoked with the validated arguments as kwargs
    """

    name: str
    description: str
    parameters: Mapping[str, ParameterSchema]
    handler: ToolHandler = field(compare=False)
    required: frozenset[str] = frozenset()

    def to_schema(self) -> dict[str, Any]:
        """Convert to the function-calling schema sent to the model."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        name: param.to_json_schema()
                        for name, param in self.parameters.items()
                    },
                    # Keep declaration order so schemas are stable
                    "required": [name for name in self.parameters if name in self.required],
                },
            },
        }


@dataclass(frozen=True)
class ToolSuccess:
    """A tool completed and returned a JSON-compatible value."""

    value: Any
    success: bool = field(default=True, init=False)

    def to_content(self) -> str:
        return json.dumps(self.value, allow_nan=False)


@dataclass(frozen=True)
class ToolFailure:
    """A tool call could not be completed."""

    error: ToolLoopError
    success: bool = field(default=False, init=False)

    @property
    def kind(self) -> str:
        return self.error.code

    @property
    def reason(self) -> str:
        return self.error.message

    def to_content(self) -> str:
        return json.dumps({"error": {"kind": self.kind, "message": self.reason}})


ToolResult = ToolSuccess | ToolFailure
