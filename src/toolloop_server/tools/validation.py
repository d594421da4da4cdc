"""Strict validation of model-supplied tool arguments.

Arguments arrive from the completion service as loosely typed JSON. They are
checked against the tool contract before any handler is touched. No coercion
is performed: ``"3"`` is not an integer and ``3.0`` is not an integer either.
"""

import math
from collections.abc import Mapping
from typing import Any

from toolloop_server.errors import (
    InvalidArgumentsError,
    MissingRequiredArgumentError,
    TypeMismatchError,
    UnknownArgumentError,
)
from toolloop_server.tools.types import ParameterSchema, ParameterType, ToolContract


def describe_type(value: Any) -> str:
    """Name the JSON type of a value for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def _matches(param: ParameterSchema, value: Any) -> bool:
    # bool is a subclass of int; JSON true/false are never numbers
    if param.type is ParameterType.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if param.type is ParameterType.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return math.isfinite(value)
    if param.type is ParameterType.STRING:
        return isinstance(value, str)
    if param.type is ParameterType.ENUM:
        return isinstance(value, str) and value in (param.enum or ())
    return False


def _expected(param: ParameterSchema) -> str:
    if param.type is ParameterType.ENUM:
        return "one of " + ", ".join(repr(v) for v in param.enum or ())
    if param.type is ParameterType.NUMBER:
        return "finite number"
    return param.type.value


def _actual(param: ParameterSchema, value: Any) -> str:
    if param.type is ParameterType.ENUM and isinstance(value, str):
        return repr(value)
    if isinstance(value, float) and not math.isfinite(value):
        return repr(value)
    return describe_type(value)


def validate_arguments(contract: ToolContract, raw_arguments: Any) -> dict[str, Any]:
    """Validate raw arguments against a tool contract.

    Rules are applied in order: required presence, unknown keys, then types.

    Args:
        contract: The tool contract to validate against
        raw_arguments: Argument payload from the model

    Returns:
        dict: The validated arguments, in parameter declaration order

    Raises:
        InvalidArgumentsError: If the payload is not an object
        MissingRequiredArgumentError: If a required argument is absent
        UnknownArgumentError: If an undeclared argument is present
        TypeMismatchError: If a value does not have the declared type
    """
    if not isinstance(raw_arguments, Mapping):
        raise InvalidArgumentsError(describe_type(raw_arguments))

    for key in raw_arguments:
        if not isinstance(key, str):
            raise InvalidArgumentsError(f"object with {describe_type(key)} key")

    for name in contract.parameters:
        if name in contract.required and name not in raw_arguments:
            raise MissingRequiredArgumentError(name)

    for name in raw_arguments:
        if name not in contract.parameters:
            raise UnknownArgumentError(name)

    validated: dict[str, Any] = {}
    for name, param in contract.parameters.items():
        if name not in raw_arguments:
            continue
        value = raw_arguments[name]
        if not _matches(param, value):
            raise TypeMismatchError(name, _expected(param), _actual(param, value))
        validated[name] = value

    return validated
