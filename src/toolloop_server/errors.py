"""Error taxonomy for toolloop-server.

Every error carries a stable ``code`` used in HTTP error bodies and in the
tool failure payloads fed back to the model, plus a ``details`` dict with
structured context.

Registry errors are raised at startup and are fatal. Validation and dispatch
errors are recovered by the conversation loop and turned into tool failures.
``TooManyIterationsError`` and ``CompletionServiceError`` end the request.
"""

from typing import Any


class ToolLoopError(Exception):
    """Base class for all toolloop-server errors."""

    code = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for an API error body."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


# --- Registry ---


class DuplicateToolError(ToolLoopError):
    """A tool with the same name is already registered."""

    code = "duplicate_tool"

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' is already registered", {"name": name})
        self.name = name


class InvalidToolContractError(ToolLoopError):
    """A tool contract breaks one of its invariants."""

    code = "invalid_tool_contract"

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(
            f"Invalid contract for tool '{name}': {reason}",
            {"name": name, "reason": reason},
        )
        self.name = name
        self.reason = reason


class RegistryFrozenError(ToolLoopError):
    """Registration was attempted after the registry was frozen."""

    code = "registry_frozen"


class UnknownToolError(ToolLoopError):
    """The requested tool is not registered."""

    code = "unknown_tool"

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' is not registered", {"name": name})
        self.name = name


# --- Argument validation ---


class ArgumentValidationError(ToolLoopError):
    """Base class for argument payloads that do not match a tool contract."""

    code = "invalid_arguments"


class InvalidArgumentsError(ArgumentValidationError):
    """The argument payload is not a JSON object."""

    code = "invalid_arguments"

    def __init__(self, actual: str) -> None:
        super().__init__(
            f"Arguments must be a JSON object, got {actual}", {"actual": actual}
        )
        self.actual = actual


class MissingRequiredArgumentError(ArgumentValidationError):
    """A required argument is absent."""

    code = "missing_required_argument"

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required argument '{name}'", {"name": name})
        self.name = name


class UnknownArgumentError(ArgumentValidationError):
    """An argument is not declared by the tool contract."""

    code = "unknown_argument"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown argument '{name}'", {"name": name})
        self.name = name


class TypeMismatchError(ArgumentValidationError):
    """An argument value does not have the declared type."""

    code = "type_mismatch"

    def __init__(self, name: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Argument '{name}' expected {expected}, got {actual}",
            {"name": name, "expected": expected, "actual": actual},
        )
        self.name = name
        self.expected = expected
        self.actual = actual


# --- Execution ---


class ToolExecutionError(ToolLoopError):
    """A tool handler failed."""

    code = "tool_execution_error"

    def __init__(self, tool_name: str, reason: str) -> None:
        super().__init__(
            f"Tool '{tool_name}' failed: {reason}",
            {"tool_name": tool_name, "reason": reason},
        )
        self.tool_name = tool_name
        self.reason = reason


class ToolTimeoutError(ToolExecutionError):
    """A tool handler did not finish within its time budget."""

    code = "tool_timeout"

    def __init__(self, tool_name: str, timeout_seconds: float) -> None:
        super().__init__(tool_name, f"timed out after {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds


# --- Conversation ---


class TooManyIterationsError(ToolLoopError):
    """The model kept requesting tools past the iteration bound."""

    code = "too_many_iterations"

    def __init__(self, max_iterations: int) -> None:
        super().__init__(
            f"No final answer after {max_iterations} tool round trips",
            {"max_iterations": max_iterations},
        )
        self.max_iterations = max_iterations


class CompletionServiceError(ToolLoopError):
    """The completion service was unreachable or returned a malformed response."""

    code = "completion_service_error"
