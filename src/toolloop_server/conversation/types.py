"""Data types for a single conversation.

This module defines the conversation messages, the tagged result returned by
the completion service, the completion service protocol itself, and the
events and outcome produced by the conversation loop.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Protocol

from toolloop_server.tools.types import ToolResult


@dataclass
class UserMessage:
    """A message from the user."""

    role: str = "user"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'user'."""
        self.role = "user"


@dataclass
class SystemMessage:
    """A system prompt message."""

    role: str = "system"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'system'."""
        self.role = "system"


@dataclass(frozen=True)
class ToolCallRequest:
    """A model-issued request to invoke a tool.

    ``raw_arguments`` is whatever the model sent; it is only trusted after
    validation against the tool contract.
    """

    tool_name: str
    raw_arguments: Any = field(default_factory=dict)


@dataclass
class AssistantMessage:
    """A response from the LLM assistant."""

    role: str = "assistant"
    content: str = ""
    tool_calls: list[ToolCallRequest] | None = None

    def __post_init__(self) -> None:
        """Validate role is always 'assistant'."""
        self.role = "assistant"


@dataclass
class ToolMessage:
    """A tool execution result fed back to the model."""

    role: str = "tool"
    tool_name: str = ""
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'tool'."""
        self.role = "tool"


# Union type for all message types
Message = UserMessage | SystemMessage | AssistantMessage | ToolMessage


# --- Completion service ---


class ToolMode(str, Enum):
    """Whether the model may call tools on this turn."""

    AUTO = "auto"
    NONE = "none"


@dataclass(frozen=True)
class Answer:
    """The model produced a final textual answer."""

    text: str
    type: Literal["answer"] = field(default="answer", init=False)


@dataclass(frozen=True)
class ToolCalls:
    """The model requested one or more tool invocations."""

    calls: tuple[ToolCallRequest, ...]
    content: str = ""
    type: Literal["tool_calls"] = field(default="tool_calls", init=False)


CompletionResult = Answer | ToolCalls


class CompletionService(Protocol):
    """Anything that can turn a message history into an answer or tool calls."""

    async def complete(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]],
        model: str,
        tool_mode: ToolMode = ToolMode.AUTO,
    ) -> CompletionResult: ...


# --- Loop events and outcome ---


@dataclass(frozen=True)
class ToolExecution:
    """One tool call made during the conversation, with its result."""

    tool_name: str
    arguments: Any
    result: ToolResult

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tool_name": self.tool_name,
            "arguments": self.arguments,
            "success": self.result.success,
        }
        if self.result.success:
            data["result"] = self.result.value
        else:
            data["error"] = {"kind": self.result.kind, "message": self.result.reason}
        return data


@dataclass(frozen=True)
class ToolCallEvent:
    """Emitted before a requested tool call is validated and executed."""

    iteration: int
    call: ToolCallRequest


@dataclass(frozen=True)
class ToolResultEvent:
    """Emitted after a tool call's result has been appended to the history."""

    iteration: int
    execution: ToolExecution


@dataclass(frozen=True)
class AnswerEvent:
    """Emitted once, when the model produces its final answer."""

    text: str
    iterations: int


LoopEvent = ToolCallEvent | ToolResultEvent | AnswerEvent


@dataclass
class ConversationOutcome:
    """Result of a completed conversation."""

    answer: str
    messages: list[Message]
    iterations: int
    executions: list[ToolExecution] = field(default_factory=list)
