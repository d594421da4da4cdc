"""Conversation loop and its message and event types.

One ``ConversationLoop`` drives a single request: it submits the history to
the completion service, executes requested tools and feeds their results back
until the model answers.
"""

from toolloop_server.conversation.loop import ConversationLoop, LoopState
from toolloop_server.conversation.types import (
    Answer,
    AnswerEvent,
    AssistantMessage,
    CompletionResult,
    CompletionService,
    ConversationOutcome,
    LoopEvent,
    Message,
    SystemMessage,
    ToolCallEvent,
    ToolCallRequest,
    ToolCalls,
    ToolExecution,
    ToolMessage,
    ToolMode,
    ToolResultEvent,
    UserMessage,
)

__all__ = [
    "Answer",
    "AnswerEvent",
    "AssistantMessage",
    "CompletionResult",
    "CompletionService",
    "ConversationLoop",
    "ConversationOutcome",
    "LoopEvent",
    "LoopState",
    "Message",
    "SystemMessage",
    "ToolCallEvent",
    "ToolCallRequest",
    "ToolCalls",
    "ToolExecution",
    "ToolMessage",
    "ToolMode",
    "ToolResultEvent",
    "UserMessage",
]
