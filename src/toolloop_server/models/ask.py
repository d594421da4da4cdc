"""Pydantic models for the ask API requests and responses.

This module defines the request and response schemas for the ask endpoints,
including the events emitted by the streaming variant.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AskRequest(BaseModel):
    """Request body for POST /api/v1/ask and POST /api/v1/ask/stream."""

    question: str = Field(
        min_length=1,
        description="The question to answer. The model may call tools to answer it.",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"question": "What is 7 plus 5?"},
                {"question": "Is 17 prime?"},
            ]
        }
    )


class ToolExecutionInfo(BaseModel):
    """A tool call made while answering the question."""

    tool_name: str = Field(description="Name of the requested tool")
    arguments: Any = Field(description="Arguments as sent by the model")
    success: bool = Field(description="Whether the tool call succeeded")
    result: Any = Field(default=None, description="Tool result on success")
    error: dict[str, str] | None = Field(
        default=None, description="Error kind and message on failure"
    )


class AskResponse(BaseModel):
    """Response body for the non-streaming ask endpoint."""

    answer: str = Field(description="The model's final answer")
    model: str = Field(description="Model that produced the answer")
    iterations: int = Field(description="Number of tool round trips made")
    tool_calls_executed: list[ToolExecutionInfo] = Field(
        default_factory=list,
        description="Tool calls executed while producing the answer, in order",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "answer": "7 plus 5 is 12.",
                "model": "llama3.1:8b",
                "iterations": 1,
                "tool_calls_executed": [
                    {
                        "tool_name": "sum_of_two_numbers",
                        "arguments": {"firstNumber": 7, "secondNumber": 5},
                        "success": True,
                        "result": {"result": 12},
                        "error": None,
                    }
                ],
            }
        }
    )


# --- SSE event payloads ---


class ToolCallEventData(BaseModel):
    """Payload of a tool_call event."""

    iteration: int
    tool_name: str
    arguments: Any


class ToolResultEventData(ToolExecutionInfo):
    """Payload of a tool_result event."""

    iteration: int


class AnswerEventData(BaseModel):
    """Payload of an answer event."""

    answer: str
    model: str
    iterations: int


class ErrorEvent(BaseModel):
    """Payload of an error event."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class DoneEvent(BaseModel):
    """Payload of the final done event."""

    success: bool
