"""Completion service backed by Ollama's streaming chat API.

Collects a streamed response into a single ``Answer`` or ``ToolCalls`` result
and converts conversation messages into Ollama's message format.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from toolloop_server.conversation.types import (
    Answer,
    AssistantMessage,
    CompletionResult,
    Message,
    ToolCallRequest,
    ToolCalls,
    ToolMessage,
    ToolMode,
)
from toolloop_server.errors import CompletionServiceError
from toolloop_server.ollama.client import OllamaClient

logger = logging.getLogger(__name__)


def convert_messages_to_ollama_format(messages: list[Message]) -> list[dict[str, Any]]:
    """Convert conversation messages to Ollama API format.

    Args:
        messages: List of message objects (UserMessage, SystemMessage,
                  AssistantMessage, ToolMessage)

    Returns:
        List of message dicts in Ollama format: [{"role": "...", "content": "..."}, ...]
    """
    ollama_messages = []

    for msg in messages:
        ollama_msg: dict[str, Any] = {
            "role": msg.role,
            "content": msg.content,
        }

        if isinstance(msg, AssistantMessage) and msg.tool_calls:
            ollama_msg["tool_calls"] = [
                {
                    "function": {
                        "name": call.tool_name,
                        # Ollama only accepts objects here; a malformed payload
                        # has already been reported back through the tool result.
                        "arguments": dict(call.raw_arguments)
                        if isinstance(call.raw_arguments, Mapping)
                        else {},
                    }
                }
                for call in msg.tool_calls
            ]

        if isinstance(msg, ToolMessage):
            ollama_msg["tool_name"] = msg.tool_name

        ollama_messages.append(ollama_msg)

    return ollama_messages


def parse_tool_call(raw_call: Any) -> ToolCallRequest:
    """Parse one tool call from an Ollama message.

    Arguments delivered as a JSON string are decoded. A string that does not
    decode is passed through unchanged so argument validation can reject it.

    Raises:
        CompletionServiceError: If the call has no function name
    """
    function = raw_call.get("function") if isinstance(raw_call, Mapping) else None
    name = function.get("name") if isinstance(function, Mapping) else None
    if not isinstance(name, str) or not name:
        raise CompletionServiceError(
            "Malformed tool call in completion response",
            {"tool_call": repr(raw_call)},
        )

    arguments = function.get("arguments")
    if arguments is None:
        arguments = {}
    elif isinstance(arguments, str):
        try:
            arguments = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError:
            logger.debug(f"Tool call arguments for {name} are not valid JSON")

    return ToolCallRequest(tool_name=name, raw_arguments=arguments)


class OllamaCompletionService:
    """Completion service that talks to Ollama.

    Ollama has no "tool choice" switch, so ``ToolMode.NONE`` is expressed by
    not offering any tools.

    Attributes:
        client: The shared OllamaClient
        options: Optional model parameters passed on every request
    """

    def __init__(
        self, client: OllamaClient, options: dict[str, Any] | None = None
    ) -> None:
        self.client = client
        self.options = options

    async def complete(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]],
        model: str,
        tool_mode: ToolMode = ToolMode.AUTO,
    ) -> CompletionResult:
        """Collect a complete response from Ollama's streaming API.

        Returns:
            Answer if the model replied with text, ToolCalls if it requested tools

        Raises:
            CompletionServiceError: If streaming fails or the response is malformed
        """
        content_parts: list[str] = []
        raw_tool_calls: list[Any] = []
        final_chunk = None

        try:
            async for chunk in self.client.chat_stream(
                model=model,
                messages=convert_messages_to_ollama_format(messages),
                tools=tools if tool_mode is ToolMode.AUTO else None,
                options=self.options,
            ):
                message = chunk.get("message") or {}
                content = message.get("content") or ""
                if content:
                    content_parts.append(content)

                # Tool calls may arrive in any chunk, not only the last one
                if message.get("tool_calls"):
                    raw_tool_calls.extend(message["tool_calls"])

                if chunk.get("done"):
                    final_chunk = chunk

        except Exception as e:
            logger.error(f"Ollama streaming error: {e}")
            raise CompletionServiceError(
                f"Failed to get response from Ollama: {str(e)}",
                {"model": model},
            ) from e

        if final_chunk is None:
            raise CompletionServiceError(
                "Stream ended without completion marker", {"model": model}
            )

        content = "".join(content_parts)

        if raw_tool_calls:
            calls = tuple(parse_tool_call(raw_call) for raw_call in raw_tool_calls)
            logger.debug(f"Model requested tools: {[c.tool_name for c in calls]}")
            return ToolCalls(calls=calls, content=content)

        logger.debug(f"Model answered with {len(content)} characters")
        return Answer(text=content)
