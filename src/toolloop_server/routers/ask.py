"""Ask API endpoints.

This module provides the endpoints that answer a question by running the
tool-calling conversation loop, either returning the final answer in one
response or streaming loop events via SSE.
"""

import asyncio
import logging
from typing import Any, Awaitable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request
from sse_starlette.sse import EventSourceResponse

from toolloop_server.conversation import (
    AnswerEvent,
    ConversationLoop,
    ConversationOutcome,
    ToolCallEvent,
    ToolExecution,
    ToolResultEvent,
)
from toolloop_server.dependencies import get_conversation_loop
from toolloop_server.errors import (
    CompletionServiceError,
    TooManyIterationsError,
    ToolLoopError,
)
from toolloop_server.models.ask import (
    AnswerEventData,
    AskRequest,
    AskResponse,
    DoneEvent,
    ErrorEvent,
    ToolCallEventData,
    ToolExecutionInfo,
    ToolResultEventData,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ask", tags=["ask"])

T = TypeVar("T")

# Status codes for errors that end a conversation
_ERROR_STATUS = {
    TooManyIterationsError: 500,
    CompletionServiceError: 502,
}


def _error_status(error: ToolLoopError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status_code
    return 500


def _to_http_exception(error: ToolLoopError) -> HTTPException:
    return HTTPException(
        status_code=_error_status(error),
        detail={"error": error.to_dict()},
    )


def _execution_info(execution: ToolExecution) -> dict[str, Any]:
    return ToolExecutionInfo(**execution.to_dict()).model_dump()


async def _run_until_disconnected(
    request: Request, awaitable: Awaitable[T], poll_interval: float
) -> T:
    """Await a conversation, cancelling it if the client goes away.

    Raises:
        HTTPException: 499 if the client disconnected before completion
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.warning("Client disconnected; cancelling conversation")
                task.cancel()
                await asyncio.wait({task})
                raise HTTPException(
                    status_code=499,
                    detail={
                        "error": {
                            "code": "client_disconnected",
                            "message": "Client disconnected before the answer was ready",
                            "details": {},
                        }
                    },
                )
    finally:
        if not task.done():
            task.cancel()


@router.post("", response_model=AskResponse)
async def ask(
    request_body: AskRequest,
    request: Request,
    loop: ConversationLoop = Depends(get_conversation_loop),
) -> AskResponse:
    """Answer a question, executing any tools the model requests.

    Args:
        request_body: Ask request containing the question
        request: FastAPI request object
        loop: Injected per-request conversation loop

    Returns:
        AskResponse with the final answer and the tool calls executed

    Raises:
        HTTPException: 500 if the iteration bound is exceeded,
                       502 if the completion service fails
    """
    settings = request.app.state.settings
    logger.info(f"Received question ({len(request_body.question)} characters)")

    try:
        outcome: ConversationOutcome = await _run_until_disconnected(
            request,
            loop.run(request_body.question),
            settings.disconnect_poll_interval,
        )
    except ToolLoopError as e:
        logger.error(f"Conversation failed: {e.code}: {e.message}")
        raise _to_http_exception(e)

    logger.info(
        f"Answered after {outcome.iterations} iterations "
        f"and {len(outcome.executions)} tool calls"
    )

    return AskResponse(
        answer=outcome.answer,
        model=loop.model,
        iterations=outcome.iterations,
        tool_calls_executed=[
            ToolExecutionInfo(**execution.to_dict()) for execution in outcome.executions
        ],
    )


@router.post("/stream")
async def ask_streaming(
    request_body: AskRequest,
    request: Request,
    loop: ConversationLoop = Depends(get_conversation_loop),
) -> EventSourceResponse:
    """Answer a question, streaming loop progress via Server-Sent Events (SSE).

    SSE Events:
        - tool_call: The model requested a tool
        - tool_result: A tool call finished (successfully or not)
        - answer: The model's final answer
        - error: The conversation failed
        - done: Stream is complete
    """
    logger.info(f"Starting streaming conversation with model {loop.model}")

    async def event_generator():
        """Generate SSE events from the conversation loop."""
        success = False
        try:
            async for event in loop.stream(request_body.question):
                if await request.is_disconnected():
                    logger.warning("Client disconnected during streaming")
                    return

                if isinstance(event, ToolCallEvent):
                    data = ToolCallEventData(
                        iteration=event.iteration,
                        tool_name=event.call.tool_name,
                        arguments=event.call.raw_arguments,
                    )
                    yield {"event": "tool_call", "data": data.model_dump_json()}
                elif isinstance(event, ToolResultEvent):
                    data = ToolResultEventData(
                        iteration=event.iteration,
                        **_execution_info(event.execution),
                    )
                    yield {"event": "tool_result", "data": data.model_dump_json()}
                elif isinstance(event, AnswerEvent):
                    data = AnswerEventData(
                        answer=event.text,
                        model=loop.model,
                        iterations=event.iterations,
                    )
                    yield {"event": "answer", "data": data.model_dump_json()}
                    success = True

        except ToolLoopError as e:
            logger.error(f"Streaming conversation failed: {e.code}: {e.message}")
            error_event = ErrorEvent(**e.to_dict())
            yield {"event": "error", "data": error_event.model_dump_json()}

        yield {"event": "done", "data": DoneEvent(success=success).model_dump_json()}

    return EventSourceResponse(event_generator())
