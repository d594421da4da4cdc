"""The tool-calling conversation loop.

The loop alternates between asking the completion service for the next step
and executing the tools it requests, until the model produces a final answer
or the iteration bound is reached.

    AWAITING_MODEL --answer--> DONE
    AWAITING_MODEL --tool calls--> EXECUTING_TOOL --results--> AWAITING_MODEL
    AWAITING_MODEL --bound exceeded / service error--> FAILED

One loop instance serves one request. The message history is local to the
instance; the registry and dispatcher are shared read-only collaborators.
"""

import logging
from enum import Enum
from typing import AsyncIterator

from toolloop_server.conversation.types import (
    Answer,
    AnswerEvent,
    AssistantMessage,
    CompletionService,
    ConversationOutcome,
    LoopEvent,
    Message,
    SystemMessage,
    ToolCallEvent,
    ToolCallRequest,
    ToolExecution,
    ToolMessage,
    ToolMode,
    ToolResultEvent,
    UserMessage,
)
from toolloop_server.errors import (
    ArgumentValidationError,
    CompletionServiceError,
    TooManyIterationsError,
    UnknownToolError,
)
from toolloop_server.tools.dispatcher import ToolDispatcher
from toolloop_server.tools.registry import ToolRegistry
from toolloop_server.tools.types import ToolFailure, ToolResult
from toolloop_server.tools.validation import validate_arguments

logger = logging.getLogger(__name__)


class LoopState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOL = "executing_tool"
    DONE = "done"
    FAILED = "failed"


class ConversationLoop:
    """Drives one conversation through the tool-calling cycle.

    Attributes:
        completion: The completion service client
        registry: Tool registry whose schemas are offered to the model
        dispatcher: Executes validated tool calls
        model: Model identifier passed to the completion service
        max_iterations: Maximum number of tool round trips
        system_prompt: Optional system prompt placed before the question
        state: Current loop state
        messages: The conversation history built so far
        iterations: Tool round trips completed so far
        executions: Every tool call made, with its result
    """

    def __init__(
        self,
        completion: CompletionService,
        registry: ToolRegistry,
        dispatcher: ToolDispatcher,
        model: str,
        max_iterations: int = 10,
        system_prompt: str | None = None,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.completion = completion
        self.registry = registry
        self.dispatcher = dispatcher
        self.model = model
        self.max_iterations = max_iterations
        self.system_prompt = system_prompt

        self.state = LoopState.AWAITING_MODEL
        self.messages: list[Message] = []
        self.iterations = 0
        self.executions: list[ToolExecution] = []
        self._started = False

    async def run(self, question: str) -> ConversationOutcome:
        """Run the conversation to completion and return the outcome.

        Raises:
            TooManyIterationsError: If the model keeps requesting tools
            CompletionServiceError: If the completion service fails
        """
        answer = ""
        async for event in self.stream(question):
            if isinstance(event, AnswerEvent):
                answer = event.text

        return ConversationOutcome(
            answer=answer,
            messages=list(self.messages),
            iterations=self.iterations,
            executions=list(self.executions),
        )

    async def stream(self, question: str) -> AsyncIterator[LoopEvent]:
        """Run the conversation, yielding an event for every step.

        Yields ToolCallEvent and ToolResultEvent for each tool call, then a
        single AnswerEvent. Terminal failures are raised, not yielded.
        """
        if self._started:
            raise RuntimeError("ConversationLoop instances are single-use")
        self._started = True

        if self.system_prompt:
            self.messages.append(SystemMessage(content=self.system_prompt))
        self.messages.append(UserMessage(content=question))
        tools = self.registry.schemas()

        logger.info(
            f"Starting conversation with model {self.model} "
            f"({len(tools)} tools, max {self.max_iterations} iterations)"
        )

        while True:
            self.state = LoopState.AWAITING_MODEL
            logger.debug(
                f"Submitting {len(self.messages)} messages (iteration {self.iterations})"
            )
            try:
                result = await self.completion.complete(
                    self.messages, tools, self.model, ToolMode.AUTO
                )
            except CompletionServiceError:
                self.state = LoopState.FAILED
                logger.error("Completion service failed; ending conversation")
                raise

            if isinstance(result, Answer):
                self.messages.append(AssistantMessage(content=result.text))
                self.state = LoopState.DONE
                logger.info(
                    f"Conversation finished after {self.iterations} tool round trips"
                )
                yield AnswerEvent(text=result.text, iterations=self.iterations)
                return

            if not result.calls:
                self.state = LoopState.FAILED
                raise CompletionServiceError("Completion returned an empty tool call list")

            if self.iterations >= self.max_iterations:
                self.state = LoopState.FAILED
                logger.error(
                    f"Model still requesting tools after {self.max_iterations} round trips"
                )
                raise TooManyIterationsError(self.max_iterations)

            self.iterations += 1
            self.state = LoopState.EXECUTING_TOOL
            self.messages.append(
                AssistantMessage(content=result.content, tool_calls=list(result.calls))
            )

            # Calls from one response run in order; each result is appended
            # before the next call starts.
            for call in result.calls:
                yield ToolCallEvent(iteration=self.iterations, call=call)
                tool_result = await self._execute(call)
                execution = ToolExecution(
                    tool_name=call.tool_name,
                    arguments=call.raw_arguments,
                    result=tool_result,
                )
                self.executions.append(execution)
                self.messages.append(
                    ToolMessage(tool_name=call.tool_name, content=tool_result.to_content())
                )
                yield ToolResultEvent(iteration=self.iterations, execution=execution)

    async def _execute(self, call: ToolCallRequest) -> ToolResult:
        """Validate and dispatch a single call; never raises for tool errors."""
        try:
            contract = self.registry.lookup(call.tool_name)
            arguments = validate_arguments(contract, call.raw_arguments)
        except (UnknownToolError, ArgumentValidationError) as e:
            logger.warning(f"Rejected call to {call.tool_name!r}: {e.message}")
            return ToolFailure(e)

        logger.info(f"Executing tool {call.tool_name}")
        return await self.dispatcher.dispatch(call.tool_name, arguments)
