"""Dispatches validated tool calls to their handlers and captures the outcome.

The dispatcher never raises for a failed tool: an unknown name, a handler
exception, a timeout or an unserializable return value all come back as a
``ToolFailure`` so the conversation loop can report it to the model.
"""

import asyncio
import inspect
import json
import logging
from typing import Any

from toolloop_server.errors import (
    ToolExecutionError,
    ToolLoopError,
    ToolTimeoutError,
    UnknownToolError,
)
from toolloop_server.tools.registry import ToolRegistry
from toolloop_server.tools.types import (
    ToolContract,
    ToolFailure,
    ToolResult,
    ToolSuccess,
)

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Invokes tool handlers with a per-call time budget.

    Attributes:
        registry: The registry used to resolve tool names
        timeout_seconds: Upper bound for a single handler call
    """

    def __init__(self, registry: ToolRegistry, timeout_seconds: float = 10.0) -> None:
        self.registry = registry
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        """Execute a tool by name with already-validated arguments.

        Handles both sync and async handlers:
        - Async handlers are awaited directly
        - Sync handlers are run in a thread pool to avoid blocking

        Args:
            tool_name: Name of the registered tool
            arguments: Validated keyword arguments for the handler

        Returns:
            ToolResult: ToolSuccess with the handler's value, or ToolFailure
        """
        try:
            contract = self.registry.lookup(tool_name)
        except UnknownToolError as e:
            logger.warning(f"Model requested unknown tool: {tool_name}")
            return ToolFailure(e)

        # Only the budget running out is a timeout; a TimeoutError raised by the
        # handler itself is an ordinary failure
        task = asyncio.ensure_future(self._invoke(contract, arguments))
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout_seconds)
            if not done:
                task.cancel()
                await asyncio.wait({task})
                logger.warning(
                    f"Tool {tool_name} timed out after {self.timeout_seconds:g}s"
                )
                return ToolFailure(ToolTimeoutError(tool_name, self.timeout_seconds))
            value = task.result()
        except ToolExecutionError as e:
            logger.warning(f"Tool {tool_name} failed: {e.reason}")
            return ToolFailure(e)
        except ToolLoopError as e:
            logger.warning(f"Tool {tool_name} failed: {e.message}")
            return ToolFailure(ToolExecutionError(tool_name, e.message))
        except Exception as e:
            logger.exception(f"Tool {tool_name} execution failed")
            return ToolFailure(ToolExecutionError(tool_name, str(e) or type(e).__name__))
        finally:
            if not task.done():
                task.cancel()

        try:
            json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as e:
            logger.warning(f"Tool {tool_name} returned a non-JSON value: {e}")
            return ToolFailure(
                ToolExecutionError(tool_name, f"result is not JSON-serializable: {e}")
            )

        logger.debug(f"Tool {tool_name} returned: {value!r}")
        return ToolSuccess(value)

    async def _invoke(self, contract: ToolContract, arguments: dict[str, Any]) -> Any:
        logger.debug(f"Executing tool '{contract.name}' with args={arguments}")
        if inspect.iscoroutinefunction(contract.handler):
            return await contract.handler(**arguments)

        result = await asyncio.to_thread(contract.handler, **arguments)
        # Sync callables may still hand back an awaitable (e.g. functools.partial)
        if inspect.isawaitable(result):
            result = await result
        return result
