"""
Tool dispatch for function calls emitted by the realtime model.

A tool is an async function taking the decoded arguments and the call's
ToolContext and returning something JSON-serializable. The invoker only exposes
tools whose collaborator is configured, so the session configuration never
declares a tool that cannot run.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from app.config.constants import LOGGER_NAME, TOOL_SEARCH, TOOL_TRANSFER_CALL
from app.errors import ToolError, ToolNotFound, ToolPreconditionFailed, ToolProviderFailure
from app.models.call import ToolContext

logger = logging.getLogger(LOGGER_NAME)

ToolFunc = Callable[[Dict[str, Any], ToolContext], Awaitable[Any]]


class ToolInvoker:
    """Executes named tools against the configured collaborators."""

    def __init__(self, search_client=None, call_control=None, transfer_number: Optional[str] = None):
        """
        Args:
            search_client: Object with an async ``search(query)`` method, or None to disable search
            call_control: Object with an async ``transfer(call_sid, destination)`` method,
                or None to disable call transfer
            transfer_number: Destination for call transfers
        """
        self.search_client = search_client
        self.call_control = call_control
        self.transfer_number = transfer_number

        self.tools: Dict[str, ToolFunc] = {}
        if search_client is not None:
            self.tools[TOOL_SEARCH] = self._search
        if call_control is not None and transfer_number:
            self.tools[TOOL_TRANSFER_CALL] = self._transfer_call

    @property
    def supported_tools(self) -> List[str]:
        return list(self.tools)

    async def invoke(self, name: str, arguments: str, context: ToolContext) -> Any:
        """
        Run a tool.

        Args:
            name: Tool name from the function call
            arguments: Raw JSON arguments from the function call
            context: The call the tool runs for

        Returns:
            A JSON-serializable result

        Raises:
            ToolNotFound: if no tool of that name is available
            ToolPreconditionFailed: if the arguments or the call state do not allow the tool to run
            ToolProviderFailure: if the collaborator behind the tool failed
        """
        tool = self.tools.get(name)
        if tool is None:
            raise ToolNotFound(name, "no such tool")

        try:
            args = json.loads(arguments) if arguments else {}
        except json.JSONDecodeError as e:
            raise ToolPreconditionFailed(name, f"invalid arguments: {e}") from e
        if not isinstance(args, dict):
            raise ToolPreconditionFailed(name, "arguments must be a JSON object")

        logger.info(f"Invoking tool {name} for call {context.call_sid}")
        try:
            return await tool(args, context)
        except ToolError:
            raise
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}", exc_info=True)
            raise ToolProviderFailure(name, str(e)) from e

    async def _search(self, args: Dict[str, Any], context: ToolContext) -> Any:
        query = args.get("query")
        if not isinstance(query, str) or not query.strip():
            raise ToolPreconditionFailed(TOOL_SEARCH, "query is required")
        results = await self.search_client.search(query)
        logger.info(f"Web search for {query!r} returned {len(results or [])} results")
        return results or []

    async def _transfer_call(self, args: Dict[str, Any], context: ToolContext) -> Any:
        if not context.call_sid:
            raise ToolPreconditionFailed(TOOL_TRANSFER_CALL, "call sid is not known for this call")
        if context.registry is not None and context.registry.get(context.call_sid) is None:
            raise ToolPreconditionFailed(TOOL_TRANSFER_CALL, "call is no longer active")
        await self.call_control.transfer(context.call_sid, self.transfer_number)
        return {"status": "transferred", "destination": self.transfer_number}
