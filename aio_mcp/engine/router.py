"""Request router: the single entry point for tools/call.

Pipeline, each step a possible exit:
1. Validate the tools/call envelope
2. Validate arguments against the tool's compiled validator
3. Apply declared defaults
4. Resolve the handler by name
5. Run the handler inside an error boundary

Every path returns a ToolResponse; nothing raised by a handler reaches the
caller.
"""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from ..config import Settings, settings
from ..mcp.schema_store import SchemaStore
from ..mcp.validators import format_errors
from ..models import CallToolRequest, ToolResponse
from .dispatch import get_tool_handler
from .handlers import HandlerContext, HandlerFunc

logger = logging.getLogger(__name__)


def default_context(config: Settings = settings) -> HandlerContext:
    return HandlerContext(project_root=config.resolve_project_root(), settings=config)


class RequestRouter:
    """Validate, default-fill and dispatch tool calls."""

    def __init__(
        self,
        store: SchemaStore,
        handlers: dict[str, HandlerFunc] | None = None,
        context_factory: Callable[[], HandlerContext] = default_context,
    ):
        self.store = store
        self.handlers = handlers
        self.context_factory = context_factory

    async def list_tools(self) -> list[dict[str, Any]]:
        """Descriptors for tools/list (loads the store on first use)."""
        await self.store.ensure_loaded()
        return [descriptor.to_mcp() for descriptor in self.store.get_all()]

    async def handle_call(self, request: Any) -> ToolResponse:
        """Process one tools/call request.

        Args:
            request: Raw envelope ``{"method": "tools/call", "params":
                {"name": ..., "arguments": {...}}}``

        Returns:
            ToolResponse carrying the handler's result or an error narrative
        """
        try:
            call = CallToolRequest.model_validate(request)
        except ValidationError as e:
            detail = ", ".join(format_errors(e))
            logger.warning(f"Rejected tools/call envelope: {detail}")
            return ToolResponse.text(f"❌ Invalid request format: Invalid tool request: {detail}")

        name = call.params.name
        try:
            validation = self.store.validate_input(name, call.params.arguments)
            if not validation.valid:
                logger.info(f"Input validation failed for {name}: {validation.error}")
                return ToolResponse.text(f"❌ Input validation failed: {validation.error}")

            arguments = self.store.apply_defaults(validation.data, name)
            handler = get_tool_handler(name, self.handlers)
            return await handler(arguments, self.context_factory())
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}", exc_info=True)
            return ToolResponse.text(f"Error: {e}")
