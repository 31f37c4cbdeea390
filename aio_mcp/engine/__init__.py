"""Request routing and tool execution."""

from .dispatch import TOOL_HANDLERS, get_tool_handler
from .router import RequestRouter

__all__ = [
    "TOOL_HANDLERS",
    "get_tool_handler",
    "RequestRouter",
]
