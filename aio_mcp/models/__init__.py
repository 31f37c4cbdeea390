"""Pydantic models for the Adobe I/O MCP server.

This module re-exports all models:

    from aio_mcp.models import ToolDescriptor, ToolResponse, ToolName
"""

from .descriptors import InputSchema, ToolDescriptor
from .enums import ConfigureAction, HttpMethod, ToolName
from .requests import CallToolParams, CallToolRequest, JSONRPCRequest
from .responses import ExecutionResult, TextContent, ToolResponse

__all__ = [
    # Enums
    "ToolName",
    "ConfigureAction",
    "HttpMethod",
    # Descriptors
    "InputSchema",
    "ToolDescriptor",
    # Requests
    "JSONRPCRequest",
    "CallToolParams",
    "CallToolRequest",
    # Responses
    "TextContent",
    "ToolResponse",
    "ExecutionResult",
]
