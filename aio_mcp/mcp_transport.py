"""MCP transports.

- HTTP: the FastAPI ``POST /mcp`` route feeds decoded JSON-RPC messages to
  ``handle_message``. Only transport faults (bad JSON, unknown method,
  malformed JSON-RPC) become JSON-RPC errors.
- stdio: framing and session handling come from the MCP SDK
  (``mcp.server.stdio``); ``create_mcp_server`` wires its tools/list and
  tools/call handlers to the same RequestRouter.

Every tools/call is answered with a ToolResponse result, including failed ones.
"""

import asyncio
import logging
import sys
from io import TextIOWrapper
from typing import Any, BinaryIO

import anyio
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from pydantic import ValidationError

from . import __version__
from .config import settings
from .engine.router import RequestRouter
from .mcp import INTERNAL_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND, jsonrpc_error, jsonrpc_response
from .models import JSONRPCRequest

logger = logging.getLogger(__name__)


def server_info() -> dict[str, Any]:
    return {
        "protocolVersion": settings.protocol_version,
        "serverInfo": {"name": settings.server_name, "version": __version__},
        "capabilities": {"tools": {}},
    }


# ============ HTTP (JSON-RPC) ============


async def _handle_request(body: Any, router: RequestRouter) -> dict | None:
    """Handle a single JSON-RPC request; returns None for notifications."""
    try:
        request = JSONRPCRequest.model_validate(body)
    except ValidationError:
        request_id = body.get("id") if isinstance(body, dict) else None
        return jsonrpc_error(request_id, INVALID_REQUEST, "Invalid Request")

    if request.is_notification:
        logger.debug(f"Notification received: {request.method}")
        return None

    method = request.method
    if method == "initialize":
        return jsonrpc_response(request.id, server_info())
    elif method == "ping":
        return jsonrpc_response(request.id, {})
    elif method == "tools/list":
        try:
            tools = await router.list_tools()
        except Exception as e:
            logger.error(f"tools/list failed: {e}", exc_info=True)
            return jsonrpc_error(request.id, INTERNAL_ERROR, str(e))
        return jsonrpc_response(request.id, {"tools": tools})
    elif method == "tools/call":
        response = await router.handle_call({"method": method, "params": request.params})
        return jsonrpc_response(request.id, response.model_dump())
    else:
        return jsonrpc_error(request.id, METHOD_NOT_FOUND, f"Method not found: {method}")


async def handle_message(body: Any, router: RequestRouter) -> dict | list | None:
    """Handle a decoded JSON-RPC message (single request or batch)."""
    if isinstance(body, list):
        if not body:
            return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request")
        responses = await asyncio.gather(*(_handle_request(item, router) for item in body))
        return [resp for resp in responses if resp is not None] or None
    return await _handle_request(body, router)


# ============ STDIO (MCP SDK) ============


def create_mcp_server(router: RequestRouter) -> Server:
    """Build an MCP SDK server whose tool handlers delegate to ``router``.

    The SDK's own argument validation is off: the router validates against
    the compiled descriptors and reports failures as tool results.
    """
    server = Server(settings.server_name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [types.Tool.model_validate(tool) for tool in await router.list_tools()]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        response = await router.handle_call(
            {"method": "tools/call", "params": {"name": name, "arguments": arguments or {}}}
        )
        return [types.TextContent(type="text", text=response.body)]

    return server


def text_stream(buffer: BinaryIO) -> anyio.AsyncFile[str]:
    """Async UTF-8 text view of a byte stream; undecodable bytes are replaced.

    A line that is not valid UTF-8 then fails JSON-RPC parsing on its own
    instead of aborting the read loop.
    """
    return anyio.wrap_file(TextIOWrapper(buffer, encoding="utf-8", errors="replace"))


async def serve_stdio(
    router: RequestRouter,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> None:
    """Serve MCP over newline-delimited JSON-RPC on stdin/stdout until stdin closes."""
    server = create_mcp_server(router)
    logger.info("Adobe I/O MCP Server listening on stdio")
    async with stdio_server(
        stdin=text_stream(stdin or sys.stdin.buffer),
        stdout=text_stream(stdout or sys.stdout.buffer),
    ) as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("stdin closed, stdio transport stopped")
