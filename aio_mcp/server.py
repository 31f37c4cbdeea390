"""Adobe I/O MCP server entry point.

Two transports share one SchemaStore and RequestRouter:
- stdio: newline-delimited JSON-RPC (default, used by MCP clients)
- http: FastAPI app with ``POST /mcp`` plus a few operational routes
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .engine import RequestRouter
from .mcp import PARSE_ERROR, SchemaStore, jsonrpc_error
from .mcp_transport import handle_message, serve_stdio

logger = logging.getLogger(__name__)

store = SchemaStore()
router = RequestRouter(store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load tool descriptors before serving requests."""
    logger.info(f"Starting Adobe I/O MCP Server v{__version__}")
    await store.load()
    yield
    logger.info("Adobe I/O MCP Server stopped")


app = FastAPI(
    title="Adobe I/O MCP Server",
    description="MCP tools wrapping the Adobe I/O CLI and Commerce App Builder docs search",
    version=__version__,
    lifespan=lifespan,
)


# ============ EXCEPTION HANDLERS ============


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with a generic error body."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "An internal server error occurred."},
    )


# ============ HEALTH ENDPOINTS ============


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, Any]:
    """Liveness check with the number of loaded tools."""
    return {
        "status": "healthy",
        "version": __version__,
        "tools": len(store),
        "timestamp": datetime.now(UTC).isoformat(),
    }


# ============ TOOL ENDPOINTS ============


@app.get("/tools", tags=["Tools"])
async def list_tools() -> dict[str, Any]:
    """Tool descriptors, as returned by tools/list."""
    return {"tools": await router.list_tools()}


@app.get("/tools/{name}", tags=["Tools"])
async def tool_info(name: str) -> dict[str, Any]:
    """Descriptor summary for one tool."""
    info = store.schema_info(name)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")
    return info


@app.post("/tools/reload", tags=["Tools"])
async def reload_tools() -> dict[str, Any]:
    """Re-read descriptor files from disk."""
    count = await store.reload()
    return {"success": True, "loaded": count}


# ============ MCP TRANSPORT ============


@app.post("/mcp", tags=["MCP"])
async def mcp_endpoint(request: Request) -> Response:
    """JSON-RPC over HTTP: one message or a batch per request."""
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(content=jsonrpc_error(None, PARSE_ERROR, "Parse error"))

    result = await handle_message(body, router)
    if result is None:
        return Response(status_code=202)
    return JSONResponse(content=result)


# ============ MAIN ============


async def run_stdio() -> None:
    await store.load()
    await serve_stdio(router)


def main():
    """Run the server on the configured transport."""
    # stdout carries the stdio protocol, so logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if settings.transport == "stdio":
        try:
            asyncio.run(run_stdio())
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        return

    import uvicorn

    uvicorn.run(
        "aio_mcp.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
