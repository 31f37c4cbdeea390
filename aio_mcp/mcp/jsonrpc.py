"""JSON-RPC 2.0 envelopes for the HTTP transport (https://www.jsonrpc.org/specification)."""

from typing import Any

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


def jsonrpc_response(id: Any, result: Any) -> dict:
    """Success response echoing the request ``id``."""
    return {"jsonrpc": "2.0", "id": id, "result": result}


def jsonrpc_error(id: Any, code: int, message: str, data: Any = None) -> dict:
    """Error response; ``id`` is None when the request could not be parsed."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": id, "error": error}
