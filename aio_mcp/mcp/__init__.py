"""MCP (Model Context Protocol) support module.

This module contains the schema-driven parts of the MCP surface:
- Tool descriptor store (tools/list source of truth)
- Validator compiler for tool arguments
- JSON-RPC 2.0 helpers

The JSON-RPC method dispatch lives in mcp_transport.py.
"""

from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    jsonrpc_error,
    jsonrpc_response,
)
from .schema_store import SchemaStore, parse_descriptor
from .validators import CompiledValidator, ValidationResult, compile_validator

__all__ = [
    # Schema store
    "SchemaStore",
    "parse_descriptor",
    # Validators
    "CompiledValidator",
    "ValidationResult",
    "compile_validator",
    # JSON-RPC helpers
    "jsonrpc_response",
    "jsonrpc_error",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INTERNAL_ERROR",
]
