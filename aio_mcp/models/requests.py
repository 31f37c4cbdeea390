"""Inbound request envelopes (JSON-RPC 2.0 and MCP tools/call)."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class JSONRPCRequest(BaseModel):
    """A single JSON-RPC 2.0 request or notification."""

    model_config = ConfigDict(extra="ignore")

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    method: str
    params: dict[str, Any] | None = None

    @property
    def is_notification(self) -> bool:
        # A notification has no "id" member; an explicit null id still gets a reply
        return "id" not in self.model_fields_set


class CallToolParams(BaseModel):
    """Parameters of an MCP tools/call request."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="Tool to invoke")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")
    meta: dict[str, Any] | None = Field(default=None, alias="_meta")


class CallToolRequest(BaseModel):
    """MCP tools/call request envelope."""

    method: Literal["tools/call"]
    params: CallToolParams
