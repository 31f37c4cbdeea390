"""Tool descriptor models.

A descriptor is the declarative contract for one tool: its name, a description
and a JSON-Schema-like ``inputSchema`` of type ``object``. Unknown fields are
kept so that ``tools/list`` returns the document as authored.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InputSchema(BaseModel):
    """Object schema describing a tool's arguments."""

    model_config = ConfigDict(extra="allow")

    type: Literal["object"]
    properties: dict[str, dict[str, Any]] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _required_are_declared(self) -> "InputSchema":
        undeclared = [key for key in self.required if key not in self.properties]
        if undeclared:
            raise ValueError(f"required properties not declared: {', '.join(undeclared)}")
        return self


class ToolDescriptor(BaseModel):
    """Declarative description of one callable tool."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., min_length=1, description="Unique tool name")
    description: str = Field(..., description="Human-readable description")
    input_schema: InputSchema = Field(..., alias="inputSchema")

    def defaults(self) -> dict[str, Any]:
        """Declared default values keyed by property name."""
        return {
            key: prop["default"]
            for key, prop in self.input_schema.properties.items()
            if "default" in prop
        }

    def to_mcp(self) -> dict[str, Any]:
        """Return the descriptor in the shape served by tools/list."""
        return self.model_dump(by_alias=True, exclude_unset=True)
