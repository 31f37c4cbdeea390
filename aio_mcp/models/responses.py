"""Outbound result models."""

from typing import Literal

from pydantic import BaseModel, Field


class TextContent(BaseModel):
    """One text content block."""

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Result of a tools/call: exactly one text block, success or failure."""

    content: list[TextContent] = Field(..., min_length=1, max_length=1)

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        return cls(content=[TextContent(text=text)])

    @property
    def body(self) -> str:
        """Text of the single content block."""
        return self.content[0].text


class ExecutionResult(BaseModel):
    """Outcome of running an external program."""

    success: bool = Field(..., description="True iff the process exited with code 0")
    output: str = Field(default="", description="Everything written to stdout")
    error: str | None = Field(default=None, description="Stderr, or the spawn failure message")
    returncode: int | None = Field(default=None, description="Exit code (None if never spawned)")
