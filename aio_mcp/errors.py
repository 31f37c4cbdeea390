"""Exception types shared across the server.

Handlers report expected failures as ToolResponse text. These exceptions cover
the internal seams where something has to unwind: descriptor loading, handler
lookup and project detection.
"""


class AIOMCPError(Exception):
    """Base error for the Adobe I/O MCP server."""


class DescriptorError(AIOMCPError):
    """Raised when a tool descriptor document cannot be used."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid schema structure in {source}: {reason}")


class UnknownToolError(AIOMCPError, LookupError):
    """Raised when no handler is registered for a tool name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ProjectError(AIOMCPError):
    """Raised when project files (app.config.yaml, package.json) are unusable."""
