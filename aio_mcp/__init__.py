"""Adobe I/O MCP Server - Adobe I/O CLI tools over the Model Context Protocol."""

__version__ = "1.0.0"
