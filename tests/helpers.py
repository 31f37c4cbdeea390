"""Shared test data and fakes."""

import json
from pathlib import Path
from typing import Any

from aio_mcp.models import ExecutionResult

EXAMPLE_TOOL = {
    "name": "example-tool",
    "description": "Example tool used by the router tests",
    "inputSchema": {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "count": {"type": "integer", "default": 1},
            "mode": {"type": "string", "enum": ["fast", "slow"], "default": "fast"},
            "flag": {"type": "boolean", "default": True},
        },
        "required": ["name"],
    },
}


def write_descriptor(directory: Path, filename: str, document: Any) -> Path:
    path = directory / filename
    text = document if isinstance(document, str) else json.dumps(document)
    path.write_text(text, encoding="utf-8")
    return path


class FakeExecutor:
    """Stand-in for execute_command that records calls and replays results."""

    def __init__(self, *results: ExecutionResult):
        self.results = list(results)
        self.calls: list[tuple[str, list[str]]] = []

    async def __call__(self, command: str, args: list[str], cwd: Any = None) -> ExecutionResult:
        self.calls.append((command, list(args)))
        if self.results:
            return self.results.pop(0)
        return ok()


def ok(output: str = "", error: str = "") -> ExecutionResult:
    return ExecutionResult(success=True, output=output, error=error, returncode=0)


def failed(error: str = "", output: str = "", returncode: int = 1) -> ExecutionResult:
    return ExecutionResult(success=False, output=output, error=error, returncode=returncode)
