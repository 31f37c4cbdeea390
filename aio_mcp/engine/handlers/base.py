"""Base infrastructure for tool handlers.

This module provides the common types and utilities used by all handler modules.
Each handler receives the defaulted arguments and a HandlerContext and returns
a ToolResponse with a single text block.
"""

from collections.abc import Callable, Coroutine, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...config import Settings
from ...models import ExecutionResult, ToolResponse
from ..core.executor import format_command
from ..core.project import is_aio_app_project, missing_project_message


@dataclass
class HandlerContext:
    """Context object passed to all handlers.

    Decouples handlers from process-wide state so tests can point them at a
    temporary project directory or a different CLI binary.
    """

    # Directory checked for app.config.yaml and used as the child cwd
    project_root: Path

    # Server settings (binary names, dev server port, docs URL)
    settings: Settings


# Type alias for handler functions
HandlerFunc = Callable[
    [dict[str, Any], HandlerContext],
    Coroutine[Any, Any, ToolResponse],
]


# (substrings, hint) pairs; the first rule with a matching substring wins
HintRules = Sequence[tuple[Sequence[str], str]]


def text_response(text: str) -> ToolResponse:
    return ToolResponse.text(text)


async def require_project(ctx: HandlerContext) -> ToolResponse | None:
    """Return an error response if the context is not an Adobe I/O App project."""
    if await is_aio_app_project(ctx.project_root):
        return None
    return text_response(missing_project_message(ctx.project_root))


def match_hint(error: str | None, rules: HintRules, default: str = "") -> str:
    """Pick remediation text by substring match on a command's stderr."""
    if error:
        for patterns, hint in rules:
            if any(pattern in error for pattern in patterns):
                return hint
    return default


def command_report(
    command: str,
    args: list[str],
    result: ExecutionResult,
    *,
    include_error: bool = False,
    bold: bool = False,
) -> str:
    """Render the command line, its output and optionally its stderr."""
    label = (lambda name: f"**{name}:**") if bold else (lambda name: f"{name}:")
    parts = [f"📋 {label('Command')} {format_command(command, args)}"]
    if include_error:
        parts.append(f"📄 {label('Error')}\n{result.error or ''}")
    parts.append(f"📄 {label('Output')}\n{result.output}")
    return "\n\n".join(parts)
