"""External process execution.

``execute_command`` runs one program with an argument vector and reports the
outcome as an ExecutionResult. It never raises for spawn failures or nonzero
exits and keeps no state between calls.
"""

import asyncio
import logging
import shlex
from pathlib import Path

from ...models import ExecutionResult

logger = logging.getLogger(__name__)


def format_command(command: str, args: list[str]) -> str:
    """Render a command line for logs and tool output."""
    return " ".join([command, *args])


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


async def execute_command(
    command: str,
    args: list[str],
    cwd: Path | str | None = None,
) -> ExecutionResult:
    """Run ``command`` with ``args`` and wait for it to exit.

    stdin is closed; stdout and stderr are read concurrently until both
    streams close, so a chatty child cannot block on a full pipe. There is
    no timeout.

    Args:
        command: Program name or path (resolved through PATH)
        args: Argument vector, passed without shell interpretation
        cwd: Optional working directory for the child

    Returns:
        ExecutionResult with success=True iff the exit code is 0. If the
        program cannot be started, success=False, output="" and error holds
        the spawn failure message.
    """
    logger.info(f"Running: {format_command(command, args)}")
    try:
        process = await asyncio.create_subprocess_exec(
            command,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to start {shlex.quote(command)}: {e}")
        return ExecutionResult(success=False, output="", error=str(e))

    stdout, stderr = await process.communicate()
    returncode = process.returncode
    if returncode != 0:
        logger.info(f"{command} exited with code {returncode}")

    return ExecutionResult(
        success=returncode == 0,
        output=_decode(stdout),
        error=_decode(stderr),
        returncode=returncode,
    )
