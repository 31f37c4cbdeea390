"""Local development server handler.

Handles:
- aio-app-dev: Start `aio app dev` and report its endpoints

Unlike the other tools this one does not wait for the child to exit: the dev
server keeps running after the tool returns. The handler waits until the CLI
prints its ready banner, polls the server, then leaves the process running
with its remaining output drained in the background.
"""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from ...models import ToolResponse
from ..core.devserver import PROBE_ACTION, action_url, check_dev_server, wait_for_server_ready
from ..core.executor import format_command
from .base import HandlerContext, match_hint, require_project, text_response

logger = logging.getLogger(__name__)

READY_MARKER = "press CTRL+C"

# Background tasks draining output of, and reaping, dev servers we started
_drain_tasks: set[asyncio.Task] = set()

_STARTUP_HINTS = [
    (
        ["EADDRINUSE", "address already in use"],
        "\n\n💡 **Port Conflict**: Port {port} is already in use. Try:\n"
        "```bash\nlsof -ti:{port} | xargs kill -9\n```",
    ),
    (
        ["Not a valid application root folder", "Couldn't find configuration"],
        "\n\n💡 **Invalid Project**: Please run this command from a folder generated by "
        "'aio app init' or ensure you have at least one extension or standalone app configured.",
    ),
    (
        ["authentication", "credentials", "login"],
        "\n\n💡 **Authentication Required**: Try running the 'aio-login' tool before starting "
        "the development server.",
    ),
]

_STARTUP_FALLBACK = (
    "\n\n💡 **Troubleshooting**:\n"
    "- Make sure you're in a valid Adobe I/O App project\n"
    "- Check that all dependencies are installed\n"
    "- Verify your app.config.yaml is properly configured\n"
    "- Try running 'aio app use' to configure the runtime namespace"
)


def parse_dev_output(output: str) -> tuple[list[str], list[str]]:
    """Extract web and non-web action endpoints from `aio app dev` output.

    Endpoint lines contain ``->`` and follow a ``web actions:`` or
    ``non-web actions:`` heading; parsing stops at the ready banner.
    """
    web_actions: list[str] = []
    non_web_actions: list[str] = []
    section: list[str] | None = None

    for line in output.splitlines():
        if "non-web actions:" in line:
            section = non_web_actions
            continue
        if "web actions:" in line:
            section = web_actions
            continue
        if READY_MARKER in line:
            break
        if section is not None and "->" in line:
            section.append(line.strip())

    return web_actions, non_web_actions


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _port_conflict(port: int) -> ToolResponse:
    return text_response(
        f"""❌ **Port Conflict Detected!**

Port {port} is already in use. Please kill the existing process or use a different port.

**To fix this:**
```bash
# Find the process using the port
lsof -i :{port}

# Kill the process (replace <PID> with actual process ID)
kill <PID>

# Or kill all processes on the port
lsof -ti:{port} | xargs kill -9
```

**Alternative:** Set a different port using environment variable:
```bash
export SERVER_DEFAULT_PORT={port + 1}
aio app dev
```"""
    )


def _started(port: int, pid: int, output: str) -> ToolResponse:
    web_actions, non_web_actions = parse_dev_output(output)
    probe_url = action_url(PROBE_ACTION, port)
    return text_response(
        f"""🚀 **Adobe I/O App Development Server Started Successfully!**

📋 **Server Information:**
- **URL**: https://localhost:{port}
- **Process ID**: {pid}
- **Started**: {datetime.now(UTC).isoformat()}

🔗 **Available Endpoints:**

**Web Actions:**
{_bullets(web_actions)}

**Non-Web Actions:**
{_bullets(non_web_actions)}

🧪 **Testing Examples:**
```bash
# Test a web action (requires authentication)
curl -k -H 'Authorization: Bearer YOUR_TOKEN' {probe_url}

# Test with proper headers
curl -k -H 'Content-Type: application/json' -H 'Authorization: Bearer YOUR_TOKEN' {probe_url}
```

💡 **Notes:**
- Server requires authentication for web actions
- Use `-k` flag for self-signed certificates
- Press Ctrl+C in terminal to stop the server
- Server automatically reloads on file changes

📄 **Command Output:**
```
{output}
```"""
    )


def _not_ready(command_line: str, port: int, output: str) -> ToolResponse:
    return text_response(
        f"""⚠️ **Server Started But Not Ready**

The development server process has started but may not be fully ready yet.

📋 **Command**: {command_line}

📄 **Output**:
```
{output}
```

💡 **Try accessing**: {action_url(PROBE_ACTION, port)}

If the server doesn't respond, wait a moment and try again."""
    )


def _startup_failed(command_line: str, port: int, error: str, output: str) -> ToolResponse:
    hints = [(patterns, hint.format(port=port)) for patterns, hint in _STARTUP_HINTS]
    message = f"""❌ **Failed to start Adobe I/O App development server!**

📋 **Command**: {command_line}

📄 **Error**:
```
{error}
```

📄 **Output**:
```
{output}
```"""
    return text_response(message + match_hint(error, hints, _STARTUP_FALLBACK))


async def _drain(stream: asyncio.StreamReader | None, label: str) -> str:
    if stream is None:
        return ""
    chunks: list[str] = []
    while line := await stream.readline():
        text = line.decode("utf-8", errors="replace")
        chunks.append(text)
        logger.debug(f"[aio app dev {label}] {text.rstrip()}")
    return "".join(chunks)


async def _supervise(process: asyncio.subprocess.Process, stderr_task: asyncio.Task) -> int:
    """Drain a running dev server's output and reap it once it exits."""
    await _drain(process.stdout, "stdout")
    await stderr_task
    returncode = await process.wait()
    logger.info(f"aio app dev (pid {process.pid}) exited with code {returncode}")
    return returncode


def _keep_supervising(process: asyncio.subprocess.Process, stderr_task: asyncio.Task) -> None:
    task = asyncio.create_task(_supervise(process, stderr_task))
    _drain_tasks.add(task)
    task.add_done_callback(_drain_tasks.discard)


async def handle_app_dev(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Start the local development server.

    Args:
        params: Dict containing:
            - extension: Run only this extension (-e)
            - open: Open the app in a browser (-o)
            - verbose: Verbose output (-v)
    """
    if (error := await require_project(ctx)) is not None:
        return error

    port = ctx.settings.dev_server_port
    if await check_dev_server(port):
        return _port_conflict(port)

    command = ctx.settings.aio_command
    args = ["app", "dev"]
    if params.get("extension"):
        args.extend(["-e", params["extension"]])
    if params.get("open"):
        args.append("-o")
    if params.get("verbose"):
        args.append("-v")
    command_line = format_command(command, args)

    logger.info(f"Running: {command_line}")
    try:
        process = await asyncio.create_subprocess_exec(
            command,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=ctx.project_root,
        )
    except (OSError, ValueError) as e:
        return text_response(
            f"❌ **Process Error**: {e}\n\n"
            f"📋 **Command**: {command_line}\n\n"
            f"💡 **Suggestion**: Check if '{command}' command is available in your PATH."
        )

    stderr_task = asyncio.create_task(_drain(process.stderr, "stderr"))
    stdout_lines: list[str] = []
    ready = False
    while process.stdout is not None and (line := await process.stdout.readline()):
        stdout_lines.append(line.decode("utf-8", errors="replace"))
        if READY_MARKER in stdout_lines[-1]:
            ready = True
            break
    stdout = "".join(stdout_lines)

    if not ready:
        returncode = await process.wait()
        stderr = await stderr_task
        if returncode != 0:
            return _startup_failed(command_line, port, stderr or "Unknown error occurred", stdout)
        return text_response(
            "⚠️ **Development server exited before it was ready**\n\n"
            f"📋 **Command**: {command_line}\n\n"
            f"📄 **Output**:\n```\n{stdout}\n```"
        )

    _keep_supervising(process, stderr_task)

    await asyncio.sleep(ctx.settings.dev_server_settle_delay)
    if await wait_for_server_ready(
        port, ctx.settings.dev_server_ready_attempts, ctx.settings.dev_server_poll_interval
    ):
        return _started(port, process.pid, stdout)
    return _not_ready(command_line, port, stdout)
