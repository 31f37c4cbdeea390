"""Authentication and console configuration handlers.

Handles:
- aio-login: Log in to Adobe I/O
- aio-where: Show the selected org/project/workspace
- aio-configure-global: List or select org, project and workspace
"""

from typing import Any

from ...models import ConfigureAction, ToolResponse
from ..core.executor import execute_command
from .base import HandlerContext, command_report, text_response

DEPLOY_CONFIRMATION = "⚠️ **Please confirm:** Do you want to deploy to this org/project/workspace?"
WHERE_FAILURE_MARKER = "❌ Failed to get Adobe I/O configuration"

_CONSOLE_ARGS: dict[ConfigureAction, list[str]] = {
    ConfigureAction.LIST_ORGS: ["console", "org", "list"],
    ConfigureAction.LIST_PROJECTS: ["console", "project", "list"],
    ConfigureAction.LIST_WORKSPACES: ["console", "workspace", "list"],
    ConfigureAction.SELECT_ORG: ["console", "org", "select"],
    ConfigureAction.SELECT_PROJECT: ["console", "project", "select"],
    ConfigureAction.SELECT_WORKSPACE: ["console", "workspace", "select"],
    ConfigureAction.SHOW_CURRENT: ["where"],
}

# select action -> argument it needs and the label used in messages
_SELECTION_TARGETS: dict[ConfigureAction, tuple[str, str]] = {
    ConfigureAction.SELECT_ORG: ("org", "Organization"),
    ConfigureAction.SELECT_PROJECT: ("project", "Project"),
    ConfigureAction.SELECT_WORKSPACE: ("workspace", "Workspace"),
}

_LIST_HEADINGS: dict[ConfigureAction, str] = {
    ConfigureAction.LIST_ORGS: "📋 **Available Organizations:**",
    ConfigureAction.LIST_PROJECTS: "📋 **Available Projects:**",
    ConfigureAction.LIST_WORKSPACES: "📋 **Available Workspaces:**",
    ConfigureAction.SHOW_CURRENT: "📋 **Current Configuration:**",
}


async def handle_login(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Run ``aio login``.

    Args:
        params: Dict containing:
            - force: Force a new login (-f)
            - context: Named login context (-c)
            - openBrowser: Open the browser (False adds --no-open)
            - verbose: Verbose output (-v)
    """
    command = ctx.settings.aio_command
    args = ["login"]
    if params.get("force"):
        args.append("-f")
    if params.get("context"):
        args.extend(["-c", params["context"]])
    if params.get("openBrowser") is False:
        args.append("--no-open")
    if params.get("verbose"):
        args.append("-v")

    result = await execute_command(command, args, cwd=ctx.project_root)
    if result.success:
        return text_response(
            "✅ Adobe I/O login completed successfully!\n\n"
            f"{command_report(command, args, result)}\n\n"
            "You can now try deploying your Adobe I/O App again."
        )
    return text_response(
        "❌ Adobe I/O login failed!\n\n" + command_report(command, args, result, include_error=True)
    )


async def handle_where(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Run ``aio where`` (the CLI has no verbose flag for it)."""
    command = ctx.settings.aio_command
    args = ["where"]

    result = await execute_command(command, args, cwd=ctx.project_root)
    if result.success:
        return text_response(
            "📍 **Current Adobe I/O Configuration:**\n\n"
            f"{command_report(command, args, result)}\n\n"
            f"{DEPLOY_CONFIRMATION}"
        )
    return text_response(
        f"{WHERE_FAILURE_MARKER}!\n\n"
        f"{command_report(command, args, result, include_error=True)}\n\n"
        "💡 **Suggestion**: You may need to run 'aio console ws select' to configure your workspace first."
    )


async def handle_configure_global(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """List or select the global org, project or workspace.

    Args:
        params: Dict containing:
            - action: One of ConfigureAction
            - org / project / workspace: Name for the matching select action
            - verbose: Add --verbose (not supported by show-current)
    """
    raw_action = params.get("action")
    try:
        action = ConfigureAction(raw_action)
    except ValueError:
        valid = ", ".join(a.value for a in ConfigureAction)
        return text_response(f"❌ Error: Unknown action '{raw_action}'. Valid actions are: {valid}")

    command = ctx.settings.aio_command
    args = list(_CONSOLE_ARGS[action])

    if action in _SELECTION_TARGETS:
        key, label = _SELECTION_TARGETS[action]
        value = params.get(key)
        if not value:
            return text_response(
                f"❌ Error: {label} name is required for '{action}' action. "
                f"Please provide the '{key}' parameter."
            )
        args.append(value)

    if params.get("verbose") and action != ConfigureAction.SHOW_CURRENT:
        args.append("--verbose")

    result = await execute_command(command, args, cwd=ctx.project_root)
    if not result.success:
        return text_response(
            "❌ **Configuration Change Failed!**\n\n"
            f"{command_report(command, args, result, include_error=True)}\n\n"
            "💡 **Suggestions:**\n"
            "- Make sure you're logged in with 'aio-login'\n"
            "- Check your current configuration with 'aio-where'"
        )

    if action in _SELECTION_TARGETS:
        key, label = _SELECTION_TARGETS[action]
        heading = f"✅ **{label} Selected:** {params[key]}"
    else:
        heading = _LIST_HEADINGS[action]
    return text_response(f"{heading}\n\n{command_report(command, args, result)}")
