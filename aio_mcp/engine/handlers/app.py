"""App lifecycle handlers.

Handles:
- aio-app-use: Configure the runtime namespace for the project
- aio-app-deploy: Build and deploy the project (after showing aio where)
"""

from typing import Any

from ...models import ToolResponse
from ..core.executor import execute_command
from .auth import DEPLOY_CONFIRMATION, WHERE_FAILURE_MARKER, handle_where
from .base import HandlerContext, command_report, match_hint, require_project, text_response

# Markers printed by `aio app deploy`
NO_ACTIONS_BUILT = "No actions built for"
NO_ACTIONS_DEPLOYED = "No actions deployed for"
DEPLOYED_ACTIONS = "Your deployed actions:"
SUCCESSFUL_DEPLOYMENT = "Successful deployment"

_DEPLOY_HINTS = [
    (
        ["missing Adobe I/O Runtime namespace", "AIO_RUNTIME_NAMESPACE", "authentication", "credentials"],
        "\n\n💡 **Suggestion**: This error typically means you need to configure the runtime "
        "namespace. Try running the 'aio-app-use' tool first to set up the runtime namespace "
        "for this project.",
    ),
]


def build_deploy_args(params: dict[str, Any]) -> list[str]:
    """Translate aio-app-deploy arguments into `aio app deploy` flags.

    skipBuild wins over forceBuild and skipActions wins over forceDeploy.
    """
    args = ["app", "deploy"]
    if params.get("action"):
        args.extend(["-a", params["action"]])
    if params.get("skipBuild"):
        args.append("--no-build")
    elif params.get("forceBuild"):
        args.append("--force-build")
    if params.get("skipStatic"):
        args.append("--no-web-assets")
    if params.get("skipActions"):
        args.append("--no-actions")
    elif params.get("forceDeploy"):
        args.append("--force-deploy")
    if params.get("verbose"):
        args.append("--verbose")
    return args


async def handle_app_use(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Run ``aio app use --global --no-input``."""
    if (error := await require_project(ctx)) is not None:
        return error

    command = ctx.settings.aio_command
    args = ["app", "use", "--global", "--no-input"]
    if params.get("verbose"):
        args.append("--verbose")

    result = await execute_command(command, args, cwd=ctx.project_root)
    if result.success:
        return text_response(
            "✅ **Runtime Namespace Configured Successfully!**\n\n"
            f"{command_report(command, args, result)}\n\n"
            "🎉 **Next Steps:** You can now try deploying your application using the 'aio-app-deploy' tool."
        )
    return text_response(
        "❌ **Runtime Namespace Configuration Failed!**\n\n"
        f"{command_report(command, args, result, include_error=True)}\n\n"
        "💡 **Suggestions:**\n"
        "- Make sure you're logged in with 'aio-login'\n"
        "- Check your current configuration with 'aio-where'\n"
        "- Try selecting a workspace with 'aio-configure-global'"
    )


async def handle_app_deploy(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Deploy the app after reporting the target org/project/workspace.

    The outcome is classified from the CLI output:
    - exit 0 with deployed actions and no "No actions ..." markers: success
    - exit 0 without any deployment marker: nothing was deployed
    - otherwise: failure, with a namespace hint for auth/namespace errors

    Args:
        params: Dict containing:
            - action: Deploy a single action (-a)
            - skipBuild / forceBuild: --no-build / --force-build
            - skipStatic: --no-web-assets
            - skipActions / forceDeploy: --no-actions / --force-deploy
            - verbose: --verbose
    """
    if (error := await require_project(ctx)) is not None:
        return error

    where = await handle_where({"verbose": params.get("verbose")}, ctx)
    if WHERE_FAILURE_MARKER in where.body:
        return where
    config_message = where.body.replace(DEPLOY_CONFIRMATION, "")

    command = ctx.settings.aio_command
    args = build_deploy_args(params)
    result = await execute_command(command, args, cwd=ctx.project_root)

    output = result.output
    nothing_built = NO_ACTIONS_BUILT in output
    nothing_deployed = NO_ACTIONS_DEPLOYED in output
    deployed = DEPLOYED_ACTIONS in output or SUCCESSFUL_DEPLOYMENT in output

    if result.success and deployed and not nothing_built and not nothing_deployed:
        return text_response(
            "✅ Adobe I/O App deployment completed successfully!\n\n"
            f"{config_message}\n\n"
            f"{command_report(command, args, result)}"
        )

    if result.success and not deployed:
        return text_response(
            "❌ **No actions were deployed!**\n\n"
            f"{config_message}\n\n"
            f"{command_report(command, args, result)}\n\n"
            "💡 **Possible reasons:**\n"
            "- The specified action name doesn't exist in this project\n"
            "- Check the action name in app.config.yaml\n"
            "- Try deploying without specifying an action to deploy all actions\n"
            "- Common action names: starter-kit/info, product-commerce/created, etc."
        )

    message = (
        "❌ Adobe I/O App deployment failed!\n\n"
        f"{config_message}\n\n"
        f"{command_report(command, args, result, include_error=True)}"
    )
    return text_response(message + match_hint(result.error, _DEPLOY_HINTS))
