"""Project script handlers.

Handles:
- onboard: `npm run onboard` (event providers, runtime namespace)
- commerce-event-subscribe: `npm run commerce-event-subscribe`

Both require the script to be declared in the project's package.json.
Failures are annotated with a hint chosen by matching the script's stderr.
"""

from dataclasses import dataclass
from typing import Any

from ...errors import ProjectError
from ...models import ToolResponse
from ..core.executor import execute_command
from ..core.project import read_package_scripts
from .base import HandlerContext, HintRules, command_report, match_hint, require_project, text_response


@dataclass(frozen=True)
class ProjectScript:
    """An npm script exposed as a tool."""

    script: str
    title: str
    missing_help: str
    configured: str
    next_steps: str
    hints: HintRules
    fallback_hint: str


_SSL_HINT = """

💡 **SSL Certificate Issue**: The Commerce instance has an expired SSL certificate.

🔧 **Common Solutions:**
1. **Check Commerce instance** - Verify the Commerce instance is accessible and has valid SSL
2. **Contact Adobe Support** - If this is a production instance, contact Adobe Commerce support
3. **Use a different environment** - Try with a different Commerce instance if available"""


ONBOARD = ProjectScript(
    script="onboard",
    title="Adobe I/O App Onboarding",
    missing_help="""```json
{
  "scripts": {
    "onboard": "aio app use && aio app configure events"
  }
}
```

This script typically:
1. Configures the runtime namespace for the app
2. Sets up Adobe I/O event providers
3. Configures the Adobe I/O Events for Commerce module""",
    configured="""- Adobe I/O event providers for the application
- Adobe I/O Events for Commerce module
- Runtime namespace configuration""",
    next_steps="""- Your app is now configured for Adobe I/O Events
- You can now deploy your app using the 'aio-app-deploy' tool
- Test your event handlers using the 'aio-dev-invoke' tool""",
    hints=[
        (
            ["CANNOT_GENERATE_TOKEN"],
            """

💡 **Authentication Issue**: The onboarding script cannot generate authentication tokens.

🔧 **Common Solutions:**
1. **Check your .env file** - Make sure all required environment variables are set:
   - IO_CONSUMER_ID
   - IO_PROJECT_ID
   - IO_WORKSPACE_ID
   - COMMERCE_BASE_URL
   - And other authentication credentials

2. **Verify workspace.json** - Ensure your onboarding/config/workspace.json file is up to date

3. **Login to Adobe I/O** - Try running the 'aio-login' tool first

4. **Check authentication method** - The script supports JWT, OAuth2, and CLI authentication methods""",
        ),
        (
            ["invalid json response body", "Unexpected token"],
            """

💡 **API Configuration Issue**: The Adobe I/O Events API is returning HTML instead of JSON.

🔧 **Common Solutions:**
1. **Check environment variables** - Verify IO_CONSUMER_ID, IO_PROJECT_ID, and IO_WORKSPACE_ID in your .env file
2. **Update workspace.json** - Ensure onboarding/config/workspace.json has the correct values
3. **Verify authentication** - Make sure your Adobe I/O credentials are correct
4. **Check COMMERCE_BASE_URL** - Ensure the Commerce instance URL is correct""",
        ),
        (
            ["Invalid URL"],
            """

💡 **URL Configuration Issue**: The Commerce base URL is malformed or missing.

🔧 **Common Solutions:**
1. **Check COMMERCE_BASE_URL** - Ensure it's a valid URL (e.g., https://your-instance.magentosite.cloud)
2. **Update workspace.json** - Verify the URL in onboarding/config/workspace.json
3. **Check .env file** - Make sure COMMERCE_BASE_URL is properly set""",
        ),
        (["certificate has expired"], _SSL_HINT),
        (
            ["AIO_RUNTIME_NAMESPACE"],
            """

💡 **Runtime Namespace Issue**: The runtime namespace is not configured.

🔧 **Solution**: Run the 'aio-app-use' tool to configure the runtime namespace for this project.""",
        ),
        (
            ["authentication", "login"],
            """

💡 **Authentication Issue**: You need to authenticate with Adobe I/O.

🔧 **Solution**: Run the 'aio-login' tool to authenticate with Adobe I/O.""",
        ),
        (
            ["org", "project", "workspace"],
            """

💡 **Configuration Issue**: Adobe I/O org/project/workspace is not configured.

🔧 **Solution**: Run the 'aio-configure-global' tool to configure your Adobe I/O settings.""",
        ),
        (
            ["event"],
            """

💡 **Event Configuration Issue**: There's a problem with event provider configuration.

🔧 **Common Solutions:**
1. **Check app.config.yaml** - Ensure proper event configurations
2. **Deploy your app first** - Run 'aio app deploy' before onboarding
3. **Verify workspace.json** - Check onboarding/config/workspace.json configuration""",
        ),
    ],
    fallback_hint="""

💡 **General Troubleshooting**:
1. **Check your .env file** - Ensure all required environment variables are set
2. **Verify workspace.json** - Check onboarding/config/workspace.json configuration
3. **Deploy your app first** - Run 'aio app deploy' before onboarding
4. **Check authentication** - Run 'aio-login' if needed
5. **Configure runtime** - Run 'aio-app-use' to set up runtime namespace""",
)


COMMERCE_EVENT_SUBSCRIBE = ProjectScript(
    script="commerce-event-subscribe",
    title="Commerce Event Subscription",
    missing_help="""```json
{
  "scripts": {
    "commerce-event-subscribe": "node --no-warnings -e 'require(\\"./scripts/commerce-event-subscribe/index.js\\").main()'"
  }
}
```

This script typically:
1. Subscribes to Commerce events for product and customer changes
2. Sets up event listeners for catalog and customer operations
3. Configures Commerce OAuth1 authentication""",
    configured="""- Subscribed to Commerce events for product and customer changes
- Set up event listeners for catalog operations
- Configured Commerce OAuth1 authentication""",
    next_steps="""- Your app is now subscribed to Commerce events
- Events will be received when products or customers are modified
- You can test event handling using the 'aio-dev-invoke' tool
- Monitor event logs for incoming Commerce events""",
    hints=[
        (
            ["authentication", "OAuth1"],
            """

💡 **Authentication Issue**: Commerce OAuth1 authentication failed.

🔧 **Common Solutions:**
1. **Check your .env file** - Make sure Commerce authentication credentials are set:
   - COMMERCE_BASE_URL
   - COMMERCE_CONSUMER_KEY
   - COMMERCE_CONSUMER_SECRET
   - COMMERCE_ACCESS_TOKEN
   - COMMERCE_ACCESS_TOKEN_SECRET

2. **Verify Commerce instance** - Ensure the Commerce instance is accessible and credentials are valid

3. **Check authentication method** - The script uses Commerce OAuth1 authentication""",
        ),
        (
            ["Invalid URL", "ENOTFOUND"],
            """

💡 **URL Configuration Issue**: The Commerce base URL is invalid or unreachable.

🔧 **Common Solutions:**
1. **Check COMMERCE_BASE_URL** - Ensure it's a valid URL (e.g., https://your-instance.magentosite.cloud)
2. **Verify network connectivity** - Make sure the Commerce instance is accessible
3. **Check SSL certificates** - Ensure the Commerce instance has valid SSL certificates""",
        ),
        (["certificate has expired"], _SSL_HINT),
        (
            ["event", "subscription"],
            """

💡 **Event Subscription Issue**: There's a problem with event subscription.

🔧 **Common Solutions:**
1. **Check app configuration** - Ensure your app is properly configured for Commerce events
2. **Verify event providers** - Make sure event providers are set up correctly
3. **Check permissions** - Ensure your Commerce credentials have proper permissions for event subscription""",
        ),
        (
            ["module", "require"],
            """

💡 **Script Issue**: The commerce-event-subscribe script is missing or has issues.

🔧 **Common Solutions:**
1. **Check script location** - Ensure scripts/commerce-event-subscribe/index.js exists
2. **Install dependencies** - Run 'npm install' to install required dependencies
3. **Check script permissions** - Ensure the script file is executable""",
        ),
    ],
    fallback_hint="""

💡 **General Troubleshooting**:
1. **Check your .env file** - Ensure all required Commerce environment variables are set
2. **Verify Commerce credentials** - Make sure Commerce OAuth1 credentials are correct
3. **Check Commerce instance** - Ensure the Commerce instance is accessible
4. **Verify script exists** - Check that scripts/commerce-event-subscribe/index.js exists
5. **Install dependencies** - Run 'npm install' if needed""",
)


async def run_project_script(
    script: ProjectScript, params: dict[str, Any], ctx: HandlerContext
) -> ToolResponse:
    """Check the project and package.json, then run ``npm run <script>``."""
    if (error := await require_project(ctx)) is not None:
        return error

    try:
        scripts = await read_package_scripts(ctx.project_root)
    except ProjectError as e:
        return text_response(f"❌ Error: {e}")

    if script.script not in scripts:
        return text_response(
            f"❌ Error: No '{script.script}' script found in package.json\n\n"
            f"💡 **To add the {script.script} script to your package.json:**\n"
            f"{script.missing_help}"
        )

    command = ctx.settings.npm_command
    args = ["run", script.script]
    if params.get("verbose"):
        args.append("--verbose")

    result = await execute_command(command, args, cwd=ctx.project_root)
    if result.success:
        return text_response(
            f"✅ **{script.title} Completed Successfully!**\n\n"
            f"🎉 **What was configured:**\n{script.configured}\n\n"
            f"{command_report(command, args, result, bold=True)}\n\n"
            f"💡 **Next Steps:**\n{script.next_steps}"
        )

    message = f"❌ **{script.title} Failed!**\n\n" + command_report(
        command, args, result, include_error=True, bold=True
    )
    return text_response(message + match_hint(result.error, script.hints, script.fallback_hint))


async def handle_onboard(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Run the project's onboard script."""
    return await run_project_script(ONBOARD, params, ctx)


async def handle_commerce_event_subscribe(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Run the project's commerce-event-subscribe script."""
    return await run_project_script(COMMERCE_EVENT_SUBSCRIBE, params, ctx)
