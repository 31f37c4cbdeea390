"""Dev server action invocation handler.

Handles:
- aio-dev-invoke: Discover or invoke web actions on a running `aio app dev`
"""

import json
from typing import Any

from ...models import HttpMethod, ToolResponse
from ..core.devserver import action_url, check_dev_server, invoke_action, probe_actions
from ..core.project import discover_actions_from_config
from .base import HandlerContext, require_project, text_response

# Probed when app.config.yaml declares no actions
COMMON_ACTIONS = [
    "starter-kit/info",
    "product-commerce/created",
    "product-commerce/updated",
    "order-commerce/created",
    "order-commerce/updated",
    "customer-commerce/created",
    "customer-commerce/updated",
    "inventory-commerce/updated",
    "catalog-commerce/updated",
]


def _json_block(value: Any) -> str:
    return f"```json\n{json.dumps(value, indent=2, default=str)}\n```"


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _server_not_running(port: int) -> ToolResponse:
    return text_response(
        f"""❌ **Development Server Not Running**

The Adobe I/O development server is not running on port {port}.

💡 **To start the server:**
```bash
aio app dev
```

**Or if you're using a different port:**
```bash
export SERVER_DEFAULT_PORT={port + 1}
aio app dev
```

Then try this tool again."""
    )


def _missing_action_name(port: int) -> ToolResponse:
    example = {"actionName": "starter-kit/info", "parameters": {"name": "test"}, "method": "POST"}
    discover = {"discoverActions": True, "port": port}
    return text_response(
        "❌ **Missing Required Parameter**\n\n"
        "The `actionName` parameter is required.\n\n"
        f"💡 **Example Usage:**\n{_json_block(example)}\n\n"
        f"🔍 **To discover available actions:**\n{_json_block(discover)}"
    )


def _discovery_response(available: list[str], port: int, used_config: bool) -> ToolResponse:
    if not available:
        return text_response(
            "🔍 **Action Discovery Results**\n\n"
            f"❌ **No actions found** on port {port}\n\n"
            "💡 **Suggestions:**\n"
            "- Make sure `aio app dev` is running\n"
            "- Check if your app has different action names\n"
            "- Try running the action with a specific name you know exists\n\n"
            f"📋 **Common action names tried:**\n{_bullets(COMMON_ACTIONS)}"
        )

    example = {"actionName": available[0], "parameters": {"key": "value"}, "method": "POST"}
    method = "Parsed from app.config.yaml" if used_config else "Used common action names (fallback)"
    return text_response(
        "🔍 **Action Discovery Results**\n\n"
        f"✅ **Found {len(available)} available actions** on port {port}\n\n"
        f"📋 **Available Actions:**\n{_bullets(available)}\n\n"
        f"💡 **Usage Example:**\n{_json_block(example)}\n\n"
        f"🔧 **Discovery Method:** {method}"
    )


def _invocation_response(
    action_name: str, result: dict[str, Any], parameters: dict[str, Any], method: str, port: int
) -> ToolResponse:
    status = "✅ **Action Invocation Success**" if result["success"] else "❌ **Action Invocation Failed**"
    text = (
        f"{status}\n\n"
        "📋 **Details:**\n"
        f"- **Action**: {action_name}\n"
        f"- **Method**: {method}\n"
        f"- **URL**: {action_url(action_name, port)}\n"
        f"- **Status**: {result['status']} {result['status_text']}\n\n"
        f"📤 **Request Parameters:**\n{_json_block(parameters)}\n\n"
    )
    if "error" in result:
        text += f"📥 **Error:**\n{result['error']}"
    else:
        text += f"📥 **Response:**\n{_json_block(result['body'])}"
    if result.get("headers"):
        text += f"\n\n📋 **Response Headers:**\n{_json_block(result['headers'])}"
    return text_response(text)


async def handle_dev_invoke(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Invoke (or discover) actions on the local dev server.

    Args:
        params: Dict containing:
            - actionName: ``<package>/<action>`` to invoke
            - parameters: JSON body for the invocation
            - method: HTTP method (default POST)
            - port: Dev server port (default from settings)
            - discoverActions: List available actions instead of invoking
    """
    if (error := await require_project(ctx)) is not None:
        return error

    port = params.get("port")
    if port is None:
        port = ctx.settings.dev_server_port
    method = HttpMethod(params.get("method") or HttpMethod.POST)

    if not await check_dev_server(port):
        return _server_not_running(port)

    if params.get("discoverActions"):
        candidates = await discover_actions_from_config(ctx.project_root)
        used_config = bool(candidates)
        available = await probe_actions(candidates or COMMON_ACTIONS, port)
        return _discovery_response(available, port, used_config)

    action_name = params.get("actionName")
    if not action_name:
        return _missing_action_name(port)

    parameters = params.get("parameters") or {}
    result = await invoke_action(action_name, parameters, method, port)
    return _invocation_response(action_name, result, parameters, method, port)
