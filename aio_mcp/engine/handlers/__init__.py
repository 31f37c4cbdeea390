"""Tool handlers for the Adobe I/O MCP server.

This package contains the tool handlers organized by domain:
- auth: Login and console configuration (aio-login, aio-where, aio-configure-global)
- app: App lifecycle (aio-app-use, aio-app-deploy)
- dev: Local development server (aio-app-dev)
- invoke: Dev server action invocation (aio-dev-invoke)
- scripts: Project npm scripts (onboard, commerce-event-subscribe)
- docs: Documentation search (search-commerce-app-builder-docs)

Each handler is a standalone async function that takes:
- params: dict[str, Any] - Validated tool arguments with defaults applied
- ctx: HandlerContext - Project root and settings

And returns:
- ToolResponse with exactly one text block
"""

from .app import handle_app_deploy, handle_app_use
from .auth import handle_configure_global, handle_login, handle_where
from .base import HandlerContext, HandlerFunc, text_response
from .dev import handle_app_dev
from .docs import handle_search_docs
from .invoke import handle_dev_invoke
from .scripts import handle_commerce_event_subscribe, handle_onboard

__all__ = [
    # Base
    "HandlerContext",
    "HandlerFunc",
    "text_response",
    # Auth handlers
    "handle_login",
    "handle_where",
    "handle_configure_global",
    # App handlers
    "handle_app_use",
    "handle_app_deploy",
    "handle_app_dev",
    "handle_dev_invoke",
    # Script handlers
    "handle_onboard",
    "handle_commerce_event_subscribe",
    # Docs handlers
    "handle_search_docs",
]
