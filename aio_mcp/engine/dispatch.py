"""Tool name -> handler dispatch table."""

from ..errors import UnknownToolError
from ..models import ToolName
from .handlers import (
    HandlerFunc,
    handle_app_deploy,
    handle_app_dev,
    handle_app_use,
    handle_commerce_event_subscribe,
    handle_configure_global,
    handle_dev_invoke,
    handle_login,
    handle_onboard,
    handle_search_docs,
    handle_where,
)

TOOL_HANDLERS: dict[str, HandlerFunc] = {
    ToolName.AIO_APP_DEPLOY: handle_app_deploy,
    ToolName.AIO_APP_DEV: handle_app_dev,
    ToolName.AIO_DEV_INVOKE: handle_dev_invoke,
    ToolName.AIO_LOGIN: handle_login,
    ToolName.AIO_WHERE: handle_where,
    ToolName.AIO_APP_USE: handle_app_use,
    ToolName.AIO_CONFIGURE_GLOBAL: handle_configure_global,
    ToolName.ONBOARD: handle_onboard,
    ToolName.COMMERCE_EVENT_SUBSCRIBE: handle_commerce_event_subscribe,
    ToolName.SEARCH_COMMERCE_APP_BUILDER_DOCS: handle_search_docs,
}


def get_tool_handler(name: str, handlers: dict[str, HandlerFunc] | None = None) -> HandlerFunc:
    """Resolve the handler for a tool name.

    Raises:
        UnknownToolError: If no handler is registered under ``name``
    """
    table = TOOL_HANDLERS if handlers is None else handlers
    try:
        return table[name]
    except KeyError:
        raise UnknownToolError(name) from None
