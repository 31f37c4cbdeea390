"""Enumeration types for the Adobe I/O MCP server."""

from enum import StrEnum


class ToolName(StrEnum):
    """Tools served by this server (must match the descriptor documents)."""

    # Authentication and console configuration
    AIO_LOGIN = "aio-login"
    AIO_WHERE = "aio-where"
    AIO_CONFIGURE_GLOBAL = "aio-configure-global"
    # App lifecycle
    AIO_APP_USE = "aio-app-use"
    AIO_APP_DEPLOY = "aio-app-deploy"
    AIO_APP_DEV = "aio-app-dev"
    AIO_DEV_INVOKE = "aio-dev-invoke"
    # Project scripts
    ONBOARD = "onboard"
    COMMERCE_EVENT_SUBSCRIBE = "commerce-event-subscribe"
    # Documentation
    SEARCH_COMMERCE_APP_BUILDER_DOCS = "search-commerce-app-builder-docs"


class ConfigureAction(StrEnum):
    """Actions accepted by aio-configure-global."""

    LIST_ORGS = "list-orgs"
    LIST_PROJECTS = "list-projects"
    LIST_WORKSPACES = "list-workspaces"
    SELECT_ORG = "select-org"
    SELECT_PROJECT = "select-project"
    SELECT_WORKSPACE = "select-workspace"
    SHOW_CURRENT = "show-current"


class HttpMethod(StrEnum):
    """HTTP methods accepted by aio-dev-invoke."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
