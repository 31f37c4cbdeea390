"""HTTP helpers for the local ``aio app dev`` server.

The dev server listens on https://localhost:<port> with a self-signed
certificate, so TLS verification is disabled for these requests. Web actions
are served under ``/api/v1/web/<package>/<action>``.
"""

import asyncio
import json
import logging
from typing import Any

import httpx

from ...config import settings

logger = logging.getLogger(__name__)

PROBE_ACTION = "starter-kit/info"

# Placeholder credentials; the dev server only needs the headers to be present
DEV_HEADERS = {
    "Accept": "application/json",
    "Authorization": "Bearer fake-token-123",
    "x-gw-ims-org-id": "fake-org-id-123",
}


def action_url(action_name: str, port: int) -> str:
    return f"https://localhost:{port}/api/v1/web/{action_name}"


def create_client(**kwargs: Any) -> httpx.AsyncClient:
    """Client for localhost dev server calls (no TLS verification)."""
    kwargs.setdefault("verify", False)
    kwargs.setdefault("timeout", settings.http_timeout)
    return httpx.AsyncClient(**kwargs)


async def check_dev_server(port: int) -> bool:
    """True if anything answers HTTP on the dev server port."""
    async with create_client() as client:
        try:
            await client.get(action_url(PROBE_ACTION, port), headers=DEV_HEADERS)
        except httpx.HTTPError:
            return False
    return True


async def wait_for_server_ready(port: int, attempts: int, interval: float) -> bool:
    """Poll the dev server until it answers 401 (auth required) or 2xx.

    Args:
        port: Dev server port
        attempts: Maximum number of polls
        interval: Seconds between polls

    Returns:
        True once the server responds, False after ``attempts`` polls
    """
    async with create_client() as client:
        for attempt in range(attempts):
            try:
                response = await client.get(
                    action_url(PROBE_ACTION, port), headers={"Accept": "application/json"}
                )
                if response.status_code == 401 or response.is_success:
                    return True
            except httpx.HTTPError:
                logger.debug(f"Dev server not ready (attempt {attempt + 1}/{attempts})")
            await asyncio.sleep(interval)
    return False


async def probe_actions(action_names: list[str], port: int) -> list[str]:
    """Return the actions that exist on the dev server (anything but 404)."""
    available: list[str] = []
    async with create_client() as client:
        for name in action_names:
            try:
                response = await client.get(action_url(name, port), headers=DEV_HEADERS)
            except httpx.HTTPError:
                continue
            if response.status_code != 404:
                available.append(name)
    return available


async def invoke_action(
    action_name: str,
    parameters: dict[str, Any],
    method: str,
    port: int,
) -> dict[str, Any]:
    """Invoke a web action on the dev server.

    The body is sent as JSON for non-GET methods when parameters are given.

    Returns:
        Dict with success, status, status_text, body (parsed JSON when
        possible) and headers; on network failure success=False with status 0
        and an error message.
    """
    headers = {**DEV_HEADERS, "Content-Type": "application/json"}
    body = None
    if method != "GET" and parameters:
        body = json.dumps(parameters)

    async with create_client() as client:
        try:
            response = await client.request(
                method, action_url(action_name, port), headers=headers, content=body
            )
        except httpx.HTTPError as e:
            logger.warning(f"Action invocation failed for {action_name}: {e}")
            return {
                "success": False,
                "error": str(e),
                "status": 0,
                "status_text": "Network Error",
            }

    try:
        payload: Any = response.json()
    except ValueError:
        payload = response.text

    return {
        "success": response.is_success,
        "status": response.status_code,
        "status_text": response.reason_phrase,
        "body": payload,
        "headers": dict(response.headers),
    }
