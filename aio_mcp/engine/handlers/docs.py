"""Documentation search handler.

Handles:
- search-commerce-app-builder-docs: Query the Commerce App Builder
  documentation service and return ranked passages

The service is a single endpoint: POST <docs_worker_url>/query with
``{"query": str, "count": int}``, answering ``{"results": [...]}`` where
each result has ``pageContent``, ``metadata`` and optionally
``relevanceScore``. The answer is returned as a JSON text block.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from ...models import ToolResponse
from .base import HandlerContext, text_response

logger = logging.getLogger(__name__)


def create_client(**kwargs: Any) -> httpx.AsyncClient:
    return httpx.AsyncClient(**kwargs)


def format_documents(results: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Rank results in service order and pull out their source."""
    documents = []
    for rank, doc in enumerate(results, start=1):
        metadata = doc.get("metadata") or {}
        documents.append(
            {
                "rank": rank,
                "source": metadata.get("source") or "Unknown",
                "content": doc.get("pageContent"),
                "metadata": metadata,
                "relevanceScore": doc.get("relevanceScore"),
            }
        )
    return documents


async def search_docs(query: str, count: int, base_url: str, timeout: float) -> list[dict[str, Any]]:
    """POST the query to the documentation service and return its results.

    Raises:
        httpx.HTTPError: On transport failures or non-2xx responses
        ValueError: If the body is not JSON or has no ``results`` list
    """
    async with create_client(timeout=timeout) as client:
        response = await client.post(
            f"{base_url.rstrip('/')}/query",
            json={"query": query, "count": count},
        )
        response.raise_for_status()
        payload = response.json()

    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        raise ValueError("Documentation service response has no 'results' list")
    return results


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


async def handle_search_docs(params: dict[str, Any], ctx: HandlerContext) -> ToolResponse:
    """Search the Commerce App Builder documentation.

    Args:
        params: Dict containing:
            - query: Search text (required, non-empty)
            - maxResults: Number of results (default from settings)
    """
    query = params.get("query")
    count = params.get("maxResults")
    if count is None:
        count = ctx.settings.search_results_count

    try:
        if not query or not isinstance(query, str):
            raise ValueError("Query must be a non-empty string")

        logger.info(f'Searching Commerce App Builder documentation for: "{query}"')
        results = await search_docs(
            query, count, ctx.settings.docs_worker_url, ctx.settings.http_timeout
        )
        logger.info(f"Found {len(results)} relevant documentation sections")

        body = {
            "success": True,
            "query": query,
            "resultsCount": len(results),
            "documents": format_documents(results),
            "timestamp": _timestamp(),
        }
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Error searching Commerce App Builder documentation: {e}")
        body = {
            "success": False,
            "error": str(e),
            "query": query,
            "timestamp": _timestamp(),
        }

    return text_response(json.dumps(body, indent=2, default=str))
