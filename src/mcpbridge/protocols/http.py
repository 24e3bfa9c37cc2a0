"""HTTP helpers shared by the JSON-RPC and completion clients."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mcpbridge.protocols.errors import (
    ConnectError,
    HTTPStatusError,
    RequestTimeoutError,
    TransportError,
)

logger = logging.getLogger(__name__)


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    payload: dict[str, Any],
    *,
    timeout: float | None,
) -> httpx.Response:
    """POST *payload* as JSON and return the response.

    Every failure that happens before a successful HTTP status is available
    is raised as a :class:`TransportError` subclass, so callers only ever
    see the bridge taxonomy.
    """
    logger.debug("POST %s", url)
    try:
        response = await client.post(url, json=payload, timeout=timeout)
    except httpx.TimeoutException as exc:
        raise RequestTimeoutError(url, timeout) from exc
    except httpx.ConnectError as exc:
        raise ConnectError(url, str(exc)) from exc
    except httpx.HTTPError as exc:
        raise TransportError(f"Request to {url} failed: {exc}") from exc

    if not response.is_success:
        raise HTTPStatusError(response.status_code, response.text)
    return response
