"""Shared outbound HTTP transport."""

from typing import Optional

import httpx

from mcpbridge.infra.config import config


def create_http_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    Create the pooled client used by every tool call.

    httpx.AsyncClient is safe for concurrent use, so one instance is shared
    across requests and closed on application shutdown.

    Args:
        transport: Optional transport override (tests pass httpx.MockTransport)
    """
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.UPSTREAM_TIMEOUT),
        limits=httpx.Limits(
            max_connections=config.UPSTREAM_MAX_CONNECTIONS,
            max_keepalive_connections=config.UPSTREAM_MAX_KEEPALIVE,
        ),
        follow_redirects=True,
    )
