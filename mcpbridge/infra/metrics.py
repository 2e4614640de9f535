"""Prometheus metrics export."""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# JSON-RPC metrics
mcp_requests_total = Counter(
    "mcp_requests_total",
    "Total JSON-RPC requests",
    ["method", "outcome"],  # outcome: result or error
)

# Tool metrics
tool_calls_total = Counter(
    "tool_calls_total",
    "Total tool calls",
    ["tool_name", "status"],  # status: success, tool_error or invalid_params
)

tool_call_duration = Histogram(
    "tool_call_duration_seconds",
    "Tool call duration in seconds",
    ["tool_name"],
)

# Upstream attempts (one per network call, retries included)
upstream_attempts_total = Counter(
    "upstream_attempts_total",
    "Total outbound HTTP attempts",
    ["tool_name", "outcome"],  # outcome: success, http_error or network_error
)


def get_metrics_response() -> Response:
    """Get Prometheus metrics as HTTP response."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
