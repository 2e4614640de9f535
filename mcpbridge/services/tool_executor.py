"""Retrying executor for outbound tool requests."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from mcpbridge.infra.config import config
from mcpbridge.infra.error_handler import NetworkError, ToolTimeoutError
from mcpbridge.infra.metrics import upstream_attempts_total
from mcpbridge.models.tool import ToolDescriptor
from mcpbridge.services.request_builder import build_request
from mcpbridge.services.response_processor import is_success_status

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


class ToolExecutor:
    """
    Sends a tool's request with bounded retries under one deadline.

    Attempts run sequentially. Before attempt N (N >= 1) the executor waits
    N * backoff_unit seconds, then rebuilds and resends the request. The
    deadline covers every attempt and every backoff wait.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        sleep: SleepFunc = asyncio.sleep,
        backoff_unit: Optional[float] = None,
        default_timeout: float = 30.0,
    ):
        """
        Args:
            client: Shared pooled HTTP client
            sleep: Awaitable used for backoff waits (tests inject a no-op)
            backoff_unit: Seconds per backoff step (RETRY_BACKOFF_SECONDS when None)
            default_timeout: Deadline for tools that declare a timeout of 0
        """
        self._client = client
        self._sleep = sleep
        self.backoff_unit = config.RETRY_BACKOFF_SECONDS if backoff_unit is None else backoff_unit
        self.default_timeout = default_timeout

    def deadline_for(self, tool: ToolDescriptor) -> float:
        return tool.timeout if tool.timeout > 0 else self.default_timeout

    async def execute(self, tool: ToolDescriptor, args: Dict[str, Any]) -> httpx.Response:
        """
        Run the attempt loop for one call.

        Returns:
            The first successful response, or the final attempt's response when
            every attempt got an unsuccessful status

        Raises:
            RequestBuildError: If the request cannot be built (no network I/O happens)
            NetworkError: If the final attempt produced no response
            ToolTimeoutError: If the deadline expires
        """
        deadline = self.deadline_for(tool)
        if deadline <= 0:
            return await self._attempt_loop(tool, args)

        try:
            return await asyncio.wait_for(self._attempt_loop(tool, args), timeout=deadline)
        except asyncio.TimeoutError:
            logger.warning(
                "Tool call deadline exceeded",
                extra={"tool_name": tool.name, "timeout_seconds": deadline},
            )
            raise ToolTimeoutError(f"request timed out after {deadline:g}s")

    async def _attempt_loop(self, tool: ToolDescriptor, args: Dict[str, Any]) -> httpx.Response:
        attempts = tool.retries + 1
        response: Optional[httpx.Response] = None
        last_error: Optional[Exception] = None

        for attempt in range(attempts):
            if attempt > 0:
                delay = attempt * self.backoff_unit
                logger.info(
                    "Retrying tool request",
                    extra={"tool_name": tool.name, "attempt": attempt + 1, "delay_seconds": delay},
                )
                await self._sleep(delay)

            request = build_request(tool, args)

            try:
                response = await self._client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.content,
                    auth=request.auth,
                )
            except httpx.RequestError as e:
                response = None
                last_error = e
                upstream_attempts_total.labels(tool_name=tool.name, outcome="network_error").inc()
                logger.warning(
                    "Tool request attempt failed",
                    extra={"tool_name": tool.name, "attempt": attempt + 1, "error": str(e) or type(e).__name__},
                )
                continue

            if is_success_status(response.status_code, tool.validation):
                upstream_attempts_total.labels(tool_name=tool.name, outcome="success").inc()
                return response

            upstream_attempts_total.labels(tool_name=tool.name, outcome="http_error").inc()
            logger.warning(
                "Tool request returned unsuccessful status",
                extra={"tool_name": tool.name, "attempt": attempt + 1, "status_code": response.status_code},
            )

        if response is not None:
            return response

        reason = (str(last_error) or type(last_error).__name__) if last_error else "no response"
        raise NetworkError(f"request failed after {attempts} attempts: {reason}", attempts=attempts)
