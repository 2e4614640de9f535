"""Tool execution engine: the single invocation path for every configured tool."""

import logging
import time
from typing import Any, Dict, Optional

from mcpbridge.infra.error_handler import ParameterValidationError, ToolError
from mcpbridge.infra.metrics import tool_call_duration, tool_calls_total
from mcpbridge.models.tool import ToolDescriptor
from mcpbridge.services.parameter_validator import validate_arguments
from mcpbridge.services.response_processor import process_response
from mcpbridge.services.result_mapper import map_failure, map_outcome
from mcpbridge.services.tool_executor import ToolExecutor

logger = logging.getLogger(__name__)

SENSITIVE_KEYS = ("password", "token", "api_key", "apikey", "secret", "auth")


def sanitize_arguments(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of the argument map safe for logging.

    Values under keys that look like credentials are replaced, nested objects
    are sanitized recursively and long strings are truncated.
    """
    sanitized: Dict[str, Any] = {}
    for key, value in arguments.items():
        if any(marker in key.lower() for marker in SENSITIVE_KEYS):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_arguments(value)
        elif isinstance(value, str) and len(value) > 100:
            sanitized[key] = value[:100] + "..."
        else:
            sanitized[key] = value
    return sanitized


class ToolExecutionEngine:
    """Runs validate -> build -> execute -> process -> map for any tool descriptor."""

    def __init__(self, executor: ToolExecutor):
        self.executor = executor

    async def execute_tool(
        self,
        tool: ToolDescriptor,
        arguments: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Execute one tool call.

        Args:
            tool: Descriptor of the tool to call
            arguments: Call-time arguments (mutated in place with defaults)

        Returns:
            Tool result dict ({"content": [...], "isError": bool}). Build,
            network, timeout and response validation failures are reported
            inside the result.

        Raises:
            ParameterValidationError: If the arguments do not satisfy the descriptor
        """
        start_time = time.time()
        if arguments is None:
            arguments = {}

        try:
            validate_arguments(tool, arguments)
        except ParameterValidationError as e:
            tool_calls_total.labels(tool_name=tool.name, status="invalid_params").inc()
            logger.info(
                "Tool arguments rejected",
                extra={"tool_name": tool.name, "parameter": e.parameter, "error": e.message},
            )
            raise

        logger.info(
            "Executing tool",
            extra={"tool_name": tool.name, "method": tool.method, "arguments": sanitize_arguments(arguments)},
        )

        try:
            response = await self.executor.execute(tool, arguments)
            outcome = process_response(response, tool)
            result = map_outcome(tool, outcome)
        except ToolError as e:
            result = map_failure(tool, e)
            logger.warning(
                "Tool execution failed",
                extra={"tool_name": tool.name, "category": e.category.value, "error": e.message},
            )

        duration = time.time() - start_time
        status = "tool_error" if result["isError"] else "success"
        tool_calls_total.labels(tool_name=tool.name, status=status).inc()
        tool_call_duration.labels(tool_name=tool.name).observe(duration)

        logger.info(
            "Tool execution completed",
            extra={"tool_name": tool.name, "status": status, "duration_ms": round(duration * 1000, 2)},
        )
        return result
