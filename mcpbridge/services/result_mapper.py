"""Maps upstream outcomes and failures to MCP tool results."""

import json
from typing import Any, Dict

from mcpbridge.models.outcome import APIOutcome
from mcpbridge.models.tool import ParameterType, ToolDescriptor


def text_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    """Single text content block in the shape tools/call returns."""
    return {
        "content": [{"type": "text", "text": text}],
        "isError": is_error,
    }


def _call_label(tool: ToolDescriptor) -> str:
    return f"{tool.method} {tool.endpoint}"


def map_failure(tool: ToolDescriptor, error: Exception) -> Dict[str, Any]:
    """Tool-level error result for a call that never produced a usable response."""
    return text_result(f"{_call_label(tool)} failed: {error}", is_error=True)


def map_outcome(tool: ToolDescriptor, outcome: APIOutcome) -> Dict[str, Any]:
    """
    Convert a processed response into a tool result.

    Status codes >= 400 are reported as tool errors. A "string" return type
    yields the raw body; any other (or no) return type yields the parsed
    payload pretty-printed, falling back to the raw body when there is none.
    """
    if outcome.status_code >= 400:
        return text_result(
            f"{_call_label(tool)} failed: HTTP Error {outcome.status_code}: {outcome.body}",
            is_error=True,
        )

    if tool.return_type == ParameterType.STRING or outcome.data is None:
        return text_result(outcome.body)

    return text_result(json.dumps(outcome.data, indent=2, ensure_ascii=False))
