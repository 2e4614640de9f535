"""Reads upstream responses and enforces response validation rules."""

import json
import logging
from typing import Dict, Optional

import httpx

from mcpbridge.infra.error_handler import ResponseValidationError
from mcpbridge.models.outcome import APIOutcome
from mcpbridge.models.tool import ResponseValidationDescriptor, ToolDescriptor

logger = logging.getLogger(__name__)


def is_success_status(status_code: int, rules: Optional[ResponseValidationDescriptor]) -> bool:
    """Allow-listed status when one is configured, any 2xx otherwise."""
    if rules is not None and rules.status_codes:
        return status_code in rules.status_codes
    return 200 <= status_code < 300


def _first_values(headers: httpx.Headers) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for name, value in headers.multi_items():
        values.setdefault(name, value)
    return values


def validate_outcome(outcome: APIOutcome, rules: ResponseValidationDescriptor) -> None:
    """
    Apply response validation rules to a processed outcome.

    Raises:
        ResponseValidationError: On a disallowed status or a missing required field
    """
    if rules.status_codes and outcome.status_code not in rules.status_codes:
        raise ResponseValidationError(
            f"response validation failed: unexpected status code {outcome.status_code}",
            status_code=outcome.status_code,
        )

    if rules.required_fields:
        if not isinstance(outcome.data, dict):
            raise ResponseValidationError(
                "response validation failed: response is not a JSON object",
                status_code=outcome.status_code,
            )
        for name in rules.required_fields:
            if name not in outcome.data:
                raise ResponseValidationError(
                    f"response validation failed: required field '{name}' missing from response",
                    status_code=outcome.status_code,
                )


def process_response(response: httpx.Response, tool: ToolDescriptor) -> APIOutcome:
    """
    Turn the final upstream response into an APIOutcome.

    A body that claims to be JSON but does not parse is kept as raw text;
    only validation rules can fail the call here.

    Args:
        response: Fully read httpx response
        tool: Tool whose validation rules apply

    Returns:
        APIOutcome with raw body and, for JSON responses, the parsed payload

    Raises:
        ResponseValidationError: When configured validation rules are not met
    """
    outcome = APIOutcome(
        status_code=response.status_code,
        body=response.text,
        headers=_first_values(response.headers),
    )

    content_type = response.headers.get("content-type", "").lower()
    if "application/json" in content_type and outcome.body:
        try:
            outcome.data = json.loads(outcome.body)
        except ValueError as e:
            logger.warning(
                "Failed to parse JSON response",
                extra={"tool_name": tool.name, "status_code": outcome.status_code, "error": str(e)},
            )

    if tool.validation is not None:
        validate_outcome(outcome, tool.validation)

    return outcome
