"""Turns a tool descriptor and call-time arguments into an outbound request."""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from mcpbridge.infra.config import config
from mcpbridge.infra.error_handler import RequestBuildError, TemplateError
from mcpbridge.models.tool import AuthDescriptor, AuthType, ToolDescriptor
from mcpbridge.services.template_expander import expand, format_value, referenced_names

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT = "application/json, text/plain, */*"
DEFAULT_API_KEY_HEADER = "X-API-Key"


@dataclass
class BuiltRequest:
    """A fully-formed outbound request, rebuilt for every attempt."""
    method: str
    url: httpx.URL
    headers: httpx.Headers
    content: Optional[bytes] = None
    auth: Optional[httpx.BasicAuth] = None


def _env_override(value: str, env_var: str) -> str:
    """Environment variable wins over the explicit value when it is set and non-empty."""
    if env_var:
        env_value = os.environ.get(env_var)
        if env_value:
            return env_value
    return value


def _expand_field(label: str, template: str, args: Dict[str, Any]) -> str:
    try:
        return expand(template, args)
    except TemplateError as e:
        raise RequestBuildError(f"failed to expand {label}: {e}")


def _build_url(tool: ToolDescriptor, args: Dict[str, Any]) -> httpx.URL:
    endpoint = _expand_field("endpoint template", tool.endpoint, args)
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise RequestBuildError(f"invalid endpoint URL: {e}")
    if url.scheme not in ("http", "https") or not url.host:
        raise RequestBuildError(f"invalid endpoint URL: {endpoint!r} is not an absolute http(s) URL")

    params = url.params
    for key, template in tool.query_params.items():
        params = params.set(key, _expand_field(f"query param {key}", template, args))

    # GET tools pass declared arguments through as query values,
    # except those already placed in the endpoint path
    if tool.method == "GET":
        in_path = referenced_names(tool.endpoint)
        for param in tool.parameters:
            if param.name in args and param.name not in in_path:
                params = params.set(param.name, format_value(args[param.name]))

    return url.copy_with(params=params)


def _build_body(tool: ToolDescriptor, args: Dict[str, Any]) -> Optional[bytes]:
    if tool.method == "GET":
        return None
    if tool.body_template:
        return _expand_field("body template", tool.body_template, args).encode("utf-8")
    if args:
        try:
            return json.dumps(args).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RequestBuildError(f"failed to marshal parameters to JSON: {e}")
    return None


def _apply_auth(
    auth: AuthDescriptor,
    headers: httpx.Headers,
    args: Dict[str, Any],
) -> Optional[httpx.BasicAuth]:
    # SECURITY: Never log secrets or tokens
    if auth.type == AuthType.BEARER:
        token = _env_override(auth.token, auth.env_var)
        if not token:
            raise RequestBuildError("failed to apply authentication: bearer token not found")
        headers["Authorization"] = f"Bearer {token}"

    elif auth.type == AuthType.BASIC:
        password = _env_override(auth.password, auth.env_var)
        if not auth.username or not password:
            raise RequestBuildError("failed to apply authentication: basic auth credentials not found")
        return httpx.BasicAuth(auth.username, password)

    elif auth.type == AuthType.API_KEY:
        if not auth.headers:
            key = _env_override("", auth.env_var)
            if not key:
                raise RequestBuildError("failed to apply authentication: api key not found")
            headers[DEFAULT_API_KEY_HEADER] = key
        for name, template in auth.headers.items():
            value = _env_override(_expand_field(f"auth header {name}", template, args), auth.env_var)
            if not value:
                raise RequestBuildError(f"failed to apply authentication: api key for header {name} not found")
            headers[name] = value

    elif auth.type == AuthType.CUSTOM:
        for name, template in auth.headers.items():
            headers[name] = _expand_field(f"auth header {name}", template, args)

    return None


def build_request(tool: ToolDescriptor, args: Dict[str, Any]) -> BuiltRequest:
    """
    Build the outbound request for one attempt.

    Order matters: defaults first, configured headers next, authentication last
    so credentials cannot be replaced by a configured header.

    Args:
        tool: Tool descriptor
        args: Validated arguments (defaults already injected)

    Returns:
        BuiltRequest ready to be sent

    Raises:
        RequestBuildError: On template, URL or credential problems
    """
    url = _build_url(tool, args)
    content = _build_body(tool, args)

    headers = httpx.Headers()
    if content is not None:
        headers["Content-Type"] = tool.content_type or "application/json"
    headers["User-Agent"] = config.USER_AGENT
    headers["Accept"] = DEFAULT_ACCEPT

    for name, template in tool.headers.items():
        headers[name] = _expand_field(f"header {name}", template, args)

    basic_auth = None
    if tool.auth is not None:
        basic_auth = _apply_auth(tool.auth, headers, args)

    logger.debug(
        "Built request",
        extra={"tool_name": tool.name, "method": tool.method, "host": url.host, "path": url.path},
    )

    return BuiltRequest(
        method=tool.method,
        url=url,
        headers=headers,
        content=content,
        auth=basic_auth,
    )
