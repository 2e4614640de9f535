"""MCP JSON-RPC endpoint."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from mcpbridge.infra.auth import PROTECTED_RESOURCE_PATH, protected_resource_metadata, require_bearer_token
from mcpbridge.infra.config import config
from mcpbridge.infra.middleware import request_too_large
from mcpbridge.models.jsonrpc import INVALID_REQUEST, PARSE_ERROR, jsonrpc_error

logger = logging.getLogger(__name__)

router = APIRouter()


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON constant: {name}")


@router.api_route(
    "/mcp",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    dependencies=[Depends(require_bearer_token)],
    tags=["MCP"],
)
async def mcp_endpoint(request: Request):
    """
    JSON-RPC 2.0 over HTTP POST.

    The transport status is always 200; outcomes travel in the envelope.
    Bodies over MAX_REQUEST_SIZE are refused with a plain 413 before any
    JSON-RPC processing.
    """
    if request.method != "POST":
        return JSONResponse(
            jsonrpc_error(None, INVALID_REQUEST, "Invalid Request", "Only POST method is supported")
        )

    body = await request.body()
    if len(body) > config.MAX_REQUEST_SIZE:
        return request_too_large(config.MAX_REQUEST_SIZE)

    try:
        payload = json.loads(body, parse_constant=_reject_constant)
    except ValueError as e:
        logger.info("Rejected malformed JSON-RPC body", extra={"error": str(e)})
        return JSONResponse(jsonrpc_error(None, PARSE_ERROR, "Parse error", str(e)))

    response = await request.app.state.dispatcher.dispatch(payload)
    return JSONResponse(response)


@router.get(PROTECTED_RESOURCE_PATH, tags=["MCP"])
async def oauth_protected_resource(request: Request):
    """OAuth protected resource metadata (only when OAuth is enabled)."""
    oauth = request.app.state.server_config.security.oauth
    if not oauth.enabled:
        raise HTTPException(status_code=404, detail="Not Found")
    return protected_resource_metadata(request, oauth)
