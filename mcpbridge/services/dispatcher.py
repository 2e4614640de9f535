"""JSON-RPC method routing for the MCP endpoint."""

import logging
from typing import Any, Awaitable, Callable, Dict

from mcpbridge.infra.error_handler import ParameterValidationError, ProtocolError
from mcpbridge.infra.metrics import mcp_requests_total
from mcpbridge.models.jsonrpc import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    JsonRpcRequest,
    invalid_params,
    jsonrpc_error,
    jsonrpc_response,
    request_id,
)
from mcpbridge.models.server_config import ServerInfo
from mcpbridge.services.prompt_service import PromptCatalog
from mcpbridge.services.resource_service import ResourceCatalog
from mcpbridge.services.tool_execution_engine import ToolExecutionEngine
from mcpbridge.services.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_INSTRUCTIONS = "MCP Server ready for tool, prompt, and resource operations"

Handler = Callable[[JsonRpcRequest], Awaitable[Any]]


class MCPDispatcher:
    """
    Routes decoded JSON-RPC requests to method handlers.

    Stateless between requests. Handlers return a result payload or raise
    ProtocolError; the dispatcher owns envelope framing so every path yields
    exactly one of result or error.
    """

    def __init__(
        self,
        server_info: ServerInfo,
        registry: ToolRegistry,
        engine: ToolExecutionEngine,
        prompts: PromptCatalog,
        resources: ResourceCatalog,
    ):
        self.server_info = server_info
        self.registry = registry
        self.engine = engine
        self.prompts = prompts
        self.resources = resources
        self._handlers: Dict[str, Handler] = {
            "initialize": self._initialize,
            "initialized": self._initialized,
            "notifications/initialized": self._initialized,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "prompts/list": self._prompts_list,
            "prompts/get": self._prompts_get,
            "resources/list": self._resources_list,
            "resources/read": self._resources_read,
            "ping": self._ping,
        }

    async def dispatch(self, payload: Any) -> Dict[str, Any]:
        """
        Handle one parsed JSON-RPC payload.

        Args:
            payload: Decoded JSON body

        Returns:
            JSON-RPC response envelope (never raises)
        """
        req_id = request_id(payload)
        try:
            request = JsonRpcRequest.from_payload(payload)
        except ProtocolError as e:
            mcp_requests_total.labels(method="invalid", outcome="error").inc()
            return jsonrpc_error(req_id, e.code, e.message, e.data)

        handler = self._handlers.get(request.method)
        if handler is None:
            mcp_requests_total.labels(method="unknown", outcome="error").inc()
            logger.info("Unknown JSON-RPC method", extra={"rpc_method": request.method})
            return jsonrpc_error(request.id, METHOD_NOT_FOUND, "Method not found", f"Unknown method: {request.method}")

        try:
            result = await handler(request)
        except ProtocolError as e:
            mcp_requests_total.labels(method=request.method, outcome="error").inc()
            return jsonrpc_error(request.id, e.code, e.message, e.data)
        except Exception as e:
            mcp_requests_total.labels(method=request.method, outcome="error").inc()
            logger.error(
                "Unhandled error in JSON-RPC handler",
                extra={"rpc_method": request.method, "error": str(e)},
                exc_info=True,
            )
            return jsonrpc_error(request.id, INTERNAL_ERROR, "Internal error")

        mcp_requests_total.labels(method=request.method, outcome="result").inc()
        return jsonrpc_response(request.id, result)

    async def _initialize(self, request: JsonRpcRequest) -> Dict[str, Any]:
        client_info = request.params.get("clientInfo")
        if not isinstance(client_info, dict):
            client_info = {}
        logger.info(
            "MCP client initializing",
            extra={
                "client_name": client_info.get("name"),
                "client_version": client_info.get("version"),
                "protocol_version": request.params.get("protocolVersion"),
            },
        )
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {
                "tools": {"listChanged": True},
                "prompts": {"listChanged": True},
                "resources": {"listChanged": True},
            },
            "serverInfo": {
                "name": self.server_info.name,
                "version": self.server_info.version,
            },
            "instructions": SERVER_INSTRUCTIONS,
        }

    async def _initialized(self, request: JsonRpcRequest) -> Dict[str, Any]:
        logger.info("MCP client initialized")
        return {}

    async def _tools_list(self, request: JsonRpcRequest) -> Dict[str, Any]:
        return {"tools": self.registry.list_tools()}

    async def _tools_call(self, request: JsonRpcRequest) -> Dict[str, Any]:
        name = request.params.get("name")
        if not isinstance(name, str) or not name:
            raise invalid_params("tool name is required")

        tool = self.registry.get(name)
        if tool is None:
            raise invalid_params(f"tool '{name}' not found")

        arguments = request.params.get("arguments")
        if arguments is None:
            arguments = {}
        elif not isinstance(arguments, dict):
            raise invalid_params("arguments must be a JSON object")

        try:
            return await self.engine.execute_tool(tool, arguments)
        except ParameterValidationError as e:
            raise invalid_params(e.message, {"parameter": e.parameter} if e.parameter else None)

    async def _prompts_list(self, request: JsonRpcRequest) -> Dict[str, Any]:
        return {"prompts": self.prompts.list_prompts()}

    async def _prompts_get(self, request: JsonRpcRequest) -> Dict[str, Any]:
        arguments = request.params.get("arguments")
        if arguments is not None and not isinstance(arguments, dict):
            raise invalid_params("arguments must be a JSON object")
        return self.prompts.get_prompt(request.params.get("name"), arguments)

    async def _resources_list(self, request: JsonRpcRequest) -> Dict[str, Any]:
        return {"resources": self.resources.list_resources()}

    async def _resources_read(self, request: JsonRpcRequest) -> Dict[str, Any]:
        return await self.resources.read_resource(request.params.get("uri"))

    async def _ping(self, request: JsonRpcRequest) -> Dict[str, Any]:
        return {}
