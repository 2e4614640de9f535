"""FastAPI application factory for the MCP server."""

import uuid
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mcpbridge.adapters.http_transport import create_http_client
from mcpbridge.infra.config import __version__
from mcpbridge.infra.logging import app_logger
from mcpbridge.infra.middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
    setup_cors,
)
from mcpbridge.models.server_config import ServerConfig
from mcpbridge.services.dispatcher import MCPDispatcher
from mcpbridge.services.prompt_service import PromptCatalog
from mcpbridge.services.resource_service import ResourceCatalog
from mcpbridge.services.tool_execution_engine import ToolExecutionEngine
from mcpbridge.services.tool_executor import ToolExecutor
from mcpbridge.services.tool_registry import ToolRegistry


def build_dispatcher(
    server_config: ServerConfig,
    client: httpx.AsyncClient,
    backoff_unit: Optional[float] = None,
) -> MCPDispatcher:
    """Wire registry, catalogs and the execution pipeline for one configuration."""
    executor = ToolExecutor(
        client,
        backoff_unit=backoff_unit,
        default_timeout=server_config.runtime.default_timeout,
    )
    return MCPDispatcher(
        server_info=server_config.server,
        registry=ToolRegistry(server_config.tools),
        engine=ToolExecutionEngine(executor),
        prompts=PromptCatalog(server_config.prompts),
        resources=ResourceCatalog(server_config.resources, client=client),
    )


def create_app(
    server_config: ServerConfig,
    http_client: Optional[httpx.AsyncClient] = None,
    backoff_unit: Optional[float] = None,
) -> FastAPI:
    """
    Create the ASGI application.

    Args:
        server_config: Validated server configuration
        http_client: Outbound client to use; one is created (and closed on
            shutdown) when omitted
        backoff_unit: Override for the retry backoff unit in seconds

    Returns:
        Configured FastAPI app
    """
    owns_client = http_client is None
    client = http_client or create_http_client()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown."""
        app_logger.info(
            "Application starting up",
            extra={"server_name": server_config.server.name, "tools_count": len(server_config.tools)},
        )

        yield

        app_logger.info("Application shutting down")
        if owns_client:
            await client.aclose()

    app = FastAPI(
        title=server_config.server.name,
        description=server_config.server.description or "MCP server exposing HTTP APIs as tools",
        version=server_config.server.version,
        lifespan=lifespan,
        tags_metadata=[
            {"name": "MCP", "description": "JSON-RPC 2.0 Model Context Protocol endpoint"},
            {"name": "Health", "description": "Health check and monitoring endpoints"},
        ],
    )
    app.state.server_config = server_config
    app.state.http_client = client
    app.state.dispatcher = build_dispatcher(server_config, client, backoff_unit=backoff_unit)

    # Setup middleware (last added runs first)
    app.add_middleware(RequestSizeLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    setup_cors(app, server_config.security)

    # Import and register routers
    from mcpbridge.api.routers import health, mcp

    app.include_router(mcp.router)
    app.include_router(health.router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions."""
        error_id = str(uuid.uuid4())
        app_logger.error(f"Unhandled exception: {exc}", exc_info=True, extra={"error_id": error_id})
        return JSONResponse(
            status_code=500,
            content={"detail": f"Internal server error. Error ID: {error_id}"},
        )

    app_logger.debug("Application created", extra={"version": __version__})
    return app
