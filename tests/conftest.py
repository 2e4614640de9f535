"""Pytest configuration and fixtures."""

import os
from typing import Any, Callable, Dict, List

import httpx
import pytest

# Set test environment
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")

from mcpbridge.models.server_config import ServerConfig
from mcpbridge.models.tool import ToolDescriptor


class UpstreamRecorder:
    """MockTransport handler that records every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], Any]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


class RecordingSleep:
    """Backoff sleep that returns immediately and remembers requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def make_tool() -> Callable[..., ToolDescriptor]:
    """Factory for tool descriptors based on a GET item lookup."""
    def _make(**overrides: Any) -> ToolDescriptor:
        data: Dict[str, Any] = {
            "name": "get_item",
            "description": "Fetch one item by id",
            "endpoint": "https://api.example.com/items/{{.id}}",
            "method": "GET",
            "parameters": [{"name": "id", "type": "string", "required": True}],
        }
        data.update(overrides)
        return ToolDescriptor.model_validate(data)
    return _make


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_upstream() -> Callable[[Callable[[httpx.Request], Any]], UpstreamRecorder]:
    """Factory wrapping a handler in a recording MockTransport upstream."""
    return UpstreamRecorder


@pytest.fixture
def server_config_data() -> Dict[str, Any]:
    """Configuration document with one tool, one prompt and one resource."""
    return {
        "server": {"name": "test-server", "version": "1.2.3"},
        "tools": [
            {
                "name": "get_item",
                "description": "Fetch one item by id",
                "endpoint": "https://api.example.com/items/{{.id}}",
                "method": "GET",
                "parameters": [{"name": "id", "type": "string", "required": True}],
                "retries": 0,
            },
            {
                "name": "create_item",
                "description": "Create an item",
                "endpoint": "https://api.example.com/items",
                "method": "POST",
                "parameters": [
                    {"name": "name", "type": "string", "required": True},
                    {"name": "quantity", "type": "number", "default": 1},
                ],
                "retries": 2,
            },
        ],
        "prompts": [
            {
                "name": "greet",
                "description": "Greet someone",
                "content": "Say hello to {name}.",
                "arguments": [{"name": "name", "required": True}],
            }
        ],
        "resources": [
            {
                "uri": "docs://readme",
                "name": "Readme",
                "description": "Inline readme",
                "mime_type": "text/plain",
                "content": "Hello from the readme",
            }
        ],
    }


@pytest.fixture
def server_config(server_config_data) -> ServerConfig:
    return ServerConfig.model_validate(server_config_data)
