"""Server configuration file models."""

import re
from typing import Any, List

from pydantic import BaseModel, Field, field_validator

from mcpbridge.models.tool import ToolDescriptor, parse_duration

_SEMVER = re.compile(
    r"^v?(\d+)\.(\d+)\.(\d+)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


class ServerInfo(BaseModel):
    """Identity reported to clients during initialize."""
    name: str = Field(..., min_length=1, max_length=100)
    version: str = "1.0.0"
    description: str = Field(default="", max_length=500)
    author: str = Field(default="", max_length=100)
    license: str = Field(default="", max_length=50)

    @field_validator("version", mode="before")
    @classmethod
    def check_semver(cls, value: Any) -> Any:
        if value in (None, ""):
            return "1.0.0"
        if not isinstance(value, str) or not _SEMVER.match(value):
            raise ValueError("version must be a valid semantic version")
        return value


class PromptArgument(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(default="", max_length=200)
    required: bool = False


class PromptConfig(BaseModel):
    """A static prompt with {argument} placeholders."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    arguments: List[PromptArgument] = Field(default_factory=list)


class ResourceConfig(BaseModel):
    """A static resource served from inline content, a file or a URL."""
    uri: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    mime_type: str = Field(..., min_length=1)
    content: str = ""
    file_path: str = ""
    url: str = ""


class OAuthConfig(BaseModel):
    """Transport-level OAuth for the /mcp endpoint (bearer presence check only)."""
    enabled: bool = False
    authorization_servers: List[str] = Field(default_factory=list)
    accepted_audiences: List[str] = Field(default_factory=list)
    required_scopes: List[str] = Field(default_factory=list)


class SecurityConfig(BaseModel):
    enable_cors: bool = False
    allowed_origins: List[str] = Field(default_factory=list, description="CORS allow-list, applied regardless of enable_cors (empty = any origin)")
    oauth: OAuthConfig = Field(default_factory=OAuthConfig)


class RuntimeConfig(BaseModel):
    default_timeout: float = Field(default=30.0, description="Deadline in seconds for tools declaring no timeout")
    log_level: str = "info"
    environment: str = "development"
    metrics_enabled: bool = False

    @field_validator("default_timeout", mode="before")
    @classmethod
    def coerce_timeout(cls, value: Any) -> float:
        return parse_duration(value)

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        if value not in ("debug", "info", "warn", "error"):
            raise ValueError("log_level must be one of: debug, info, warn, error")
        return value

    @field_validator("environment")
    @classmethod
    def check_environment(cls, value: str) -> str:
        if value not in ("development", "staging", "production"):
            raise ValueError("environment must be one of: development, staging, production")
        return value


class ServerConfig(BaseModel):
    """Complete configuration for one server instance."""
    server: ServerInfo
    tools: List[ToolDescriptor] = Field(default_factory=list)
    prompts: List[PromptConfig] = Field(default_factory=list)
    resources: List[ResourceConfig] = Field(default_factory=list)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
