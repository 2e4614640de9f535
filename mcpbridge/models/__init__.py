from .tool import (
    AuthDescriptor,
    AuthType,
    ParameterDescriptor,
    ParameterType,
    ParameterValidation,
    ResponseValidationDescriptor,
    ToolDescriptor,
)
from .server_config import (
    OAuthConfig,
    PromptArgument,
    PromptConfig,
    ResourceConfig,
    RuntimeConfig,
    SecurityConfig,
    ServerConfig,
    ServerInfo,
)
from .outcome import APIOutcome

__all__ = [
    "AuthDescriptor",
    "AuthType",
    "ParameterDescriptor",
    "ParameterType",
    "ParameterValidation",
    "ResponseValidationDescriptor",
    "ToolDescriptor",
    "OAuthConfig",
    "PromptArgument",
    "PromptConfig",
    "ResourceConfig",
    "RuntimeConfig",
    "SecurityConfig",
    "ServerConfig",
    "ServerInfo",
    "APIOutcome",
]
