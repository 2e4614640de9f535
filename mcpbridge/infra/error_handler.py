"""Error taxonomy for tool invocation and the JSON-RPC surface."""

from typing import Any, Optional
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories of errors for better handling."""
    VALIDATION = "validation"  # Argument missing, ill-typed or out of constraint
    BUILD = "build"  # Template, URL or credential problem while building the request
    NETWORK = "network"  # Connection issues, per-attempt timeouts
    TIMEOUT = "timeout"  # Whole-call deadline exceeded
    RESPONSE = "response"  # Upstream response failed validation
    PROTOCOL = "protocol"  # Malformed envelope, unknown method or tool


class ToolError(Exception):
    """Base exception for failures while invoking a tool."""
    def __init__(self, message: str, category: ErrorCategory, retryable: bool = False):
        self.message = message
        self.category = category
        self.retryable = retryable
        super().__init__(message)


class ParameterValidationError(ToolError):
    """A call-time argument violates its parameter descriptor."""
    def __init__(self, message: str, parameter: Optional[str] = None):
        self.parameter = parameter
        super().__init__(message, ErrorCategory.VALIDATION)


class TemplateError(ToolError):
    """A template could not be parsed or referenced an unknown argument."""
    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.BUILD)


class RequestBuildError(ToolError):
    """The outbound request could not be constructed."""
    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.BUILD)


class NetworkError(ToolError):
    """Every attempt failed without an HTTP response."""
    def __init__(self, message: str, attempts: int = 1):
        self.attempts = attempts
        super().__init__(message, ErrorCategory.NETWORK, retryable=True)


class ToolTimeoutError(ToolError):
    """The deadline for the whole call expired."""
    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.TIMEOUT)


class ResponseValidationError(ToolError):
    """The upstream response did not satisfy the configured rules."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, ErrorCategory.RESPONSE)


class ProtocolError(Exception):
    """Raised by method handlers to produce a JSON-RPC error object."""
    def __init__(self, code: int, message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(message)
