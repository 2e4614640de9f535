"""Declarative tool descriptor models."""

import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class ParameterType(str, Enum):
    """Closed set of argument kinds a tool parameter may declare."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


class AuthType(str, Enum):
    BEARER = "bearer"
    BASIC = "basic"
    API_KEY = "api_key"
    CUSTOM = "custom"


HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")

CONTENT_TYPES = (
    "application/json",
    "application/xml",
    "text/plain",
    "application/x-www-form-urlencoded",
)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Union[str, int, float, None]) -> float:
    """
    Parse a duration into seconds.

    Accepts numbers (seconds) or Go-style duration strings such as "30s",
    "1m30s" or "250ms". Empty values mean 0.
    """
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise ValueError("duration must be a number or a duration string")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip()
        if text == "0":
            return 0.0
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()
        if pos == 0 or pos != len(text):
            raise ValueError(f"invalid duration format: {value!r}")
    if seconds < 0:
        raise ValueError("duration cannot be negative")
    return seconds


class ParameterValidation(BaseModel):
    """Optional constraints for a parameter value."""
    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    pattern: Optional[str] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    enum: List[str] = Field(default_factory=list)


class ParameterDescriptor(BaseModel):
    """A declared input of a tool."""
    name: str = Field(..., min_length=1, max_length=50)
    type: ParameterType = Field(default=ParameterType.STRING)
    description: str = Field(default="", max_length=200)
    required: bool = False
    default: Any = None
    validation: Optional[ParameterValidation] = None


class AuthDescriptor(BaseModel):
    """Credentials injected into every request of a tool."""
    type: AuthType
    token: str = ""
    username: str = ""
    password: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    env_var: str = Field(default="", description="Environment variable overriding the secret value")


class ResponseValidationDescriptor(BaseModel):
    """Rules an upstream response must satisfy."""
    status_codes: List[int] = Field(default_factory=list, description="Allowed status codes (2xx when empty)")
    required_fields: List[str] = Field(default_factory=list, description="Required top-level JSON fields")


class ToolDescriptor(BaseModel):
    """Declarative definition of one HTTP-backed tool."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    endpoint: str = Field(..., min_length=1, description="URL template, e.g. https://api.example.com/items/{{.id}}")
    method: str = Field(default="GET")
    headers: Dict[str, str] = Field(default_factory=dict)
    query_params: Dict[str, str] = Field(default_factory=dict)
    body_template: str = ""
    content_type: str = ""
    parameters: List[ParameterDescriptor] = Field(default_factory=list)
    return_type: Optional[ParameterType] = None
    timeout: float = Field(default=30.0, description="Deadline for the whole call in seconds (0 = none)")
    retries: int = Field(default=3, ge=0, le=5)
    auth: Optional[AuthDescriptor] = None
    validation: Optional[ResponseValidationDescriptor] = None

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().upper() or "GET"
            if value not in HTTP_METHODS:
                raise ValueError(f"method must be one of: {', '.join(HTTP_METHODS)}")
        return value

    @field_validator("content_type")
    @classmethod
    def check_content_type(cls, value: str) -> str:
        if value and value not in CONTENT_TYPES:
            raise ValueError(f"content_type must be one of: {', '.join(CONTENT_TYPES)}")
        return value

    @field_validator("timeout", mode="before")
    @classmethod
    def coerce_timeout(cls, value: Any) -> float:
        return parse_duration(value)

    @field_validator("return_type", mode="before")
    @classmethod
    def empty_return_type(cls, value: Any) -> Any:
        return value or None

    @model_validator(mode="after")
    def default_content_type(self) -> "ToolDescriptor":
        if not self.content_type and self.method in ("POST", "PUT", "PATCH"):
            self.content_type = "application/json"
        return self
