"""Tool registry built once from the server configuration."""

from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from mcpbridge.models.tool import ParameterDescriptor, ParameterType, ToolDescriptor


def _parameter_schema(param: ParameterDescriptor) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": param.type.value}
    if param.description:
        schema["description"] = param.description

    rules = param.validation
    if rules is not None:
        if param.type == ParameterType.STRING:
            if rules.min_length is not None:
                schema["minLength"] = rules.min_length
            if rules.max_length is not None:
                schema["maxLength"] = rules.max_length
            if rules.pattern:
                schema["pattern"] = rules.pattern
            if rules.enum:
                schema["enum"] = list(rules.enum)
        elif param.type == ParameterType.NUMBER:
            if rules.min_value is not None:
                schema["minimum"] = rules.min_value
            if rules.max_value is not None:
                schema["maximum"] = rules.max_value

    if param.default is not None:
        schema["default"] = param.default
    return schema


def build_input_schema(tool: ToolDescriptor) -> Dict[str, Any]:
    """JSON Schema advertised for a tool's arguments."""
    schema: Dict[str, Any] = {
        "type": "object",
        "properties": {param.name: _parameter_schema(param) for param in tool.parameters},
    }
    required = [param.name for param in tool.parameters if param.required]
    if required:
        schema["required"] = required
    return schema


class ToolRegistry:
    """
    Read-only name -> ToolDescriptor map.

    Populated once at startup and shared by every request; there is no way
    to add or remove tools afterwards.
    """

    def __init__(self, tools: Iterable[ToolDescriptor]):
        by_name: Dict[str, ToolDescriptor] = {}
        for tool in tools:
            if tool.name in by_name:
                raise ValueError(f"duplicate tool name: {tool.name}")
            by_name[tool.name] = tool
        self._tools: Mapping[str, ToolDescriptor] = MappingProxyType(by_name)

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def tools(self) -> List[ToolDescriptor]:
        return list(self._tools.values())

    def list_tools(self) -> List[Dict[str, Any]]:
        """Tool listing in tools/list shape, in configuration order."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": build_input_schema(tool),
            }
            for tool in self._tools.values()
        ]
