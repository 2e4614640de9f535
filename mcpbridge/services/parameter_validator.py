"""Call-time argument validation against a tool's parameter descriptors."""

import re
from typing import Any, Callable, Dict, Optional

from mcpbridge.infra.error_handler import ParameterValidationError
from mcpbridge.models.tool import ParameterDescriptor, ParameterType, ToolDescriptor


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def _validate_string(param: ParameterDescriptor, value: Any) -> None:
    if not isinstance(value, str):
        raise ValueError(f"expected string, got {_type_name(value)}")

    rules = param.validation
    if rules is None:
        return
    if rules.min_length is not None and len(value) < rules.min_length:
        raise ValueError(f"string too short, minimum length is {rules.min_length}")
    if rules.max_length is not None and len(value) > rules.max_length:
        raise ValueError(f"string too long, maximum length is {rules.max_length}")
    if rules.pattern is not None:
        try:
            matched = re.search(rules.pattern, value)
        except re.error as e:
            raise ValueError(f"invalid pattern: {e}")
        if not matched:
            raise ValueError(f"string does not match pattern {rules.pattern}")
    if rules.enum and value not in rules.enum:
        raise ValueError(f"value must be one of: {', '.join(rules.enum)}")


def _as_number(value: Any) -> float:
    # bool is an int subclass but never a number here
    if isinstance(value, bool):
        raise ValueError("expected number, got boolean")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"cannot convert string {value!r} to number")
    raise ValueError(f"expected number, got {_type_name(value)}")


def _validate_number(param: ParameterDescriptor, value: Any) -> None:
    number = _as_number(value)

    rules = param.validation
    if rules is None:
        return
    if rules.min_value is not None and number < rules.min_value:
        raise ValueError(f"number too small, minimum value is {rules.min_value:g}")
    if rules.max_value is not None and number > rules.max_value:
        raise ValueError(f"number too large, maximum value is {rules.max_value:g}")


def _validate_boolean(param: ParameterDescriptor, value: Any) -> None:
    if not isinstance(value, bool):
        raise ValueError(f"expected boolean, got {_type_name(value)}")


def _validate_object(param: ParameterDescriptor, value: Any) -> None:
    if not isinstance(value, dict) or not all(isinstance(key, str) for key in value):
        raise ValueError(f"expected object, got {_type_name(value)}")


def _validate_array(param: ParameterDescriptor, value: Any) -> None:
    if not isinstance(value, list):
        raise ValueError(f"expected array, got {_type_name(value)}")


TYPE_VALIDATORS: Dict[ParameterType, Callable[[ParameterDescriptor, Any], None]] = {
    ParameterType.STRING: _validate_string,
    ParameterType.NUMBER: _validate_number,
    ParameterType.BOOLEAN: _validate_boolean,
    ParameterType.OBJECT: _validate_object,
    ParameterType.ARRAY: _validate_array,
}


def validate_parameter_value(param: ParameterDescriptor, value: Any) -> None:
    """
    Check one present argument against its descriptor.

    Raises:
        ParameterValidationError: If the type or a constraint does not match
    """
    try:
        TYPE_VALIDATORS[param.type](param, value)
    except ValueError as e:
        raise ParameterValidationError(
            f"parameter '{param.name}' validation failed: {e}",
            parameter=param.name,
        )


def validate_arguments(tool: ToolDescriptor, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate call-time arguments and fill in defaults.

    CONTRACT: the given argument map is mutated in place. Defaults of absent
    optional parameters are written into it so later template expansion sees
    them. The same map is returned for convenience.

    Args:
        tool: Tool whose parameters are enforced
        arguments: Argument map supplied by the client

    Returns:
        The (mutated) argument map

    Raises:
        ParameterValidationError: Naming the first parameter that fails
    """
    if arguments is None:
        arguments = {}

    for param in tool.parameters:
        if param.name in arguments:
            validate_parameter_value(param, arguments[param.name])
        elif param.required:
            raise ParameterValidationError(
                f"required parameter '{param.name}' is missing",
                parameter=param.name,
            )
        elif param.default is not None:
            arguments[param.name] = param.default

    return arguments
