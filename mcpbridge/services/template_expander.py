"""Placeholder expansion for endpoint, query, header and body templates.

Templates reference call-time arguments with ``{{.name}}`` (whitespace inside
the braces is allowed, dotted paths such as ``{{.filter.status}}`` walk nested
objects). Any placeholder that cannot be resolved is an error.
"""

import json
import re
from typing import Any, Dict, Set

from mcpbridge.infra.error_handler import TemplateError

_ACTION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_REFERENCE = re.compile(r"^\.([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)$")


def format_value(value: Any) -> str:
    """Render an argument value the way it should appear inside a URL, header or body."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _lookup(path: str, args: Dict[str, Any]) -> Any:
    current: Any = args
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            raise TemplateError(f"template execution failed: no value for {{{{.{path}}}}}")
        current = current[part]
    return current


def has_placeholders(template: str) -> bool:
    return "{{" in template


def referenced_names(template: str) -> Set[str]:
    """Top-level argument names a template refers to."""
    names = set()
    for match in _ACTION.finditer(template):
        reference = _REFERENCE.match(match.group(1).strip())
        if reference:
            names.add(reference.group(1).split(".")[0])
    return names


def expand(template: str, args: Dict[str, Any]) -> str:
    """
    Substitute every placeholder in template with the matching argument.

    Args:
        template: Template text; strings without placeholders are returned unchanged
        args: Call-time argument map

    Returns:
        The expanded string

    Raises:
        TemplateError: If a placeholder is malformed or references a missing argument
    """
    if not has_placeholders(template):
        return template

    parts = []
    pos = 0
    for match in _ACTION.finditer(template):
        literal = template[pos:match.start()]
        if "{{" in literal:
            raise TemplateError("invalid template: unclosed action")
        parts.append(literal)

        action = match.group(1).strip()
        reference = _REFERENCE.match(action)
        if not reference:
            raise TemplateError(f"invalid template: unsupported action {{{{{match.group(1)}}}}}")
        parts.append(format_value(_lookup(reference.group(1), args)))
        pos = match.end()

    tail = template[pos:]
    if "{{" in tail:
        raise TemplateError("invalid template: unclosed action")
    parts.append(tail)
    return "".join(parts)
