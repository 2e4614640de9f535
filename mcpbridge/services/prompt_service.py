"""Static prompt catalog."""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional

from mcpbridge.models.jsonrpc import invalid_params
from mcpbridge.models.server_config import PromptConfig
from mcpbridge.services.template_expander import format_value

logger = logging.getLogger(__name__)


def render_prompt(content: str, arguments: Dict[str, Any]) -> str:
    """Replace each {name} in content with the matching argument value."""
    for key, value in arguments.items():
        content = content.replace("{" + key + "}", format_value(value))
    return content


class PromptCatalog:
    """Read-only prompt lookup for prompts/list and prompts/get."""

    def __init__(self, prompts: Iterable[PromptConfig]):
        self._prompts = MappingProxyType({prompt.name: prompt for prompt in prompts})

    def list_prompts(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": prompt.name,
                "description": prompt.description,
                "arguments": [
                    {"name": arg.name, "description": arg.description, "required": arg.required}
                    for arg in prompt.arguments
                ],
            }
            for prompt in self._prompts.values()
        ]

    def get_prompt(self, name: Optional[str], arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Render a prompt.

        Raises:
            ProtocolError: INVALID_PARAMS for an unknown prompt or a missing required argument
        """
        prompt = self._prompts.get(name) if isinstance(name, str) else None
        if prompt is None:
            raise invalid_params(f"prompt '{name}' not found")

        arguments = arguments or {}
        for arg in prompt.arguments:
            if arg.required and arg.name not in arguments:
                raise invalid_params(f"prompt '{name}' requires argument '{arg.name}'")

        logger.info("Getting prompt", extra={"prompt_name": name, "argument_names": sorted(arguments)})

        return {
            "description": prompt.description,
            "messages": [
                {
                    "role": "user",
                    "content": {"type": "text", "text": render_prompt(prompt.content, arguments)},
                }
            ],
        }
