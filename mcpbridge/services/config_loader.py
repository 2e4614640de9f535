"""Server configuration file loading and validation."""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Set, Union

from pydantic import ValidationError

from mcpbridge.models.server_config import ServerConfig
from mcpbridge.models.tool import AuthDescriptor, AuthType

logger = logging.getLogger(__name__)

_ENV_VAR = re.compile(r"\$\{([^}]+)\}")


class ConfigError(Exception):
    """The configuration file cannot be read, parsed or validated."""


def substitute_env_vars(content: str) -> str:
    """
    Replace ${VAR} with the value of the environment variable VAR.

    Unset or empty variables leave the placeholder in place.
    """
    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        value = os.environ.get(name, "")
        if not value:
            logger.warning("Environment variable not found, keeping placeholder", extra={"var_name": name})
            return match.group(0)
        logger.debug("Substituted environment variable", extra={"var_name": name})
        return value

    return _ENV_VAR.sub(_replace, content)


def _check_auth(auth: AuthDescriptor) -> None:
    if auth.type == AuthType.BEARER and not auth.token and not auth.env_var:
        raise ValueError("bearer auth requires either token or env_var")
    if auth.type == AuthType.BASIC and (not auth.username or (not auth.password and not auth.env_var)):
        raise ValueError("basic auth requires username and either password or env_var")
    if auth.type == AuthType.API_KEY and not auth.headers and not auth.env_var:
        raise ValueError("api_key auth requires headers or env_var")
    if auth.type == AuthType.CUSTOM and not auth.headers:
        raise ValueError("custom auth requires headers")


def validate_business_rules(cfg: ServerConfig) -> None:
    """
    Cross-entry checks the models cannot express on their own.

    Raises:
        ConfigError: On the first violated rule
    """
    tool_names: Set[str] = set()
    for tool in cfg.tools:
        if tool.name in tool_names:
            raise ConfigError(f"duplicate tool name: {tool.name}")
        tool_names.add(tool.name)
        if not tool.endpoint.startswith(("http://", "https://")):
            raise ConfigError(f"tool {tool.name}: endpoint must start with http:// or https://")
        if tool.auth is not None:
            try:
                _check_auth(tool.auth)
            except ValueError as e:
                raise ConfigError(f"invalid auth config for tool {tool.name}: {e}")

    prompt_names: Set[str] = set()
    for prompt in cfg.prompts:
        if prompt.name in prompt_names:
            raise ConfigError(f"duplicate prompt name: {prompt.name}")
        prompt_names.add(prompt.name)

    resource_uris: Set[str] = set()
    for resource in cfg.resources:
        if resource.uri in resource_uris:
            raise ConfigError(f"duplicate resource URI: {resource.uri}")
        resource_uris.add(resource.uri)

        sources = sum(1 for source in (resource.content, resource.file_path, resource.url) if source)
        if sources == 0:
            raise ConfigError(
                f"resource {resource.uri} must have at least one content source (content, file_path, or url)"
            )
        if sources > 1:
            raise ConfigError(f"resource {resource.uri} can only have one content source")


def parse_config(data: Dict[str, Any]) -> ServerConfig:
    """
    Validate a decoded configuration document.

    Raises:
        ConfigError: If structural or business-rule validation fails
    """
    try:
        cfg = ServerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"configuration validation failed: {e}")
    validate_business_rules(cfg)
    return cfg


def load_config(config_path: Union[str, Path]) -> ServerConfig:
    """
    Read, substitute, parse and validate a configuration file.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        Validated ServerConfig

    Raises:
        ConfigError: If the file is unreadable, not JSON or invalid
    """
    logger.debug("Loading configuration", extra={"config_path": str(config_path)})
    try:
        content = Path(config_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file: {e}")

    try:
        data = json.loads(substitute_env_vars(content))
    except ValueError as e:
        raise ConfigError(f"failed to parse config JSON: {e}")
    if not isinstance(data, dict):
        raise ConfigError("failed to parse config JSON: top level must be an object")

    cfg = parse_config(data)
    logger.info(
        "Configuration loaded successfully",
        extra={
            "server_name": cfg.server.name,
            "tools_count": len(cfg.tools),
            "prompts_count": len(cfg.prompts),
            "resources_count": len(cfg.resources),
        },
    )
    return cfg
