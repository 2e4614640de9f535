"""Process configuration loaded from the environment."""

import os
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

__version__ = "1.0.0"

# Load .env file from project root
# This ensures dotenv works regardless of where the server is started from
project_root = Path(__file__).parent.parent.parent
env_file = project_root / ".env"

# override=False means existing environment variables take precedence
load_dotenv(dotenv_path=env_file, override=False)


def _get_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "y"}


class Config:
    """Process-level settings. Tool, prompt and resource definitions live in the
    server configuration file (see services/config_loader.py)."""

    # Server configuration file
    CONFIG_PATH: str = os.getenv("MCP_CONFIG_PATH", "config.json")

    # HTTP listener
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))
    MAX_REQUEST_SIZE: int = int(os.getenv("MAX_REQUEST_SIZE", str(1024 * 1024)))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = _get_bool("DEBUG")
    LOG_LEVEL: Optional[str] = os.getenv("LOG_LEVEL")

    # Outbound HTTP transport shared by all tools
    UPSTREAM_TIMEOUT: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))
    UPSTREAM_MAX_CONNECTIONS: int = int(os.getenv("UPSTREAM_MAX_CONNECTIONS", "100"))
    UPSTREAM_MAX_KEEPALIVE: int = int(os.getenv("UPSTREAM_MAX_KEEPALIVE", "20"))

    # Delay unit between retry attempts (attempt N waits N units)
    RETRY_BACKOFF_SECONDS: float = float(os.getenv("RETRY_BACKOFF_SECONDS", "1.0"))

    USER_AGENT: str = f"MCP-Server/{__version__}"


config = Config()
