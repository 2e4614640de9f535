#!/usr/bin/env python3
"""Validate a server configuration file and print a summary.

Usage:
    python scripts/validate_config.py [config.json]
"""

import os
import sys
from pathlib import Path

# Add parent directory to path to import mcpbridge
sys.path.insert(0, str(Path(__file__).parent.parent))

from mcpbridge.services.config_loader import ConfigError, load_config


def validate_config(config_path: str) -> int:
    """Load the configuration and report what it declares."""
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        print(f"❌ {config_path}: {e}")
        return 1

    print(f"✅ {config_path} is valid")
    print(f"   Server: {cfg.server.name} {cfg.server.version}")
    print(f"   Tools: {len(cfg.tools)}")
    for tool in cfg.tools:
        print(f"     - {tool.name}: {tool.method} {tool.endpoint}")
    print(f"   Prompts: {len(cfg.prompts)}")
    print(f"   Resources: {len(cfg.resources)}")
    return 0


if __name__ == "__main__":
    # Default config path
    config_path = os.getenv("MCP_CONFIG_PATH", "config.json")

    # Allow override via command line
    if len(sys.argv) > 1:
        config_path = sys.argv[1]

    sys.exit(validate_config(config_path))
