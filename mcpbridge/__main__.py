"""Command line entry point.

Usage:
    python -m mcpbridge [--config config.json] [--host 0.0.0.0] [--port 8080]
                        [--log-level info] [--log-format json|text] [--env .env]
"""

import argparse
import sys

import uvicorn
from dotenv import load_dotenv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve HTTP APIs as MCP tools")
    parser.add_argument("--config", help="Path to the server configuration file (default: MCP_CONFIG_PATH)")
    parser.add_argument("--host", help="Host to bind (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: PORT or 8080)")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error"],
        help="Log level (default: LOG_LEVEL, then runtime.log_level from the configuration)",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Log format (default: json in production, text otherwise)",
    )
    parser.add_argument("--env", help="Additional .env file to load before reading settings")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.env:
        load_dotenv(dotenv_path=args.env, override=False)

    # Settings are read at import time, after any extra .env is loaded
    from mcpbridge.infra.config import config
    from mcpbridge.infra.logging import setup_logging
    from mcpbridge.main import create_app
    from mcpbridge.services.config_loader import ConfigError, load_config

    config_path = args.config or config.CONFIG_PATH
    setup_logging(args.log_level or config.LOG_LEVEL, json_format=args.log_format != "text")

    try:
        server_config = load_config(config_path)
    except ConfigError as e:
        print(f"Failed to load configuration from {config_path}: {e}", file=sys.stderr)
        return 1

    level = args.log_level or config.LOG_LEVEL or server_config.runtime.log_level
    if args.log_format:
        json_format = args.log_format == "json"
    else:
        json_format = server_config.runtime.environment == "production" or config.APP_ENV == "production"
    logger = setup_logging(level, json_format=json_format)

    host = args.host or config.HOST
    port = args.port or config.PORT
    logger.info(
        "Starting MCP server",
        extra={"server_name": server_config.server.name, "host": host, "port": port},
    )

    uvicorn.run(
        create_app(server_config),
        host=host,
        port=port,
        log_level=level if level != "warn" else "warning",
        timeout_keep_alive=30,
        timeout_graceful_shutdown=30,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
