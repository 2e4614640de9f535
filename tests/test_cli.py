"""Tests for the command line entry point and logging setup."""

import json
import logging

import pytest
from pythonjsonlogger import jsonlogger

from mcpbridge.__main__ import build_parser, main
from mcpbridge.infra.logging import resolve_level, setup_logging


class TestMain:
    """python -m mcpbridge."""

    def test_invalid_config_exits_with_error(self, tmp_path, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json")

        assert main(["--config", str(config_path)]) == 1
        assert "Failed to load configuration" in capsys.readouterr().err

    def test_missing_config_exits_with_error(self, tmp_path):
        assert main(["--config", str(tmp_path / "absent.json")]) == 1

    def test_serves_loaded_config(self, tmp_path, monkeypatch, server_config_data):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(server_config_data))
        calls = []
        monkeypatch.setattr("mcpbridge.__main__.uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))

        assert main(["--config", str(config_path), "--port", "9090", "--log-level", "warn"]) == 0

        app, kwargs = calls[0]
        assert app.state.server_config.server.name == "test-server"
        assert kwargs["port"] == 9090
        assert kwargs["log_level"] == "warning"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--log-level", "trace"])


class TestLogging:
    """Logger tree setup."""

    @pytest.mark.parametrize(
        "name,level",
        [("debug", logging.DEBUG), ("warn", logging.WARNING), ("ERROR", logging.ERROR), ("bogus", logging.INFO)],
    )
    def test_resolve_level(self, name, level):
        assert resolve_level(name) == level

    def test_json_format(self):
        logger = setup_logging("info", json_format=True)
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, jsonlogger.JsonFormatter)

    def test_text_format_replaces_handlers(self):
        setup_logging("info", json_format=True)
        logger = setup_logging("debug", json_format=False)
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, jsonlogger.JsonFormatter)
        assert logger.level == logging.DEBUG
