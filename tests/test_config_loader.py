"""Tests for configuration loading and validation."""

import json

import pytest

from mcpbridge.models.tool import AuthType, ParameterType
from mcpbridge.services.config_loader import ConfigError, load_config, parse_config, substitute_env_vars


def _write(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return path


class TestLoadConfig:
    """File loading, substitution and defaults."""

    def test_load_valid_file(self, tmp_path, server_config_data):
        cfg = load_config(_write(tmp_path, server_config_data))
        assert cfg.server.name == "test-server"
        assert [tool.name for tool in cfg.tools] == ["get_item", "create_item"]

    def test_defaults_applied(self, tmp_path):
        cfg = load_config(
            _write(
                tmp_path,
                {
                    "server": {"name": "defaults"},
                    "tools": [
                        {
                            "name": "create",
                            "description": "Create",
                            "endpoint": "https://api.example.com/things",
                            "method": "post",
                            "parameters": [{"name": "title"}],
                        }
                    ],
                },
            )
        )
        tool = cfg.tools[0]
        assert cfg.server.version == "1.0.0"
        assert tool.method == "POST"
        assert tool.content_type == "application/json"
        assert tool.timeout == 30.0
        assert tool.retries == 3
        assert tool.parameters[0].type == ParameterType.STRING
        assert cfg.runtime.default_timeout == 30.0
        assert cfg.runtime.log_level == "info"

    def test_duration_strings(self, tmp_path, server_config_data):
        server_config_data["tools"][0]["timeout"] = "1m30s"
        server_config_data["runtime"] = {"default_timeout": "500ms"}
        cfg = load_config(_write(tmp_path, server_config_data))
        assert cfg.tools[0].timeout == 90.0
        assert cfg.runtime.default_timeout == 0.5

    def test_env_substitution(self, tmp_path, monkeypatch, server_config_data):
        monkeypatch.setenv("ITEMS_HOST", "items.internal")
        server_config_data["tools"][0]["endpoint"] = "https://${ITEMS_HOST}/items/{{.id}}"
        cfg = load_config(_write(tmp_path, server_config_data))
        assert cfg.tools[0].endpoint == "https://items.internal/items/{{.id}}"

    def test_missing_env_keeps_placeholder(self, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        assert substitute_env_vars("token=${NOT_SET_ANYWHERE}") == "token=${NOT_SET_ANYWHERE}"

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigError, match="failed to read config file"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        with pytest.raises(ConfigError, match="failed to parse config JSON"):
            load_config(_write(tmp_path, "{not json"))

    def test_structural_error(self, tmp_path):
        with pytest.raises(ConfigError, match="configuration validation failed"):
            load_config(_write(tmp_path, {"tools": []}))

    def test_example_config_is_valid(self):
        from pathlib import Path

        example = Path(__file__).parent.parent / "examples" / "config.example.json"
        cfg = load_config(example)
        assert cfg.tools[1].auth.type == AuthType.BEARER


class TestModelValidation:
    """Field-level rules."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"method": "TRACE"},
            {"content_type": "application/yaml"},
            {"retries": 6},
            {"retries": -1},
            {"timeout": "soon"},
            {"timeout": "-5s"},
            {"parameters": [{"name": "p", "type": "integer"}]},
        ],
    )
    def test_invalid_tool_fields(self, server_config_data, overrides):
        server_config_data["tools"][0].update(overrides)
        with pytest.raises(ConfigError):
            parse_config(server_config_data)

    @pytest.mark.parametrize("version", ["1.0", "one", "1.0.0.0"])
    def test_invalid_semver(self, server_config_data, version):
        server_config_data["server"]["version"] = version
        with pytest.raises(ConfigError):
            parse_config(server_config_data)

    @pytest.mark.parametrize("version", ["2.0.0", "v1.2.3", "1.0.0-beta.1+build.5"])
    def test_valid_semver(self, server_config_data, version):
        server_config_data["server"]["version"] = version
        assert parse_config(server_config_data).server.version == version

    def test_invalid_runtime_values(self, server_config_data):
        server_config_data["runtime"] = {"log_level": "verbose"}
        with pytest.raises(ConfigError):
            parse_config(server_config_data)


class TestBusinessRules:
    """Cross-entry rules."""

    def test_duplicate_tool_names(self, server_config_data):
        server_config_data["tools"][1]["name"] = "get_item"
        with pytest.raises(ConfigError, match="duplicate tool name: get_item"):
            parse_config(server_config_data)

    def test_duplicate_prompt_names(self, server_config_data):
        server_config_data["prompts"].append(dict(server_config_data["prompts"][0]))
        with pytest.raises(ConfigError, match="duplicate prompt name"):
            parse_config(server_config_data)

    def test_duplicate_resource_uris(self, server_config_data):
        server_config_data["resources"].append(dict(server_config_data["resources"][0]))
        with pytest.raises(ConfigError, match="duplicate resource URI"):
            parse_config(server_config_data)

    def test_resource_needs_one_source(self, server_config_data):
        server_config_data["resources"][0]["content"] = ""
        with pytest.raises(ConfigError, match="at least one content source"):
            parse_config(server_config_data)

    def test_resource_with_two_sources(self, server_config_data):
        server_config_data["resources"][0]["url"] = "https://example.com/readme"
        with pytest.raises(ConfigError, match="only have one content source"):
            parse_config(server_config_data)

    def test_endpoint_scheme_required(self, server_config_data):
        server_config_data["tools"][0]["endpoint"] = "ftp://files.example.com/{{.id}}"
        with pytest.raises(ConfigError, match="endpoint must start with"):
            parse_config(server_config_data)

    @pytest.mark.parametrize(
        "auth,message",
        [
            ({"type": "bearer"}, "bearer auth requires"),
            ({"type": "basic", "password": "p"}, "basic auth requires"),
            ({"type": "basic", "username": "u"}, "basic auth requires"),
            ({"type": "api_key"}, "api_key auth requires"),
            ({"type": "custom"}, "custom auth requires"),
        ],
    )
    def test_incomplete_auth(self, server_config_data, auth, message):
        server_config_data["tools"][0]["auth"] = auth
        with pytest.raises(ConfigError, match=message):
            parse_config(server_config_data)

    @pytest.mark.parametrize(
        "auth",
        [
            {"type": "bearer", "env_var": "TOKEN"},
            {"type": "basic", "username": "u", "env_var": "PASS"},
            {"type": "api_key", "headers": {"X-Key": "k"}},
            {"type": "custom", "headers": {"X-Sig": "s"}},
        ],
    )
    def test_complete_auth(self, server_config_data, auth):
        server_config_data["tools"][0]["auth"] = auth
        assert parse_config(server_config_data).tools[0].auth is not None
