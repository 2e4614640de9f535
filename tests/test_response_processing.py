"""Tests for response processing, validation and result mapping."""

import json

import httpx
import pytest

from mcpbridge.infra.error_handler import NetworkError, ResponseValidationError
from mcpbridge.models.outcome import APIOutcome
from mcpbridge.services.response_processor import is_success_status, process_response
from mcpbridge.services.result_mapper import map_failure, map_outcome, text_result


class TestProcessResponse:
    """Raw response to APIOutcome."""

    def test_json_body_parsed(self, make_tool):
        response = httpx.Response(200, json={"id": "42", "name": "widget"})
        outcome = process_response(response, make_tool())
        assert outcome.status_code == 200
        assert outcome.data == {"id": "42", "name": "widget"}
        assert json.loads(outcome.body) == outcome.data

    def test_non_json_body_kept_raw(self, make_tool):
        response = httpx.Response(200, text="plain text", headers={"Content-Type": "text/plain"})
        outcome = process_response(response, make_tool())
        assert outcome.body == "plain text"
        assert outcome.data is None

    def test_invalid_json_is_not_fatal(self, make_tool):
        response = httpx.Response(200, content=b"{not json", headers={"Content-Type": "application/json"})
        outcome = process_response(response, make_tool())
        assert outcome.body == "{not json"
        assert outcome.data is None

    def test_first_header_value_kept(self, make_tool):
        response = httpx.Response(
            200,
            text="ok",
            headers=[("X-Trace", "first"), ("X-Trace", "second")],
        )
        outcome = process_response(response, make_tool())
        assert outcome.headers["x-trace"] == "first"

    def test_disallowed_status_fails_validation(self, make_tool):
        tool = make_tool(validation={"status_codes": [200]})
        with pytest.raises(ResponseValidationError, match="unexpected status code 201"):
            process_response(httpx.Response(201, json={}), tool)

    def test_required_fields_present(self, make_tool):
        tool = make_tool(validation={"required_fields": ["id", "name"]})
        outcome = process_response(httpx.Response(200, json={"id": 1, "name": "x"}), tool)
        assert outcome.data["id"] == 1

    def test_required_field_missing(self, make_tool):
        tool = make_tool(validation={"required_fields": ["id", "name"]})
        with pytest.raises(ResponseValidationError, match="required field 'name' missing"):
            process_response(httpx.Response(200, json={"id": 1}), tool)

    def test_required_fields_need_json_object(self, make_tool):
        tool = make_tool(validation={"required_fields": ["id"]})
        with pytest.raises(ResponseValidationError, match="not a JSON object"):
            process_response(httpx.Response(200, json=[{"id": 1}]), tool)

    def test_is_success_status(self, make_tool):
        assert is_success_status(204, None)
        assert not is_success_status(302, None)
        rules = make_tool(validation={"status_codes": [404]}).validation
        assert is_success_status(404, rules)
        assert not is_success_status(200, rules)


class TestResultMapper:
    """APIOutcome and failures to tool results."""

    def test_object_result_round_trips(self, make_tool):
        payload = {"id": "42", "name": "widget", "tags": ["a", "b"], "nested": {"n": 1.5}}
        outcome = APIOutcome(status_code=200, body=json.dumps(payload), data=payload)
        result = map_outcome(make_tool(return_type="object"), outcome)
        assert result["isError"] is False
        assert json.loads(result["content"][0]["text"]) == payload

    def test_pretty_printed_with_two_spaces(self, make_tool):
        payload = {"id": "42", "name": "widget"}
        outcome = APIOutcome(status_code=200, body='{"id":"42","name":"widget"}', data=payload)
        result = map_outcome(make_tool(), outcome)
        assert result["content"][0]["text"] == json.dumps(payload, indent=2)

    def test_string_return_type_uses_raw_body(self, make_tool):
        outcome = APIOutcome(status_code=200, body='{"a":1}', data={"a": 1})
        result = map_outcome(make_tool(return_type="string"), outcome)
        assert result["content"][0]["text"] == '{"a":1}'

    def test_raw_body_when_not_json(self, make_tool):
        outcome = APIOutcome(status_code=200, body="hello")
        assert map_outcome(make_tool(), outcome)["content"][0]["text"] == "hello"

    def test_error_status_is_tool_error(self, make_tool):
        outcome = APIOutcome(status_code=500, body="boom")
        result = map_outcome(make_tool(), outcome)
        assert result["isError"] is True
        text = result["content"][0]["text"]
        assert text == "GET https://api.example.com/items/{{.id}} failed: HTTP Error 500: boom"

    def test_failure_names_method_and_endpoint(self, make_tool):
        result = map_failure(make_tool(method="POST"), NetworkError("request failed after 4 attempts: refused"))
        assert result == text_result(
            "POST https://api.example.com/items/{{.id}} failed: request failed after 4 attempts: refused",
            is_error=True,
        )
