"""Unit tests for JSON-RPC protocol handling.

This module tests JSON-RPC parsing, validation, and response generation
according to JSON-RPC 2.0 and MCP's null-id rule.
"""

import json

import pytest

from gitlab_mcp.protocol import (
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcResponse,
    create_error_response,
    create_success_response,
    parse_jsonrpc_request,
)


class TestJsonRpcRequestParsing:
    """Test JSON-RPC request parsing and validation."""

    def test_parse_valid_request_without_params(self):
        """Test parsing a valid JSON-RPC request without params."""
        request = parse_jsonrpc_request('{"jsonrpc": "2.0", "method": "tools/list", "id": 1}')

        assert request.method == "tools/list"
        assert request.id == 1
        assert request.params is None
        assert not request.is_notification

    def test_parse_valid_request_with_params(self):
        """Test parsing a tools/call request."""
        line = '{"jsonrpc": "2.0", "method": "tools/call", "params": {"name": "get_project", "arguments": {"projectId": "42"}}, "id": "a"}'
        request = parse_jsonrpc_request(line)

        assert request.id == "a"
        assert request.params == {
            "name": "get_project",
            "arguments": {"projectId": "42"},
        }

    def test_parse_notification(self):
        """Test that a request without id is a notification."""
        request = parse_jsonrpc_request(
            '{"jsonrpc": "2.0", "method": "notifications/initialized"}'
        )

        assert request.is_notification

    def test_parse_malformed_json_raises_error(self):
        """Test that malformed JSON raises appropriate error."""
        with pytest.raises(json.JSONDecodeError):
            parse_jsonrpc_request('{"jsonrpc": "2.0", "method": "tools/list", "id": 1')

    def test_parse_missing_method_field_raises_error(self):
        """Test that missing method field raises validation error."""
        with pytest.raises(ValueError, match="Missing required field: method"):
            parse_jsonrpc_request('{"jsonrpc": "2.0", "id": 1}')

    def test_parse_invalid_jsonrpc_version(self):
        """Test that invalid JSON-RPC version raises validation error."""
        with pytest.raises(ValueError, match="Invalid jsonrpc version"):
            parse_jsonrpc_request('{"jsonrpc": "1.0", "method": "tools/list", "id": 1}')

    def test_parse_non_object_params_rejected(self):
        """Test that positional params are rejected."""
        with pytest.raises(ValueError, match="params"):
            parse_jsonrpc_request(
                '{"jsonrpc": "2.0", "method": "tools/call", "params": [1], "id": 1}'
            )

    def test_parse_array_payload_rejected(self):
        """Test that batch arrays are rejected."""
        with pytest.raises(ValueError, match="JSON object"):
            parse_jsonrpc_request("[]")


class TestJsonRpcResponses:
    """Test JSON-RPC response creation."""

    def test_success_response(self):
        """Test success response serialization."""
        response = create_success_response(3, {"tools": []})

        assert response.to_dict() == {"jsonrpc": "2.0", "id": 3, "result": {"tools": []}}

    def test_error_response_with_data(self):
        """Test error response serialization."""
        response = create_error_response(5, PARSE_ERROR, "Parse error", {"detail": "x"})

        assert response.to_dict()["error"] == {
            "code": PARSE_ERROR,
            "message": "Parse error",
            "data": {"detail": "x"},
        }

    def test_error_response_never_has_null_id(self):
        """Test that an unknown request id becomes 0."""
        response = create_error_response(None, PARSE_ERROR, "Parse error")

        assert response.id == 0

    def test_response_cannot_have_both_result_and_error(self):
        """Test response invariant."""
        with pytest.raises(ValueError, match="both result and error"):
            JsonRpcResponse(
                id=1, result={}, error=JsonRpcError(code=1, message="x")
            )

    def test_response_requires_result_or_error(self):
        """Test response invariant."""
        with pytest.raises(ValueError, match="either result or error"):
            JsonRpcResponse(id=1)
