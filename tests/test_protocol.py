#!/usr/bin/env python3
"""Tests for the JSON-RPC protocol handler."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import orjson
import pytest

from openapi_mcp_proxy.constants import JsonRpcError
from openapi_mcp_proxy.types import ServerInfo, create_server_capabilities


def _request(method: str, params: dict | None = None, msg_id: int | None = 1) -> dict:
    message = {"jsonrpc": "2.0", "method": method}
    if msg_id is not None:
        message["id"] = msg_id
    if params is not None:
        message["params"] = params
    return message


class TestServerTypes:
    def test_capabilities_are_tools_only(self):
        capabilities = create_server_capabilities()
        assert capabilities.model_dump(exclude_none=True, by_alias=True) == {"tools": {"listChanged": False}}

    def test_server_info_defaults(self):
        info = ServerInfo()
        assert info.name == "openapi-mcp-proxy"
        assert info.title is None


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_initialize(self, protocol):
        response = await protocol.handle_request(
            _request("initialize", {"protocolVersion": "2025-06-18", "clientInfo": {"name": "test"}})
        )
        result = response["result"]
        assert response["id"] == 1
        assert result["protocolVersion"] == "2025-06-18"
        assert result["serverInfo"] == {"name": "coins", "version": "3.0.0"}
        assert result["capabilities"] == {"tools": {"listChanged": False}}

    @pytest.mark.asyncio
    async def test_notifications_have_no_response(self, protocol):
        assert await protocol.handle_request(_request("notifications/initialized", msg_id=None)) is None
        assert await protocol.handle_request(_request("notifications/cancelled", {"requestId": 3}, None)) is None

    @pytest.mark.asyncio
    async def test_ping(self, protocol):
        response = await protocol.handle_request(_request("ping", msg_id=7))
        assert response == {"jsonrpc": "2.0", "id": 7, "result": {}}

    @pytest.mark.asyncio
    async def test_unknown_method(self, protocol):
        response = await protocol.handle_request(_request("resources/list"))
        assert response["error"]["code"] == JsonRpcError.METHOD_NOT_FOUND
        assert "resources/list" in response["error"]["message"]


class TestTools:
    @pytest.mark.asyncio
    async def test_tools_list(self, protocol, catalog):
        response = await protocol.handle_request(_request("tools/list"))
        assert [tool["name"] for tool in response["result"]["tools"]] == catalog.tool_names()

    @pytest.mark.asyncio
    async def test_tools_call(self, protocol, upstream):
        upstream.responder = lambda request: httpx.Response(200, json=[1, 2])
        response = await protocol.handle_request(
            _request("tools/call", {"name": "coins_id", "arguments": {"id": "btc"}})
        )
        assert orjson.loads(response["result"]["content"][0]["text"]) == [1, 2]

    @pytest.mark.asyncio
    async def test_http_error_is_a_result(self, protocol, upstream):
        upstream.responder = lambda request: httpx.Response(404, json={"error": "not found"})
        response = await protocol.handle_request(
            _request("tools/call", {"name": "coins_id", "arguments": {"id": "nope"}})
        )
        assert "error" not in response
        assert orjson.loads(response["result"]["content"][0]["text"]) == {"status": "error", "error": "not found"}

    @pytest.mark.asyncio
    async def test_unknown_tool_is_protocol_error(self, protocol):
        response = await protocol.handle_request(_request("tools/call", {"name": "missing_tool"}))
        assert response["error"]["code"] == JsonRpcError.METHOD_NOT_FOUND
        assert response["error"]["message"].startswith("Method missing_tool not found.")

    @pytest.mark.asyncio
    async def test_missing_tool_name(self, protocol):
        response = await protocol.handle_request(_request("tools/call", {"arguments": {}}))
        assert response["error"]["code"] == JsonRpcError.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_arguments_must_be_object(self, protocol):
        response = await protocol.handle_request(_request("tools/call", {"name": "get_ping", "arguments": [1]}))
        assert response["error"]["code"] == JsonRpcError.INVALID_PARAMS
        assert "list" in response["error"]["message"]

    @pytest.mark.asyncio
    async def test_missing_file_is_invalid_params(self, protocol):
        response = await protocol.handle_request(
            _request("tools/call", {"name": "upload_file", "arguments": {"title": "x"}})
        )
        assert response["error"]["code"] == JsonRpcError.INVALID_PARAMS
        assert "File path must be provided for parameter: file" in response["error"]["message"]

    @pytest.mark.asyncio
    async def test_transport_failure_is_internal_error(self, protocol, upstream):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        upstream.responder = refuse
        response = await protocol.handle_request(_request("tools/call", {"name": "get_ping"}))
        assert response["error"]["code"] == JsonRpcError.INTERNAL_ERROR
        assert "connection refused" in response["error"]["message"]

    @pytest.mark.asyncio
    async def test_cancellation_is_not_swallowed(self, protocol):
        protocol.dispatcher.call_tool = AsyncMock(side_effect=asyncio.CancelledError())
        with pytest.raises(asyncio.CancelledError):
            await protocol.handle_request(_request("tools/call", {"name": "get_ping"}))
