#!/usr/bin/env python3
"""Tests for tools/list and tools/call against a mocked upstream API."""

import httpx
import orjson
import pytest

from openapi_mcp_proxy.errors import MissingFileError, UnknownToolError

from conftest import UpstreamRecorder


def _payload(result: dict) -> object:
    assert len(result["content"]) == 1
    block = result["content"][0]
    assert block["type"] == "text"
    return orjson.loads(block["text"])


class TestListTools:
    def test_lists_every_tool_in_order(self, dispatcher, catalog):
        tools = dispatcher.list_tools()
        assert [tool["name"] for tool in tools] == catalog.tool_names()
        assert set(tools[0]) == {"name", "description", "inputSchema"}

    def test_listing_is_stable(self, dispatcher):
        first = orjson.dumps(dispatcher.list_tools())
        second = orjson.dumps(dispatcher.list_tools())
        assert first == second

    def test_listing_returns_copies(self, dispatcher):
        tools = dispatcher.list_tools()
        tools[0]["inputSchema"]["properties"].clear()
        assert dispatcher.list_tools()[0]["inputSchema"]["properties"]


class TestCallTool:
    @pytest.mark.asyncio
    async def test_get_end_to_end(self, dispatcher, upstream):
        upstream.responder = lambda request: httpx.Response(200, json={"id": "bitcoin", "usd": 67000})
        result = await dispatcher.call_tool("coins_id", {"id": "bitcoin", "vs_currency": "usd"})

        sent = upstream.last
        assert sent.method == "GET"
        assert str(sent.url) == "https://api.example.com/api/v3/coins/bitcoin?vs_currency=usd"
        assert sent.headers["x-api-key"] == "secret"
        assert sent.content == b""
        assert _payload(result) == {"id": "bitcoin", "usd": 67000}

    @pytest.mark.asyncio
    async def test_null_optional_argument_is_omitted(self, dispatcher, upstream):
        await dispatcher.call_tool("coins_id", {"id": "bitcoin", "vs_currency": None})
        assert str(upstream.last.url) == "https://api.example.com/api/v3/coins/bitcoin"

    @pytest.mark.asyncio
    async def test_post_body(self, dispatcher, upstream):
        upstream.responder = lambda request: httpx.Response(201, json={"created": True})
        result = await dispatcher.call_tool("create_coin", {"name": "Bitcoin", "symbol": "btc"})

        assert orjson.loads(upstream.last.content) == {"name": "Bitcoin", "symbol": "btc"}
        assert _payload(result) == {"created": True}

    @pytest.mark.asyncio
    async def test_text_response_is_json_string(self, dispatcher, upstream):
        upstream.responder = lambda request: httpx.Response(200, text="pong")
        result = await dispatcher.call_tool("get_ping")
        assert result["content"][0]["text"] == '"pong"'

    @pytest.mark.asyncio
    async def test_http_error_becomes_tool_output(self, dispatcher, upstream):
        upstream.responder = lambda request: httpx.Response(404, json={"error": "not found"})
        result = await dispatcher.call_tool("coins_id", {"id": "nope"})
        assert _payload(result) == {"status": "error", "error": "not found"}

    @pytest.mark.asyncio
    async def test_error_body_status_field_wins(self, dispatcher, upstream):
        upstream.responder = lambda request: httpx.Response(422, json={"status": 422, "detail": "bad"})
        result = await dispatcher.call_tool("create_coin", {"name": ""})
        assert _payload(result) == {"status": 422, "detail": "bad"}

    @pytest.mark.asyncio
    async def test_non_object_error_body(self, dispatcher, upstream):
        upstream.responder = lambda request: httpx.Response(500, text="boom")
        result = await dispatcher.call_tool("get_ping")
        assert _payload(result) == {"status": "error", "data": "boom"}

    @pytest.mark.asyncio
    async def test_wrapped_upstream_error_is_unwrapped(self, dispatcher, upstream):
        wrapped = {"message": "gateway failed", "response": {"data": {"error": "rate limited"}}}
        upstream.responder = lambda request: httpx.Response(502, json=wrapped)
        result = await dispatcher.call_tool("get_ping")
        assert _payload(result) == {"status": "error", "error": "rate limited"}

    @pytest.mark.asyncio
    async def test_empty_error_body(self, dispatcher, upstream):
        upstream.responder = lambda request: httpx.Response(503)
        result = await dispatcher.call_tool("get_ping")
        assert _payload(result) == {"status": "error"}

    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher, upstream):
        with pytest.raises(UnknownToolError) as exc_info:
            await dispatcher.call_tool("coins_idd", {})
        assert "Did you mean 'coins_id'?" in str(exc_info.value)
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_upload_errors_propagate(self, dispatcher, upstream):
        with pytest.raises(MissingFileError):
            await dispatcher.call_tool("upload_file", {"title": "x"})
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, make_dispatcher):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        dispatcher = make_dispatcher(UpstreamRecorder(refuse))
        with pytest.raises(httpx.ConnectError):
            await dispatcher.call_tool("get_ping")
