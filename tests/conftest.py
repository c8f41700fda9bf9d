#!/usr/bin/env python3
"""Shared fixtures: a small OpenAPI document and a recording upstream API."""

import copy
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from openapi_mcp_proxy.catalog import build_catalog
from openapi_mcp_proxy.client import HttpClient
from openapi_mcp_proxy.dispatcher import ToolDispatcher
from openapi_mcp_proxy.protocol import MCPProtocolHandler
from openapi_mcp_proxy.types import ServerInfo

BASE_URL = "https://api.example.com/api/v3"

COINS_DOCUMENT: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Coins API", "version": "3.0.0"},
    "servers": [{"url": BASE_URL}],
    "paths": {
        "/coins/{id}": {
            "get": {
                "operationId": "coins_id",
                "summary": "Coin data by id",
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
                    {"name": "vs_currency", "in": "query", "description": "Target currency", "schema": {"type": "string"}},
                    {"name": "x-trace", "in": "header", "schema": {"type": "string"}},
                    {"name": "session", "in": "cookie", "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {"description": "Coin data"},
                    "404": {"description": "Coin not found"},
                },
            },
            "delete": {
                "operationId": "delete_coin",
                "parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}],
                "responses": {"204": {"description": "Deleted"}},
            },
        },
        "/coins": {
            "post": {
                "operationId": "create_coin",
                "summary": "Create a coin",
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Coin"}}},
                },
                "responses": {"201": {"description": "Created"}},
            }
        },
        "/coins/{id}/tags": {
            "put": {
                "operationId": "set_tags",
                "parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}],
                "requestBody": {
                    "content": {"application/json": {"schema": {"type": "array", "items": {"type": "string"}}}},
                },
                "responses": {"200": {"description": "Tags"}},
            }
        },
        "/uploads": {
            "post": {
                "operationId": "upload_file",
                "requestBody": {
                    "content": {
                        "multipart/form-data": {
                            "schema": {
                                "type": "object",
                                "properties": {
                                    "file": {"type": "string", "format": "binary"},
                                    "title": {"type": "string"},
                                },
                            }
                        }
                    }
                },
                "responses": {"200": {"description": "Uploaded"}},
            }
        },
        "/gallery": {
            "post": {
                "operationId": "upload_images",
                "requestBody": {
                    "content": {
                        "multipart/form-data": {
                            "schema": {
                                "type": "object",
                                "properties": {
                                    "images": {"type": "array", "items": {"type": "string", "format": "binary"}},
                                },
                            }
                        }
                    }
                },
                "responses": {"200": {"description": "Uploaded"}},
            }
        },
        "/ping": {"get": {"responses": {"200": {"description": "pong"}}}},
    },
    "components": {
        "schemas": {
            "Coin": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string"},
                    "symbol": {"type": "string"},
                },
            }
        }
    },
}


class UpstreamRecorder:
    """httpx.MockTransport handler that records every request it answers."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response] | None = None):
        self.requests: list[httpx.Request] = []
        self.responder = responder or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def coins_document() -> dict[str, Any]:
    return copy.deepcopy(COINS_DOCUMENT)


@pytest.fixture
def catalog(coins_document):
    return build_catalog(coins_document)


@pytest.fixture
def upstream() -> UpstreamRecorder:
    return UpstreamRecorder()


@pytest.fixture
def make_dispatcher(catalog):
    """Build a dispatcher whose HTTP client talks to a recorder."""

    def _make(recorder: UpstreamRecorder) -> ToolDispatcher:
        client = HttpClient(catalog.base_url, headers={"X-Api-Key": "secret"}, transport=httpx.MockTransport(recorder))
        return ToolDispatcher(catalog, client)

    return _make


@pytest.fixture
def dispatcher(make_dispatcher, upstream) -> ToolDispatcher:
    return make_dispatcher(upstream)


@pytest.fixture
def protocol(dispatcher) -> MCPProtocolHandler:
    return MCPProtocolHandler(ServerInfo(name="coins", version="3.0.0"), dispatcher)
