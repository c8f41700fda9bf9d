#!/usr/bin/env python3
# src/openapi_mcp_proxy/http_transport.py
"""
HTTP Transport - JSON-RPC over HTTP with Starlette.

Routes:
    POST /mcp     JSON-RPC request, JSON-RPC response (204 for notifications)
    GET  /health  liveness plus the number of tools served
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import orjson
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from .constants import (
    CONTENT_TYPE_JSON,
    JSONRPC_KEY,
    JSONRPC_VERSION,
    KEY_ERROR,
    KEY_ID,
    JsonRpcError,
)
from .protocol import MCPProtocolHandler

logger = logging.getLogger(__name__)


def _json_response(data: dict[str, Any], status_code: int = 200) -> Response:
    return Response(orjson.dumps(data), status_code=status_code, media_type=CONTENT_TYPE_JSON)


def _error_response(msg_id: Any, code: int, message: str) -> Response:
    return _json_response({JSONRPC_KEY: JSONRPC_VERSION, KEY_ID: msg_id, KEY_ERROR: {"code": int(code), "message": message}})


def create_app(protocol: MCPProtocolHandler, debug: bool = False) -> Starlette:
    """Create the Starlette application serving one protocol handler."""
    started_at = time.time()

    async def mcp_endpoint(request: Request) -> Response:
        body = await request.body()
        if not body:
            return _error_response(None, JsonRpcError.PARSE_ERROR, "Parse error: Empty body")
        try:
            message = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            return _error_response(None, JsonRpcError.PARSE_ERROR, f"Parse error: {str(e)}")
        if not isinstance(message, dict):
            return _error_response(None, JsonRpcError.INVALID_REQUEST, "Request must be a JSON object")

        response = await protocol.handle_request(message)
        if response is None:
            return Response(status_code=204)
        return _json_response(response)

    async def health_endpoint(request: Request) -> Response:
        return _json_response(
            {
                "status": "healthy",
                "server": protocol.server_info.name,
                "tools": len(protocol.dispatcher.catalog),
                "uptime": round(time.time() - started_at, 2),
            }
        )

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        yield
        await protocol.dispatcher.client.aclose()

    routes = [
        Route("/mcp", mcp_endpoint, methods=["POST"]),
        Route("/health", health_endpoint, methods=["GET"]),
    ]
    return Starlette(debug=debug, routes=routes, lifespan=lifespan)


def run_http_server(protocol: MCPProtocolHandler, host: str, port: int, log_level: str = "info") -> None:
    """Serve the protocol handler over HTTP with uvicorn."""
    import uvicorn

    logger.info(f"Serving {protocol.server_info.name} on http://{host}:{port}/mcp")
    uvicorn.run(create_app(protocol), host=host, port=port, log_level=log_level)
