#!/usr/bin/env python3
# src/openapi_mcp_proxy/proxy.py
"""
OpenAPIProxy - wires catalog, HTTP client, dispatcher and protocol handler.

The catalog is built in the constructor; a malformed document raises
``SpecError`` before any transport starts.
"""

import logging
from pathlib import Path
from typing import Any

import httpx

from .catalog import Catalog, build_catalog
from .client import HttpClient
from .constants import SERVER_NAME, SERVER_VERSION
from .dispatcher import ToolDispatcher
from .loader import load_document
from .protocol import MCPProtocolHandler
from .types import ServerInfo

logger = logging.getLogger(__name__)


class OpenAPIProxy:
    """An MCP server exposing every operation of one OpenAPI document."""

    def __init__(
        self,
        document: dict[str, Any],
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
        name: str | None = None,
        version: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.catalog: Catalog = build_catalog(document, base_url)
        self.client = HttpClient(self.catalog.base_url, headers=headers, transport=transport)
        self.dispatcher = ToolDispatcher(self.catalog, self.client)

        info = document.get("info") or {}
        self.server_info = ServerInfo(
            name=name or SERVER_NAME,
            version=version or str(info.get("version") or SERVER_VERSION),
            title=info.get("title"),
        )
        self.protocol = MCPProtocolHandler(self.server_info, self.dispatcher)
        logger.info(f"Loaded {len(self.catalog)} tools for {self.catalog.base_url}")

    def run_stdio(self) -> None:
        from .stdio_transport import run_stdio_server

        run_stdio_server(self.protocol)

    def run_http(self, host: str, port: int, log_level: str = "info") -> None:
        from .http_transport import run_http_server

        run_http_server(self.protocol, host, port, log_level=log_level)

    async def aclose(self) -> None:
        await self.client.aclose()


def init_proxy(
    spec_path: str | Path,
    base_url: str | None = None,
    headers: dict[str, str] | None = None,
    **kwargs: Any,
) -> OpenAPIProxy:
    """Load the document at ``spec_path`` and build a proxy for it."""
    document = load_document(spec_path)
    return OpenAPIProxy(document, base_url=base_url, headers=headers, **kwargs)
