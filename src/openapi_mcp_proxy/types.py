#!/usr/bin/env python3
# src/openapi_mcp_proxy/types.py
"""
Types - MCP handshake models advertised by the proxy.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .constants import SERVER_NAME, SERVER_VERSION


class ServerInfo(BaseModel):
    """Server identity returned from ``initialize``."""

    model_config = ConfigDict(frozen=True)

    name: str = SERVER_NAME
    version: str = SERVER_VERSION
    title: str | None = None


class ToolsCapability(BaseModel):
    list_changed: bool = Field(default=False, alias="listChanged")

    model_config = ConfigDict(populate_by_name=True)


class ServerCapabilities(BaseModel):
    tools: ToolsCapability | None = None
    experimental: dict[str, Any] | None = None


def create_server_capabilities(tools: bool = True) -> ServerCapabilities:
    """Capabilities for a tools-only server; the tool list never changes."""
    return ServerCapabilities(tools=ToolsCapability(list_changed=False) if tools else None)


__all__ = ["ServerInfo", "ToolsCapability", "ServerCapabilities", "create_server_capabilities"]
