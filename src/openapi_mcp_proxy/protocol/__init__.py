#!/usr/bin/env python3
# src/openapi_mcp_proxy/protocol/__init__.py
"""
MCP protocol package.
"""

from .handler import MCPProtocolHandler

__all__ = [
    "MCPProtocolHandler",
]
