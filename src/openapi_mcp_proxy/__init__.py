#!/usr/bin/env python3
"""
openapi_mcp_proxy - serve any REST API described by OpenAPI as MCP tools.

    from openapi_mcp_proxy import init_proxy

    proxy = init_proxy("specs/coingecko.json")
    proxy.run_stdio()

Every operation in the document becomes one tool; calling the tool issues
the matching HTTP request and returns the response body as JSON text.
"""

from .catalog import Catalog, ToolDescriptor, build_catalog
from .client import HttpClient
from .dispatcher import ToolDispatcher
from .errors import (
    FileAccessError,
    HttpError,
    MissingFileError,
    ProxyError,
    SpecError,
    UnknownToolError,
    UnsupportedValueError,
)
from .protocol import MCPProtocolHandler
from .proxy import OpenAPIProxy, init_proxy

__version__ = "0.1.0"
__all__ = [
    "Catalog",
    "ToolDescriptor",
    "build_catalog",
    "HttpClient",
    "ToolDispatcher",
    "MCPProtocolHandler",
    "OpenAPIProxy",
    "init_proxy",
    "ProxyError",
    "SpecError",
    "UnknownToolError",
    "MissingFileError",
    "UnsupportedValueError",
    "FileAccessError",
    "HttpError",
]
