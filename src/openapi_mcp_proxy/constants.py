#!/usr/bin/env python3
"""
Top-level constants shared across the openapi_mcp_proxy package.
"""

import re
from enum import IntEnum

# ---------------------------------------------------------------------------
# JSON-RPC
# ---------------------------------------------------------------------------
JSONRPC_VERSION = "2.0"
JSONRPC_KEY = "jsonrpc"

# JSON-RPC message keys
KEY_METHOD = "method"
KEY_PARAMS = "params"
KEY_ID = "id"
KEY_RESULT = "result"
KEY_ERROR = "error"


class JsonRpcError(IntEnum):
    """Standard JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


# ---------------------------------------------------------------------------
# MCP protocol
# ---------------------------------------------------------------------------
MCP_PROTOCOL_VERSION_2025_06 = "2025-06-18"
MCP_DEFAULT_PROTOCOL_VERSION = MCP_PROTOCOL_VERSION_2025_06


# MCP method names
class McpMethod:
    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    PING = "ping"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    NOTIFICATIONS_CANCELLED = "notifications/cancelled"


# MCP initialize parameter keys
KEY_CLIENT_INFO = "clientInfo"
KEY_PROTOCOL_VERSION = "protocolVersion"
KEY_SERVER_INFO = "serverInfo"
KEY_CAPABILITIES = "capabilities"

# tools/call keys
KEY_NAME = "name"
KEY_ARGUMENTS = "arguments"
KEY_CONTENT = "content"


# ---------------------------------------------------------------------------
# Tool naming
# ---------------------------------------------------------------------------
MAX_TOOL_NAME_LENGTH = 64
TOOL_NAME_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_\-]+")
BODY_ARGUMENT = "body"


# ---------------------------------------------------------------------------
# OpenAPI
# ---------------------------------------------------------------------------
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
OPENAPI_REF_KEY = "$ref"


# ---------------------------------------------------------------------------
# Content types
# ---------------------------------------------------------------------------
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_MULTIPART = "multipart/form-data"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"


# ---------------------------------------------------------------------------
# Common HTTP headers
# ---------------------------------------------------------------------------
HEADER_ACCEPT = "Accept"
HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"
DEFAULT_USER_AGENT = "openapi-mcp-proxy"


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------
ENV_OPENAPI_MCP_HEADERS = "OPENAPI_MCP_HEADERS"
ENV_BASE_URL = "BASE_URL"
ENV_OPENAPI_SPEC_PATH = "OPENAPI_SPEC_PATH"
ENV_MCP_LOG_LEVEL = "MCP_LOG_LEVEL"
ENV_MCP_SERVER_NAME = "MCP_SERVER_NAME"
ENV_MCP_SERVER_VERSION = "MCP_SERVER_VERSION"
ENV_PORT = "PORT"


# ---------------------------------------------------------------------------
# Logging level strings
# ---------------------------------------------------------------------------
LOG_DEBUG = "debug"
LOG_INFO = "info"
LOG_WARNING = "warning"
LOG_ERROR = "error"
LOG_CRITICAL = "critical"


# ---------------------------------------------------------------------------
# Network defaults
# ---------------------------------------------------------------------------
DEFAULT_HOST = "0.0.0.0"
DEFAULT_ENCODING = "utf-8"
DEFAULT_PORT = 8000


# ---------------------------------------------------------------------------
# Server identity
# ---------------------------------------------------------------------------
SERVER_NAME = "openapi-mcp-proxy"
SERVER_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Tool result envelope
# ---------------------------------------------------------------------------
CONTENT_TYPE_TEXT_BLOCK = "text"
ERROR_STATUS_VALUE = "error"
