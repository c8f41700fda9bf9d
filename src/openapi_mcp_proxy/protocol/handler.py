#!/usr/bin/env python3
# src/openapi_mcp_proxy/protocol/handler.py
"""
Protocol Handler - JSON-RPC 2.0 front of the tool dispatcher.
"""

import asyncio
import logging
from typing import Any

from ..constants import (
    JSONRPC_KEY,
    JSONRPC_VERSION,
    KEY_ARGUMENTS,
    KEY_CAPABILITIES,
    KEY_CLIENT_INFO,
    KEY_ERROR,
    KEY_ID,
    KEY_METHOD,
    KEY_NAME,
    KEY_PARAMS,
    KEY_PROTOCOL_VERSION,
    KEY_RESULT,
    KEY_SERVER_INFO,
    MCP_DEFAULT_PROTOCOL_VERSION,
    JsonRpcError,
    McpMethod,
)
from ..dispatcher import ToolDispatcher
from ..errors import ProxyError
from ..types import ServerCapabilities, ServerInfo, create_server_capabilities

logger = logging.getLogger(__name__)


class MCPProtocolHandler:
    """Routes MCP requests to the dispatcher and shapes JSON-RPC responses."""

    def __init__(
        self,
        server_info: ServerInfo,
        dispatcher: ToolDispatcher,
        capabilities: ServerCapabilities | None = None,
    ):
        self.server_info = server_info
        self.dispatcher = dispatcher
        self.capabilities = capabilities or create_server_capabilities(tools=True)

        # Don't log during init to keep stdio mode clean
        logger.debug("MCP protocol handler initialized")

    async def handle_request(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Handle one JSON-RPC message; notifications return None."""
        msg_id = message.get(KEY_ID)
        try:
            method = message.get(KEY_METHOD)
            params = message.get(KEY_PARAMS) or {}

            logger.debug(f"Handling {method} (ID: {msg_id})")

            if method == McpMethod.INITIALIZE:
                return self._handle_initialize(params, msg_id)
            elif method in (McpMethod.INITIALIZED, McpMethod.NOTIFICATIONS_CANCELLED):
                return None
            elif method == McpMethod.PING:
                return self._create_response(msg_id, {})
            elif method == McpMethod.TOOLS_LIST:
                return self._create_response(msg_id, {"tools": self.dispatcher.list_tools()})
            elif method == McpMethod.TOOLS_CALL:
                return await self._handle_tools_call(params, msg_id)
            else:
                return self._create_error_response(msg_id, JsonRpcError.METHOD_NOT_FOUND, f"Method not found: {method}")

        except asyncio.CancelledError:
            raise  # Never swallow cancellation
        except ProxyError as e:
            logger.warning(f"Request {msg_id} failed: {e}")
            return self._create_error_response(msg_id, e.code, e.to_message())
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Invalid params in request: {e}")
            return self._create_error_response(msg_id, JsonRpcError.INVALID_PARAMS, f"Invalid parameters: {str(e)}")
        except Exception as e:
            logger.error(f"Error handling request: {e}", exc_info=True)
            return self._create_error_response(msg_id, JsonRpcError.INTERNAL_ERROR, f"Internal error: {str(e)}")

    def _handle_initialize(self, params: dict[str, Any], msg_id: Any) -> dict[str, Any]:
        client_info = params.get(KEY_CLIENT_INFO, {})
        protocol_version = params.get(KEY_PROTOCOL_VERSION, MCP_DEFAULT_PROTOCOL_VERSION)

        result = {
            KEY_PROTOCOL_VERSION: protocol_version,
            KEY_SERVER_INFO: self.server_info.model_dump(exclude_none=True),
            KEY_CAPABILITIES: self.capabilities.model_dump(exclude_none=True, by_alias=True),
        }
        logger.debug(f"Initialized for {client_info.get('name', 'unknown')} (v{protocol_version})")
        return self._create_response(msg_id, result)

    async def _handle_tools_call(self, params: dict[str, Any], msg_id: Any) -> dict[str, Any]:
        tool_name = params.get(KEY_NAME)
        arguments = params.get(KEY_ARGUMENTS) or {}

        if not isinstance(tool_name, str) or not tool_name:
            return self._create_error_response(msg_id, JsonRpcError.INVALID_PARAMS, "Tool name is required")
        if not isinstance(arguments, dict):
            return self._create_error_response(
                msg_id, JsonRpcError.INVALID_PARAMS, f"arguments must be an object, got {type(arguments).__name__}"
            )

        result = await self.dispatcher.call_tool(tool_name, arguments)
        return self._create_response(msg_id, result)

    def _create_response(self, msg_id: Any, result: dict[str, Any]) -> dict[str, Any]:
        return {JSONRPC_KEY: JSONRPC_VERSION, KEY_ID: msg_id, KEY_RESULT: result}

    def _create_error_response(self, msg_id: Any, code: int, message: str) -> dict[str, Any]:
        """Create error response."""
        return {JSONRPC_KEY: JSONRPC_VERSION, KEY_ID: msg_id, KEY_ERROR: {"code": int(code), "message": message}}
