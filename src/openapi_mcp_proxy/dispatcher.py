#!/usr/bin/env python3
# src/openapi_mcp_proxy/dispatcher.py
"""
Tool Dispatcher - answers list and call against the immutable catalog.

Upstream HTTP errors are recovered here and returned as structured tool
output; every other error propagates to the protocol layer.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .catalog import Catalog, truncate_tool_name
from .client import HttpClient, route
from .content import format_error_payload, format_tool_result
from .errors import HttpError, UnknownToolError

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Protocol-facing entry point for ``tools/list`` and ``tools/call``."""

    def __init__(self, catalog: Catalog, client: HttpClient):
        self.catalog = catalog
        self.client = client

    def list_tools(self) -> list[dict[str, Any]]:
        """Every tool in catalog order, names re-truncated to the MCP limit."""
        tools = []
        for descriptor in self.catalog.tools:
            tool = descriptor.to_mcp_format()
            tool["name"] = truncate_tool_name(tool["name"])
            tools.append(tool)
        return tools

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Invoke the operation behind ``name``.

        Raises:
            UnknownToolError: ``name`` is not in the catalog.
            MissingFileError, UnsupportedValueError, FileAccessError: bad upload arguments.
            httpx.TransportError: the API could not be reached.
        """
        operation = self.catalog.get_operation(name)
        if operation is None:
            raise UnknownToolError(name, self.catalog.tool_names())

        logger.debug(f"Calling {name}: {operation.method.upper()} {operation.path}")
        request = route(operation, arguments)
        try:
            response = await self.client.execute(request)
        except HttpError as e:
            logger.warning(f"Tool {name} got HTTP {e.status} from upstream, returning structured error")
            return format_tool_result(format_error_payload(e.body))

        return format_tool_result(response.body)
