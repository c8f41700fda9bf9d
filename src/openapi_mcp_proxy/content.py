#!/usr/bin/env python3
# src/openapi_mcp_proxy/content.py
"""
Content - MCP tool result formatting with orjson.
"""

from typing import Any

import orjson

from .constants import CONTENT_TYPE_TEXT_BLOCK, ERROR_STATUS_VALUE, KEY_CONTENT


def format_text_content(value: Any) -> list[dict[str, Any]]:
    """Serialize ``value`` as JSON into a single text content block."""
    return [{"type": CONTENT_TYPE_TEXT_BLOCK, "text": orjson.dumps(value).decode()}]


def format_tool_result(value: Any) -> dict[str, Any]:
    """Wrap a response body as a ``tools/call`` result."""
    return {KEY_CONTENT: format_text_content(value)}


def format_error_payload(body: Any) -> dict[str, Any]:
    """Structured error output for an upstream HTTP error.

    Object bodies are spread after ``status``, so a body field named
    ``status`` wins. Other bodies are carried under ``data``. A body that
    itself wraps an upstream error as ``{"response": {"data": ...}}`` is
    unwrapped to that inner ``data`` first.
    """
    if isinstance(body, dict):
        nested = body.get("response")
        if isinstance(nested, dict) and nested.get("data") is not None:
            body = nested["data"]
    if body is None:
        body = {}
    if isinstance(body, dict):
        return {"status": ERROR_STATUS_VALUE, **body}
    return {"status": ERROR_STATUS_VALUE, "data": body}


__all__ = ["format_text_content", "format_tool_result", "format_error_payload"]
