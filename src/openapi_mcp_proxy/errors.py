"""
Structured error types for the OpenAPI MCP proxy.

Every error a caller can trigger derives from ``ProxyError`` and carries the
JSON-RPC code the protocol handler reports it with. ``HttpError`` is the one
exception: it never reaches the protocol layer, the dispatcher turns it into
structured tool output.
"""

from difflib import get_close_matches
from typing import Any

from .constants import JsonRpcError


class ProxyError(Exception):
    """Base error with a JSON-RPC code and an optional fix suggestion."""

    def __init__(
        self,
        message: str,
        code: int = JsonRpcError.INTERNAL_ERROR,
        suggestion: str | None = None,
    ):
        self.code = code
        self.suggestion = suggestion
        super().__init__(message)

    def to_message(self) -> str:
        """Format the error with suggestion."""
        parts = [str(self)]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " | ".join(parts)


class SpecError(ProxyError):
    """The OpenAPI document is malformed or has no usable base URL."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        super().__init__(message, code=JsonRpcError.INVALID_REQUEST)


class UnknownToolError(ProxyError):
    """A call named a tool that is not in the catalog."""

    def __init__(self, tool_name: str, available_tools: list[str]):
        self.tool_name = tool_name
        super().__init__(
            format_unknown_tool_error(tool_name, available_tools),
            code=JsonRpcError.METHOD_NOT_FOUND,
        )


class MissingFileError(ProxyError):
    """A file-designated parameter has no value."""

    def __init__(self, param: str):
        self.param = param
        super().__init__(
            f"File path must be provided for parameter: {param}",
            code=JsonRpcError.INVALID_PARAMS,
            suggestion="Pass an absolute path to a local file, or a list of paths.",
        )


class UnsupportedValueError(ProxyError):
    """A file-designated parameter holds something other than path strings."""

    def __init__(self, param: str, value: Any):
        self.param = param
        super().__init__(
            f"Unsupported file type for parameter '{param}': {type(value).__name__}",
            code=JsonRpcError.INVALID_PARAMS,
        )


class FileAccessError(ProxyError):
    """A file referenced by an upload argument could not be opened."""

    def __init__(self, path: str, error: Exception):
        self.path = path
        super().__init__(f"Failed to read file at {path}: {error}", code=JsonRpcError.INVALID_PARAMS)


class HttpError(ProxyError):
    """The upstream API answered with an error status (>= 400)."""

    def __init__(self, message: str, status: int, body: Any, headers: dict[str, str] | None = None):
        self.status = status
        self.body = body
        self.headers = headers or {}
        super().__init__(f"{status} {message}", code=JsonRpcError.INTERNAL_ERROR)


def suggest_tool_name(tool_name: str, available_tools: list[str]) -> str | None:
    """Find the closest matching tool name using fuzzy matching.

    Args:
        tool_name: The unknown tool name.
        available_tools: List of catalog tool names.

    Returns:
        The closest match, or None if no good match found.
    """
    matches = get_close_matches(tool_name, available_tools, n=1, cutoff=0.6)
    return matches[0] if matches else None


def format_unknown_tool_error(tool_name: str, available_tools: list[str]) -> str:
    """Create an error message for an unknown tool with suggestions."""
    suggestion = suggest_tool_name(tool_name, available_tools)
    if suggestion:
        return f"Method {tool_name} not found. Did you mean '{suggestion}'?"
    if available_tools:
        names = ", ".join(sorted(available_tools)[:10])
        suffix = "..." if len(available_tools) > 10 else ""
        return f"Method {tool_name} not found. Available tools: {names}{suffix}"
    return f"Method {tool_name} not found. No tools are available."
