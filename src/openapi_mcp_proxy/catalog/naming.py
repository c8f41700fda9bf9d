"""Derive MCP tool names from OpenAPI operations.

Pattern: the operationId when present, else {method}_{path}:
  operationId "coins/markets"   -> coins_markets
  GET  /coins/{id}              -> get_coins_id
  POST /simple/token price      -> post_simple_token_price

Names are limited to 64 characters and must be unique inside one catalog.
Uniqueness is always checked on the final, truncated name: a colliding name
gets an ``_{n}`` suffix, and room for the suffix is reserved before the cut.
"""

from __future__ import annotations

import re
from collections.abc import Collection

from ..constants import MAX_TOOL_NAME_LENGTH, TOOL_NAME_INVALID_CHARS

_FALLBACK_NAME = "operation"


def sanitize_tool_name(name: str) -> str:
    """Replace characters outside [A-Za-z0-9_-] and collapse underscores."""
    cleaned = TOOL_NAME_INVALID_CHARS.sub("_", name.strip())
    cleaned = re.sub(r"_+", "_", cleaned)
    return cleaned.strip("_") or _FALLBACK_NAME


def build_base_name(method: str, path: str, operation_id: str | None = None) -> str:
    """Build the untruncated tool name for an operation."""
    if operation_id and operation_id.strip():
        return sanitize_tool_name(operation_id)
    return sanitize_tool_name(f"{method.lower()}_{path}")


def truncate_tool_name(name: str, max_length: int = MAX_TOOL_NAME_LENGTH) -> str:
    if len(name) <= max_length:
        return name
    return name[:max_length]


def ensure_unique_name(base_name: str, taken: Collection[str], max_length: int = MAX_TOOL_NAME_LENGTH) -> str:
    """Return a name derived from ``base_name`` that is not in ``taken``.

    The result is never longer than ``max_length``. Two base names that only
    differ after ``max_length`` characters still resolve to distinct names.
    """
    candidate = truncate_tool_name(base_name, max_length)
    counter = 2
    while candidate in taken:
        suffix = f"_{counter}"
        candidate = base_name[: max_length - len(suffix)] + suffix
        counter += 1
    return candidate
