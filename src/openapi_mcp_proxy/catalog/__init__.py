#!/usr/bin/env python3
# src/openapi_mcp_proxy/catalog/__init__.py
"""
Operation catalog package.

Builds the immutable tool catalog from an OpenAPI document.
"""

from .builder import build_catalog, resolve_base_url, validate_document
from .models import (
    Catalog,
    OperationRecord,
    ParameterLocation,
    ParameterSpec,
    RequestBodySpec,
    ToolDescriptor,
)
from .naming import build_base_name, ensure_unique_name, sanitize_tool_name, truncate_tool_name

__all__ = [
    "build_catalog",
    "resolve_base_url",
    "validate_document",
    "Catalog",
    "OperationRecord",
    "ParameterLocation",
    "ParameterSpec",
    "RequestBodySpec",
    "ToolDescriptor",
    "build_base_name",
    "ensure_unique_name",
    "sanitize_tool_name",
    "truncate_tool_name",
]
