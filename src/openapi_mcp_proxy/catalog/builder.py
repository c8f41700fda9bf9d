#!/usr/bin/env python3
# src/openapi_mcp_proxy/catalog/builder.py
"""
Catalog Builder - converts an OpenAPI 3.x document into MCP tools.

``build_catalog`` is a pure function of the document: it either returns a
complete, immutable Catalog or raises ``SpecError`` before anything is
served, so no reader ever observes a partially built catalog.
"""

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
from urllib.parse import urlsplit

from ..constants import HTTP_METHODS
from ..errors import SpecError
from .models import Catalog, OperationRecord, ToolDescriptor
from .naming import build_base_name, ensure_unique_name
from .schema import (
    RefResolver,
    build_description,
    build_input_schema,
    parse_parameters,
    parse_request_body,
)

logger = logging.getLogger(__name__)

_SERVER_VARIABLE = re.compile(r"\{([^}]+)\}")


def validate_document(document: Any) -> None:
    """Check the fields every OpenAPI 3.x document must carry."""
    if not isinstance(document, Mapping):
        raise SpecError("OpenAPI document must be an object", [f"got {type(document).__name__}"])

    errors = []
    version = document.get("openapi")
    if not isinstance(version, str) or not version.startswith("3."):
        errors.append(f"'openapi' must be a 3.x version string, got {version!r}")
    if not isinstance(document.get("info"), Mapping):
        errors.append("'info' object is required")
    paths = document.get("paths")
    if not isinstance(paths, Mapping):
        errors.append("'paths' object is required")
    else:
        for path, item in paths.items():
            if not str(path).startswith("/"):
                errors.append(f"path '{path}' must start with '/'")
            if not isinstance(item, Mapping):
                errors.append(f"path item '{path}' must be an object")

    if errors:
        raise SpecError("Invalid OpenAPI 3 specification", errors)


def resolve_base_url(document: Mapping[str, Any], override: str | None = None) -> str:
    """Pick the base URL: explicit override first, then the first server entry."""
    if override:
        return override.rstrip("/")

    servers = document.get("servers") or []
    server = servers[0] if servers and isinstance(servers[0], Mapping) else {}
    url = server.get("url")
    if not url:
        raise SpecError("No base URL found in OpenAPI spec")

    variables = server.get("variables") or {}

    def _substitute(match: re.Match[str]) -> str:
        variable = variables.get(match.group(1)) or {}
        if "default" not in variable:
            raise SpecError(f"Server variable '{match.group(1)}' has no default value")
        return str(variable["default"])

    url = _SERVER_VARIABLE.sub(_substitute, str(url))
    if not urlsplit(url).scheme:
        raise SpecError(f"Server URL '{url}' is relative; provide a base URL override")
    return url.rstrip("/")


def build_catalog(document: Any, base_url: str | None = None) -> Catalog:
    """Build the tool catalog for every path x method in the document."""
    validate_document(document)
    resolved_base_url = resolve_base_url(document, base_url)
    resolver = RefResolver(document)

    tools: list[ToolDescriptor] = []
    operations: dict[str, OperationRecord] = {}

    for path, raw_item in document["paths"].items():
        path_item = resolver.resolve(raw_item)
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if operation is None:
                continue
            if not isinstance(operation, Mapping):
                raise SpecError(f"Operation {method.upper()} {path} must be an object")

            base_name = build_base_name(method, path, operation.get("operationId"))
            tool_name = ensure_unique_name(base_name, operations.keys())
            if tool_name != base_name:
                logger.debug(f"Tool name '{base_name}' adjusted to '{tool_name}'")

            record = OperationRecord(
                tool_name=tool_name,
                operation_id=operation.get("operationId"),
                method=method,
                path=path,
                parameters=parse_parameters(resolver, path_item.get("parameters"), operation.get("parameters")),
                request_body=parse_request_body(resolver, operation.get("requestBody")),
            )
            operations[tool_name] = record
            tools.append(
                ToolDescriptor(
                    name=tool_name,
                    description=build_description(method, path, operation, resolver),
                    input_schema=build_input_schema(record),
                )
            )

    logger.debug(f"Built catalog with {len(tools)} tools for {resolved_base_url}")
    return Catalog(base_url=resolved_base_url, tools=tuple(tools), operations=MappingProxyType(operations))
