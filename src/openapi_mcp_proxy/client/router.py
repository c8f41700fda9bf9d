#!/usr/bin/env python3
# src/openapi_mcp_proxy/client/router.py
"""
Parameter Router - shapes a flat tool argument object into an HTTP request.

Arguments are classified in a fixed order and each is consumed once:
path, query, header (cookie parameters are never forwarded), then either the
multipart payload, the request body, or extra query parameters.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..catalog.models import OperationRecord, ParameterLocation
from ..constants import BODY_ARGUMENT, CONTENT_TYPE_JSON, HEADER_CONTENT_TYPE
from .encoding import encode_path_value, format_query_value, format_value
from .uploads import MultipartPayload, encode_multipart

logger = logging.getLogger(__name__)

# Locations read from the arguments, in classification order
_ROUTED_LOCATIONS = (ParameterLocation.PATH, ParameterLocation.QUERY, ParameterLocation.HEADER)


@dataclass
class RequestSpec:
    """One outgoing HTTP request; ``url`` is relative to the API base URL."""

    method: str
    url: str
    query: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    multipart: MultipartPayload | None = None

    @property
    def has_body(self) -> bool:
        return self.body is not None or self.multipart is not None


def fold_body_arguments(remaining: Mapping[str, Any]) -> Any:
    """Decide the JSON body from the arguments no parameter consumed.

    An explicit ``body`` argument is the whole body. Otherwise the leftover
    arguments are assumed to mirror the body schema's top-level properties
    and are folded into one object. The folded object is not checked against
    the declared schema.
    """
    explicit = remaining.get(BODY_ARGUMENT)
    if explicit is not None:
        return explicit
    folded = {key: value for key, value in remaining.items() if key != BODY_ARGUMENT}
    return folded or None


def route(operation: OperationRecord, args: Mapping[str, Any] | None) -> RequestSpec:
    """Build the RequestSpec for one invocation of ``operation``."""
    args = dict(args or {})
    consumed: set[str] = set()
    url = operation.path
    query: dict[str, Any] = {}
    headers: dict[str, str] = {}

    for location in _ROUTED_LOCATIONS:
        for param in operation.parameters_in(location):
            if param.name not in args or param.name in consumed:
                continue
            value = args[param.name]
            consumed.add(param.name)
            if value is None and location is not ParameterLocation.PATH:
                # Unset optional argument
                continue
            if location is ParameterLocation.PATH:
                url = url.replace(f"{{{param.name}}}", encode_path_value(value))
            elif location is ParameterLocation.QUERY:
                query[param.name] = format_query_value(value)
            else:
                headers[param.name] = format_value(value)

    # Cookie arguments are dropped, not forwarded as leftovers
    consumed.update(param.name for param in operation.parameters_in(ParameterLocation.COOKIE))

    remaining = {key: value for key, value in args.items() if key not in consumed}
    request = RequestSpec(method=operation.method.upper(), url=url, query=query, headers=headers)

    if operation.file_params:
        request.multipart = encode_multipart(operation.file_params, remaining)
    elif operation.request_body is not None:
        request.body = fold_body_arguments(remaining)
        if request.body is not None:
            headers[HEADER_CONTENT_TYPE] = CONTENT_TYPE_JSON
    else:
        for key, value in remaining.items():
            if value is not None:
                query[key] = format_query_value(value)

    logger.debug(f"Routed {operation.tool_name} -> {request.method} {request.url}")
    return request
