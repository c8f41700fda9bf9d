#!/usr/bin/env python3
# src/openapi_mcp_proxy/client/__init__.py
"""
HTTP client package - argument routing, file uploads and request execution.
"""

from .http_client import HttpClient, HttpResponse
from .router import RequestSpec, fold_body_arguments, route
from .uploads import MultipartPayload, encode_multipart

__all__ = [
    "HttpClient",
    "HttpResponse",
    "RequestSpec",
    "fold_body_arguments",
    "route",
    "MultipartPayload",
    "encode_multipart",
]
