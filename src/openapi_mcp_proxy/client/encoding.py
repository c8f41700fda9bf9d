#!/usr/bin/env python3
# src/openapi_mcp_proxy/client/encoding.py
"""
Encoding - value rendering for URLs, headers and form fields, and the
response body decoding rules shared by the HTTP client.
"""

import base64
from typing import Any, Literal
from urllib.parse import quote

import httpx
import orjson

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"

ContentKind = Literal["text", "image", "binary"]


def format_value(value: Any) -> str:
    """Render an argument as a string: strings verbatim, everything else as JSON.

    Integral floats render without a fractional part (``1.0`` -> ``"1"``).
    """
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return orjson.dumps(value).decode()  # type: ignore[no-any-return]


def format_query_value(value: Any) -> str | list[str]:
    """Like ``format_value`` but keeps lists as repeated query keys."""
    if isinstance(value, list | tuple):
        return [format_value(item) for item in value]
    return format_value(value)


def encode_path_value(value: Any) -> str:
    """Percent-encode a path parameter value so it fits in one path segment."""
    return quote(format_value(value), safe=_URI_COMPONENT_SAFE)


def classify_content_type(content_type: str | None) -> ContentKind:
    """Text for text/* and JSON, image for image/*, binary for everything else."""
    if not content_type:
        return "binary"
    if "text" in content_type or "json" in content_type:
        return "text"
    if "image" in content_type:
        return "image"
    return "binary"


def encode_binary_body(content: bytes) -> str:
    """Base64-encode a binary response so it fits a text content block."""
    return base64.b64encode(content).decode("ascii")


def decode_response_body(response: httpx.Response, binary_as_base64: bool = False) -> Any:
    """Decode a response body.

    JSON bodies are parsed, text bodies returned as text, empty bodies as None.
    With ``binary_as_base64`` (multipart uploads), non-text bodies are
    base64-encoded instead.
    """
    content_type = response.headers.get("content-type")
    if binary_as_base64 and classify_content_type(content_type) != "text":
        return encode_binary_body(response.content)

    if not response.content:
        return None
    if content_type and "json" in content_type:
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError:
            return response.text
    return response.text
