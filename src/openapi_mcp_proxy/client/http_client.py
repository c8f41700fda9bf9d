#!/usr/bin/env python3
# src/openapi_mcp_proxy/client/http_client.py
"""
HTTP Client - issues routed requests against the upstream API with httpx.

Two failure modes stay distinct: a transport failure (no response at all)
propagates as the original ``httpx.TransportError``, while a received
response with status >= 400 raises ``HttpError`` carrying status, decoded
body and headers.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
import orjson

from ..constants import (
    CONTENT_TYPE_JSON,
    DEFAULT_USER_AGENT,
    HEADER_ACCEPT,
    HEADER_USER_AGENT,
)
from ..errors import HttpError
from .encoding import decode_response_body
from .router import RequestSpec

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    status: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)


class HttpClient:
    """Async executor bound to one API base URL and a static header set."""

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        default_headers = {
            HEADER_ACCEPT: CONTENT_TYPE_JSON,
            HEADER_USER_AGENT: DEFAULT_USER_AGENT,
        }
        default_headers.update(headers or {})

        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=default_headers,
            transport=transport,
            timeout=timeout,
        )

    async def execute(self, request: RequestSpec) -> HttpResponse:
        """Send ``request`` and return the decoded response.

        Raises:
            HttpError: the API answered with status >= 400.
            httpx.TransportError: no response was received.
        """
        if request.multipart is not None:
            with request.multipart:
                response = await self._send(request)
        else:
            response = await self._send(request)

        headers = dict(response.headers)
        body = decode_response_body(response, binary_as_base64=request.multipart is not None)

        if response.status_code >= 400:
            logger.warning(f"{request.method} {request.url} failed with status {response.status_code}")
            raise HttpError(response.reason_phrase or "Request failed", response.status_code, body, headers)

        return HttpResponse(status=response.status_code, body=body, headers=headers)

    async def _send(self, request: RequestSpec) -> httpx.Response:
        kwargs: dict[str, Any] = {
            "params": request.query,
            "headers": request.headers,
        }
        if request.multipart is not None:
            kwargs["files"] = request.multipart.files
            if request.multipart.fields:
                kwargs["data"] = request.multipart.fields
        elif request.body is not None:
            kwargs["content"] = orjson.dumps(request.body)

        return await self._client.request(request.method, request.url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        await self.aclose()
