#!/usr/bin/env python3
# src/openapi_mcp_proxy/config.py
"""
Configuration resolved once at startup from CLI flags and the environment.

Priority for every setting: explicit CLI value, then environment variable,
then default.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

import orjson

from .constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENV_BASE_URL,
    ENV_MCP_LOG_LEVEL,
    ENV_MCP_SERVER_NAME,
    ENV_MCP_SERVER_VERSION,
    ENV_OPENAPI_MCP_HEADERS,
    ENV_OPENAPI_SPEC_PATH,
    ENV_PORT,
    LOG_INFO,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxyConfig:
    spec_path: str | None = None
    base_url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    log_level: str = LOG_INFO
    server_name: str | None = None
    server_version: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def parse_headers_from_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Read static headers from ``OPENAPI_MCP_HEADERS`` (a JSON object).

    A malformed or non-object value is logged and ignored.
    """
    env = os.environ if environ is None else environ
    headers_json = env.get(ENV_OPENAPI_MCP_HEADERS)
    if not headers_json:
        return {}

    try:
        headers = orjson.loads(headers_json)
    except orjson.JSONDecodeError as e:
        logger.error(f"Failed to parse {ENV_OPENAPI_MCP_HEADERS} environment variable: {e}")
        return {}

    if not isinstance(headers, dict):
        logger.error(f"{ENV_OPENAPI_MCP_HEADERS} environment variable must be a JSON object, got: {type(headers).__name__}")
        return {}
    return {str(key): value if isinstance(value, str) else orjson.dumps(value).decode() for key, value in headers.items()}


def load_config(
    spec_path: str | None = None,
    base_url: str | None = None,
    log_level: str | None = None,
    host: str | None = None,
    port: int | None = None,
    environ: Mapping[str, str] | None = None,
) -> ProxyConfig:
    """Merge CLI values with the environment into a ProxyConfig."""
    env = os.environ if environ is None else environ

    env_port = env.get(ENV_PORT)
    resolved_port = port if port is not None else int(env_port) if env_port else DEFAULT_PORT

    return ProxyConfig(
        spec_path=spec_path or env.get(ENV_OPENAPI_SPEC_PATH),
        base_url=base_url or env.get(ENV_BASE_URL) or None,
        headers=parse_headers_from_env(env),
        log_level=(log_level or env.get(ENV_MCP_LOG_LEVEL) or LOG_INFO).lower(),
        server_name=env.get(ENV_MCP_SERVER_NAME),
        server_version=env.get(ENV_MCP_SERVER_VERSION),
        host=host or DEFAULT_HOST,
        port=resolved_port,
    )
