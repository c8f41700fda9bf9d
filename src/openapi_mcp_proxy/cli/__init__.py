#!/usr/bin/env python3
# src/openapi_mcp_proxy/cli/__init__.py
"""
CLI entry point for the OpenAPI MCP proxy.

Loads the OpenAPI document, builds the tool catalog and serves it over
stdio or HTTP.
"""

import argparse
import logging
import sys

from ..config import ProxyConfig, load_config
from ..constants import LOG_CRITICAL, LOG_DEBUG, LOG_ERROR, LOG_INFO, LOG_WARNING
from ..errors import SpecError
from ..proxy import OpenAPIProxy, init_proxy

_LOG_LEVELS = [LOG_DEBUG, LOG_INFO, LOG_WARNING, LOG_ERROR, LOG_CRITICAL]

logger = logging.getLogger(__name__)


def setup_logging(level: str = LOG_INFO, debug: bool = False) -> None:
    """Set up logging on stderr; stdout carries protocol frames in stdio mode."""
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openapi-mcp-proxy",
        description="Expose a REST API described by an OpenAPI document as MCP tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve an API to an MCP client over stdio
  openapi-mcp-proxy stdio specs/coingecko.json

  # Override the server URL from the document
  openapi-mcp-proxy stdio specs/coingecko.json --base-url https://pro-api.coingecko.com/api/v3

  # Serve over HTTP
  openapi-mcp-proxy http specs/petstore.yaml --port 9000

Environment Variables:
  OPENAPI_SPEC_PATH    Document path when none is given
  OPENAPI_MCP_HEADERS  JSON object of headers sent with every request
  BASE_URL             Base URL override (--base-url wins)
  MCP_LOG_LEVEL        Logging level (debug|info|warning|error|critical)
  MCP_SERVER_NAME      Advertised server name
  MCP_SERVER_VERSION   Advertised server version
        """,
    )
    subparsers = parser.add_subparsers(dest="mode", help="Transport mode", required=True)

    for mode, help_text in (("stdio", "Serve over stdin/stdout"), ("http", "Serve JSON-RPC over HTTP")):
        sub = subparsers.add_parser(mode, help=help_text)
        sub.add_argument("spec", nargs="?", default=None, help="Path to the OpenAPI document (JSON or YAML)")
        sub.add_argument("--base-url", default=None, help="Base URL of the API (default: first server in document)")
        sub.add_argument("--debug", action="store_true", help="Enable debug logging")
        sub.add_argument("--log-level", default=None, choices=_LOG_LEVELS, help="Logging level (default: info)")
        if mode == "http":
            sub.add_argument("--host", default=None, help="Host to bind to")
            sub.add_argument("--port", type=int, default=None, help="Port to bind to")

    return parser


def create_proxy(config: ProxyConfig) -> OpenAPIProxy:
    if not config.spec_path:
        raise SpecError("No OpenAPI document given; pass a path or set OPENAPI_SPEC_PATH")
    return init_proxy(
        config.spec_path,
        base_url=config.base_url,
        headers=config.headers,
        name=config.server_name,
        version=config.server_version,
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    config = load_config(
        spec_path=args.spec,
        base_url=args.base_url,
        log_level=args.log_level,
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
    )
    setup_logging(config.log_level, debug=args.debug)

    try:
        proxy = create_proxy(config)
    except SpecError as e:
        logger.error(f"Invalid OpenAPI specification: {e}")
        for error in e.errors:
            logger.error(f"  {error}")
        sys.exit(1)

    if args.mode == "stdio":
        proxy.run_stdio()
    else:
        proxy.run_http(config.host, config.port, log_level=config.log_level)


if __name__ == "__main__":
    main()
