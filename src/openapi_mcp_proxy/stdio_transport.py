#!/usr/bin/env python3
# src/openapi_mcp_proxy/stdio_transport.py
"""
STDIO Transport - MCP protocol over standard input/output.

Newline-delimited JSON-RPC messages are read from stdin; each request is
handled in its own task so slow upstream calls do not block the reader.
Responses are written to stdout, one JSON document per line.
"""

import asyncio
import logging
import sys
from typing import Any, TextIO

import orjson

from .constants import (
    DEFAULT_ENCODING,
    JSONRPC_KEY,
    JSONRPC_VERSION,
    KEY_ERROR,
    KEY_ID,
    JsonRpcError,
)
from .protocol import MCPProtocolHandler

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096


class StdioTransport:
    """Handle MCP protocol communication over stdio (stdin/stdout)."""

    def __init__(self, protocol_handler: MCPProtocolHandler, writer: TextIO | None = None) -> None:
        """
        Initialize stdio transport.

        Args:
            protocol_handler: The MCP protocol handler instance
            writer: Output stream, stdout when omitted
        """
        self.protocol = protocol_handler
        self.reader: asyncio.StreamReader | None = None
        self.writer: TextIO | None = writer
        self.running = False
        self._tasks: set[asyncio.Task[None]] = set()

    async def start(self) -> None:
        """Start the stdio transport server."""
        self.running = True

        loop = asyncio.get_running_loop()
        self.reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(self.reader)
        await loop.connect_read_pipe(lambda: protocol, sys.stdin)

        if self.writer is None:
            self.writer = sys.stdout

        await self._listen()

    async def _listen(self) -> None:
        """Listen for incoming JSON-RPC messages on stdin.

        Stdin is read in chunks and split on newlines, so a message is never
        bounded by the reader's line limit.
        """
        buffer = bytearray()

        while self.running and self.reader is not None:
            try:
                chunk = await self.reader.read(READ_CHUNK_SIZE)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error reading stdin: {e}")
                break
            if not chunk:
                # Stdin closed, shutting down
                break

            buffer.extend(chunk)
            while (end := buffer.find(b"\n")) != -1:
                raw = bytes(buffer[:end])
                del buffer[: end + 1]
                self._dispatch_line(raw)

        if buffer.strip():
            self._dispatch_line(bytes(buffer))

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _dispatch_line(self, raw: bytes) -> None:
        """Decode one framed line and hand it to a message task."""
        try:
            line = raw.decode(DEFAULT_ENCODING).strip()
        except UnicodeDecodeError as e:
            logger.debug(f"Invalid {DEFAULT_ENCODING} in stdio message: {e}")
            self._send_error(None, JsonRpcError.PARSE_ERROR, f"Parse error: {str(e)}")
            return
        if line:
            self._spawn(line)

    def _spawn(self, line: str) -> None:
        task = asyncio.create_task(self._handle_message(line))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle_message(self, message: str) -> None:
        """Handle a single JSON-RPC message and write its response, if any."""
        try:
            request_data = orjson.loads(message)
        except orjson.JSONDecodeError as e:
            logger.debug(f"Invalid JSON in stdio message: {e}")
            self._send_error(None, JsonRpcError.PARSE_ERROR, f"Parse error: {str(e)}")
            return

        if not isinstance(request_data, dict):
            self._send_error(None, JsonRpcError.INVALID_REQUEST, "Request must be a JSON object")
            return

        response = await self.protocol.handle_request(request_data)
        if request_data.get(KEY_ID) is not None and response:
            self._send_response(response)

    def _send_response(self, response: dict[str, Any]) -> None:
        """Send a response over stdout."""
        if self.writer:
            self.writer.write(orjson.dumps(response).decode(DEFAULT_ENCODING) + "\n")
            self.writer.flush()

    def _send_error(self, request_id: Any, code: int, message: str) -> None:
        error_response = {
            JSONRPC_KEY: JSONRPC_VERSION,
            KEY_ID: request_id,
            KEY_ERROR: {"code": int(code), "message": message},
        }
        self._send_response(error_response)

    async def stop(self) -> None:
        """Stop the stdio transport."""
        self.running = False
        if self.reader:
            self.reader.feed_eof()


def run_stdio_server(protocol_handler: MCPProtocolHandler) -> None:
    """Run the MCP server in stdio mode until stdin closes."""

    async def _run() -> None:
        transport = StdioTransport(protocol_handler)
        try:
            await transport.start()
        finally:
            await transport.stop()
            await protocol_handler.dispatcher.client.aclose()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info("STDIO server interrupted")
