#!/usr/bin/env python3
# src/openapi_mcp_proxy/client/uploads.py
"""
File Upload Encoder - turns file-path arguments into a multipart payload.

The payload owns the file handles it opens. Use it as a context manager
around the single request that sends it; leaving the block closes every
handle.
"""

import logging
import mimetypes
import os
from collections.abc import Iterable, Mapping
from contextlib import ExitStack
from typing import IO, Any

from ..constants import CONTENT_TYPE_OCTET_STREAM
from ..errors import FileAccessError, MissingFileError, UnsupportedValueError
from .encoding import format_value

logger = logging.getLogger(__name__)

FilePart = tuple[str, tuple[str, IO[bytes], str]]


class MultipartPayload:
    """File parts plus plain form fields for one multipart request."""

    def __init__(self) -> None:
        self.files: list[FilePart] = []
        self.fields: dict[str, str | list[str]] = {}
        self._stack = ExitStack()

    def add_file(self, field: str, path: str) -> None:
        """Open ``path`` and attach it as a file part under ``field``."""
        try:
            handle = self._stack.enter_context(open(path, "rb"))
        except OSError as e:
            raise FileAccessError(path, e) from e
        mime_type = mimetypes.guess_type(path)[0] or CONTENT_TYPE_OCTET_STREAM
        self.files.append((field, (os.path.basename(path), handle, mime_type)))

    def add_field(self, name: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, list | tuple):
            self.fields[name] = [format_value(item) for item in value]
        else:
            self.fields[name] = format_value(value)

    def file_fields(self) -> list[str]:
        return [field for field, _ in self.files]

    def close(self) -> None:
        self._stack.close()

    def __enter__(self) -> "MultipartPayload":
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()


def _file_paths(param: str, value: Any) -> list[str]:
    """Validate the shape of a file argument and return its paths."""
    if value is None or value == "":
        raise MissingFileError(param)
    if isinstance(value, str):
        return [value]
    if isinstance(value, list | tuple):
        if not value:
            raise MissingFileError(param)
        if not all(isinstance(item, str) for item in value):
            raise UnsupportedValueError(param, value)
        return list(value)
    raise UnsupportedValueError(param, value)


def encode_multipart(file_params: Iterable[str], args: Mapping[str, Any]) -> MultipartPayload:
    """Build the multipart payload for one upload request.

    Raises:
        MissingFileError: a file parameter has no value.
        UnsupportedValueError: a file parameter is not a path or list of paths.
        FileAccessError: a path could not be opened.
    """
    file_params = list(file_params)
    payload = MultipartPayload()
    try:
        for param in file_params:
            for path in _file_paths(param, args.get(param)):
                payload.add_file(param, path)

        for key, value in args.items():
            if key not in file_params:
                payload.add_field(key, value)
    except Exception:
        payload.close()
        raise

    logger.debug(f"Encoded multipart payload with {len(payload.files)} file(s), {len(payload.fields)} field(s)")
    return payload
