#!/usr/bin/env python3
# src/openapi_mcp_proxy/catalog/models.py
"""
Catalog models - immutable records produced once from the OpenAPI document.

Operation records are plain frozen dataclasses; tool descriptors are pydantic
models because they are what goes over the wire in ``tools/list``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..constants import MAX_TOOL_NAME_LENGTH


class ParameterLocation(str, Enum):
    """Where an argument travels in the HTTP request."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    location: ParameterLocation
    required: bool = False
    description: str | None = None
    schema: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RequestBodySpec:
    content_type: str
    schema: Mapping[str, Any] = field(default_factory=dict)
    required: bool = False
    file_params: tuple[str, ...] = ()

    @property
    def is_multipart(self) -> bool:
        return bool(self.file_params)


@dataclass(frozen=True)
class OperationRecord:
    """One OpenAPI operation, keyed in the catalog by its tool name."""

    tool_name: str
    operation_id: str | None
    method: str
    path: str
    parameters: tuple[ParameterSpec, ...] = ()
    request_body: RequestBodySpec | None = None

    @property
    def file_params(self) -> tuple[str, ...]:
        return self.request_body.file_params if self.request_body else ()

    def parameters_in(self, location: ParameterLocation) -> list[ParameterSpec]:
        return [p for p in self.parameters if p.location is location]


class ToolDescriptor(BaseModel):
    """Protocol-facing description of a tool, serialized once and cached."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(max_length=MAX_TOOL_NAME_LENGTH)
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")

    _cached_mcp_bytes: bytes | None = PrivateAttr(default=None)

    def to_mcp_bytes(self) -> bytes:
        """Get the orjson-serialized MCP form of this tool."""
        if self._cached_mcp_bytes is None:
            self._cached_mcp_bytes = orjson.dumps(self.model_dump(by_alias=True))
        return self._cached_mcp_bytes

    def to_mcp_format(self) -> dict[str, Any]:
        """Get a fresh copy of the MCP form, so callers cannot mutate the descriptor."""
        result: dict[str, Any] = orjson.loads(self.to_mcp_bytes())
        return result


@dataclass(frozen=True)
class Catalog:
    """Read-only mapping from tool name to operation, plus the tool descriptors."""

    base_url: str
    tools: tuple[ToolDescriptor, ...]
    operations: Mapping[str, OperationRecord]

    def get_operation(self, tool_name: str) -> OperationRecord | None:
        return self.operations.get(tool_name)

    def tool_names(self) -> list[str]:
        return [tool.name for tool in self.tools]

    def __len__(self) -> int:
        return len(self.tools)

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self.operations
