#!/usr/bin/env python3
# src/openapi_mcp_proxy/catalog/schema.py
"""
Schema - $ref resolution, parameter parsing and input schema derivation.

Turns the parameter and request body declarations of one OpenAPI operation
into ParameterSpec / RequestBodySpec records and into the JSON Schema object
advertised as the tool's ``inputSchema``.
"""

from collections.abc import Mapping
from typing import Any

from ..constants import (
    BODY_ARGUMENT,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_MULTIPART,
    OPENAPI_REF_KEY,
)
from ..errors import SpecError
from .models import OperationRecord, ParameterLocation, ParameterSpec, RequestBodySpec

# Body content types, most preferred first
_BODY_CONTENT_PREFERENCE = (CONTENT_TYPE_JSON, CONTENT_TYPE_MULTIPART, "application/x-www-form-urlencoded")

_FILE_PATH_DESCRIPTION = "Absolute path to a local file"


# ============================================================================
# $ref Resolution
# ============================================================================


class RefResolver:
    """Resolve local ``#/...`` JSON pointers against one OpenAPI document."""

    def __init__(self, document: Mapping[str, Any]):
        self.document = document

    def lookup(self, ref: str) -> Any:
        """Return the node a ``$ref`` points at."""
        if not ref.startswith("#/"):
            raise SpecError(f"Only local $ref pointers are supported, got: {ref}")
        node: Any = self.document
        for raw_part in ref[2:].split("/"):
            part = raw_part.replace("~1", "/").replace("~0", "~")
            if isinstance(node, Mapping) and part in node:
                node = node[part]
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                raise SpecError(f"Unresolvable $ref: {ref}")
        return node

    def resolve(self, node: Any) -> Any:
        """Follow a chain of ``$ref`` on a single node (not recursive)."""
        seen: set[str] = set()
        while isinstance(node, Mapping) and isinstance(node.get(OPENAPI_REF_KEY), str):
            ref = node[OPENAPI_REF_KEY]
            if ref in seen:
                raise SpecError(f"Circular $ref: {ref}")
            seen.add(ref)
            siblings = {k: v for k, v in node.items() if k != OPENAPI_REF_KEY}
            target = self.lookup(ref)
            node = {**target, **siblings} if siblings and isinstance(target, Mapping) else target
        return node

    def resolve_schema(self, schema: Any, _seen: frozenset[str] = frozenset()) -> Any:
        """Inline every ``$ref`` in a schema; a cyclic reference becomes ``{}``."""
        if isinstance(schema, list):
            return [self.resolve_schema(item, _seen) for item in schema]
        if not isinstance(schema, Mapping):
            return schema

        ref = schema.get(OPENAPI_REF_KEY)
        if isinstance(ref, str):
            if ref in _seen:
                return {}
            target = self.lookup(ref)
            siblings = {k: v for k, v in schema.items() if k != OPENAPI_REF_KEY}
            merged = {**target, **siblings} if isinstance(target, Mapping) else target
            return self.resolve_schema(merged, _seen | {ref})

        return {key: self.resolve_schema(value, _seen) for key, value in schema.items()}


# ============================================================================
# Parameters and Request Body
# ============================================================================


def parse_parameters(
    resolver: RefResolver, shared: list[Any] | None, own: list[Any] | None
) -> tuple[ParameterSpec, ...]:
    """Merge path-item and operation parameters; the operation wins on (name, in)."""
    merged: dict[tuple[str, str], ParameterSpec] = {}
    for raw in list(shared or []) + list(own or []):
        param = resolver.resolve(raw)
        if not isinstance(param, Mapping) or "name" not in param or "in" not in param:
            raise SpecError(f"Parameter must declare 'name' and 'in': {raw!r}")
        try:
            location = ParameterLocation(param["in"])
        except ValueError as e:
            raise SpecError(f"Unknown parameter location '{param['in']}' for '{param['name']}'") from e

        schema = resolver.resolve_schema(param.get("schema") or {})
        merged[(param["name"], location.value)] = ParameterSpec(
            name=param["name"],
            location=location,
            required=bool(param.get("required")) or location is ParameterLocation.PATH,
            description=param.get("description"),
            schema=schema,
        )
    return tuple(merged.values())


def find_file_params(schema: Mapping[str, Any]) -> tuple[str, ...]:
    """Names of multipart properties that carry binary file content."""
    if schema.get("type") != "object" or not isinstance(schema.get("properties"), Mapping):
        return ()
    names = []
    for prop_name, prop in schema["properties"].items():
        if _is_binary(prop):
            names.append(prop_name)
        elif isinstance(prop, Mapping) and prop.get("type") == "array" and _is_binary(prop.get("items")):
            names.append(prop_name)
    return tuple(names)


def _is_binary(schema: Any) -> bool:
    return isinstance(schema, Mapping) and schema.get("type") == "string" and schema.get("format") == "binary"


def parse_request_body(resolver: RefResolver, raw: Any) -> RequestBodySpec | None:
    """Pick the body content type and detect file-upload properties."""
    if raw is None:
        return None
    body = resolver.resolve(raw)
    if not isinstance(body, Mapping):
        raise SpecError(f"requestBody must be an object: {raw!r}")
    content = body.get("content") or {}
    if not content:
        return None

    file_params: tuple[str, ...] = ()
    multipart = content.get(CONTENT_TYPE_MULTIPART)
    if isinstance(multipart, Mapping) and multipart.get("schema"):
        file_params = find_file_params(resolver.resolve_schema(multipart["schema"]))

    if file_params:
        content_type = CONTENT_TYPE_MULTIPART
    else:
        content_type = next((ct for ct in _BODY_CONTENT_PREFERENCE if ct in content), next(iter(content)))

    media = content.get(content_type) or {}
    schema = resolver.resolve_schema(media.get("schema") or {})
    return RequestBodySpec(
        content_type=content_type,
        schema=schema,
        required=bool(body.get("required")),
        file_params=file_params,
    )


# ============================================================================
# Input Schema
# ============================================================================


def body_is_flat(body: RequestBodySpec, param_names: set[str]) -> bool:
    """Whether the body's properties can be advertised as top-level arguments.

    A body is flat when it is an object with declared properties, none of
    which is named ``body`` or shadows a parameter. Anything else is exposed
    as a single ``body`` argument.
    """
    if body.is_multipart:
        return True
    schema = body.schema
    properties = schema.get("properties")
    if schema.get("type", "object") != "object" or not isinstance(properties, Mapping) or not properties:
        return False
    return not any(name == BODY_ARGUMENT or name in param_names for name in properties)


def _file_path_schema(prop: Mapping[str, Any]) -> dict[str, Any]:
    path_schema: dict[str, Any] = {"type": "string", "format": "uri-reference"}
    description = prop.get("description")
    path_schema["description"] = f"{description} ({_FILE_PATH_DESCRIPTION})" if description else _FILE_PATH_DESCRIPTION
    return path_schema


def build_input_schema(operation: OperationRecord) -> dict[str, Any]:
    """Union of parameters and body fields as one JSON Schema object."""
    properties: dict[str, Any] = {}
    required: list[str] = []

    for param in operation.parameters:
        if param.location is ParameterLocation.COOKIE:
            continue
        prop = dict(param.schema) if param.schema else {"type": "string"}
        if param.description:
            prop["description"] = param.description
        properties[param.name] = prop
        if param.required:
            required.append(param.name)

    body = operation.request_body
    if body is not None:
        if body_is_flat(body, set(properties)):
            body_required = set(body.schema.get("required") or []) if body.required else set()
            for name, prop in (body.schema.get("properties") or {}).items():
                if name in properties:
                    continue
                if name in body.file_params:
                    file_schema = _file_path_schema(prop)
                    if prop.get("type") == "array":
                        file_schema = {"type": "array", "items": file_schema}
                    properties[name] = file_schema
                else:
                    properties[name] = dict(prop)
                if name in body_required:
                    required.append(name)
        else:
            properties[BODY_ARGUMENT] = dict(body.schema) if body.schema else {}
            if body.required:
                required.append(BODY_ARGUMENT)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def build_description(method: str, path: str, operation: Mapping[str, Any], resolver: RefResolver) -> str:
    """Summary (or description) plus a list of declared error responses."""
    description = operation.get("summary") or operation.get("description") or f"{method.upper()} {path}"

    error_lines = []
    for status, raw_response in (operation.get("responses") or {}).items():
        code = str(status)
        if code != "default" and code[:1] not in ("4", "5"):
            continue
        response = resolver.resolve(raw_response)
        detail = response.get("description", "") if isinstance(response, Mapping) else ""
        error_lines.append(f"{code}: {detail}" if detail else code)

    if error_lines:
        description += "\nError Responses:\n" + "\n".join(error_lines)
    return description
