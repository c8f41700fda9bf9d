"""Load an OpenAPI document from disk.

JSON files are parsed with orjson, YAML files with PyYAML. Files with any
other extension are tried as JSON first, then YAML.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
import yaml

from .errors import SpecError

_JSON_SUFFIXES = {".json"}
_YAML_SUFFIXES = {".yaml", ".yml"}


def parse_document(text: str | bytes, suffix: str = "") -> dict[str, Any]:
    """Parse document text as JSON or YAML depending on ``suffix``."""
    suffix = suffix.lower()
    try:
        if suffix in _JSON_SUFFIXES:
            document = orjson.loads(text)
        elif suffix in _YAML_SUFFIXES:
            document = yaml.safe_load(text)
        else:
            try:
                document = orjson.loads(text)
            except orjson.JSONDecodeError:
                document = yaml.safe_load(text)
    except (orjson.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecError(f"Failed to parse OpenAPI document: {e}") from e

    if not isinstance(document, dict):
        raise SpecError(f"OpenAPI document must be an object, got {type(document).__name__}")
    return document


def load_document(path: str | Path) -> dict[str, Any]:
    """Load the OpenAPI document at ``path``."""
    spec_file = Path(path)
    try:
        raw = spec_file.read_bytes()
    except OSError as e:
        raise SpecError(f"Cannot read OpenAPI document {spec_file}: {e}") from e
    return parse_document(raw, spec_file.suffix)
