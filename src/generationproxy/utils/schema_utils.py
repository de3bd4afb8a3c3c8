"""Schema transformation utilities for Gemini structured output.

Gemini's ``responseSchema`` accepts an OpenAPI 3.0 subset, not full JSON
Schema:
1. No $ref / $defs, so referenced definitions must be inlined
2. Optional fields are expressed with 'nullable: true', not anyOf with null
3. 'title', 'default', 'additionalProperties' and '$schema' are rejected
4. Type names are upper-case enum values (OBJECT, STRING, ...)

This module transforms Pydantic-generated JSON schemas to meet these requirements.
"""

import copy
import logging
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

UNSUPPORTED_KEYS = {"title", "default", "additionalProperties", "$schema", "examples"}


def schema_for(model: type[BaseModel]) -> dict[str, Any]:
    """Gemini response schema for a pydantic model (by alias)."""
    return to_gemini_schema(model.model_json_schema(by_alias=True))


def to_gemini_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """
    Transform a Pydantic JSON schema into a Gemini response schema.

    Args:
        schema: Pydantic model's JSON schema (from model.model_json_schema())

    Returns:
        Self-contained schema in Gemini's OpenAPI subset
    """
    # Deep copy to avoid mutating original
    schema = copy.deepcopy(schema)
    definitions = schema.pop("$defs", {})
    if definitions:
        logger.debug(f"Inlining {len(definitions)} schema definitions")
    return _convert_node(schema, definitions, ())


def _resolve_ref(ref: str, definitions: dict[str, Any], seen: tuple[str, ...]) -> dict[str, Any]:
    name = ref.rsplit("/", 1)[-1]
    if name in seen:
        raise ValueError(f"Recursive schema reference not supported: {name}")
    if name not in definitions:
        raise ValueError(f"Unknown schema reference: {ref}")
    return _convert_node(copy.deepcopy(definitions[name]), definitions, seen + (name,))


def _convert_node(node: Any, definitions: dict[str, Any], seen: tuple[str, ...]) -> Any:
    """
    Convert a single schema node (recursive helper for to_gemini_schema).

    Handles:
    - $ref inlining (sibling keywords such as description are kept)
    - Nullable anyOf collapsing
    - Dropping unsupported keywords
    - Upper-casing type names
    """
    if not isinstance(node, dict):
        return node

    # FIRST: inline references, merging any sibling keywords
    if "$ref" in node:
        resolved = _resolve_ref(node["$ref"], definitions, seen)
        siblings = {k: v for k, v in node.items() if k != "$ref" and k not in UNSUPPORTED_KEYS}
        return {**resolved, **_convert_node(siblings, definitions, seen)}

    # SECOND: collapse {"anyOf": [X, {"type": "null"}]} into X + nullable
    if "anyOf" in node:
        options = node["anyOf"]
        non_null = [option for option in options if option.get("type") != "null"]
        has_null = len(non_null) < len(options)
        if len(non_null) == 1:
            rest = {k: v for k, v in node.items() if k != "anyOf"}
            merged = _convert_node({**non_null[0], **rest}, definitions, seen)
            if has_null:
                merged["nullable"] = True
            return merged

    result: dict[str, Any] = {}
    for key, value in node.items():
        if key in UNSUPPORTED_KEYS:
            continue
        if key == "properties" and isinstance(value, dict):
            # property names are data, not keywords
            result[key] = {name: _convert_node(sub, definitions, seen) for name, sub in value.items()}
        elif isinstance(value, dict):
            result[key] = _convert_node(value, definitions, seen)
        elif isinstance(value, list):
            result[key] = [_convert_node(item, definitions, seen) for item in value]
        else:
            result[key] = value

    if isinstance(result.get("type"), str):
        result["type"] = result["type"].upper()

    return result
