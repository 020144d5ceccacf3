"""Synthesize example values for request body schemas.

$ref pointers are followed at most ``max_depth`` times, so self-referencing
relation chains terminate. Properties whose example cannot be determined are
left out of the synthesized object.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from . import naming

EPOCH_TIMESTAMP = "1970-01-01T00:00:00.000Z"


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# Sentinel: no example could be determined (distinct from a null example)
MISSING: Any = _Missing()


def _scalar_example(schema: Mapping[str, Any]) -> Any:
    schema_type = schema.get("type")
    if schema_type == "string":
        if schema.get("format") == "date-time":
            return EPOCH_TIMESTAMP
        return "string"
    if schema_type in ("integer", "number"):
        return 0
    if schema_type == "boolean":
        return True
    if schema_type == "object":
        return {}
    return None


def build_example(
    schema: Mapping[str, Any],
    schemas: Mapping[str, Mapping[str, Any]],
    max_depth: int,
    depth: int = 0,
) -> Any:
    """Return a representative value for ``schema`` or MISSING."""
    if "example" in schema:
        return schema["example"]

    if "$ref" in schema:
        name = naming.ref_name(schema["$ref"])
        if depth >= max_depth or name is None or name not in schemas:
            return MISSING
        return build_example(schemas[name], schemas, max_depth, depth + 1)

    if "allOf" in schema:
        merged: dict[str, Any] = {}
        for branch in schema["allOf"]:
            value = build_example(branch, schemas, max_depth, depth)
            if isinstance(value, dict):
                merged.update(value)
        return merged if merged else MISSING

    if schema.get("enum"):
        return schema["enum"][0]

    if schema.get("type") == "array":
        item = build_example(schema.get("items", {}), schemas, max_depth, depth)
        return MISSING if item is MISSING else [item]

    if "properties" in schema:
        result: dict[str, Any] = {}
        for prop_name, prop_schema in schema["properties"].items():
            value = build_example(prop_schema, schemas, max_depth, depth)
            if value is not MISSING:
                result[prop_name] = value
        return result

    return _scalar_example(schema)


def apply_examples(
    schemas: Mapping[str, dict[str, Any]],
    names: Iterable[str],
    max_depth: int,
) -> dict[str, dict[str, Any]]:
    """Return a copy of ``schemas`` with examples added to the named schemas.

    Schemas that already carry an example are left untouched.
    """
    result = dict(schemas)
    for name in names:
        schema = result[name]
        if "example" in schema:
            continue
        value = build_example(schema, schemas, max_depth)
        if value is not MISSING:
            result[name] = {**schema, "example": value}
    return result
