"""Derive OpenAPI component schemas from a Prisma data model.

Handles:
- Prisma scalar -> OpenAPI type/format mapping
- enum and relation fields as $ref pointers
- list fields as arrays
- read (Get), create (Post), update (Put) and paginated list schemas
- string enums
- fixed error-response schemas
- request body examples
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from typing import Any

from . import naming
from .datamodel import Datamodel, Enum, Field, Model
from .examples import apply_examples
from .settings import Settings

logger = logging.getLogger(__name__)

Schema = dict[str, Any]

_SCALAR_SCHEMAS: dict[str, Schema] = {
    "String": {"type": "string"},
    "Boolean": {"type": "boolean"},
    "Int": {"type": "integer"},
    "BigInt": {"type": "integer", "format": "int64"},
    "Float": {"type": "number"},
    "Decimal": {"type": "number"},
    "DateTime": {"type": "string", "format": "date-time"},
    "Json": {"type": "object"},
    "Bytes": {"type": "string", "format": "byte"},
}

_LIST_FIELDS = (
    "count", "hasPreviousPage", "hasNextPage", "pageNumber", "pageSize", "totalPages", "items",
)

EXCEPTION_SCHEMA_NAME = "Exception"

# name -> (statusCode, message, error)
_ERROR_RESPONSES: dict[str, tuple[int, str, str]] = {
    "BadRequestException": (400, "Bad Request", "BadRequest"),
    "NotFoundException": (404, "Not Found", "NotFound"),
    "InternalServerErrorException": (500, "Internal Server Error", "InternalServerError"),
}


def scalar_to_schema(scalar: str) -> Schema:
    """Map a Prisma scalar type name to a schema fragment."""
    return dict(_SCALAR_SCHEMAS.get(scalar, {"type": "string"}))


def _array_of(schema: Schema, is_list: bool) -> Schema:
    if is_list:
        return {"type": "array", "items": schema}
    return schema


def field_schema(field: Field, get_ref_name: Callable[[str], str]) -> Schema:
    """Build the schema for a single model field."""
    if field.kind == "scalar":
        return _array_of(scalar_to_schema(field.type), field.is_list)
    if field.kind == "enum":
        return _array_of({"$ref": naming.ref(field.type)}, field.is_list)
    if field.kind == "object":
        return _array_of({"$ref": naming.ref(get_ref_name(field.type))}, field.is_list)
    return {"type": "object"}


def model_to_get_schema(model: Model, get_ref_name: Callable[[str], str]) -> Schema:
    """Build the read schema: every field, required ones listed in order."""
    properties: dict[str, Schema] = {}
    required: list[str] = []

    for f in model.fields:
        properties[f.name] = field_schema(f, get_ref_name)
        if f.is_required:
            required.append(f.name)

    schema: Schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def strip_write_fields(model: Model, get_schema: Schema, omit: Iterable[str]) -> Schema:
    """Copy the read schema without omitted and relation fields."""
    schema = copy.deepcopy(get_schema)
    if "properties" not in schema:
        return schema

    dropped = set(omit) | model.relation_field_names
    schema["properties"] = {
        name: prop for name, prop in schema["properties"].items() if name not in dropped
    }

    if isinstance(schema.get("required"), list):
        schema["required"] = [name for name in schema["required"] if name not in dropped]
        if not schema["required"]:
            del schema["required"]

    return schema


def make_all_optional(schema: Schema) -> Schema:
    """Copy a schema with every property optional."""
    optional = copy.deepcopy(schema)
    optional.pop("required", None)
    return optional


def list_response_schema(item_ref: str) -> Schema:
    """Paginated list wrapper around ``item_ref``."""
    return {
        "type": "object",
        "properties": {
            "count": {"type": "number"},
            "hasPreviousPage": {"type": "boolean"},
            "hasNextPage": {"type": "boolean"},
            "pageNumber": {"type": "number"},
            "pageSize": {"type": "number"},
            "totalPages": {"type": "number"},
            "items": {"type": "array", "items": {"$ref": item_ref}},
        },
        "required": list(_LIST_FIELDS),
    }


def enum_to_schema(enum: Enum) -> Schema:
    return {"type": "string", "enum": list(enum.values)}


def error_schemas() -> dict[str, Schema]:
    """Generic exception shape plus its 400/404/500 specializations."""
    schemas: dict[str, Schema] = {
        EXCEPTION_SCHEMA_NAME: {
            "type": "object",
            "properties": {
                "statusCode": {"type": "integer"},
                "message": {"type": "string"},
                "error": {"type": "string"},
            },
            "required": ["statusCode", "message"],
        },
    }
    for name, (status, message, error) in _ERROR_RESPONSES.items():
        schemas[name] = {
            "allOf": [{"$ref": naming.ref(EXCEPTION_SCHEMA_NAME)}],
            "example": {"statusCode": status, "message": message, "error": error},
        }
    return schemas


def build_schemas(datamodel: Datamodel, settings: Settings) -> dict[str, Schema]:
    """Build every named component schema for the data model.

    Order: enums, then Get/Post/Put/List per model, then error schemas.
    Post and Put request schemas receive a synthesized example.
    """
    schemas: dict[str, Schema] = {}
    request_names: list[str] = []

    for enum in datamodel.enums:
        schemas[enum.name] = enum_to_schema(enum)

    for model in datamodel.models:
        get_name = naming.get_schema_name(model.name)
        post_name = naming.post_schema_name(model.name)
        put_name = naming.put_schema_name(model.name)

        get_schema = model_to_get_schema(model, naming.get_schema_name)
        post_schema = strip_write_fields(model, get_schema, settings.omit_fields)

        schemas[get_name] = get_schema
        schemas[post_name] = post_schema
        schemas[put_name] = make_all_optional(post_schema)
        schemas[naming.list_schema_name(model.name)] = list_response_schema(naming.ref(get_name))
        request_names.extend((post_name, put_name))

    schemas.update(error_schemas())

    logger.debug(
        "Built %d schemas from %d models and %d enums",
        len(schemas), len(datamodel.models), len(datamodel.enums),
    )
    return apply_examples(schemas, request_names, settings.example_depth)
