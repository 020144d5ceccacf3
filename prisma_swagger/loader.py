"""Load the Prisma data model.

Reads the schema source, runs it through the configured introspector and
validates the returned DMMF tree. A ``.json`` source is taken to be a
pre-computed DMMF document and is loaded directly.
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .datamodel import Datamodel
from .errors import ConfigurationError, IntrospectionError, SchemaNotFoundError

logger = logging.getLogger(__name__)


def resolve_introspector(reference: str) -> Callable[[str], Any]:
    """Import the ``module:attribute`` introspector callable."""
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Invalid introspector reference {reference!r}, expected 'module:function'"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise IntrospectionError(f"{module_name} is not available: {exc}") from exc

    introspector = getattr(module, attr, None)
    if not callable(introspector):
        raise IntrospectionError(f"{module_name}.{attr} not available")
    return introspector


async def _await(value: Any) -> Any:
    return await value


def introspect(source: str, reference: str) -> Any:
    """Call the introspector, awaiting the result when it is awaitable."""
    introspector = resolve_introspector(reference)
    result = introspector(source)
    if inspect.isawaitable(result):
        result = asyncio.run(_await(result))
    return result


def load_dmmf(schema_path: Path, reference: str) -> Any:
    """Read the schema file and return the raw DMMF tree."""
    if not schema_path.is_file():
        raise SchemaNotFoundError(f"Prisma schema not found at {schema_path}")

    logger.debug("Reading model description from %s", schema_path)
    try:
        text = schema_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise IntrospectionError(f"Prisma schema at {schema_path} is not valid UTF-8: {exc}") from exc

    if schema_path.suffix == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise IntrospectionError(f"Invalid DMMF JSON in {schema_path}: {exc}") from exc

    return introspect(text, reference)


def load_datamodel(schema_path: Path, reference: str) -> Datamodel:
    """Load and validate the data model found at ``schema_path``."""
    dmmf = load_dmmf(schema_path, reference)
    source = str(schema_path) if schema_path.suffix == ".json" else reference
    datamodel = Datamodel.from_dmmf(dmmf, source=source)
    logger.debug(
        "Loaded %d models and %d enums", len(datamodel.models), len(datamodel.enums),
    )
    return datamodel
