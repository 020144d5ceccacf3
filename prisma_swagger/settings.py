"""Run settings: defaults merged with command line overrides.

Built once at start-up and passed explicitly to every step.
"""

from __future__ import annotations

import json
import os
import posixpath
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import ConfigurationError

DEFAULT_SCHEMA_PATH = "prisma/schema.prisma"
DEFAULT_INTROSPECTOR = "prisma_swagger.prisma_parser:get_dmmf"

# Relations are always stripped from write bodies; these scalar names are too.
DEFAULT_OMIT_FIELDS = ("id", "createdAt", "updatedAt", "v")

# Number of $ref hops followed when synthesizing request examples
DEFAULT_EXAMPLE_DEPTH = 2


def ensure_posix(path: str) -> str:
    """Normalize path separators to forward slashes."""
    return path.replace(os.sep, posixpath.sep)


def parse_csv(value: str) -> tuple[str, ...]:
    """Split a comma-separated list, dropping blanks."""
    return tuple(part.strip() for part in value.split(",") if part.strip())


def parse_json_object(value: str, flag_name: str) -> dict[str, Any]:
    """Decode a JSON object passed on the command line."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON for {flag_name}: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ConfigurationError(f"Invalid JSON for {flag_name}: must be a JSON object")
    return parsed


@dataclass(frozen=True)
class Settings:  # pylint: disable=too-many-instance-attributes
    """Everything a generation run needs to know."""

    schema_path: str = DEFAULT_SCHEMA_PATH
    project_root: Path = field(default_factory=Path.cwd)
    controllers_glob: str = "./**/controllers/**/*.ts"
    out_file: str = "./swagger.config.js"
    openapi_out: str = "./src/web/api/openapi.json"
    service_title: str = "Microservice Swagger Docs"
    server_url: str = "http://localhost:3000"
    security_scheme_name: str = "keycloakOAuth"
    oauth_token_url: str = "http://localhost:8080/realms/master/protocol/openid-connect/token"
    oauth_refresh_url: str = "http://localhost:8080/realms/master/protocol/openid-connect/refresh"
    oauth_scopes: Mapping[str, str] = field(default_factory=lambda: {"openid": "openid"})
    omit_fields: frozenset[str] = frozenset(DEFAULT_OMIT_FIELDS)
    example_depth: int = DEFAULT_EXAMPLE_DEPTH
    fix_schemas: bool = True
    introspector: str = DEFAULT_INTROSPECTOR
    run_node: bool = False

    @property
    def resolved_schema_path(self) -> Path:
        """Schema path resolved against the current working directory."""
        return (Path.cwd() / self.schema_path).resolve()

    @property
    def resolved_out_file(self) -> Path:
        return (self.project_root / self.out_file).resolve()

    @classmethod
    def from_overrides(cls, **overrides: Any) -> Settings:
        """Build settings from defaults, ignoring overrides that are None.

        Raw command line strings are accepted for ``oauth_scopes`` (JSON
        object), ``omit_fields`` (CSV) and ``example_depth``.
        """
        values = {key: value for key, value in overrides.items() if value is not None}

        if "project_root" in values:
            values["project_root"] = (Path.cwd() / values["project_root"]).resolve()
        if isinstance(values.get("oauth_scopes"), str):
            values["oauth_scopes"] = parse_json_object(values["oauth_scopes"], "--oauthScopes")
        if isinstance(values.get("omit_fields"), str):
            values["omit_fields"] = parse_csv(values["omit_fields"])
        if "omit_fields" in values:
            values["omit_fields"] = frozenset(values["omit_fields"])
        if "example_depth" in values:
            values["example_depth"] = _parse_depth(values["example_depth"])

        settings = replace(cls(), **values)
        return replace(
            settings,
            controllers_glob=ensure_posix(settings.controllers_glob),
            out_file=ensure_posix(settings.out_file),
            openapi_out=ensure_posix(settings.openapi_out),
        )


def _parse_depth(value: Any) -> int:
    try:
        depth = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value for --exampleDepth: {value!r}") from exc
    if depth < 0:
        raise ConfigurationError(f"Invalid value for --exampleDepth: {value!r}")
    return depth
