"""Build the Jinja2 template context for swagger.config.js.j2.

Discovers controller files, assembles the swagger-autogen ``docs`` object
(title, server, component schemas, OAuth2 password-flow security scheme)
and serializes both as JSON literals for the template.
"""

from __future__ import annotations

import glob
import json
import logging
from pathlib import Path
from typing import Any

from .settings import Settings, ensure_posix

logger = logging.getLogger(__name__)

# swagger-autogen copies "@schemas" into components.schemas verbatim
SCHEMAS_KEY = "@schemas"

_SECURITY_DESCRIPTION = "This API uses OAuth2 with the password flow."


def discover_routes(project_root: Path, pattern: str) -> list[str]:
    """Return files matching ``pattern`` under ``project_root``, sorted, posix separators."""
    matches = glob.glob(pattern, root_dir=str(project_root), recursive=True)
    routes = sorted({ensure_posix(m) for m in matches if (project_root / m).is_file()})
    logger.debug("Found %d route files matching %s", len(routes), pattern)
    return routes


def build_docs(settings: Settings, schemas: dict[str, Any]) -> dict[str, Any]:
    """Build the swagger-autogen documentation object."""
    scheme = settings.security_scheme_name
    return {
        "info": {"title": settings.service_title},
        "servers": [{"url": settings.server_url}],
        "components": {
            SCHEMAS_KEY: schemas,
            "securitySchemes": {
                scheme: {
                    "type": "oauth2",
                    "description": _SECURITY_DESCRIPTION,
                    "flows": {
                        "password": {
                            "tokenUrl": settings.oauth_token_url,
                            "refreshUrl": settings.oauth_refresh_url,
                            "scopes": dict(settings.oauth_scopes),
                        },
                    },
                },
            },
        },
        "security": [{scheme: ["openid"]}],
    }


def _to_js_literal(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def build_context(
    settings: Settings,
    schemas: dict[str, Any],
    routes: list[str] | None = None,
) -> dict[str, Any]:
    """Build the full template context."""
    if routes is None:
        routes = discover_routes(settings.project_root, settings.controllers_glob)

    return {
        "docs_json": _to_js_literal(build_docs(settings, schemas)),
        "routes_json": _to_js_literal(routes),
        "openapi_out_json": json.dumps(settings.openapi_out, ensure_ascii=False),
        "fix_schemas": settings.fix_schemas,
        "schema_count": len(schemas),
        "route_count": len(routes),
    }
