"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from .codegen import generate, run_script
from .context_builder import build_context
from .errors import GeneratorError
from .loader import load_datamodel
from .schema_builder import build_schemas
from .settings import DEFAULT_OMIT_FIELDS, DEFAULT_SCHEMA_PATH, Settings

logger = logging.getLogger(__name__)

_EPILOG = """\b
Examples:
  prisma-swagger-autogen
  prisma-swagger-autogen --schema ./prisma/schema.prisma
  prisma-swagger-autogen --controllersGlob "./src/api/**/*.ts" --outFile ./swagger.config.js
  prisma-swagger-autogen --oauthScopes '{"openid":"openid scope","profile":"profile"}'
"""


def _unset_if_blank(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    """Treat empty values and values that look like another flag as not given."""
    if not value or value.startswith("--"):
        return None
    return value


def _value_option(*param_decls: str, **attrs: object):
    """A string option that falls back to its default when left blank."""
    return click.option(*param_decls, callback=_unset_if_blank, **attrs)


def _drop_valueless_options(argv: list[str]) -> list[str]:
    """Remove value-taking flags that are last or directly followed by another flag."""
    value_flags = {
        opt
        for param in cli.params
        if isinstance(param, click.Option) and not param.is_flag
        for opt in param.opts
    }
    cleaned: list[str] = []
    for i, arg in enumerate(argv):
        if arg in value_flags and (i + 1 == len(argv) or argv[i + 1].startswith("--")):
            logger.debug("Ignoring %s without a value", arg)
            continue
        cleaned.append(arg)
    return cleaned


def run(settings: Settings) -> tuple[Path, dict[str, int]]:
    """Generate the swagger config script described by ``settings``.

    Returns the written path and schema/route counts. Nothing is written
    when loading or schema derivation fails.
    """
    datamodel = load_datamodel(settings.resolved_schema_path, settings.introspector)
    schemas = build_schemas(datamodel, settings)
    context = build_context(settings, schemas)
    out_path = generate(context, settings.resolved_out_file)
    if settings.run_node:
        run_script(out_path, settings.project_root)
    return out_path, {"schemas": context["schema_count"], "routes": context["route_count"]}


@click.command(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "ignore_unknown_options": True,
        "allow_extra_args": True,
    },
    epilog=_EPILOG,
)
@_value_option("--schema", "schema_path", help=f"Prisma schema path (default: ./{DEFAULT_SCHEMA_PATH})")
@_value_option(
    "--projectRoot", "project_root",
    help="Project root for resolving outFile and route globs (default: cwd)",
)
@_value_option(
    "--controllersGlob", "controllers_glob",
    help="Glob for controller files (default: ./**/controllers/**/*.ts)",
)
@_value_option("--outFile", "out_file", help="Path to write swagger.config.js (default: ./swagger.config.js)")
@_value_option(
    "--openapiOut", "openapi_out",
    help="Path swagger-autogen writes OpenAPI JSON to (default: ./src/web/api/openapi.json)",
)
@_value_option("--serviceTitle", "service_title", help="OpenAPI title")
@_value_option("--serverUrl", "server_url", help="OpenAPI server url")
@_value_option("--securitySchemeName", "security_scheme_name", help="Security scheme name")
@_value_option("--oauthTokenUrl", "oauth_token_url", help="OAuth2 tokenUrl")
@_value_option("--oauthRefreshUrl", "oauth_refresh_url", help="OAuth2 refreshUrl")
@_value_option(
    "--oauthScopes", "oauth_scopes",
    help='OAuth2 scopes as JSON object, e.g. {"openid":"openid scope"}',
)
@_value_option(
    "--omitFields", "omit_fields",
    help=f"Comma-separated fields to omit in write DTOs (default: {','.join(DEFAULT_OMIT_FIELDS)})",
)
@_value_option("--exampleDepth", "example_depth", help="$ref hops followed when building request examples (default: 2)")
@_value_option(
    "--introspector",
    help="Model introspector as module:function (default: built-in Prisma parser)",
)
@click.option(
    "--fix-schemas/--no-fix-schemas", "fix_schemas", default=True,
    help="Append the schema keyword fix-up step to the generated script",
)
@click.option("--run", "run_node", is_flag=True, default=False, help="Run the generated script with node")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output to stderr")
def cli(verbose: bool, **options: object) -> None:
    """prisma-swagger-autogen

    Generate a swagger-autogen config with OpenAPI schemas derived from a
    Prisma data model.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    settings = Settings.from_overrides(**options)
    logger.debug("Running with %s", settings)
    out_path, counts = run(settings)
    click.echo(f"Generated {out_path} ({counts['schemas']} schemas, {counts['routes']} routes)")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=_drop_valueless_options(list(argv)), prog_name="prisma-swagger-autogen", standalone_mode=False)
    except (GeneratorError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
