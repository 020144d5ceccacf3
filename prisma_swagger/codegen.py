"""Render templates and write generated output.

Takes the context from context_builder and produces swagger.config.js.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any

import jinja2

from .errors import ScriptRunError

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "swagger.config.js.j2"


def render(context: dict[str, Any]) -> str:
    """Render the swagger config template."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    template = env.get_template(TEMPLATE_NAME)
    return template.render(**context)


def generate(context: dict[str, Any], output_path: Path) -> Path:
    """Render the template and write it to ``output_path``."""
    output = render(context)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(output, encoding="utf-8")

    logger.debug("Wrote %s (%d bytes)", output_path, len(output))
    return output_path


def run_script(script_path: Path, cwd: Path) -> None:
    """Run the generated script with node so swagger-autogen writes the OpenAPI file."""
    logger.debug("Running node %s in %s", script_path, cwd)
    try:
        subprocess.run(["node", str(script_path)], cwd=str(cwd), check=True)
    except FileNotFoundError as exc:
        raise ScriptRunError("node executable not available on PATH") from exc
    except subprocess.CalledProcessError as exc:
        raise ScriptRunError(
            f"node {script_path} exited with status {exc.returncode}"
        ) from exc
