"""Tests for rendering and writing the swagger config script."""

import subprocess

import pytest

from prisma_swagger import codegen
from prisma_swagger.codegen import generate, render, run_script
from prisma_swagger.context_builder import build_context
from prisma_swagger.errors import ScriptRunError
from prisma_swagger.settings import Settings


def _context(**overrides):
    return build_context(Settings.from_overrides(**overrides), {"Status": {"type": "string"}}, routes=["./a.ts"])


class TestRender:
    """Test the rendered script text."""

    def test_requires_swagger_autogen(self):
        output = render(_context())
        assert output.startswith("// Generated by prisma-swagger-autogen")
        assert "require('swagger-autogen')({ openapi: '3.0.0' })" in output

    def test_embeds_literals(self):
        output = render(_context(openapi_out="./docs/openapi.json"))
        assert 'const outputFile = "./docs/openapi.json";' in output
        assert 'const routes = [\n  "./a.ts"\n];' in output
        assert '"@schemas": {\n      "Status": {' in output

    def test_fix_up_step_included_by_default(self):
        output = render(_context())
        assert "function fixSchemaKeywords(node)" in output
        assert "swaggerAutogen(outputFile, routes, docs).then(() => {" in output

    def test_fix_up_step_can_be_disabled(self):
        output = render(_context(fix_schemas=False))
        assert "fixSchemaKeywords" not in output
        assert output.rstrip().endswith("swaggerAutogen(outputFile, routes, docs);")

    def test_ends_with_newline(self):
        assert render(_context()).endswith("\n")

    def test_deterministic(self):
        assert render(_context()) == render(_context())


class TestGenerate:
    """Test writing the script to disk."""

    def test_writes_file(self, tmp_path):
        out = tmp_path / "nested" / "swagger.config.js"
        assert generate(_context(), out) == out
        assert out.read_text(encoding="utf-8") == render(_context())


class TestRunScript:
    """Test the optional node follow-up step."""

    def test_runs_node(self, tmp_path, monkeypatch):
        calls = []

        def fake_run(args, **kwargs):
            calls.append((args, kwargs))
            return subprocess.CompletedProcess(args, 0)

        monkeypatch.setattr(codegen.subprocess, "run", fake_run)
        run_script(tmp_path / "swagger.config.js", tmp_path)
        assert calls == [
            (["node", str(tmp_path / "swagger.config.js")], {"cwd": str(tmp_path), "check": True}),
        ]

    def test_node_missing(self, tmp_path, monkeypatch):
        def fake_run(args, **kwargs):
            raise FileNotFoundError("node")

        monkeypatch.setattr(codegen.subprocess, "run", fake_run)
        with pytest.raises(ScriptRunError, match="node executable not available"):
            run_script(tmp_path / "swagger.config.js", tmp_path)

    def test_node_fails(self, tmp_path, monkeypatch):
        def fake_run(args, **kwargs):
            raise subprocess.CalledProcessError(3, args)

        monkeypatch.setattr(codegen.subprocess, "run", fake_run)
        with pytest.raises(ScriptRunError, match="exited with status 3"):
            run_script(tmp_path / "swagger.config.js", tmp_path)
