"""Shared fixtures for prisma-swagger-autogen tests.

``project`` builds a throwaway project with a Prisma schema and a few
controller files, and makes it the working directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from prisma_swagger.datamodel import Datamodel, Enum, Field, Model


FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCHEMA_PRISMA = (FIXTURES_DIR / "schema.prisma").read_text(encoding="utf-8")

CONTROLLER_FILES = (
    "src/users/controllers/user.controller.ts",
    "src/tags/controllers/tag.controller.ts",
    "src/tags/service.ts",
)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A project root containing prisma/schema.prisma and controller files."""
    schema = tmp_path / "prisma" / "schema.prisma"
    schema.parent.mkdir(parents=True)
    schema.write_text(SCHEMA_PRISMA, encoding="utf-8")

    for rel in CONTROLLER_FILES:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export {};\n", encoding="utf-8")

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def datamodel() -> Datamodel:
    """The data model described by SCHEMA_PRISMA."""
    return Datamodel(
        models=(
            Model(
                name="User",
                fields=(
                    Field("id", "scalar", "String", is_required=True),
                    Field("email", "scalar", "String", is_required=True),
                    Field("status", "enum", "Status", is_required=True),
                    Field("tags", "object", "Tag", is_list=True, is_required=True),
                    Field("createdAt", "scalar", "DateTime", is_required=True),
                    Field("updatedAt", "scalar", "DateTime", is_required=True),
                ),
            ),
            Model(
                name="Tag",
                fields=(
                    Field("id", "scalar", "Int", is_required=True),
                    Field("label", "scalar", "String", is_required=True),
                    Field("weight", "scalar", "Float"),
                    Field("owner", "object", "User"),
                    Field("ownerId", "scalar", "String"),
                    Field("meta", "scalar", "Json"),
                ),
            ),
        ),
        enums=(Enum("Status", ("ACTIVE", "SUSPENDED")),),
    )
