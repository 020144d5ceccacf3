"""Built-in introspector for Prisma schema source text.

Produces the subset of Prisma's DMMF that the schema builder reads:

    {"datamodel": {"models": [...], "enums": [...]}}

Handles:
- model and enum blocks (datasource, generator, type and view blocks are skipped)
- line comments and /// doc comments
- optional (?) and list ([]) modifiers
- @id and @default field attributes
- @map on enum values
- Unsupported("...") column types
"""

from __future__ import annotations

import re
from typing import Any

from .errors import IntrospectionError

SCALAR_TYPES = frozenset(
    {"String", "Boolean", "Int", "BigInt", "Float", "Decimal", "DateTime", "Json", "Bytes"}
)

_BLOCK_START = re.compile(r"^(model|enum|type|view|datasource|generator)\s+(\w+)\s*\{\s*$")
_FIELD = re.compile(
    r"""^(?P<name>\w+)\s+
        (?P<type>Unsupported\("[^"]*"\)|\w+)
        (?P<list>\[\])?
        (?P<optional>\?)?
        (?P<attrs>\s+.*)?$""",
    re.VERBOSE,
)
_ENUM_VALUE = re.compile(r'^(?P<name>\w+)(?:\s+@map\(\s*"(?P<db>[^"]*)"\s*\))?\s*$')


def _strip_comment(line: str) -> str:
    """Drop a trailing // comment that is not inside a string literal."""
    in_string = False
    for i, char in enumerate(line):
        if char == '"' and (i == 0 or line[i - 1] != "\\"):
            in_string = not in_string
        elif char == "/" and not in_string and line.startswith("//", i):
            return line[:i]
    return line


def _split_blocks(source: str) -> list[tuple[str, str, list[tuple[int, str]]]]:
    """Group source lines into (keyword, name, [(line_no, line)]) blocks."""
    blocks: list[tuple[str, str, list[tuple[int, str]]]] = []
    current: tuple[str, str, list[tuple[int, str]]] | None = None
    start_line = 0

    for line_no, raw in enumerate(source.splitlines(), start=1):
        line = _strip_comment(raw).strip()
        if not line:
            continue
        if current is None:
            match = _BLOCK_START.match(line)
            if not match:
                raise IntrospectionError(f"Prisma schema line {line_no}: unexpected {line!r}")
            current = (match.group(1), match.group(2), [])
            start_line = line_no
        elif line == "}":
            blocks.append(current)
            current = None
        else:
            current[2].append((line_no, line))

    if current is not None:
        raise IntrospectionError(
            f"Prisma schema line {start_line}: {current[0]} {current[1]} is never closed"
        )
    return blocks


def _field_kind(type_name: str, models: set[str], enums: set[str]) -> str:
    if type_name in SCALAR_TYPES:
        return "scalar"
    if type_name in enums:
        return "enum"
    if type_name in models:
        return "object"
    return "unsupported"


def _parse_field(
    line_no: int, line: str, models: set[str], enums: set[str],
) -> dict[str, Any]:
    match = _FIELD.match(line)
    if not match:
        raise IntrospectionError(f"Prisma schema line {line_no}: cannot parse field {line!r}")

    attrs = match.group("attrs") or ""
    is_list = match.group("list") is not None
    return {
        "name": match.group("name"),
        "kind": _field_kind(match.group("type"), models, enums),
        "type": match.group("type"),
        "isList": is_list,
        # Prisma reports list fields as required
        "isRequired": match.group("optional") is None,
        "isId": re.search(r"@id\b", attrs) is not None,
        "hasDefaultValue": "@default(" in attrs,
    }


def _parse_enum_value(line_no: int, line: str) -> dict[str, Any]:
    match = _ENUM_VALUE.match(line)
    if not match:
        raise IntrospectionError(f"Prisma schema line {line_no}: cannot parse enum value {line!r}")
    return {"name": match.group("name"), "dbName": match.group("db")}


def get_dmmf(datamodel: str) -> dict[str, Any]:
    """Parse Prisma schema text into a DMMF-shaped dict."""
    blocks = _split_blocks(datamodel)
    models = {name for keyword, name, _ in blocks if keyword == "model"}
    enums = {name for keyword, name, _ in blocks if keyword == "enum"}

    dmmf_models: list[dict[str, Any]] = []
    dmmf_enums: list[dict[str, Any]] = []

    for keyword, name, lines in blocks:
        if keyword == "model":
            fields = [
                _parse_field(line_no, line, models, enums)
                for line_no, line in lines
                if not line.startswith("@@")
            ]
            dmmf_models.append({"name": name, "fields": fields})
        elif keyword == "enum":
            values = [
                _parse_enum_value(line_no, line)
                for line_no, line in lines
                if not line.startswith("@@")
            ]
            dmmf_enums.append({"name": name, "values": values})

    return {"datamodel": {"models": dmmf_models, "enums": dmmf_enums}}
