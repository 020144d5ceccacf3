"""Typed view of the DMMF tree returned by an introspector.

Only the parts the schema builder needs are kept: models with their
ordered fields, and enums with their ordered value names.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import IntrospectionError


@dataclass(frozen=True)
class Field:
    """One field of a Prisma model."""

    name: str
    kind: str
    type: str
    is_list: bool = False
    is_required: bool = False

    @property
    def is_relation(self) -> bool:
        return self.kind == "object"

    @classmethod
    def from_dmmf(cls, raw: Mapping[str, Any]) -> Field:
        return cls(
            name=str(raw["name"]),
            kind=str(raw.get("kind", "scalar")),
            type=str(raw.get("type", "")),
            is_list=bool(raw.get("isList", False)),
            is_required=bool(raw.get("isRequired", False)),
        )


@dataclass(frozen=True)
class Model:
    name: str
    fields: tuple[Field, ...]

    @property
    def relation_field_names(self) -> frozenset[str]:
        return frozenset(f.name for f in self.fields if f.is_relation)


@dataclass(frozen=True)
class Enum:
    name: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class Datamodel:
    """Models and enums in declaration order."""

    models: tuple[Model, ...]
    enums: tuple[Enum, ...]

    @classmethod
    def from_dmmf(cls, dmmf: Any, source: str = "introspector") -> Datamodel:
        """Validate the raw DMMF shape and convert it.

        Raises IntrospectionError when ``datamodel.models`` or
        ``datamodel.enums`` is missing or not a list.
        """
        datamodel = dmmf.get("datamodel") if isinstance(dmmf, Mapping) else None
        if (
            not isinstance(datamodel, Mapping)
            or not isinstance(datamodel.get("models"), list)
            or not isinstance(datamodel.get("enums"), list)
        ):
            raise IntrospectionError(f"Unexpected DMMF shape returned by {source}")

        try:
            models = tuple(
                Model(
                    name=str(m["name"]),
                    fields=tuple(Field.from_dmmf(f) for f in m.get("fields", [])),
                )
                for m in datamodel["models"]
            )
            enums = tuple(
                Enum(
                    name=str(e["name"]),
                    values=tuple(_enum_value_name(v) for v in e.get("values", [])),
                )
                for e in datamodel["enums"]
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise IntrospectionError(
                f"Unexpected DMMF shape returned by {source}: {exc!r}"
            ) from exc

        return cls(models=models, enums=enums)


def _enum_value_name(value: Any) -> str:
    # DMMF enum values are {"name": ..., "dbName": ...}; bare strings are accepted too
    if isinstance(value, Mapping):
        return str(value["name"])
    return str(value)
