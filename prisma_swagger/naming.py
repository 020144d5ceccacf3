"""Schema names derived from Prisma model names.

Pattern per model:
  - read schema    -> Get{Model}Response
  - create body    -> Post{Model}Request
  - update body    -> Put{Model}Request
  - paginated list -> List{Plural}Response

Examples:
  User    -> GetUserResponse, PostUserRequest, PutUserRequest, ListUsersResponse
  Status  -> ListStatusesResponse
  Address -> ListAddressesResponse
"""

from __future__ import annotations

REF_PREFIX = "#/components/schemas/"


def pluralize(name: str) -> str:
    """Return the plural form of a model name."""
    if name.endswith("s"):
        return f"{name}es"
    return f"{name}s"


def get_schema_name(model: str) -> str:
    return f"Get{model}Response"


def post_schema_name(model: str) -> str:
    return f"Post{model}Request"


def put_schema_name(model: str) -> str:
    return f"Put{model}Request"


def list_schema_name(model: str) -> str:
    return f"List{pluralize(model)}Response"


def ref(name: str) -> str:
    """Build a component $ref pointer for a schema name."""
    return f"{REF_PREFIX}{name}"


def ref_name(pointer: str) -> str | None:
    """Return the schema name a $ref points at, or None for foreign pointers."""
    if not pointer.startswith(REF_PREFIX):
        return None
    return pointer[len(REF_PREFIX):]
