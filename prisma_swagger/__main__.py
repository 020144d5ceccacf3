"""Entry point: python -m prisma_swagger

Reads prisma/schema.prisma, generates swagger.config.js.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
