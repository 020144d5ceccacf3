"""Errors raised while generating the swagger config.

Every failure is fatal for the run: the CLI prints the message and exits 1.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for all generator failures."""


class ConfigurationError(GeneratorError):
    """Raised when a command line value cannot be turned into settings."""


class SchemaNotFoundError(GeneratorError):
    """Raised when the Prisma schema file does not exist."""


class IntrospectionError(GeneratorError):
    """Raised when the model description cannot be obtained or has the wrong shape."""


class ScriptRunError(GeneratorError):
    """Raised when the generated script cannot be executed with node."""
