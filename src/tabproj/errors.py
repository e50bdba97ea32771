"""Fatal configuration errors raised while building a projection table."""

from __future__ import annotations


class ProjectionError(Exception):
    """Base class for errors that abort projection building.

    The underlying library exception is kept on ``original_error`` (and as
    ``__cause__``) so callers can report the exact schema problem.
    """

    prefix = "projection error"

    def __init__(self, original_error: Exception):
        super().__init__(f"{self.prefix}: {original_error}")
        self.original_error = original_error


class SchemaBuildError(ProjectionError):
    """Raised when the schema document is not a structurally valid JSON Schema."""

    prefix = "failed to parse json schema"


class SchemaIndexError(ProjectionError):
    """Raised when a reference inside the schema cannot be resolved."""

    prefix = "cannot process json schema"
