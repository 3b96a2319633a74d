"""Typed errors raised by the chromaview pipeline.

Every pipeline failure is a PipelineError subclass carrying a stable ``kind``
string, so a host can render the message in place of a table or plot without
parsing text.
"""

from __future__ import annotations

from typing import Iterable


class PipelineError(Exception):
    """Base class for all pipeline errors."""

    kind: str = "PipelineError"


class MissingFieldError(PipelineError):
    """A required value was null or absent after the null-filter step.

    This indicates an inconsistency inside the pipeline (or a table built with
    ``filter_null`` disabled), not malformed user data.
    """

    kind = "MissingField"

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"missing value in required field {column!r}")


class SchemaMismatchError(PipelineError):
    """The input table lacks expected columns or has unusable dtypes."""

    kind = "SchemaMismatch"

    def __init__(self, message: str, *, missing: Iterable[str] = ()) -> None:
        self.missing = tuple(missing)
        super().__init__(message)


class UnsupportedError(PipelineError):
    """The requested computation is not defined."""

    kind = "Unsupported"

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"unsupported: {feature}")
