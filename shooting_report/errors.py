from __future__ import annotations

from typing import Any, Optional


class PipelineError(Exception):
    """Base class for every error raised while preparing the report data."""


class SourceUnavailable(PipelineError):
    """The raw table could not be fetched or parsed. Aborts the run."""


class RecordError(PipelineError):
    """A single record failed validation and is dropped from the batch."""

    def __init__(self, field: str, value: Any, message: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message or f"{type(self).__name__}: {field}={value!r}")


class SchemaViolation(RecordError):
    pass


class DateParseError(RecordError):
    pass


class CategoryViolation(RecordError):
    pass


RECORD_ERRORS = (SchemaViolation, DateParseError, CategoryViolation)
