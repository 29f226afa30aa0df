"""Error types shared across pipeline stages."""


class PipelineError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(PipelineError, ValueError):
    """Invalid pipeline configuration. Raised before any article is processed."""


class MalformedRecordError(PipelineError, ValueError):
    """An individual article record is missing a required field."""

    def __init__(self, field: str, record_ref: str | None = None):
        self.field = field
        self.record_ref = record_ref
        message = f"Article record missing or invalid '{field}'"
        if record_ref:
            message = f"{message}: {record_ref}"
        super().__init__(message)


class MergeConflictError(PipelineError):
    """The article store was written by another run since it was loaded."""
