from __future__ import annotations

REPHRASE_MESSAGE = (
    "I don't understand that question. Please ask about bike share data like "
    "ride times, distances, weather patterns, or station usage."
)


class QueryError(Exception):
    """Base class for failures raised while answering a question."""


class ValidationError(QueryError):
    """The question does not look like a bike-share question."""

    def __init__(self, message: str = REPHRASE_MESSAGE) -> None:
        super().__init__(message)


class BuildError(QueryError):
    """The intent cannot be turned into SQL."""


class ExecutionError(QueryError):
    """The executor failed; the message is passed through unchanged."""


__all__ = ["QueryError", "ValidationError", "BuildError", "ExecutionError"]
