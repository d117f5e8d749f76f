"""Domain errors raised by the grounding pipeline.

Every error carries a machine-readable code and the HTTP status the API
layer should answer with. None of them is ever converted into fallback
content inside the services; callers decide what to show.
"""

from typing import Any


class AppError(Exception):
    """Base class for all domain errors."""

    error_code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a JSON-serializable dictionary."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(AppError):
    """Referenced subject, note or turn does not exist."""

    error_code = "NOT_FOUND"
    status_code = 404


class ValidationError(AppError):
    """Malformed or missing request fields."""

    error_code = "VALIDATION_ERROR"
    status_code = 400


class EmptyCorpusError(AppError):
    """The subject exists but has no notes."""

    error_code = "EMPTY_CORPUS"
    status_code = 400


class InsufficientMaterialError(EmptyCorpusError):
    """A study set was requested for a subject without notes."""


class UpstreamRateLimitError(AppError):
    """The generative model reported quota exhaustion. Safe to retry with backoff."""

    error_code = "UPSTREAM_RATE_LIMITED"
    status_code = 429

    def __init__(self, message: str = "Model rate limit exceeded", retry_after: float | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after
        if retry_after is not None:
            self.details["retry_after"] = retry_after


class UpstreamFailureError(AppError):
    """The generative model call failed (network, timeout, bad response)."""

    error_code = "UPSTREAM_FAILURE"
    status_code = 502


class MalformedGenerationError(AppError):
    """The model output could not be parsed into the required structure."""

    error_code = "MALFORMED_GENERATION"
    status_code = 502
