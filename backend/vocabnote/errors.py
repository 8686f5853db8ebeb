"""
Domain errors.

Every error carries a machine-checkable ``kind`` and a human-readable message.
The app factory maps each kind to an HTTP status in one place.
"""
from __future__ import annotations


class VocabNoteError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class ValidationError(VocabNoteError):
    """Missing or malformed input (e.g. a blank filename)."""

    kind = "validation_error"
    status_code = 400


class PreconditionError(VocabNoteError):
    """A mark-studied call that violates the schedule lifecycle."""

    kind = "precondition_failed"
    status_code = 400


class NotFoundError(VocabNoteError):
    kind = "not_found"
    status_code = 404


class ConflictError(VocabNoteError):
    """A vocabulary set with the same identifier already exists."""

    kind = "conflict"
    status_code = 409


class StorageError(VocabNoteError):
    kind = "storage_error"
    status_code = 500


class LLMError(VocabNoteError):
    """Base class for failures of the external text-generation service."""

    kind = "llm_error"
    status_code = 502


class LLMUnavailableError(LLMError):
    """Raised when the model API is not configured or cannot be reached."""

    kind = "llm_unavailable"
    status_code = 503


class RateLimitedError(LLMError):
    kind = "rate_limited"
    status_code = 429

    def __init__(self, message: str, retry_after: int = 60) -> None:
        super().__init__(message)
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        return {**super().to_dict(), "retryAfter": self.retry_after}


class MalformedResponseError(LLMError):
    """The model answered, but not with the JSON shape we asked for."""

    kind = "malformed_response"
    status_code = 502
