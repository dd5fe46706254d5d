"""Error types raised by ViRA services.

Services raise these instead of HTTP exceptions so they stay usable outside a
request. Each error carries the HTTP status the API layer should answer with
and optional structured details; ``vira.server.exception_handlers`` turns them
into JSON responses.
"""

from __future__ import annotations

from typing import Any, Optional


class ViraError(Exception):
    """Base error for ViRA service failures.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code associated with the failure.
        details: Optional structured payload (validation rows, rollback notes, ...).
    """

    status_code: int = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class NotFoundError(ViraError):
    status_code = 404


class ValidationFailedError(ViraError):
    status_code = 400


class ConflictError(ViraError):
    status_code = 409


class ExternalServiceError(ViraError):
    """An upstream provider (email, identity, embeddings, LLM) failed."""

    status_code = 502


class TransactionRollbackError(ViraError):
    """A multi-step write failed and compensating writes were issued."""

    status_code = 500
