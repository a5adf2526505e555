"""Domain exceptions raised by the service layer.

Every exception carries a human-readable message plus structured context
(the identifiers of the operation that failed). The HTTP layer maps them to
status codes in ``comic_cms.main``; only validation, not-found and conflict
messages are ever shown to clients.
"""

from __future__ import annotations

from typing import Any


class ComicCmsError(RuntimeError):
    """Base exception for all comic CMS failures."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        ctx = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({ctx})"


class ValidationError(ComicCmsError):
    """Raised when a request body is malformed. Nothing has been written."""


class NotFoundError(ComicCmsError):
    """Raised when a referenced comic, action or artist does not exist."""


class AuthorizationError(ComicCmsError):
    """Raised when the caller may not act on the referenced record."""


class ConflictError(ComicCmsError):
    """Base class for requests that conflict with the current record state."""


class ActionAlreadyClaimedError(ConflictError):
    """Raised when another moderator already holds a moderation action."""


class ActionAlreadyProcessedError(ConflictError):
    """Raised when a moderation action has already reached a terminal state."""


class InvalidStateError(ConflictError):
    """Raised when a comic is not in a state that allows the transition."""


class DataStoreError(ComicCmsError):
    """Raised when a query or transaction fails.

    The underlying driver exception is chained as ``__cause__``.
    """


class LedgerUnavailableError(DataStoreError):
    """Raised when contribution points could not be recorded."""
