"""Remote backend error taxonomy.

``classify`` is the only place that knows the backend's error wording.
Everything downstream branches on ``ErrorKind``.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

_DESCRIPTION_FIELDS = ("description", "detail", "error", "message")

_NOT_FOUND_PHRASES = ("not found", "does not exist")
_ENDED_PHRASES = ("chat has ended",)
_CONFLICT_PHRASES = ("already exists with different configuration",)
_ALREADY_EXISTS_PHRASES = ("already exists",)


class ErrorKind(enum.Enum):
    """Closed set of failure classes for remote session operations."""

    NOT_FOUND = "not_found"
    ENDED = "ended"
    CONFIG_CONFLICT = "config_conflict"
    OTHER = "other"


class RemoteError(Exception):
    """A classified failure from the conversational backend.

    ``status`` is None for transport-level failures (timeouts, refused
    connections) where no HTTP response was received.
    """

    def __init__(self, kind: ErrorKind, status: int | None = None, detail: str = "") -> None:
        self.kind = kind
        self.status = status
        self.detail = detail
        super().__init__(f"{kind.value} (status={status}): {detail[:200]}")

    @property
    def already_exists(self) -> bool:
        """True when a create failed only because the session is already there."""
        if self.kind is ErrorKind.CONFIG_CONFLICT or self.status == 409:
            return True
        return self.status == 400 and _matches(self.detail.lower(), _ALREADY_EXISTS_PHRASES)

    @classmethod
    def from_response(cls, status: int | None, body: Any) -> RemoteError:
        """Build a classified error from an HTTP status and error body."""
        return cls(classify(status, body), status=status, detail=_describe(body))


def _describe(body: Any) -> str:
    """Pull the human-readable description out of an error body."""
    if body is None:
        return ""
    if isinstance(body, Mapping):
        for name in _DESCRIPTION_FIELDS:
            value = body.get(name)
            if isinstance(value, str) and value:
                return value
            # Some errors nest the description: {"error": {"message": ...}}
            if isinstance(value, Mapping):
                nested = _describe(value)
                if nested:
                    return nested
        return ""
    return str(body)


def _matches(description: str, phrases: tuple[str, ...]) -> bool:
    return any(phrase in description for phrase in phrases)


def classify(status: int | None, body: Any) -> ErrorKind:
    """Map an HTTP status and error body to an ``ErrorKind``."""
    description = _describe(body).lower()

    if status == 404 or _matches(description, _NOT_FOUND_PHRASES):
        return ErrorKind.NOT_FOUND
    if status == 400 and _matches(description, _ENDED_PHRASES):
        return ErrorKind.ENDED
    if status == 400 and _matches(description, _CONFLICT_PHRASES):
        return ErrorKind.CONFIG_CONFLICT
    return ErrorKind.OTHER
