"""Stable session keys derived from a sender's identity.

The same sender always maps to the same key, so no sender-to-session table
has to be kept. Rotation mixes in a salt to move a sender onto a fresh key.
"""

from __future__ import annotations

import secrets
import time
import uuid

from src.config import settings


def _namespace_uuid(namespace: str) -> uuid.UUID:
    return uuid.uuid5(uuid.NAMESPACE_URL, namespace)


def derive_session_key(
    sender: str,
    salt: str | None = None,
    *,
    namespace: str | None = None,
) -> str:
    """Return the session key for *sender*.

    Pure and deterministic: equal arguments give equal keys. Passing a
    ``salt`` yields a different key for the same sender (used on rotation).
    """
    ns = _namespace_uuid(namespace or settings.session_namespace)
    name = sender if not salt else f"{sender}#{salt}"
    return str(uuid.uuid5(ns, name))


def rotation_salt() -> str:
    """Fresh salt for rotating a sender onto a new session key."""
    return f"{time.time_ns()}-{secrets.token_hex(4)}"
