"""Per-message session reconciliation against the conversational backend.

Each inbound message is sent first and recovered only on failure:

- NOT_FOUND: create the session under the same key, then resend once.
- ENDED: rotate to a freshly salted key, create it, then send once on it.
- CONFIG_CONFLICT: resend once on the same key, without creating.
- OTHER: give up.

A create that fails only because the session already exists counts as done.
Recovery happens at most once per message, so a message costs at most three
remote calls. Any failure during recovery is final.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.chat.cache import SessionKeyCache
from src.chat.client import SessionClient
from src.chat.errors import ErrorKind, RemoteError
from src.chat.identity import derive_session_key, rotation_salt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Delivered:
    """The backend answered; ``reply`` is shown to the user as-is."""

    reply: str
    session_key: str


@dataclass(frozen=True)
class Failed:
    """Delivery gave up. ``reason`` is for logs only, never for the user."""

    reason: str


DeliveryOutcome = Delivered | Failed


class SessionReconciler:
    """Decides, per message, whether to send, create-then-send, or rotate."""

    def __init__(
        self,
        client: SessionClient,
        cache: SessionKeyCache | None = None,
    ) -> None:
        self.client = client
        self.cache = cache

    def _current_key(self, sender: str) -> str:
        if self.cache is not None:
            cached = self.cache.get(sender)
            if cached:
                return cached
        return derive_session_key(sender)

    async def deliver(self, sender: str, text: str) -> DeliveryOutcome:
        """Send *text* for *sender*, applying at most one recovery step."""
        key = self._current_key(sender)

        try:
            reply = await self.client.send_message(key, text)
        except RemoteError as err:
            return await self._recover(sender, key, text, err)

        return self._delivered(sender, key, reply)

    async def _recover(
        self,
        sender: str,
        key: str,
        text: str,
        err: RemoteError,
    ) -> DeliveryOutcome:
        logger.info("Send on session %s failed (%s), recovering", key, err.kind.value)

        try:
            if err.kind is ErrorKind.NOT_FOUND:
                await self._create(key)
            elif err.kind is ErrorKind.ENDED:
                old_key = key
                key = derive_session_key(sender, rotation_salt())
                logger.info("Session %s has ended, rotating to %s", old_key, key)
                await self._create(key)
            elif err.kind is ErrorKind.CONFIG_CONFLICT:
                logger.info("Session %s exists with a different configuration, retrying", key)
            else:
                return self._failed(sender, key, err)

            reply = await self.client.send_message(key, text)
        except RemoteError as retry_err:
            return self._failed(sender, key, retry_err)

        return self._delivered(sender, key, reply)

    async def _create(self, key: str) -> None:
        try:
            await self.client.create_session(key)
        except RemoteError as err:
            if not err.already_exists:
                raise
            logger.info("Session %s already exists, sending anyway", key)

    def _delivered(self, sender: str, key: str, reply: str) -> Delivered:
        if self.cache is not None:
            self.cache.put(sender, key)
        return Delivered(reply=reply, session_key=key)

    def _failed(self, sender: str, key: str, err: RemoteError) -> Failed:
        if self.cache is not None:
            # Next message starts over from the derived key
            self.cache.discard(sender)
        reason = f"{err.kind.value}: status={err.status} detail={err.detail[:200]}"
        logger.error("Delivery failed for %s on session %s: %s", sender, key, reason)
        return Failed(reason=reason)
