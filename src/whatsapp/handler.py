"""Inbound WhatsApp message pipeline."""

from __future__ import annotations

import logging

from src.chat.cache import SessionKeyCache
from src.chat.client import SessionClient
from src.chat.reconciler import SessionReconciler
from src.config import settings
from src.whatsapp.reply import SETUP_FALLBACK, TRANSIENT_FALLBACK, format_reply

logger = logging.getLogger(__name__)

EMPTY_MESSAGE_PLACEHOLDER = "(The user sent an empty message, possibly an attachment or sticker.)"

_reconciler: SessionReconciler | None = None


def get_reconciler() -> SessionReconciler:
    """Return (and lazily create) the process-wide reconciler."""
    global _reconciler  # noqa: PLW0603
    if _reconciler is None:
        cache = None
        if settings.session_cache_size > 0:
            cache = SessionKeyCache(
                max_size=settings.session_cache_size,
                ttl_seconds=settings.session_cache_ttl_seconds,
            )
        _reconciler = SessionReconciler(SessionClient(), cache=cache)
    return _reconciler


async def close_reconciler() -> None:
    """Release the reconciler's HTTP session, if one was created."""
    global _reconciler  # noqa: PLW0603
    if _reconciler is not None:
        await _reconciler.client.close()
        _reconciler = None


def normalize_text(text: str | None) -> str:
    """Never forward an empty message to the backend."""
    text = (text or "").strip()
    return text or EMPTY_MESSAGE_PLACEHOLDER


async def handle_inbound_message(
    sender: str,
    text: str | None,
    reconciler: SessionReconciler | None = None,
) -> str:
    """Process one inbound message and return the reply text for the user.

    Always returns text: the backend's reply, or one of the fixed fallbacks.
    """
    logger.info("WhatsApp from %s: %s", sender, (text or "")[:80])

    if not settings.is_backend_configured():
        logger.error("Backend not configured: missing BACKEND_API_KEY or BACKEND_AGENT_ID")
        return SETUP_FALLBACK

    try:
        outcome = await (reconciler or get_reconciler()).deliver(sender, normalize_text(text))
    except Exception:
        logger.exception("Error processing WhatsApp message from %s", sender)
        return TRANSIENT_FALLBACK

    return format_reply(outcome)
