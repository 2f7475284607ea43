"""Reply text and TwiML envelope for WhatsApp via Twilio."""

from __future__ import annotations

import html

from src.chat.reconciler import Delivered, DeliveryOutcome

# Twilio rejects WhatsApp bodies longer than this. A transport limit, not
# part of the verbatim-reply rule: shorter replies pass through untouched.
MAX_REPLY_LENGTH = 1600

SETUP_FALLBACK = "Sorry, I'm not set up correctly yet. Please try again later."
TRANSIENT_FALLBACK = "Sorry, I had a small technical issue. Please try again in a moment 🙂"


def format_reply(outcome: DeliveryOutcome) -> str:
    """Turn a delivery outcome into the text sent back to the user."""
    if isinstance(outcome, Delivered):
        reply = outcome.reply
        if len(reply) > MAX_REPLY_LENGTH:
            reply = reply[: MAX_REPLY_LENGTH - 3] + "..."
        return reply
    return TRANSIENT_FALLBACK


def to_twiml(text: str) -> str:
    """Wrap *text* in a TwiML response holding exactly one message."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<Response><Message>{html.escape(text)}</Message></Response>"
    )
