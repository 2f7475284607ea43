"""Async HTTP server for the Twilio WhatsApp webhook.

Uses aiohttp's AppRunner/TCPSite for non-blocking start/stop. Twilio posts
form-encoded bodies by default; JSON bodies are accepted as well.
"""

from __future__ import annotations

import logging
from typing import Any

from aiohttp import web

from src.config import settings
from src.whatsapp.reply import TRANSIENT_FALLBACK, to_twiml

logger = logging.getLogger(__name__)

HEALTH_TEXT = "SplashyBot is running!"


async def _read_fields(request: web.Request) -> dict[str, Any]:
    """Return the webhook's fields from a form or JSON body."""
    if request.content_type == "application/json":
        payload = await request.json()
        if not isinstance(payload, dict):
            raise ValueError("JSON body is not an object")
        return payload
    return dict(await request.post())


def _twiml_response(text: str) -> web.Response:
    return web.Response(text=to_twiml(text), content_type="text/xml")


async def _handle_whatsapp(request: web.Request) -> web.Response:
    """POST /whatsapp: relay one inbound message and answer with TwiML."""
    try:
        fields = await _read_fields(request)
    except Exception:
        logger.warning("WhatsApp webhook bad request: unreadable body")
        return web.Response(text="invalid body", status=400)

    sender = str(fields.get("From") or "").strip()
    text = str(fields.get("Body") or "")

    if not sender:
        logger.warning("WhatsApp webhook: missing From")
        return web.Response(text="missing From", status=400)

    from src.whatsapp.handler import handle_inbound_message

    try:
        reply = await handle_inbound_message(sender, text)
    except Exception:
        logger.exception("WhatsApp handler failed: from=%s", sender)
        reply = TRANSIENT_FALLBACK

    return _twiml_response(reply)


async def _root(request: web.Request) -> web.Response:
    """GET /: static running acknowledgment."""
    return web.Response(text=HEALTH_TEXT)


async def _health(request: web.Request) -> web.Response:
    """GET /health: basic liveness check."""
    return web.json_response({"status": "ok"})


async def _on_cleanup(app: web.Application) -> None:
    from src.whatsapp.handler import close_reconciler

    await close_reconciler()


def _create_web_app() -> web.Application:
    """Build the aiohttp Application with routes."""
    app = web.Application()
    app.router.add_get("/", _root)
    app.router.add_get("/health", _health)
    app.router.add_post("/whatsapp", _handle_whatsapp)
    app.on_cleanup.append(_on_cleanup)
    return app


class WebhookServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(self, port: int | None = None) -> None:
        self.port = port or settings.port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start listening for inbound WhatsApp webhooks."""
        if not settings.is_backend_configured():
            logger.warning(
                "BACKEND_API_KEY or BACKEND_AGENT_ID empty, every message will get the setup reply"
            )

        app = _create_web_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "0.0.0.0", self.port)
        await site.start()
        logger.info("Webhook server listening on port %d", self.port)

    async def stop(self) -> None:
        """Shut down the server gracefully."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Webhook server stopped")
