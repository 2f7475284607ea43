"""Conversational backend client using aiohttp.

Wraps the two remote session operations and turns every failure into a
classified ``RemoteError``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from src.chat.errors import ErrorKind, RemoteError
from src.config import settings

logger = logging.getLogger(__name__)

DEFAULT_REPLY = "Sorry, I had a small technical issue. Please try again."

ReplyExtractor = Callable[[dict[str, Any]], Any]

# Tried in order; the first non-empty string wins.
REPLY_EXTRACTORS: list[ReplyExtractor] = [
    lambda data: (data.get("response") or {}).get("agent_message"),
    lambda data: data.get("agent_message"),
    lambda data: data.get("message"),
]


def extract_reply(data: Any) -> str:
    """Select the agent's reply text from a send-message payload."""
    if not isinstance(data, dict):
        return DEFAULT_REPLY
    for extractor in REPLY_EXTRACTORS:
        try:
            value = extractor(data)
        except AttributeError:
            # e.g. "response" present but not an object
            continue
        if isinstance(value, str) and value.strip():
            return value
    return DEFAULT_REPLY


class SessionClient:
    """Client for the backend's create-session and send-message endpoints."""

    def __init__(
        self,
        api_key: str | None = None,
        agent_id: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.backend_api_key
        self.agent_id = agent_id if agent_id is not None else settings.backend_agent_id
        self.base_url = (base_url or settings.backend_api_url).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(
            total=timeout_seconds or settings.backend_timeout_seconds
        )
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        """Return (and lazily create) the shared aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        """POST JSON and return the decoded body, raising RemoteError on failure."""
        url = f"{self.base_url}{path}"
        session = self._get_session()
        try:
            async with session.post(url, json=payload) as resp:
                try:
                    text = await resp.text(errors="replace")
                except (UnicodeDecodeError, LookupError) as exc:
                    # Unknown charset label, or bytes the codec still rejects
                    logger.error(
                        "Backend sent an undecodable body: POST %s status=%d", path, resp.status
                    )
                    raise RemoteError(
                        ErrorKind.OTHER, status=resp.status, detail="undecodable body"
                    ) from exc
                body = _decode(text)
                if resp.status >= 400:
                    error = RemoteError.from_response(resp.status, body)
                    logger.warning(
                        "Backend error: POST %s status=%d kind=%s body=%s",
                        path,
                        resp.status,
                        error.kind.value,
                        text[:200],
                    )
                    raise error
                return body
        except RemoteError:
            raise
        except asyncio.TimeoutError as exc:
            logger.error("Backend timeout after %.1fs: POST %s", self.timeout.total, path)
            raise RemoteError(ErrorKind.OTHER, detail="timeout") from exc
        except aiohttp.ClientError as exc:
            logger.error("Backend request failed (network error): POST %s: %s", path, exc)
            raise RemoteError(ErrorKind.OTHER, detail=str(exc)) from exc

    async def create_session(self, key: str) -> None:
        """Initialize a remote session bound to the configured agent."""
        await self._post(f"/session/{key}", {"model_id": self.agent_id})
        logger.info("Created backend session %s", key)

    async def send_message(self, key: str, text: str) -> str:
        """Deliver one message to an existing session and return the reply."""
        data = await self._post(f"/session/{key}/messages", {"message": text})
        reply = extract_reply(data)
        logger.info("Backend replied on session %s (%d chars)", key, len(reply))
        return reply


def _decode(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text
