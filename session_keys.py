"""
session_keys.py — Requests ephemeral realtime-session credentials.

The browser can't hold the real API key, so the voice channel asks the
realtime sessions endpoint for a short-lived session on its behalf and hands
the raw JSON body straight back to the client.
"""

import logging
from typing import Optional

import httpx

from config import Settings
from errors import UpstreamError

logger = logging.getLogger(__name__)


class SessionKeyFetcher:
    """One POST to the realtime sessions endpoint per call."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.url = settings.realtime_sessions_url
        self.model = settings.realtime_model
        self.voice = settings.realtime_voice
        self.timeout = settings.upstream_timeout
        self._api_key = settings.openai_api_key
        self._client = client

    async def fetch(self) -> str:
        """Create a session and return the response body verbatim."""
        logger.info("Requesting realtime session (model=%s, voice=%s)", self.model, self.voice)
        try:
            if self._client is not None:
                response = await self._post(self._client)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client)
        except httpx.HTTPError as exc:
            logger.warning("Realtime session request failed: %s", exc)
            raise UpstreamError(f"session request failed: {exc}") from exc

        if not response.is_success:
            logger.error("Realtime session rejected: HTTP %s", response.status_code)
            raise UpstreamError(f"session request returned HTTP {response.status_code}")

        # Strict decode: a body that isn't valid text is an upstream failure
        try:
            return response.content.decode(response.encoding or "utf-8")
        except UnicodeDecodeError as exc:
            raise UpstreamError("session response body could not be decoded") from exc

    async def _post(self, client: httpx.AsyncClient) -> httpx.Response:
        return await client.post(
            self.url,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            json={"model": self.model, "voice": self.voice},
        )
