"""
relay.py — Per-connection handlers for the text and voice websockets.

Responsibilities:
  • Text channel: read prompts one at a time, ask the chat responder, reply
  • Voice channel: fetch one ephemeral session key and hand it to the client
  • Turn upstream failures into reply frames instead of dropped connections

Wire contract:
  ┌──────────┐   text: prompt          ┌───────────┐   HTTPS   ┌──────────────┐
  │  Client   │ ──────────────────────▶ │  relay.py  │ ───────▶ │  OpenAI API  │
  │ (browser) │ ◀────────────────────── │            │ ◀─────── │              │
  └──────────┘   text: reply / "null"  └───────────┘           └──────────────┘

  • /ws        one reply per inbound frame, in order; "null" for binary frames
  • /ws/voice  exactly one frame: the raw session JSON, or "Error"
"""

import asyncio
import logging
from typing import Optional

from errors import ProtocolError, TransportError, UpstreamError

logger = logging.getLogger(__name__)

# Sentinel replies
NON_TEXT_REPLY = "null"
VOICE_ERROR_REPLY = "Error"


class ConnectionRelay:
    """Serves every websocket connection; holds no per-connection state."""

    def __init__(self, responder, fetcher, *, idle_timeout: Optional[float] = None,
                 max_message_size: Optional[int] = None):
        """
        Args:
            responder:        Object with ``async get_response(prompt) -> str``
            fetcher:          Object with ``async fetch() -> str``
            idle_timeout:     Seconds to wait for the next text frame (None = forever)
            max_message_size: Largest accepted prompt in UTF-8 bytes (None = no limit)
        """
        self.responder = responder
        self.fetcher = fetcher
        self.idle_timeout = idle_timeout
        self.max_message_size = max_message_size

    # ------------------------------------------------------------------
    # Text channel
    # ------------------------------------------------------------------

    async def handle_text(self, ws):
        """Answer each inbound frame with exactly one reply until the client leaves."""
        logger.info("Text client connected")
        try:
            while True:
                try:
                    message = await self._receive(ws)
                except asyncio.TimeoutError:
                    logger.info("Text client idle for %ss, closing", self.idle_timeout)
                    break
                except Exception as exc:
                    logger.info("Text client disconnected (%s)", exc.__class__.__name__)
                    break

                reply = await self._reply_to(message)
                try:
                    await self._send(ws, reply)
                except TransportError as exc:
                    logger.warning("Websocket error: %s", exc)
                    break
        finally:
            logger.info("Text session cleaned up")

    async def _reply_to(self, message) -> str:
        if not isinstance(message, str):
            return NON_TEXT_REPLY

        try:
            self._check_size(message)
            return await self.responder.get_response(message)
        except ProtocolError as exc:
            logger.warning("Rejected frame: %s", exc)
            return f"Error: {exc}"
        except UpstreamError as exc:
            logger.error("Chat responder failed: %s", exc)
            return f"Error: {exc}"
        except Exception as exc:
            logger.exception("Unexpected chat responder error")
            return f"Error: internal error ({exc.__class__.__name__})"

    def _check_size(self, message: str):
        if self.max_message_size is None:
            return
        if len(message.encode("utf-8")) > self.max_message_size:
            raise ProtocolError("message too large")

    async def _receive(self, ws):
        if self.idle_timeout is None:
            return await ws.receive()
        return await asyncio.wait_for(ws.receive(), timeout=self.idle_timeout)

    # ------------------------------------------------------------------
    # Voice channel
    # ------------------------------------------------------------------

    async def handle_voice(self, ws):
        """Send one session-key frame (or "Error") and return without reading."""
        logger.info("Voice client connected")
        try:
            await ws.accept()
        except Exception as exc:
            logger.warning("Websocket error: %s", exc)
            return

        try:
            reply = await self.fetcher.fetch()
        except UpstreamError as exc:
            logger.error("Session key fetch failed: %s", exc)
            reply = VOICE_ERROR_REPLY
        except Exception:
            logger.exception("Unexpected session key fetch error")
            reply = VOICE_ERROR_REPLY

        try:
            await self._send(ws, reply)
        except TransportError as exc:
            logger.warning("Websocket error: %s", exc)
        else:
            logger.info("Session key sent")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _send(ws, data: str):
        """Send one text frame; any failure becomes TransportError."""
        try:
            await ws.send(data)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
