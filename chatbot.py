"""
chatbot.py — Turns one user prompt into one model reply.

Each call is independent: a single user-role message goes to the chat
completions API and the first choice's content comes back. No history, no
caching — the same prompt twice means two upstream calls.
"""

import logging

from openai import AsyncOpenAI, OpenAIError

from config import Settings
from errors import UpstreamError

logger = logging.getLogger(__name__)


class ChatResponder:
    """Calls the OpenAI chat completions API on behalf of the text channel."""

    def __init__(self, settings: Settings, client=None):
        """
        Args:
            settings: Loaded Settings (API key, model, timeout)
            client:   Optional pre-built AsyncOpenAI-compatible client
        """
        self.model = settings.chat_model
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.upstream_timeout,
        )

    async def get_response(self, prompt: str) -> str:
        """Return the model's reply to *prompt*, or raise UpstreamError."""
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            logger.warning("Chat completion failed: %s", exc)
            raise UpstreamError(f"chat completion failed: {exc}") from exc

        if not completion.choices:
            raise UpstreamError("chat completion returned no choices")

        content = completion.choices[0].message.content
        if not content:
            raise UpstreamError("chat completion returned empty content")
        return content
