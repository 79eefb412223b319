"""
config.py — Runtime settings, read once from the environment at startup.

The entry point calls load_dotenv() first, so a local .env file works the same
as exported variables. Only OPENAI_API_KEY is required; everything else has a
default that matches the hosted OpenAI endpoints.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from errors import ConfigurationError

DEFAULT_CHAT_MODEL = "gpt-4o"
DEFAULT_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-12-17"
DEFAULT_REALTIME_VOICE = "verse"
DEFAULT_SESSIONS_URL = "https://api.openai.com/v1/realtime/sessions"


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    chat_model: str = DEFAULT_CHAT_MODEL
    realtime_model: str = DEFAULT_REALTIME_MODEL
    realtime_voice: str = DEFAULT_REALTIME_VOICE
    realtime_sessions_url: str = DEFAULT_SESSIONS_URL
    upstream_timeout: float = 30.0
    idle_timeout: Optional[float] = None
    max_message_size: int = 64 * 1024
    host: str = "0.0.0.0"
    port: int = 8080
    certfile: Optional[str] = None
    keyfile: Optional[str] = None
    log_level: str = "INFO"

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks
        return (
            f"Settings(chat_model={self.chat_model!r}, "
            f"realtime_model={self.realtime_model!r}, host={self.host!r}, port={self.port})"
        )


def _positive(env: Mapping[str, str], name: str, cast, default):
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from *environ* (defaults to os.environ).

    Raises ConfigurationError if the API key is missing or a numeric value
    doesn't parse, so a bad deployment fails before it accepts connections.
    """
    env = os.environ if environ is None else environ

    api_key = env.get("OPENAI_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY is not set")

    certfile = env.get("TLS_CERT_FILE") or None
    keyfile = env.get("TLS_KEY_FILE") or None
    if bool(certfile) != bool(keyfile):
        raise ConfigurationError("TLS_CERT_FILE and TLS_KEY_FILE must be set together")

    log_level = (env.get("LOG_LEVEL") or "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"LOG_LEVEL {log_level!r} is not a logging level")

    return Settings(
        openai_api_key=api_key,
        chat_model=env.get("CHAT_MODEL") or DEFAULT_CHAT_MODEL,
        realtime_model=env.get("REALTIME_MODEL") or DEFAULT_REALTIME_MODEL,
        realtime_voice=env.get("REALTIME_VOICE") or DEFAULT_REALTIME_VOICE,
        realtime_sessions_url=env.get("REALTIME_SESSIONS_URL") or DEFAULT_SESSIONS_URL,
        upstream_timeout=_positive(env, "UPSTREAM_TIMEOUT", float, 30.0),
        idle_timeout=_positive(env, "WS_IDLE_TIMEOUT", float, None),
        max_message_size=_positive(env, "WS_MAX_MESSAGE_SIZE", int, 64 * 1024),
        host=env.get("HOST") or "0.0.0.0",
        port=_positive(env, "PORT", int, 8080),
        certfile=certfile,
        keyfile=keyfile,
        log_level=log_level,
    )
