"""
server.py — Quart web server that bridges browser clients to the OpenAI API.

Endpoints:
  GET  /               → serves the web frontend (pages/index.html)
  GET  /pages/*        → serves static JS/CSS assets
  GET  /index/<name>   → debug greeting, handy for checking the server is up
  WS   /ws             → text chat (one reply per prompt)
  WS   /ws/voice       → one ephemeral realtime-session key, then closes

WebSocket protocol:
  /ws        Client → Server:  text frame with a prompt
             Server → Client:  text frame with the model reply, "Error: ..." if
                               the upstream call failed, "null" for binary frames
  /ws/voice  Server → Client:  one text frame with the raw session JSON, or "Error"
"""

import logging

from dotenv import load_dotenv
from quart import Quart, websocket

from chatbot import ChatResponder
from config import Settings, load_settings
from errors import ConfigurationError
from relay import ConnectionRelay
from session_keys import SessionKeyFetcher

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"

logger = logging.getLogger(__name__)


# ── Quart app ──────────────────────────────────────────────────────────────

def create_app(settings: Settings = None, *, responder=None, fetcher=None) -> Quart:
    """Build the app. Collaborators default to the real OpenAI clients."""
    if settings is None:
        settings = load_settings()

    # Assets under pages/ are served by Quart at /pages/<filename>
    app = Quart(__name__, static_folder="pages")
    app.extensions["relay"] = ConnectionRelay(
        responder or ChatResponder(settings),
        fetcher or SessionKeyFetcher(settings),
        idle_timeout=settings.idle_timeout,
        max_message_size=settings.max_message_size,
    )

    @app.route("/")
    async def index():
        """Serve the web UI."""
        return await app.send_static_file("index.html")

    @app.route("/index/<name>")
    async def debug_greeting(name):
        return f"Hello {name}"

    @app.websocket("/ws")
    async def text_ws():
        """Chat over a websocket: one text reply per inbound frame."""
        await app.extensions["relay"].handle_text(websocket._get_current_object())

    @app.websocket("/ws/voice")
    async def voice_ws():
        """Hand the client one ephemeral session key and finish."""
        await app.extensions["relay"].handle_voice(websocket._get_current_object())

    return app


# ── Entry point ────────────────────────────────────────────────────────────

def main():
    load_dotenv()
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        raise SystemExit(f"ERROR: {exc} (set it in your environment or .env file)")

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = create_app(settings)
    run_kwargs = {}
    if settings.certfile:
        run_kwargs.update(certfile=settings.certfile, keyfile=settings.keyfile)
    logger.info("Listening on %s:%s", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, **run_kwargs)


if __name__ == "__main__":
    main()
