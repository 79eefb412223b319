"""Shared fakes for relay and server tests."""

import asyncio

import pytest

from config import Settings
from errors import UpstreamError


class FakeWebSocket:
    """Stands in for a Quart websocket: scripted inbound frames, recorded sends."""

    def __init__(self, inbound=(), fail_send=False, hang=False):
        self._inbound = list(inbound)
        self.fail_send = fail_send
        self.hang = hang
        self.sent = []
        self.receive_calls = 0
        self.accepted = False

    async def receive(self):
        self.receive_calls += 1
        if self._inbound:
            item = self._inbound.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        if self.hang:
            await asyncio.Event().wait()
        raise ConnectionError("peer closed")

    async def accept(self):
        self.accepted = True

    async def send(self, data):
        if self.fail_send:
            raise ConnectionResetError("peer is gone")
        self.sent.append(data)


class FakeResponder:
    """Echoes prompts back; can be told to fail on specific prompts."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.prompts = []

    async def get_response(self, prompt):
        self.prompts.append(prompt)
        if prompt in self.failing:
            raise UpstreamError("upstream unavailable")
        return f"reply {len(self.prompts)}: {prompt}"


class FakeFetcher:
    def __init__(self, body='{"id": "sess_123"}', error=None):
        self.body = body
        self.error = error
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.body


@pytest.fixture
def settings():
    return Settings(openai_api_key="test-key")


@pytest.fixture
def fake_ws():
    return FakeWebSocket


@pytest.fixture
def responder():
    return FakeResponder()


@pytest.fixture
def fetcher():
    return FakeFetcher()
