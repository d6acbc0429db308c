import asyncio
import json

import pytest

from topic_relay.core import Relay


class FakeChannel:
    """In-memory stand-in for a websocket connection."""

    def __init__(self, address="127.0.0.1", fail_send=False, answer_pings=True):
        self.remote_address = address
        self.sent = []
        self.open = True
        self.fail_send = fail_send
        self.answer_pings = answer_pings
        self.pings = 0
        self.close_calls = 0

    def is_open(self):
        return self.open

    async def send(self, text):
        if self.fail_send:
            raise ConnectionError("broken pipe")
        self.sent.append(text)

    async def close(self):
        self.close_calls += 1
        self.open = False

    async def ping(self):
        self.pings += 1
        waiter = asyncio.get_running_loop().create_future()
        if self.answer_pings:
            waiter.set_result(None)
        return waiter

    def messages(self):
        return [json.loads(text) for text in self.sent]


@pytest.fixture
def channel_factory():
    return FakeChannel


@pytest.fixture
def relay():
    # long interval: monitors never tick unless a test drives them
    return Relay(ping_interval=60)