import asyncio
import json
from typing import Optional

from websockets.asyncio.client import connect

from .utilities import encode, make_ping


class RelayClient:
    ''' Minimal async client for the relay protocol.

    async with RelayClient("ws://localhost:4444") as client:
        await client.subscribe("orders")
        await client.publish("orders", data="x")
        print(await client.recv())
    '''

    def __init__(self, uri: str):
        self.uri = uri
        self.connection = None

    async def __aenter__(self):
        self.connection = await connect(self.uri, ping_interval=None)
        return self

    async def __aexit__(self, *exc):
        await self.connection.close()

    async def send(self, message: dict):
        await self.connection.send(encode(message))

    async def subscribe(self, *topics: str):
        await self.send({"type": "subscribe", "topics": list(topics)})

    async def unsubscribe(self, *topics: str):
        await self.send({"type": "unsubscribe", "topics": list(topics)})

    async def publish(self, topic: str, **fields):
        await self.send({"type": "publish", "topic": topic, **fields})

    async def ping(self):
        await self.send(make_ping())

    async def recv(self, timeout: Optional[float] = None) -> dict:
        raw = await asyncio.wait_for(self.connection.recv(), timeout)
        return json.loads(raw)
