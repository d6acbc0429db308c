import asyncio
import logging
from typing import Optional, Set, TYPE_CHECKING

from ..schemas import ProtocolViolation, decode_message
from ..utilities import new_peer_id
from .liveness import LivenessMonitor

if TYPE_CHECKING:
    from .relay import Relay
    from .transport import Channel

logger = logging.getLogger(__name__)


class PeerSession:
    ''' One connected peer, from accepted upgrade until teardown.

    A session is OPEN until ``close()`` runs, after which it is CLOSED for
    good. Every way a connection can end (peer hang-up, protocol violation,
    failed send, missed liveness probe) goes through ``close()``, which
    tears down exactly once.
    '''

    def __init__(self, relay: "Relay", channel: "Channel"):
        self.id = new_peer_id()
        self.relay = relay
        self.channel = channel
        self.address = channel.remote_address
        # topics this peer joined, replayed against the registry on close
        self.topics: Set[str] = set()
        self.closed = False
        self.monitor = LivenessMonitor(self, relay.ping_interval)

    def __repr__(self):
        state = "closed" if self.closed else "open"
        return f"<PeerSession {self.id} {self.address} {state}>"

    def open(self):
        self.relay.connections.register(self)
        self.monitor.start()
        logger.info("%s connected on ip %s", self.id, self.address)
        logger.debug("Connected clients %d", self.relay.connections.count())

    async def receive(self, raw):
        """Handle one inbound frame. Frames arriving after close are dropped."""
        if self.closed:
            return
        try:
            message = decode_message(raw)
        except ProtocolViolation as exc:
            logger.warning("Protocol violation from %s, closing: %s", self.id, exc)
            await self.close()
            return
        await self.relay.router.route(self, message, raw)

    async def send(self, text: str) -> bool:
        """Send a text frame, closing the session if the channel can't take it."""
        if self.closed:
            return False
        if not self.channel.is_open():
            logger.warning("Channel of %s is not open, closing", self.id)
            await self.close()
            return False
        try:
            await self.channel.send(text)
        except Exception as exc:
            logger.warning("Send to %s failed, closing: %r", self.id, exc)
            await self.close()
            return False
        return True

    async def probe(self) -> Optional[asyncio.Future]:
        """Send a transport ping; returns the waiter resolved by the peer's pong."""
        if self.closed:
            return None
        if not self.channel.is_open():
            await self.close()
            return None
        try:
            return await self.channel.ping()
        except Exception as exc:
            logger.warning("Liveness probe to %s failed, closing: %r", self.id, exc)
            await self.close()
            return None

    async def close(self):
        if self.closed:
            return
        self.closed = True
        self.monitor.stop()
        for name in list(self.topics):
            await self.relay.topics.unsubscribe(name, self)
        self.topics.clear()
        removed = self.relay.connections.unregister(self.id)
        logger.info("a client disconnected! %s %s", self.id, removed)
        logger.debug("Connected clients %d", self.relay.connections.count())
        await self.channel.close()
