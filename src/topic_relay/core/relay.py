from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ..models import ConnectionRegistry, TopicRegistry
from ..utilities import PING_INTERVAL
from .router import MessageRouter
from .session import PeerSession

if TYPE_CHECKING:
    from .transport import Channel


class Relay:
    ''' Owns the shared registries; every session is created through it.'''

    def __init__(self, ping_interval: float = PING_INTERVAL):
        self.ping_interval = ping_interval
        self.connections = ConnectionRegistry()
        self.topics = TopicRegistry()
        self.router = MessageRouter(self.topics)
        self.started_at = datetime.now(timezone.utc)

    def open_session(self, channel: "Channel") -> PeerSession:
        session = PeerSession(self, channel)
        session.open()
        return session

    async def close_all(self):
        for peer_id in self.connections.ids():
            session = self.connections.get(peer_id)
            if session is not None:
                await session.close()

    def reset(self):
        self.connections.clear()
        self.topics.clear()
        self.router.messages_routed = 0
        self.started_at = datetime.now(timezone.utc)
