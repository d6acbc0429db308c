import logging
from typing import Iterable, TYPE_CHECKING

from ..models import TopicRegistry
from ..schemas import Message, Ping, Publish, Subscribe, Unsubscribe
from ..utilities import encode, make_pong

if TYPE_CHECKING:
    from .session import PeerSession

logger = logging.getLogger(__name__)


class MessageRouter:
    ''' Applies decoded messages to the topic registry and delivers publishes.'''

    def __init__(self, topics: TopicRegistry):
        self.topics = topics
        # stats
        self.messages_routed = 0

    async def route(self, session: "PeerSession", message: Message, raw: str):
        if isinstance(message, Subscribe):
            await self.subscribe(session, message.topics or [])
        elif isinstance(message, Unsubscribe):
            await self.unsubscribe(session, message.topics or [])
        elif isinstance(message, Publish):
            await self.publish(message.topic, raw)
        elif isinstance(message, Ping):
            await session.send(encode(make_pong()))
        # pong: nothing to do

    async def subscribe(self, session: "PeerSession", names: Iterable[str]):
        for name in names:
            if session.closed:
                return
            await self.topics.subscribe(name, session)
            if session.closed:
                # teardown ran while we waited for the registry
                await self.topics.unsubscribe(name, session)
                return
            session.topics.add(name)

    async def unsubscribe(self, session: "PeerSession", names: Iterable[str]):
        for name in names:
            await self.topics.unsubscribe(name, session)
            session.topics.discard(name)

    async def publish(self, topic, raw: str) -> int:
        """Forward ``raw`` verbatim to every current subscriber of ``topic``.

        A failed delivery closes that recipient only. Returns the number of
        successful deliveries.
        """
        receivers = await self.topics.publish(topic)
        delivered = 0
        for receiver in receivers:
            if await receiver.send(raw):
                delivered += 1
        self.messages_routed += delivered
        logger.debug("Routed publish on %r to %d/%d peers", topic, delivered, len(receivers))
        return delivered
