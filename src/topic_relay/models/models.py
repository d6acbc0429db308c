import asyncio
from typing import Dict, List, Optional, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.session import PeerSession


# ------------ In-memory structures ------------
class Topic:
    ''' A named topic and the sessions currently subscribed to it.'''

    def __init__(self, name: str):
        self.name = name
        # membership only; sessions are owned by their connection handler
        self.subscribers: Set["PeerSession"] = set()
        # stats
        self.messages_published = 0


class TopicRegistry:
    ''' Maps topic name -> subscribers.

    Topics are created on first subscribe and dropped as soon as the last
    subscriber leaves, so the registry never holds an empty topic.
    '''

    def __init__(self):
        self._topics: Dict[str, Topic] = {}
        self.lock = asyncio.Lock()

    async def subscribe(self, name: str, peer: "PeerSession"):
        async with self.lock:
            topic = self._topics.get(name)
            if topic is None:
                topic = Topic(name)
                self._topics[name] = topic
            topic.subscribers.add(peer)

    async def unsubscribe(self, name: str, peer: "PeerSession"):
        async with self.lock:
            topic = self._topics.get(name)
            if topic is None:
                return
            topic.subscribers.discard(peer)
            if not topic.subscribers:
                del self._topics[name]

    async def publish(self, name: Optional[str]) -> Set["PeerSession"]:
        """Return the subscribers of ``name`` at call time.

        The returned set is a copy: recipients closing during fan-out
        unsubscribe themselves without disturbing the caller's iteration.
        """
        async with self.lock:
            topic = self._topics.get(name)
            if topic is None:
                return set()
            topic.messages_published += 1
            return set(topic.subscribers)

    # introspection
    def __contains__(self, name: str) -> bool:
        return name in self._topics

    def __len__(self) -> int:
        return len(self._topics)

    def topic_names(self) -> List[str]:
        return list(self._topics)

    def subscribers(self, name: str) -> Set["PeerSession"]:
        topic = self._topics.get(name)
        return set(topic.subscribers) if topic else set()

    def subscriber_count(self, name: str) -> int:
        topic = self._topics.get(name)
        return len(topic.subscribers) if topic else 0

    async def snapshot(self) -> Dict[str, Topic]:
        async with self.lock:
            return dict(self._topics)

    def clear(self):
        self._topics.clear()


class ConnectionRegistry:
    ''' Maps peer id -> session, one entry per live connection.'''

    def __init__(self):
        self._peers: Dict[str, "PeerSession"] = {}

    def register(self, peer: "PeerSession"):
        self._peers[peer.id] = peer

    def unregister(self, peer_id: str) -> bool:
        return self._peers.pop(peer_id, None) is not None

    def get(self, peer_id: str) -> Optional["PeerSession"]:
        return self._peers.get(peer_id)

    def ids(self) -> List[str]:
        return list(self._peers)

    def count(self) -> int:
        return len(self._peers)

    def __contains__(self, peer_id: str) -> bool:
        return peer_id in self._peers

    def clear(self):
        self._peers.clear()
