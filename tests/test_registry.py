import asyncio
from types import SimpleNamespace

from topic_relay.models import ConnectionRegistry, TopicRegistry


def test_subscribe_is_idempotent():
    topics = TopicRegistry()
    peer = object()

    async def scenario():
        await topics.subscribe("t", peer)
        await topics.subscribe("t", peer)

    asyncio.run(scenario())
    assert topics.subscriber_count("t") == 1
    assert topics.subscribers("t") == {peer}


def test_unsubscribe_drops_empty_topics():
    topics = TopicRegistry()
    a, b = object(), object()

    async def scenario():
        await topics.subscribe("x", a)
        await topics.subscribe("x", b)
        await topics.subscribe("y", a)
        await topics.unsubscribe("x", a)
        await topics.unsubscribe("y", a)

    asyncio.run(scenario())
    assert "y" not in topics
    assert topics.topic_names() == ["x"]
    assert topics.subscribers("x") == {b}


def test_unsubscribe_unknown_topic_or_peer_is_noop():
    topics = TopicRegistry()
    a = object()

    async def scenario():
        await topics.unsubscribe("missing", a)
        await topics.subscribe("t", a)
        await topics.unsubscribe("t", object())

    asyncio.run(scenario())
    assert topics.subscriber_count("t") == 1
    assert len(topics) == 1


def test_publish_returns_snapshot():
    topics = TopicRegistry()
    a, b = object(), object()

    async def scenario():
        await topics.subscribe("t", a)
        await topics.subscribe("t", b)
        receivers = await topics.publish("t")
        await topics.unsubscribe("t", a)
        return receivers

    receivers = asyncio.run(scenario())
    assert receivers == {a, b}
    assert topics.subscribers("t") == {b}


def test_publish_unknown_topic_returns_empty_set():
    topics = TopicRegistry()
    assert asyncio.run(topics.publish("nobody")) == set()
    assert asyncio.run(topics.publish(None)) == set()
    assert len(topics) == 0


def test_publish_counts_messages_per_topic():
    topics = TopicRegistry()
    a = object()

    async def scenario():
        await topics.subscribe("t", a)
        await topics.publish("t")
        await topics.publish("t")
        return await topics.snapshot()

    snapshot = asyncio.run(scenario())
    assert snapshot["t"].messages_published == 2


def test_connection_registry():
    connections = ConnectionRegistry()
    peer = SimpleNamespace(id="p1")
    connections.register(peer)
    assert connections.count() == 1
    assert connections.get("p1") is peer
    assert "p1" in connections

    assert connections.unregister("p1") is True
    assert connections.unregister("p1") is False
    assert connections.count() == 0
    assert connections.ids() == []
