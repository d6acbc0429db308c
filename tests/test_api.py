import asyncio
import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from websockets.sync.client import connect

from topic_relay.main import RELAY, app, reset_state


@pytest.fixture(autouse=True)
def clean_state():
    reset_state()
    yield
    reset_state()


def populate():
    a, b = object(), object()

    async def scenario():
        await RELAY.topics.subscribe("orders", a)
        await RELAY.topics.subscribe("orders", b)
        await RELAY.topics.subscribe("prices", a)
        await RELAY.topics.publish("orders")

    asyncio.run(scenario())
    RELAY.connections.register(SimpleNamespace(id="p1"))
    RELAY.connections.register(SimpleNamespace(id="p2"))


def test_health_empty():
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["connections"] == 0
    assert data["topics"] == 0
    assert data["subscribers"] == 0
    assert data["uptime_sec"] >= 0


def test_health_counts():
    populate()
    data = TestClient(app).get("/health").json()
    assert data["connections"] == 2
    assert data["topics"] == 2
    assert data["subscribers"] == 3


def test_list_topics():
    populate()
    data = TestClient(app).get("/topics").json()
    topics = {t["name"]: t["subscribers"] for t in data["topics"]}
    assert topics == {"orders": 2, "prices": 1}


def test_stats():
    populate()
    data = TestClient(app).get("/stats").json()
    assert data["topics"]["orders"] == {"subscribers": 2, "messages": 1}
    assert data["topics"]["prices"] == {"subscribers": 1, "messages": 0}
    assert data["connections"] == 2
    assert data["messages_routed"] == 0


def test_lifespan_runs_relay_server():
    host, port = app.state.relay_host, app.state.relay_port
    app.state.relay_host, app.state.relay_port = "127.0.0.1", 0
    try:
        with TestClient(app) as client:
            relay_port = app.state.relay_bound_port
            with connect(f"ws://127.0.0.1:{relay_port}") as ws:
                ws.send(json.dumps({"type": "subscribe", "topics": ["live"]}))
                ws.send(json.dumps({"type": "ping"}))
                assert json.loads(ws.recv(timeout=5)) == {"type": "pong"}

                health = client.get("/health").json()
                assert health["connections"] == 1
                assert health["topics"] == 1

                ws.send(json.dumps({"type": "publish", "topic": "live", "data": 1}))
                assert json.loads(ws.recv(timeout=5)) == {"type": "publish", "topic": "live", "data": 1}
                ws.send(json.dumps({"type": "ping"}))
                assert json.loads(ws.recv(timeout=5)) == {"type": "pong"}
                assert client.get("/stats").json()["messages_routed"] == 1
    finally:
        app.state.relay_host, app.state.relay_port = host, port
