import json
import uuid


def new_peer_id() -> str:
    return str(uuid.uuid4())


# Server -> client messages are built as dicts
def make_pong():
    return {"type": "pong"}


def make_ping():
    return {"type": "ping"}


def encode(message: dict) -> str:
    return json.dumps(message)
