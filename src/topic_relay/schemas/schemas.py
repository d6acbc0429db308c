from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


# ------------ Wire messages ------------
class Ping(BaseModel):
    type: Literal["ping"]


class Pong(BaseModel):
    type: Literal["pong"]


class Subscribe(BaseModel):
    type: Literal["subscribe"]
    # missing or null topic list is tolerated as an empty one
    topics: Optional[List[str]] = None


class Unsubscribe(BaseModel):
    type: Literal["unsubscribe"]
    topics: Optional[List[str]] = None


class Publish(BaseModel):
    # everything besides type/topic is opaque and forwarded verbatim
    model_config = ConfigDict(extra="allow")

    type: Literal["publish"]
    topic: Optional[str] = None


Message = Annotated[
    Union[Ping, Pong, Subscribe, Unsubscribe, Publish],
    Field(discriminator="type"),
]

_message_adapter = TypeAdapter(Message)


class ProtocolViolation(Exception):
    """Raised when an inbound frame is not a recognized message shape."""


def decode_message(raw) -> Message:
    """Decode one text frame into a Message.

    Anything that is not a JSON object carrying a known ``type`` raises
    ProtocolViolation, including binary frames.
    """
    if not isinstance(raw, str):
        raise ProtocolViolation("binary frames are not supported")
    try:
        return _message_adapter.validate_json(raw)
    except ValidationError as exc:
        raise ProtocolViolation(str(exc)) from exc


# ------------ REST responses ------------
class TopicSummary(BaseModel):
    name: str
    subscribers: int


class TopicList(BaseModel):
    topics: List[TopicSummary]


class TopicStats(BaseModel):
    subscribers: int
    messages: int


class StatsResponse(BaseModel):
    topics: Dict[str, TopicStats]
    connections: int
    messages_routed: int


class HealthResponse(BaseModel):
    uptime_sec: int
    connections: int
    topics: int
    subscribers: int
