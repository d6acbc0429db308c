from .schemas import (
    Ping,
    Pong,
    Subscribe,
    Unsubscribe,
    Publish,
    Message,
    ProtocolViolation,
    decode_message,
    TopicSummary,
    TopicList,
    TopicStats,
    StatsResponse,
    HealthResponse,
)
