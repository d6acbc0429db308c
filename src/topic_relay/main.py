import argparse
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI

from .core import Relay, serve_relay, server_port
from .schemas import HealthResponse, StatsResponse, TopicList, TopicStats, TopicSummary
from .utilities import HTTP_HOST, HTTP_PORT, LOG_LEVEL, PING_INTERVAL, RELAY_HOST, RELAY_PORT

logger = logging.getLogger(__name__)

# Global relay, shared by the websocket server and the REST endpoints
RELAY = Relay(ping_interval=PING_INTERVAL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with serve_relay(RELAY, app.state.relay_host, app.state.relay_port) as server:
        app.state.relay_bound_port = server_port(server)
        logger.info("Relay listening on ws://%s:%d", app.state.relay_host, app.state.relay_bound_port)
        try:
            yield
        finally:
            await RELAY.close_all()
    logger.info("Relay stopped")


app = FastAPI(title="Topic relay", lifespan=lifespan)
app.state.relay_host = RELAY_HOST
app.state.relay_port = RELAY_PORT


def reset_state():
    RELAY.reset()


# -------------- REST endpoints --------------

@app.get("/health", response_model=HealthResponse)
async def rest_health():
    now = datetime.now(timezone.utc)
    uptime_sec = int((now - RELAY.started_at).total_seconds())
    topics = await RELAY.topics.snapshot()
    return HealthResponse(
        uptime_sec=uptime_sec,
        connections=RELAY.connections.count(),
        topics=len(topics),
        subscribers=sum(len(t.subscribers) for t in topics.values()),
    )


@app.get("/topics", response_model=TopicList)
async def rest_list_topics():
    topics = await RELAY.topics.snapshot()
    return TopicList(
        topics=[TopicSummary(name=t.name, subscribers=len(t.subscribers)) for t in topics.values()]
    )


@app.get("/stats", response_model=StatsResponse)
async def rest_stats():
    topics = await RELAY.topics.snapshot()
    out = {}
    for name, t in topics.items():
        out[name] = TopicStats(subscribers=len(t.subscribers), messages=t.messages_published)
    return StatsResponse(
        topics=out,
        connections=RELAY.connections.count(),
        messages_routed=RELAY.router.messages_routed,
    )


# -------------- Entry point --------------

def run(argv=None):
    parser = argparse.ArgumentParser(prog="topic-relay", description="Topic based websocket pub/sub relay")
    parser.add_argument("--host", default=RELAY_HOST, help="relay bind address")
    parser.add_argument("--port", type=int, default=RELAY_PORT, help="relay websocket port")
    parser.add_argument("--http-host", default=HTTP_HOST)
    parser.add_argument("--http-port", type=int, default=HTTP_PORT, help="REST API port")
    parser.add_argument("--ping-interval", type=float, default=PING_INTERVAL, help="seconds between liveness probes")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    RELAY.ping_interval = args.ping_interval
    app.state.relay_host = args.host
    app.state.relay_port = args.port
    uvicorn.run(app, host=args.http_host, port=args.http_port, log_level=args.log_level.lower())


if __name__ == "__main__":
    run()
