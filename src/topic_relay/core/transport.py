import asyncio
import logging
from http import HTTPStatus
from typing import Protocol

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosedError
from websockets.http11 import Request
from websockets.protocol import State

from .relay import Relay

logger = logging.getLogger(__name__)


class Channel(Protocol):
    ''' What a session needs from the transport.'''

    remote_address: str

    def is_open(self) -> bool: ...

    async def send(self, text: str) -> None: ...

    async def close(self) -> None: ...

    async def ping(self) -> asyncio.Future: ...


class WebSocketChannel:
    ''' Channel over a websockets server connection.'''

    def __init__(self, connection: ServerConnection):
        self.connection = connection
        address = connection.remote_address
        self.remote_address = str(address[0]) if address else "unknown"

    def is_open(self) -> bool:
        return self.connection.state in (State.CONNECTING, State.OPEN)

    async def send(self, text: str):
        await self.connection.send(text)

    async def close(self):
        await self.connection.close()

    async def ping(self) -> asyncio.Future:
        # resolves when the matching pong control frame arrives
        return await self.connection.ping()


def reject_non_upgrade(connection: ServerConnection, request: Request):
    """Answer plain HTTP requests with 501 instead of attempting a handshake."""
    if request.headers.get("Upgrade", "").lower() != "websocket":
        return connection.respond(HTTPStatus.NOT_IMPLEMENTED, "WebSocket upgrade required\n")
    return None


def make_handler(relay: Relay):
    async def handler(connection: ServerConnection):
        session = relay.open_session(WebSocketChannel(connection))
        try:
            async for raw in connection:
                await session.receive(raw)
                if session.closed:
                    break
        except ConnectionClosedError:
            pass
        except Exception:
            logger.exception("Unexpected error in session %s", session.id)
        finally:
            await session.close()

    return handler


def serve_relay(relay: Relay, host: str, port: int):
    """Build the websocket server; use as ``async with serve_relay(...) as server``.

    The library keepalive is disabled: liveness is handled per session.
    """
    return serve(
        make_handler(relay),
        host,
        port,
        process_request=reject_non_upgrade,
        ping_interval=None,
    )


def server_port(server: Server) -> int:
    return server.sockets[0].getsockname()[1]
