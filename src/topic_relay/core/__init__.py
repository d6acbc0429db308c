from .relay import Relay
from .session import PeerSession
from .router import MessageRouter
from .liveness import LivenessMonitor
from .transport import Channel, WebSocketChannel, make_handler, reject_non_upgrade, serve_relay, server_port
