"""Topic based publish/subscribe relay over websockets."""

__version__ = "0.1.0"

from .core import Relay, PeerSession
