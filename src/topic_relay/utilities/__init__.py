from .constants import (
    RELAY_HOST,
    RELAY_PORT,
    HTTP_HOST,
    HTTP_PORT,
    PING_INTERVAL,
    LOG_LEVEL,
)
from .utility_functions import new_peer_id, make_ping, make_pong, encode
