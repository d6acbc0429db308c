import os

# ------------ Config ------------
RELAY_HOST = os.getenv("RELAY_HOST", "0.0.0.0")
RELAY_PORT = int(os.getenv("RELAY_PORT", "4444"))      # websocket relay
HTTP_HOST = os.getenv("HTTP_HOST", "0.0.0.0")
HTTP_PORT = int(os.getenv("HTTP_PORT", "8000"))        # REST introspection
PING_INTERVAL = float(os.getenv("PING_INTERVAL", "30"))  # seconds between liveness probes
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# --------------------------------
