from pathlib import Path
from config.loader import get_config_loader

config = get_config_loader()

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "info")

# Remote API
# All REST endpoints live under API_PREFIX, including the auth endpoints
API_BASE_URL = config.get("API_BASE_URL", "https://sublite-wmu2.onrender.com")
API_PREFIX = config.get("API_PREFIX", "/api")

# Where the session is sent once it can no longer be recovered
LOGIN_PATH = config.get("LOGIN_PATH", "/login")

# Timeout configuration
# Connection timeout: Time to establish TCP connection
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
# Request timeout: Total timeout for ordinary API calls
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 30.0)
# Refresh timeout: Upper bound on one token refresh; every queued request waits on it
REFRESH_TIMEOUT = config.get("REFRESH_TIMEOUT", 15.0)

# Response statuses that mean the access token was rejected
AUTH_FAILURE_STATUSES = config.get("AUTH_FAILURE_STATUSES", (401, 403))

# Token storage
TOKEN_FILE = config.get("TOKEN_FILE", str(Path.home() / ".sublite" / "session.json"))
