"""Network configuration constants for the quiz application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 5000
DEFAULT_API_BASE_URL: str = f"http://127.0.0.1:{DEFAULT_PORT}"
API_REQUEST_TIMEOUT_SECONDS: float = 30.0
RATE_LIMIT_MAX_REQUESTS: int = 100
RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
TOKEN_TTL_HOURS: int = 24
