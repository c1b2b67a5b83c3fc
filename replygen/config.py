import logging
import math
import os

DEFAULT_ENDPOINT_URL = "https://email-ai-reply-generator.onrender.com/api/email/generate"
DEFAULT_TIMEOUT_S = 30.0

def _valid_timeout(value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT_S
    # inf/nan would overflow the millisecond waits in the window
    return value if math.isfinite(value) and value > 0 else DEFAULT_TIMEOUT_S

def _timeout_from_env() -> float:
    return _valid_timeout(os.getenv("REPLY_TIMEOUT_S", ""))

# Global, mutable settings configured by the UI settings dialog
ENDPOINT_URL = (os.getenv("REPLY_ENDPOINT_URL") or DEFAULT_ENDPOINT_URL).strip()
TIMEOUT_S = _timeout_from_env()

def set_endpoint_url(url: str):
    """Set the reply endpoint; blank input restores the default."""
    global ENDPOINT_URL
    ENDPOINT_URL = (url or "").strip() or DEFAULT_ENDPOINT_URL

def set_timeout(seconds) -> None:
    global TIMEOUT_S
    TIMEOUT_S = _valid_timeout(seconds)

def setup_logging():
    """Root logging for both the window and the CLI; level from REPLYGEN_LOG_LEVEL."""
    logging.basicConfig(
        level=os.getenv("REPLYGEN_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
