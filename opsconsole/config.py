"""
CONSOLE CONFIGURATION

Purpose:
- Single place where environment settings are read
- Never hardcode the API location (use os.getenv)
- Tests build Settings directly instead of patching the environment
"""

import os
from dataclasses import dataclass


DEFAULT_API_URL = "http://localhost:5001/api"
DEFAULT_API_TIMEOUT = 10  # seconds
DEFAULT_SESSION_DIR = os.path.join("data", "sessions")
DEFAULT_ORDER_PREVIEW_LIMIT = 10


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_timeout: float = DEFAULT_API_TIMEOUT
    session_dir: str = DEFAULT_SESSION_DIR
    log_level: str = "INFO"
    order_preview_limit: int = DEFAULT_ORDER_PREVIEW_LIMIT


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    """Build settings from the process environment."""
    return Settings(
        api_url=os.getenv("OPSCONSOLE_API_URL", DEFAULT_API_URL).rstrip("/"),
        api_timeout=_env_float("OPSCONSOLE_API_TIMEOUT", DEFAULT_API_TIMEOUT),
        session_dir=os.getenv("OPSCONSOLE_SESSION_DIR", DEFAULT_SESSION_DIR),
        log_level=os.getenv("OPSCONSOLE_LOG_LEVEL", "INFO").upper(),
        order_preview_limit=_env_int(
            "OPSCONSOLE_ORDER_PREVIEW_LIMIT", DEFAULT_ORDER_PREVIEW_LIMIT
        ),
    )
