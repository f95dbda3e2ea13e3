"""
Client configuration parsing and logging setup.

Intent:
    Provide a single place to read the environment variables that control
    the backend URL, the HTTP timeout, where the session state is persisted
    and how verbose logging is.

Why:
    Centralising configuration keeps defaults and validation explicit and
    lets tests exercise config behaviour without touching the network.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from urllib.parse import urlparse


DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 15
DEFAULT_STATE_FILE = Path("~/.lms_client/state.json")


@dataclass(frozen=True)
class ClientConfig:
    api_url: str  # backend base URL without trailing slash
    timeout_seconds: int
    state_file: Path
    log_level: str


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}")
    if value <= 0 or value > 300:
        raise ValueError(f"{name} out of range (1..300), got: {value}")
    return value


def _validate_api_url(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"}:
        raise ValueError("LMS_API_URL must start with http:// or https://")
    if not parsed.hostname:
        raise ValueError("LMS_API_URL must include a host")
    return url.rstrip("/")


def load_client_config() -> ClientConfig:
    """
    Parse and validate client configuration from environment variables.

    Behavior:
        - `LMS_API_URL` is the backend base URL (default: http://localhost:8080).
        - `LMS_HTTP_TIMEOUT` is the per-request timeout in seconds (1..300).
        - `LMS_STATE_FILE` is where the token and learner id are kept.
        - `LOG_LEVEL` is passed to `configure_logging`.
    """
    api_url = _validate_api_url((os.getenv("LMS_API_URL") or DEFAULT_API_URL).strip())
    timeout = _int_env("LMS_HTTP_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
    state_file = Path(os.getenv("LMS_STATE_FILE") or DEFAULT_STATE_FILE).expanduser()
    log_level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    return ClientConfig(
        api_url=api_url,
        timeout_seconds=timeout,
        state_file=state_file,
        log_level=log_level,
    )


def configure_logging(level_name: str = "INFO") -> None:
    normalized_level = getattr(logging, level_name.upper(), logging.INFO)
    if not isinstance(normalized_level, int):
        normalized_level = logging.INFO
    logging.basicConfig(
        level=normalized_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = [
    "ClientConfig",
    "DEFAULT_API_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "load_client_config",
    "configure_logging",
]
