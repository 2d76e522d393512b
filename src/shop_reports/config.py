"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the store backend, MongoDB connection and logging options from the
environment (after loading the project `.env`).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

STORE_BACKENDS = ("memory", "mongo")


@dataclass(frozen=True)
class Settings:
    """Container for toolkit configuration read from the environment.

    Attributes:
        store_backend: Either "memory" or "mongo".
        mongo_uri: MongoDB connection URI (mongo backend only).
        mongo_db: Target MongoDB database name.
        mongo_tls: Whether to connect to MongoDB over TLS with certifi's CA bundle.
        store_latency_ms: Simulated latency applied to every store call.
        log_level: Logging level name.
        log_path: Optional log file.
    """
    store_backend: str
    mongo_uri: str
    mongo_db: str
    mongo_tls: bool
    store_latency_ms: int
    log_level: str
    log_path: Path | None


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `STORE_BACKEND` is unknown or `STORE_LATENCY_MS`
            is not a non-negative integer.
    """
    store_backend = os.getenv("STORE_BACKEND", "memory").strip().lower()
    mongo_uri = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db = os.getenv("MONGO_DB", "shop_reports")
    mongo_tls = _env_flag("MONGO_TLS")
    latency_raw = os.getenv("STORE_LATENCY_MS", "0").strip() or "0"
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    log_path_raw = os.getenv("LOG_PATH", "").strip()

    if store_backend not in STORE_BACKENDS:
        raise RuntimeError(
            f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)} "
            f"(got {store_backend!r})."
        )

    try:
        store_latency_ms = int(latency_raw)
    except ValueError:
        raise RuntimeError(
            f"STORE_LATENCY_MS must be an integer number of milliseconds (got {latency_raw!r})."
        ) from None
    if store_latency_ms < 0:
        raise RuntimeError("STORE_LATENCY_MS must not be negative.")

    return Settings(
        store_backend=store_backend,
        mongo_uri=mongo_uri,
        mongo_db=mongo_db,
        mongo_tls=mongo_tls,
        store_latency_ms=store_latency_ms,
        log_level=log_level,
        log_path=Path(log_path_raw) if log_path_raw else None,
    )
