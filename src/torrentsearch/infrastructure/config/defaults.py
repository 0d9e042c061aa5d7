"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "torrentsearch",
    "environment": "dev",
    "http": {
        "timeout_seconds": 20.0,
        "follow_redirects": True,
        "user_agent": "torrentsearch/0.1.0",
    },
    "search": {
        "provider_timeout_seconds": 15.0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "storage": {
        "backend": "diskcache",
        "dir": "./.data/torrentsearch",
        "redis_url": "redis://localhost:6379/0",
        "max_concurrent": 10,
    },
}
