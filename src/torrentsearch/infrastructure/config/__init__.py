from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, StorageConfig

__all__ = ["AppConfig", "EnvOverrides", "StorageConfig", "load_config"]
