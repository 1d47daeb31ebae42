"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .instagram import InstagramConfig, default_instagram_resilience, get_instagram_config
from .logging import configure_logging, parse_log_level
from .realtime import RealtimeConfig, get_realtime_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "InstagramConfig",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "RealtimeConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "default_instagram_resilience",
    "get_instagram_config",
    "get_realtime_config",
    "get_storage_config",
    "optional_env_var",
    "parse_log_level",
    "require_env_var",
    "require_env_vars",
]
