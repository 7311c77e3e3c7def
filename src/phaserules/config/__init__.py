"""Application configuration helpers."""

from __future__ import annotations

from .env import read_env, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging, resolve_log_level
from .rules import get_rules_path
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .webhook import WebhookConfig, get_webhook_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "WebhookConfig",
    "configure_logging",
    "get_database_config",
    "get_rules_path",
    "get_storage_config",
    "get_webhook_config",
    "read_env",
    "require_env_var",
    "require_env_vars",
    "resolve_log_level",
]
