"""
Configuration management for the Payment Gateway signing SDK
"""

from .gateway_config import (
    GatewayConfig,
    SANDBOX_BASE_URL,
    PRODUCTION_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_PREFIX,
    load_config_from_json,
    load_config_from_file,
    load_config_from_env,
)

__all__ = [
    'GatewayConfig',
    'SANDBOX_BASE_URL',
    'PRODUCTION_BASE_URL',
    'DEFAULT_TIMEOUT_SECONDS',
    'ENV_PREFIX',
    'load_config_from_json',
    'load_config_from_file',
    'load_config_from_env',
]
