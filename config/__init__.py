"""
Configuration Module

This module provides centralized configuration management for ERP operations:
- Connection configuration (base URL, API credentials, timeouts, retries)
- Bulk executor defaults (batch size limit, rollback mode, per-call timeout)
- Logging configuration

Settings are loaded from environment variables or YAML files using Pydantic.
"""

from .settings import (
    ErpSettings,
    ConnectionSettings,
    BulkSettings,
    LoggingSettings,
    load_settings
)

__all__ = [
    'ErpSettings',
    'ConnectionSettings',
    'BulkSettings',
    'LoggingSettings',
    'load_settings'
]
