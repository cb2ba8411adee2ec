"""
Pydantic Settings for ERP Operations

This module provides strongly-typed configuration settings using Pydantic,
with support for environment variables and YAML configuration files.
"""

from typing import Optional, Union
from pathlib import Path
from urllib.parse import urlparse
import os

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_yaml import to_yaml_str


_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConnectionSettings(BaseSettings):
    """
    Connection settings for the remote ERP backend.

    The backend is reached through its stateless REST resource API and
    authenticated with an API key/secret pair sent as a token header. The
    variables used by existing ERPNext deployments (ERPNEXT_BASE_URL,
    ERPNEXT_API_KEY, ERPNEXT_API_SECRET) are accepted as aliases.
    """
    base_url: str = Field(
        "http://localhost:8000",
        validation_alias=AliasChoices("base_url", "ERPNEXT_BASE_URL"),
        description="Base URL of the ERP site, e.g. https://erp.example.com"
    )
    api_key: Optional[SecretStr] = Field(
        None,
        validation_alias=AliasChoices("api_key", "ERPNEXT_API_KEY"),
        description="API key of the integration user"
    )
    api_secret: Optional[SecretStr] = Field(
        None,
        validation_alias=AliasChoices("api_secret", "ERPNEXT_API_SECRET"),
        description="API secret of the integration user"
    )
    request_timeout: float = Field(30.0, gt=0,
                                   description="Timeout in seconds for a single HTTP request")
    retry_count: int = Field(2, ge=0,
                             description="Extra attempts for requests that provably did not reach the backend")
    retry_interval: float = Field(0.5, ge=0,
                                  description="Base interval in seconds for exponential retry backoff")
    verify_ssl: bool = Field(True, description="Whether to verify the server TLS certificate")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop any trailing slash."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("base_url must be a valid http(s) URL")
        return v.rstrip("/")

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret
                    and self.api_key.get_secret_value() and self.api_secret.get_secret_value())


class BulkSettings(BaseSettings):
    """
    Settings for the bulk transaction executor.

    - max_operations bounds the size of a single batch (never above 100)
    - rollback_on_failure is the default mode when a caller does not choose one
    - operation_timeout bounds each individual gateway call, not the batch
    """
    max_operations: int = Field(100, ge=1, le=100,
                                description="Maximum number of operations accepted in one batch")
    rollback_on_failure: bool = Field(True,
                                      description="Default to all-or-nothing mode with compensation")
    operation_timeout: Optional[float] = Field(None, gt=0,
                                               description="Per-call timeout in seconds, None for no limit")
    enable_timing: bool = Field(True, description="Whether to record timing for bulk runs")

    model_config = SettingsConfigDict(env_prefix="BULK_", case_sensitive=False)


class LoggingSettings(BaseSettings):
    """Logging configuration applied by utils.configure_logging."""
    level: str = Field("INFO", validation_alias=AliasChoices("level", "LOG_LEVEL"))
    format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level == "WARN":
            level = "WARNING"
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(f"level must be one of: {', '.join(_VALID_LOG_LEVELS)}")
        return level


class ErpSettings(BaseSettings):
    """
    Main settings class consolidating all configuration categories.

    Usage:
        # Load from environment variables and defaults
        settings = ErpSettings()

        # Load from YAML file
        settings = ErpSettings.from_yaml('config.yaml')

        # Access nested settings
        base_url = settings.connection.base_url
        max_ops = settings.bulk.max_operations
    """
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings,
                                           description="Connection settings for the ERP backend")
    bulk: BulkSettings = Field(default_factory=BulkSettings,
                               description="Bulk transaction executor settings")
    logging: LoggingSettings = Field(default_factory=LoggingSettings,
                                     description="Logging configuration")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False,
                                      env_nested_delimiter="__")

    @classmethod
    def from_yaml(cls, yaml_file: Union[str, Path]) -> "ErpSettings":
        """Load settings from YAML file"""
        import yaml
        with open(yaml_file, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self) -> str:
        """Serialize settings to YAML; secrets stay masked."""
        return to_yaml_str(self)


def load_settings(config_path: Optional[str] = None) -> ErpSettings:
    """
    Load settings from file and/or environment variables.

    Args:
        config_path: Path to YAML configuration file. If None or the file
                    doesn't exist, falls back to environment variables and
                    default values.

    Returns:
        ErpSettings object with loaded configuration
    """
    if config_path and os.path.exists(config_path):
        return ErpSettings.from_yaml(config_path)
    return ErpSettings()
