"""
Tests for settings loading, bulk configuration, logging setup and log
redaction.
"""

import logging

import pytest
from pydantic import ValidationError

from bulk_operations import BulkOperationConfig
from config import BulkSettings, ConnectionSettings, ErpSettings, LoggingSettings, load_settings
from utils import REDACTED, configure_logging, redact_sensitive_data

ENV_VARS = (
    "ERPNEXT_BASE_URL", "ERPNEXT_API_KEY", "ERPNEXT_API_SECRET",
    "BASE_URL", "API_KEY", "API_SECRET", "LOG_LEVEL", "LEVEL",
    "BULK_MAX_OPERATIONS", "BULK_ROLLBACK_ON_FAILURE", "BULK_OPERATION_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConnectionSettings:

    def test_defaults(self):
        settings = ConnectionSettings()
        assert settings.base_url == "http://localhost:8000"
        assert settings.has_credentials is False
        assert settings.retry_count == 2

    def test_reads_deployment_variables(self, monkeypatch):
        monkeypatch.setenv("ERPNEXT_BASE_URL", "https://erp.example.com/")
        monkeypatch.setenv("ERPNEXT_API_KEY", "key")
        monkeypatch.setenv("ERPNEXT_API_SECRET", "s3cr3t-value-xyz")

        settings = ConnectionSettings()

        assert settings.base_url == "https://erp.example.com"
        assert settings.api_key.get_secret_value() == "key"
        assert settings.has_credentials is True
        assert "s3cr3t-value-xyz" not in repr(settings)
        assert settings.api_secret.get_secret_value() == "s3cr3t-value-xyz"

    @pytest.mark.parametrize("url", ["erp.example.com", "ftp://erp.example.com", "https://"])
    def test_invalid_base_url(self, url):
        with pytest.raises(ValidationError):
            ConnectionSettings(base_url=url)


class TestBulkSettings:

    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("BULK_MAX_OPERATIONS", "10")
        monkeypatch.setenv("BULK_ROLLBACK_ON_FAILURE", "false")

        settings = BulkSettings()

        assert settings.max_operations == 10
        assert settings.rollback_on_failure is False

    @pytest.mark.parametrize("value", [0, 101])
    def test_max_operations_bounds(self, value):
        with pytest.raises(ValidationError):
            BulkSettings(max_operations=value)


class TestLoggingSettings:

    @pytest.mark.parametrize("raw, expected", [("debug", "DEBUG"), ("warn", "WARNING"), ("ERROR", "ERROR")])
    def test_level_normalisation(self, raw, expected):
        assert LoggingSettings(level=raw).level == expected

    def test_reads_log_level_variable(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert LoggingSettings().level == "WARNING"

    def test_unknown_level(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="verbose")

    def test_configure_logging_applies_level(self, restore_root_logger):
        configure_logging(LoggingSettings(level="error"))
        assert restore_root_logger.level == logging.ERROR


class TestErpSettings:

    def test_from_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "connection:\n"
            "  base_url: https://erp.example.com\n"
            "  api_key: key123\n"
            "  api_secret: secret456\n"
            "bulk:\n"
            "  max_operations: 25\n"
            "  rollback_on_failure: false\n"
            "  operation_timeout: 12.5\n"
            "logging:\n"
            "  level: debug\n"
        )

        settings = load_settings(str(config_file))

        assert settings.connection.base_url == "https://erp.example.com"
        assert settings.connection.has_credentials is True
        assert settings.bulk.max_operations == 25
        assert settings.bulk.operation_timeout == 12.5
        assert settings.logging.level == "DEBUG"

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        settings = load_settings(str(tmp_path / "absent.yaml"))
        assert settings.bulk.max_operations == 100
        assert settings.bulk.rollback_on_failure is True

    def test_to_yaml_masks_secrets(self):
        settings = ErpSettings(connection={"api_key": "key123", "api_secret": "secret456"})
        dumped = settings.to_yaml()
        assert "max_operations: 100" in dumped
        assert "key123" not in dumped
        assert "secret456" not in dumped


class TestBulkOperationConfig:

    def test_defaults(self):
        config = BulkOperationConfig()
        assert config.to_dict() == {
            "max_operations": 100,
            "rollback_on_failure": True,
            "operation_timeout": None,
            "enable_timing": True,
        }

    @pytest.mark.parametrize("kwargs", [
        {"max_operations": 0},
        {"max_operations": 101},
        {"operation_timeout": 0},
        {"operation_timeout": -1.0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            BulkOperationConfig(**kwargs)

    def test_from_dict_ignores_unknown_keys(self):
        config = BulkOperationConfig.from_dict({"max_operations": 5, "batch_size": 7})
        assert config.max_operations == 5

    def test_from_settings(self):
        config = BulkOperationConfig.from_settings(
            BulkSettings(max_operations=20, rollback_on_failure=False, operation_timeout=3.0, enable_timing=False)
        )
        assert config == BulkOperationConfig(
            max_operations=20, rollback_on_failure=False, operation_timeout=3.0, enable_timing=False
        )


class TestRedaction:

    def test_sensitive_keys_are_masked(self):
        data = {"base_url": "https://erp", "api_key": "abc", "API_SECRET": "def", "Authorization": "token a:b"}

        redacted = redact_sensitive_data(data)

        assert redacted == {
            "base_url": "https://erp",
            "api_key": REDACTED,
            "API_SECRET": REDACTED,
            "Authorization": REDACTED,
        }
        assert data["api_key"] == "abc"

    def test_only_top_level_is_inspected(self):
        nested = {"auth": {"password": "p"}}
        assert redact_sensitive_data(nested) == nested

    @pytest.mark.parametrize("value", ["api_key=abc", None, ["password"]])
    def test_non_mappings_pass_through(self, value):
        assert redact_sensitive_data(value) == value
