"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import DatabaseSettings, Settings, TenancySettings


class TestDatabaseSettingsPoolConfiguration:
    """Tests for connection pool configuration."""

    def test_default_pool_settings(self):
        """Should have sensible pool defaults."""
        settings = DatabaseSettings()
        assert settings.pool_min_connections >= 1
        assert settings.pool_max_connections >= settings.pool_min_connections
        assert settings.pool_max_connections <= 20

    def test_pool_settings_from_fields(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=15)
        assert settings.pool_min_connections == 5
        assert settings.pool_max_connections == 15

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        """Should validate max >= min."""
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_max_connections == 5

    def test_pool_min_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_pool_max_respects_upper_limit(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_max_connections=101)


class TestDatabaseSettingsEnvironment:
    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("BULWARK_DB_HOST", "db.internal")
        monkeypatch.setenv("BULWARK_DB_PORT", "6543")

        settings = DatabaseSettings()

        assert settings.host == "db.internal"
        assert settings.port == 6543

    def test_connection_string_omits_password(self):
        settings = DatabaseSettings(password="hunter2")

        assert "hunter2" not in settings.connection_string
        assert settings.connection_string.startswith("postgresql://")


class TestTenancySettings:
    def test_defaults(self):
        settings = TenancySettings()

        assert settings.tenant_header == "X-Tenant-Id"
        assert settings.min_host_labels == 3
        assert settings.max_trial_days == 365

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("BULWARK_TENANCY_TENANT_HEADER", "X-Org-Tenant")
        monkeypatch.setenv("BULWARK_TENANCY_MIN_HOST_LABELS", "4")

        settings = TenancySettings()

        assert settings.tenant_header == "X-Org-Tenant"
        assert settings.min_host_labels == 4

    def test_single_label_hosts_are_never_tenant_domains(self):
        with pytest.raises(ValidationError):
            TenancySettings(min_host_labels=1)

    def test_trial_length_must_be_positive(self):
        with pytest.raises(ValidationError):
            TenancySettings(max_trial_days=0)


class TestApplicationSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.app_name == "Bulwark API"
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_sections_are_available(self):
        settings = Settings()

        assert isinstance(settings.database, DatabaseSettings)
        assert isinstance(settings.tenancy, TenancySettings)
