"""
Tests for settings module.

Tests settings validation, environment variable loading, and the
configuration resolver's lookup order.
"""
from __future__ import annotations

import pytest

from swiftfs.settings import ConfigResolver, Settings, create_settings_from_env


class TestSettings:
    """Test Settings dataclass validation."""

    def test_defaults(self):
        """Test creating settings with no values."""
        settings = Settings()
        assert settings.token is None
        assert settings.http_timeout_s == 30.0
        assert settings.http_retry == 0
        assert settings.spool_max_size == 2 * 1024 * 1024

    def test_account_key_pair(self):
        """Test account + key authentication settings."""
        settings = Settings(account="acct", key="secret", endpoint="https://auth.example.com/auth/v1.0")
        assert settings.account == "acct"
        assert settings.key == "secret"

    def test_account_without_key_rejected(self):
        """Test half-configured credentials are rejected."""
        with pytest.raises(ValueError, match="key is missing"):
            Settings(account="acct")

    def test_key_without_account_rejected(self):
        """Test a key without an account is rejected."""
        with pytest.raises(ValueError, match="account is missing"):
            Settings(key="secret")

    @pytest.mark.parametrize("field,value,message", [
        ("http_timeout_s", 0, "http_timeout_s must be positive"),
        ("http_retry", -1, "http_retry must be non-negative"),
        ("spool_max_size", 0, "spool_max_size must be positive"),
    ])
    def test_invalid_numbers_rejected(self, field, value, message):
        """Test numeric validation."""
        with pytest.raises(ValueError, match=message):
            Settings(**{field: value})

    def test_frozen(self):
        """Test settings cannot be mutated."""
        settings = Settings()
        with pytest.raises(AttributeError):
            settings.token = "x"  # type: ignore[misc]


class TestCreateSettingsFromEnv:
    """Test environment loading."""

    def test_empty_environment(self):
        """Test loading with nothing set."""
        settings = create_settings_from_env()
        assert settings == Settings()

    def test_full_environment(self, monkeypatch):
        """Test every variable is read."""
        monkeypatch.setenv("SWIFT_TOKEN", "tok")
        monkeypatch.setenv("SWIFT_STORAGE_URL", "https://swift/v1/AUTH_a")
        monkeypatch.setenv("SWIFT_ACCOUNT", "acct")
        monkeypatch.setenv("SWIFT_KEY", "secret")
        monkeypatch.setenv("SWIFT_AUTH_URL", "https://auth/v1.0")
        monkeypatch.setenv("SWIFT_HTTP_TIMEOUT", "12.5")
        monkeypatch.setenv("SWIFT_HTTP_RETRY", "2")
        monkeypatch.setenv("SWIFT_SPOOL_MAX_SIZE", "4096")

        settings = create_settings_from_env()
        assert settings.token == "tok"
        assert settings.swift_endpoint == "https://swift/v1/AUTH_a"
        assert settings.account == "acct"
        assert settings.key == "secret"
        assert settings.endpoint == "https://auth/v1.0"
        assert settings.http_timeout_s == 12.5
        assert settings.http_retry == 2
        assert settings.spool_max_size == 4096

    def test_fresh_instance_each_call(self, monkeypatch):
        """Test no caching between calls."""
        first = create_settings_from_env()
        monkeypatch.setenv("SWIFT_TOKEN", "later")
        assert create_settings_from_env().token == "later"
        assert first.token is None

    def test_invalid_environment_raises(self, monkeypatch):
        """Test invalid values fail fast."""
        monkeypatch.setenv("SWIFT_HTTP_TIMEOUT", "-1")
        with pytest.raises(ValueError):
            create_settings_from_env()


class TestConfigResolver:
    """Test configuration lookup order."""

    def test_context_wins_over_defaults(self):
        """Test call-scoped options take precedence."""
        resolver = ConfigResolver({"swift": {"token": "call"}}, defaults=lambda: Settings(token="default"))
        assert resolver.get("token") == "call"

    def test_falls_back_to_defaults(self):
        """Test defaults fill names missing from the context."""
        resolver = ConfigResolver({"swift": {"token": "call"}},
                                  defaults=lambda: Settings(swift_endpoint="https://swift"))
        assert resolver.get("swift_endpoint") == "https://swift"

    def test_empty_values_are_absent(self):
        """Test empty strings do not shadow defaults."""
        resolver = ConfigResolver({"swift": {"token": ""}}, defaults=lambda: Settings(token="default"))
        assert resolver.get("token") == "default"

    def test_default_value_when_missing_everywhere(self):
        """Test the explicit default is returned last."""
        resolver = ConfigResolver()
        assert resolver.get("token") is None
        assert resolver.get("spool_max_size", 10) == 10

    def test_scheme_specific_options(self):
        """Test options are keyed by the locator scheme."""
        context = {"swift": {"token": "base"}, "backup": {"token": "backup"}}
        assert ConfigResolver(context, scheme="backup").get("token") == "backup"
        assert ConfigResolver(context).get("token") == "base"

    def test_rebound_scheme_falls_back_to_default_scheme(self):
        """Test a rebound scheme without its own options uses the swift options."""
        resolver = ConfigResolver({"swift": {"token": "base"}}, scheme="other")
        assert resolver.get("token") == "base"

    def test_defaults_loaded_lazily_once(self):
        """Test the default provider is called on first need only, then cached."""
        calls = []

        def provider():
            calls.append(1)
            return Settings(token="default")

        resolver = ConfigResolver({"swift": {"token": "call"}}, defaults=provider)
        assert resolver.get("token") == "call"
        assert calls == []

        resolver.get("swift_endpoint")
        resolver.get("account")
        assert calls == [1]

    def test_for_scheme_shares_loaded_defaults(self):
        """Test a re-keyed resolver reuses already loaded defaults."""
        calls = []

        def provider():
            calls.append(1)
            return Settings(token="default")

        resolver = ConfigResolver(defaults=provider)
        resolver.get("token")
        other = resolver.for_scheme("backup")
        assert other.scheme == "backup"
        assert other.get("token") == "default"
        assert calls == [1]
