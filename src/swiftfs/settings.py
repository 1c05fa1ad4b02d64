"""
Settings and configuration resolution for swiftfs.

Settings hold process-wide defaults, loaded from environment variables on
request. The ConfigResolver layers call-scoped stream context options on top
of an injected default provider; nothing here reads global state on its own.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .storage.uri import DEFAULT_SCHEME

__all__ = ["Settings", "ConfigResolver", "create_settings_from_env"]

DEFAULT_SPOOL_MAX_SIZE = 2 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """
    Process-wide defaults for stream sessions.

    Session Settings:
        token: Pre-issued auth token
        swift_endpoint: Storage URL to use with ``token``
        account: Account name for fresh authentication
        key: Account key for fresh authentication
        endpoint: Identity (auth) endpoint for account+key

    Transport Settings:
        http_timeout_s: HTTP request timeout in seconds
        http_retry: Extra attempts on transport timeouts (0=default policy only)

    Buffer Settings:
        spool_max_size: Bytes kept in memory before the local buffer spills to disk
    """
    token: Optional[str] = None
    swift_endpoint: Optional[str] = None
    account: Optional[str] = None
    key: Optional[str] = None
    endpoint: Optional[str] = None
    http_timeout_s: float = 30.0
    http_retry: int = 0
    spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE

    def __post_init__(self):
        """Validate settings on construction."""
        if self.http_timeout_s <= 0:
            raise ValueError(f"http_timeout_s must be positive, got {self.http_timeout_s}")

        if self.http_retry < 0:
            raise ValueError(f"http_retry must be non-negative, got {self.http_retry}")

        if self.spool_max_size <= 0:
            raise ValueError(f"spool_max_size must be positive, got {self.spool_max_size}")

        # Credentials are optional here (a stream context may supply them),
        # but a half-configured pair is always a mistake.
        if self.account and not self.key:
            raise ValueError("account specified but key is missing")
        if self.key and not self.account:
            raise ValueError("key specified but account is missing")


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - SWIFT_TOKEN (optional)
        - SWIFT_STORAGE_URL (optional, storage endpoint for SWIFT_TOKEN)
        - SWIFT_ACCOUNT (optional)
        - SWIFT_KEY (optional)
        - SWIFT_AUTH_URL (optional, identity endpoint for account+key)
        - SWIFT_HTTP_TIMEOUT (default: 30.0)
        - SWIFT_HTTP_RETRY (default: 0)
        - SWIFT_SPOOL_MAX_SIZE (default: 2097152)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    return Settings(
        token=os.getenv("SWIFT_TOKEN") or None,
        swift_endpoint=os.getenv("SWIFT_STORAGE_URL") or None,
        account=os.getenv("SWIFT_ACCOUNT") or None,
        key=os.getenv("SWIFT_KEY") or None,
        endpoint=os.getenv("SWIFT_AUTH_URL") or None,
        http_timeout_s=get_float("SWIFT_HTTP_TIMEOUT", 30.0),
        http_retry=get_int("SWIFT_HTTP_RETRY", 0),
        spool_max_size=get_int("SWIFT_SPOOL_MAX_SIZE", DEFAULT_SPOOL_MAX_SIZE),
    )


class ConfigResolver:
    """
    Resolve configuration values for one stream.

    Lookup order for a name:

    1. ``context[scheme][name]`` for the scheme the locator was written with
    2. ``context["swift"][name]`` when the scheme was rebound
    3. the corresponding attribute of the default Settings

    The default provider is called at most once, on first lookup that needs
    it, and the result is kept for the lifetime of this resolver only.
    """

    def __init__(
        self,
        context: Optional[Mapping[str, Mapping[str, Any]]] = None,
        *,
        scheme: str = DEFAULT_SCHEME,
        defaults: Optional[Callable[[], Settings]] = None,
    ) -> None:
        self._context = context or {}
        self.scheme = scheme
        self._defaults = defaults
        self._settings: Optional[Settings] = None
        self._loaded = False

    def for_scheme(self, scheme: str) -> ConfigResolver:
        """Resolver over the same context and defaults, keyed by another scheme."""
        resolver = ConfigResolver(self._context, scheme=scheme, defaults=self._defaults)
        resolver._settings = self._settings
        resolver._loaded = self._loaded
        return resolver

    @property
    def settings(self) -> Optional[Settings]:
        """Default settings, loaded lazily from the injected provider."""
        if not self._loaded:
            self._settings = self._defaults() if self._defaults is not None else None
            self._loaded = True
        return self._settings

    def _scoped_options(self) -> Mapping[str, Any]:
        options = self._context.get(self.scheme)
        if options:
            return options
        return self._context.get(DEFAULT_SCHEME) or {}

    def get(self, name: str, default: Any = None) -> Any:
        """Look up ``name``; empty values count as absent."""
        value = self._scoped_options().get(name)
        if value is not None and value != "":
            return value

        settings = self.settings
        if settings is not None:
            value = getattr(settings, name, None)
            if value is not None and value != "":
                return value

        return default
