"""
Runtime configuration for ucuptest.

Defaults come from environment variables; nothing is read from disk.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    if not value:
        return None
    return float(value)


@dataclass
class ClientConfig:
    """Request client configuration."""

    base_url: str = ""
    download_dir: str = "."
    verify_ssl: bool = True
    follow_redirects: bool = False

    # None disables timeouts; a hung connection waits indefinitely
    timeout: float | None = None

    # Level for console diagnostics; None leaves logging untouched
    log_level: str | None = None

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from environment variables."""
        return cls(
            base_url=os.getenv("UCUPTEST_BASE_URL", ""),
            download_dir=os.getenv("UCUPTEST_DOWNLOAD_DIR", "."),
            verify_ssl=_env_bool("UCUPTEST_VERIFY_SSL", True),
            follow_redirects=_env_bool("UCUPTEST_FOLLOW_REDIRECTS", False),
            timeout=_env_float("UCUPTEST_TIMEOUT"),
            log_level=os.getenv("UCUPTEST_LOG_LEVEL") or None,
        )


# Global config instance
_config: ClientConfig | None = None


def get_config() -> ClientConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ClientConfig.from_env()
    return _config


def set_config(config: ClientConfig | None) -> None:
    """Set (or with None, reset) the global configuration instance."""
    global _config
    _config = config
