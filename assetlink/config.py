"""
Runtime configuration for AssetLink.

Configuration can be supplied via:
- Constructor parameters (highest precedence)
- Environment variables (ASSETLINK_*), optionally loaded from a .env file
  with python-dotenv by the caller (the CLI does this at startup)
- Built-in defaults
"""

import os
from dataclasses import dataclass
from typing import Optional

from .schema import MAX_SOURCES, PAGE_SIZE

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class AssetLinkConfig:
    """Resolved settings for a workspace and the CLI."""
    max_sources: int = MAX_SOURCES
    page_size: int = PAGE_SIZE
    transitive_merge: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(
        cls,
        max_sources: Optional[int] = None,
        page_size: Optional[int] = None,
        transitive_merge: Optional[bool] = None,
        log_level: Optional[str] = None,
    ) -> "AssetLinkConfig":
        """Build a config from explicit overrides, then environment, then defaults.

        Raises:
            ValueError: If an environment variable holds an invalid value
        """
        return cls(
            max_sources=max_sources if max_sources is not None
            else _env_int("ASSETLINK_MAX_SOURCES", MAX_SOURCES),
            page_size=page_size if page_size is not None
            else _env_int("ASSETLINK_PAGE_SIZE", PAGE_SIZE),
            transitive_merge=transitive_merge if transitive_merge is not None
            else _env_bool("ASSETLINK_TRANSITIVE_MERGE", False),
            log_level=(log_level or os.getenv("ASSETLINK_LOG_LEVEL") or "WARNING").upper(),
        )
