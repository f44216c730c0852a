"""Configuration for the ticket sales reporting core.

This module provides two small configuration classes:

- ReportConfig: how a report is computed (timezone, fetch concurrency).
- SourceSettings: how the Supabase record source connects to its backend.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ticket_sales.exceptions import ConfigError

DEFAULT_TIMEZONE = "UTC"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 3


@dataclass(frozen=True)
class ReportConfig:
    """Settings used while computing a report.

    Attributes:
        timezone: IANA timezone name used to turn booking timestamps into
            calendar days. Naive timestamps are taken as UTC first.
        fetch_workers: Number of threads used to fetch source collections.
            1 (default) fetches sequentially.

    Examples:
        >>> ReportConfig(timezone="Africa/Cairo").tzinfo
        zoneinfo.ZoneInfo(key='Africa/Cairo')
    """

    timezone: str = DEFAULT_TIMEZONE
    fetch_workers: int = 1

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone '{self.timezone}'") from e
        if self.fetch_workers < 1:
            raise ConfigError(f"fetch_workers must be >= 1, got {self.fetch_workers}")

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _env(name: str) -> str | None:
    # Strip quotes copied in from .env files
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip().strip('"').strip("'")
    return value or None


@dataclass(frozen=True)
class SourceSettings:
    """Connection settings for the Supabase (PostgREST) record source.

    Attributes:
        url: Project URL, e.g. "https://abc.supabase.co".
        api_key: Anonymous (or service) API key.
        timeout: Per-request timeout in seconds.
        retries: Retry attempts for 429/5xx responses and connection errors.
    """

    url: str
    api_key: str
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigError("Supabase URL is required")
        if not self.api_key:
            raise ConfigError("Supabase API key is required")

    @classmethod
    def from_env(cls) -> SourceSettings:
        """Create SourceSettings from environment variables.

        Reads SUPABASE_URL, SUPABASE_ANON_KEY and the optional
        SUPABASE_TIMEOUT / SUPABASE_RETRIES.

        Raises:
            ConfigError: If a required variable is missing or a number is invalid.
        """
        url = _env("SUPABASE_URL")
        api_key = _env("SUPABASE_ANON_KEY")
        if not url or not api_key:
            raise ConfigError(
                "SUPABASE_URL and SUPABASE_ANON_KEY environment variables are required"
            )

        try:
            timeout = float(_env("SUPABASE_TIMEOUT") or DEFAULT_TIMEOUT)
            retries = int(_env("SUPABASE_RETRIES") or DEFAULT_RETRIES)
        except ValueError as e:
            raise ConfigError(f"Invalid SUPABASE_TIMEOUT/SUPABASE_RETRIES value: {e}") from e

        return cls(url=url.rstrip("/"), api_key=api_key, timeout=timeout, retries=retries)
