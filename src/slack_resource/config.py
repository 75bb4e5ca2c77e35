"""Runtime configuration for the Slack resource."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

DEFAULT_API_URL = "https://slack.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(slots=True, frozen=True)
class Settings:
    """Settings for the out step, read from `SLACK_RESOURCE_*` variables."""

    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults matching the public Slack API."""

        return cls(
            api_url=os.getenv("SLACK_RESOURCE_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout_seconds=_env_float("SLACK_RESOURCE_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            log_level=os.getenv("SLACK_RESOURCE_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper(),
        )

    def validate(self) -> None:
        """Raise configuration error if any setting is unusable."""

        parsed = urlparse(self.api_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(
                f"Invalid SLACK_RESOURCE_API_URL: {self.api_url!r}. "
                "Expected absolute http(s) URL.",
            )
        if self.timeout_seconds <= 0:
            raise ValueError("SLACK_RESOURCE_TIMEOUT_SECONDS must be > 0.")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown SLACK_RESOURCE_LOG_LEVEL: {self.log_level!r}.")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}.") from exc
