"""Runtime configuration for the Suno MCP server."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import urlparse

DEFAULT_API_BASE_URL = "https://gemini.mtysp.top"
DEFAULT_SUBMIT_PATH = "/suno/submit/music"
DEFAULT_FETCH_PATH = "/suno/fetch/"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class SunoApiSettings:
    """Upstream API endpoint and credentials."""

    api_key: str = ""
    base_url: str = DEFAULT_API_BASE_URL
    submit_path: str = DEFAULT_SUBMIT_PATH
    fetch_path: str = DEFAULT_FETCH_PATH
    request_timeout_seconds: float | None = None
    connect_retries: int = 2


@dataclass(frozen=True, slots=True)
class PollingSettings:
    """Fixed-interval polling budget for one generation task."""

    interval_seconds: float = 5.0
    max_attempts: int = 60
    transport_error_limit: int = 3

    @property
    def ceiling_seconds(self) -> float:
        return self.interval_seconds * self.max_attempts


@dataclass(frozen=True, slots=True)
class ServerSettings:
    """MCP server identity and process logging."""

    name: str = "suno-music-generator-mcp"
    log_level: str = "INFO"


@dataclass(frozen=True, slots=True)
class Settings:
    """Application settings grouped by concern."""

    suno: SunoApiSettings = field(default_factory=SunoApiSettings)
    polling: PollingSettings = field(default_factory=PollingSettings)
    server: ServerSettings = field(default_factory=ServerSettings)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults matching the public API."""

        return cls(
            suno=SunoApiSettings(
                api_key=os.getenv("SUNO_MCP_API_KEY", os.getenv("SunoKey", "")).strip(),
                base_url=os.getenv("SUNO_MCP_API_BASE_URL", DEFAULT_API_BASE_URL).strip(),
                submit_path=os.getenv("SUNO_MCP_SUBMIT_PATH", DEFAULT_SUBMIT_PATH).strip(),
                fetch_path=os.getenv("SUNO_MCP_FETCH_PATH", DEFAULT_FETCH_PATH).strip(),
                request_timeout_seconds=_env_optional_float("SUNO_MCP_REQUEST_TIMEOUT_SECONDS"),
                connect_retries=int(os.getenv("SUNO_MCP_CONNECT_RETRIES", "2")),
            ),
            polling=PollingSettings(
                interval_seconds=float(os.getenv("SUNO_MCP_POLL_INTERVAL_SECONDS", "5.0")),
                max_attempts=int(os.getenv("SUNO_MCP_POLL_MAX_ATTEMPTS", "60")),
                transport_error_limit=int(os.getenv("SUNO_MCP_TRANSPORT_ERROR_LIMIT", "3")),
            ),
            server=ServerSettings(
                name=os.getenv("SUNO_MCP_SERVER_NAME", "suno-music-generator-mcp"),
                log_level=os.getenv("SUNO_MCP_LOG_LEVEL", "INFO").strip().upper(),
            ),
        )

    def validate_for_server(self) -> None:
        """Raise configuration error if the server cannot talk to the upstream API."""

        if not self.suno.api_key:
            raise ValueError(
                "Suno API key is required. Set SUNO_MCP_API_KEY (or SunoKey) and retry.",
            )
        _validate_base_url(self.suno.base_url)
        if not self.suno.submit_path.startswith("/"):
            raise ValueError("SUNO_MCP_SUBMIT_PATH must start with '/'.")
        if not self.suno.fetch_path.startswith("/"):
            raise ValueError("SUNO_MCP_FETCH_PATH must start with '/'.")
        timeout = self.suno.request_timeout_seconds
        if timeout is not None and timeout <= 0:
            raise ValueError("SUNO_MCP_REQUEST_TIMEOUT_SECONDS must be > 0 when set.")
        if self.suno.connect_retries < 0:
            raise ValueError("SUNO_MCP_CONNECT_RETRIES must be >= 0.")
        if self.polling.interval_seconds <= 0:
            raise ValueError("SUNO_MCP_POLL_INTERVAL_SECONDS must be > 0.")
        if self.polling.max_attempts <= 0:
            raise ValueError("SUNO_MCP_POLL_MAX_ATTEMPTS must be a positive integer.")
        if self.polling.transport_error_limit < 1:
            raise ValueError("SUNO_MCP_TRANSPORT_ERROR_LIMIT must be >= 1.")
        if self.server.log_level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid SUNO_MCP_LOG_LEVEL: {self.server.log_level!r}. "
                f"Expected one of {', '.join(sorted(_LOG_LEVELS))}.",
            )


def _validate_base_url(value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(
            "Invalid Suno API base URL: "
            f"{value!r}. Expected an absolute URL with http:// or https:// scheme.",
        )


def _env_optional_float(name: str) -> float | None:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError as error:
        raise ValueError(f"Invalid float value for {name}: {value!r}") from error
