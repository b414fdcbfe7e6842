"""Pydantic BaseSettings plus the validated, immutable run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from gasless_swap.core.errors import ConfigurationError

# Mode mainnet
MODE_CHAIN_ID = 34443


class Settings(BaseSettings):
    """Central configuration loaded from env / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ── Application ─────────────────────────────────────────────
    APP_ENV: Literal["dev", "prod"] = "dev"
    APP_NAME: str = "gasless-swap"
    LOG_LEVEL: str = "INFO"

    # ── Network / API ───────────────────────────────────────────
    ZEROEX_API_URL: str = "https://api.0x.org"
    ZEROEX_API_VERSION: str = "v2"
    CHAIN_ID: int = MODE_CHAIN_ID
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # ── Status polling ──────────────────────────────────────────
    STATUS_POLL_INTERVAL_SECONDS: float = 5.0
    STATUS_POLL_MAX_ATTEMPTS: Optional[int] = None
    STATUS_POLL_TIMEOUT_SECONDS: Optional[float] = 600.0
    STATUS_POLL_BACKOFF_MAX_SECONDS: float = 60.0

    # ── Credentials (never commit real values) ──────────────────
    ZEROEX_API_KEY: str = ""
    PRIVATE_KEY: str = ""


@dataclass(frozen=True)
class GaslessConfig:
    """Validated configuration handed explicitly to every component.

    Construction fails with ``ConfigurationError`` when a credential is
    missing, so a ``GaslessConfig`` in hand always carries both the API
    key and the signing key.
    """

    api_key: str
    private_key: str
    api_url: str = "https://api.0x.org"
    api_version: str = "v2"
    chain_id: int = MODE_CHAIN_ID
    http_timeout_s: float = 30.0
    poll_interval_s: float = 5.0
    poll_max_attempts: Optional[int] = None
    poll_timeout_s: Optional[float] = 600.0
    poll_backoff_max_s: float = 60.0

    def __post_init__(self) -> None:
        if not self.private_key:
            raise ConfigurationError("PRIVATE_KEY is required.")
        if not self.api_key:
            raise ConfigurationError("ZEROEX_API_KEY is required.")

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> GaslessConfig:
        """Build and validate the run configuration from ``Settings``."""
        s = source if source is not None else settings
        return cls(
            api_key=s.ZEROEX_API_KEY,
            private_key=s.PRIVATE_KEY,
            api_url=s.ZEROEX_API_URL.rstrip("/"),
            api_version=s.ZEROEX_API_VERSION,
            chain_id=s.CHAIN_ID,
            http_timeout_s=s.HTTP_TIMEOUT_SECONDS,
            poll_interval_s=s.STATUS_POLL_INTERVAL_SECONDS,
            poll_max_attempts=s.STATUS_POLL_MAX_ATTEMPTS,
            poll_timeout_s=s.STATUS_POLL_TIMEOUT_SECONDS,
            poll_backoff_max_s=s.STATUS_POLL_BACKOFF_MAX_SECONDS,
        )

    def __repr__(self) -> str:
        return (
            f"GaslessConfig(api_url={self.api_url!r}, chain_id={self.chain_id}, "
            f"api_version={self.api_version!r})"
        )


settings = Settings()
