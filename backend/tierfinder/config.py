"""TierFinder configuration — Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "TierFinder"
    debug: bool = True
    environment: str = "development"
    log_level: str = "INFO"

    # Local command API
    host: str = "127.0.0.1"
    port: int = 8100
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:1420",
    ]

    # Mode: dev = in-memory demo backend, prod = HTTP storage backend
    mode: str = "dev"

    # Storage backend (prod mode)
    backend_url: str = "http://127.0.0.1:3000/api"
    backend_timeout_seconds: float = 30.0
    backend_token: str = ""

    # Navigation
    history_limit: int = 50

    # Transfer policy: paste and drag-and-drop have separate defaults
    paste_mode: str = "copy"
    drag_same_source_mode: str = "move"
    drag_cross_source_mode: str = "copy"
    clear_clipboard_after_copy_paste: bool = False

    # Tier migration progress
    progress_source: str = "simulated"  # simulated | backend
    progress_tick_seconds: float = 0.5
    progress_max_step: float = 15.0
    job_poll_interval_seconds: float = 2.0

    # Background refresh
    enable_background_refresh: bool = True
    source_refresh_interval_seconds: int = 30
    clipboard_poll_interval_seconds: int = 5

    @property
    def is_dev_mode(self) -> bool:
        return self.mode == "dev"

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="TIERFINDER_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:5173"]

    @field_validator("history_limit")
    @classmethod
    def _check_history_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("history_limit must be at least 1")
        return value

    @field_validator("paste_mode", "drag_same_source_mode", "drag_cross_source_mode")
    @classmethod
    def _check_transfer_mode(cls, value: str) -> str:
        value = value.lower()
        if value not in ("copy", "move"):
            raise ValueError(f"transfer mode must be 'copy' or 'move', got {value!r}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
