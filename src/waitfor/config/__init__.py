"""Configuration loading for the ``waitfor`` command line entrypoint."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from waitfor.runner import DEFAULT_INTERVAL, DEFAULT_RETRIES, RetryPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    retries: int = Field(default=DEFAULT_RETRIES, ge=1, alias="WAITFOR_RETRIES")
    interval: float = Field(default=DEFAULT_INTERVAL, ge=0, allow_inf_nan=False, alias="WAITFOR_INTERVAL")
    connect_timeout: float = Field(default=5.0, gt=0, allow_inf_nan=False, alias="WAITFOR_CONNECT_TIMEOUT")

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(retries=self.retries, interval=self.interval)


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "get_settings"]
