from __future__ import annotations

from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
    )

    app_name: str = "Async Calculation Service"
    listen_addr: str = Field(default=":8081", alias="LISTEN_ADDR")
    async_service_token: str = Field(default="async-secret", alias="ASYNC_SERVICE_TOKEN")
    async_callback_token: str = Field(default="async-secret", alias="ASYNC_CALLBACK_TOKEN")

    delay_min_seconds: float = Field(default=5, ge=0, alias="ASYNC_DELAY_MIN_SECONDS")
    delay_max_seconds: float = Field(default=10, ge=0, alias="ASYNC_DELAY_MAX_SECONDS")
    success_probability: float = Field(default=0.5, ge=0, le=1, alias="ASYNC_SUCCESS_PROBABILITY")
    callback_timeout_seconds: float = Field(default=10, gt=0, alias="ASYNC_CALLBACK_TIMEOUT_SECONDS")

    @field_validator("listen_addr")
    @classmethod
    def _check_listen_addr(cls, value: str) -> str:
        _, sep, port = value.rpartition(":")
        if not sep or not (port.isascii() and port.isdigit()) or not 0 <= int(port) <= 65535:
            raise ValueError(f"LISTEN_ADDR must look like host:port or :port, got {value!r}")
        return value

    def bind(self) -> tuple[str, int]:
        """Split ``listen_addr`` (``host:port`` or ``:port``) for uvicorn."""
        host, _, port = self.listen_addr.rpartition(":")
        return host or "0.0.0.0", int(port)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
