"""Application settings loaded from the environment."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the notice dismissal backend."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = "local"
    log_level: str = "INFO"
    database_url: str = "sqlite+aiosqlite:///./notices.db"

    secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    nonce_lifetime_seconds: int = Field(default=86_400, gt=1)

    admin_ajax_path: str = "/api/v1/admin-ajax"
    # Comma-separated "prefix:id" or "prefix:id:scope" declarations.
    notices: Annotated[list[str], NoDecode] = Field(default_factory=list)

    redis_url: str = "redis://localhost:6379/0"
    rate_limit_requests: int = 120
    rate_limit_window_seconds: int = 60

    @field_validator("notices", mode="before")
    @classmethod
    def _split_notices(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


settings = Settings()
