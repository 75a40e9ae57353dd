from __future__ import annotations

from functools import cached_property, lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env",), env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    # Binding
    list_separator: str = Field(default=",", alias="BINDER_LIST_SEPARATOR")
    true_values: tuple[str, ...] = Field(default=("yes", "true", "on", "1"), alias="BINDER_TRUE_VALUES")

    # Rendering
    json_indent: int | None = Field(default=2, alias="BINDER_JSON_INDENT")

    # Logging
    log_level: str = Field(default="INFO", alias="BINDER_LOG_LEVEL")

    # Server
    app_host: str = Field(default="127.0.0.1", alias="APP_HOST")
    app_port: int = Field(default=8080, alias="APP_PORT")
    app_env: str = Field(default="prod", alias="APP_ENV")  # dev|prod

    @cached_property
    def normalized_true_values(self) -> frozenset[str]:
        return frozenset(v.strip().lower() for v in self.true_values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once from the environment."""
    return Settings()
