"""Application configuration loaded from the environment."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import AliasChoices, Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings for the CLI, the local history store and the API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    policy_id: str = Field(default="niv_failure", alias="NIVPRED_POLICY")
    history_db: Path = Field(default=Path("./nivpred_history.db"), alias="NIVPRED_HISTORY_DB")
    history_limit: PositiveInt = Field(default=10, alias="HISTORY_LIMIT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    cors_allow_origins: str = Field(
        default="*",
        alias=AliasChoices("CORS_ALLOW_ORIGINS", "ALLOWED_ORIGINS"),
    )

    @property
    def cors_origins(self) -> List[str]:
        """Comma-separated origins as a list; empty means any origin."""

        items = [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]
        return items or ["*"]

    @field_validator("log_level", mode="after")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
