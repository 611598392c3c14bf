"""Application settings and shared constants."""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Issued tokens live for 30 days unless configured otherwise.
DEFAULT_TOKEN_MINUTES = 30 * 24 * 60


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Inventory Tracker"
    database_url: str = Field("sqlite:///./inventory.db")
    secret_key: str = Field("dev-secret-change-me")
    algorithm: str = Field("HS256")
    access_token_expire_minutes: int = Field(DEFAULT_TOKEN_MINUTES)
    auth_enabled: bool = Field(True)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field("INFO")
    low_stock_margin: int = Field(0)

    @field_validator("low_stock_margin")
    @classmethod
    def validate_low_stock_margin(cls, v: int) -> int:
        if v < 0:
            raise ValueError("low_stock_margin must be zero or positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
