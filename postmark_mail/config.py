"""Configuration management for the Postmark transport."""

from __future__ import annotations

from dotenv import load_dotenv
from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """App configuration derived from environment variables."""

    postmark_server_token: str = Field(..., alias="POSTMARK_SERVER_TOKEN")
    postmark_api_url: HttpUrl = Field(
        "https://api.postmarkapp.com/email", alias="POSTMARK_API_URL"
    )
    postmark_timeout: float = Field(30, alias="POSTMARK_TIMEOUT")
    postmark_default_from: str | None = Field(None, alias="POSTMARK_DEFAULT_FROM")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("postmark_default_from", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("postmark_server_token")
    @classmethod
    def _require_token(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("POSTMARK_SERVER_TOKEN must not be blank.")
        return value.strip()
