"""Application configuration using Pydantic Settings."""

import json
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "production"] = Field(default="development")

    # HTTP surface
    api_prefix: str = Field(default="/api")
    port: int = Field(default=5000)
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    # Firebase / Google Cloud
    firebase_service_account: str | None = Field(default=None)
    firebase_api_key: str | None = Field(default=None)
    firebase_project_id: str | None = Field(default=None)
    identity_toolkit_url: str = Field(default="https://identitytoolkit.googleapis.com/v1")
    identity_timeout_seconds: float = Field(default=10.0)

    # Behaviour
    strict_account_lookup: bool = Field(default=False)
    protect_resource_writes: bool = Field(default=False)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="json")

    def service_account_info(self) -> dict[str, Any]:
        """Parse FIREBASE_SERVICE_ACCOUNT.

        Raises RuntimeError when the variable is missing or is not a JSON object,
        so startup fails before any request is served.
        """
        if not self.firebase_service_account:
            raise RuntimeError("Missing FIREBASE_SERVICE_ACCOUNT environment variable")
        try:
            info = json.loads(self.firebase_service_account)
        except json.JSONDecodeError as exc:
            raise RuntimeError("FIREBASE_SERVICE_ACCOUNT is not valid JSON") from exc
        if not isinstance(info, dict):
            raise RuntimeError("FIREBASE_SERVICE_ACCOUNT must be a JSON object")
        return info

    def resolved_project_id(self) -> str:
        if self.firebase_project_id:
            return self.firebase_project_id
        project_id = self.service_account_info().get("project_id")
        if not project_id:
            raise RuntimeError("Service account has no project_id; set FIREBASE_PROJECT_ID")
        return project_id


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
