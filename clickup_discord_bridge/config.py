"""Pydantic-based configuration helpers for the ClickUp Discord bridge."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Iterable, List

from pydantic import BaseModel, Field, ValidationError, field_validator

CLICKUP_API_BASE_URL = "https://api.clickup.com/api/v2"


class AppSettings(BaseModel):
    """Settings required to verify Discord interactions and call ClickUp."""

    discord_public_key: str = Field(..., alias="DISCORD_PUBLIC_KEY")
    discord_token: str = Field(..., alias="DISCORD_TOKEN")
    discord_application_id: str = Field(..., alias="DISCORD_APPLICATION_ID")
    clickup_api_token: str = Field(..., alias="CLICKUP_API_TOKEN")
    clickup_workspace_id: str = Field(..., alias="CLICKUP_WORKSPACE_ID")
    clickup_api_base_url: str = Field(CLICKUP_API_BASE_URL, alias="CLICKUP_API_BASE_URL")
    clickup_max_retries: int = Field(5, alias="CLICKUP_MAX_RETRIES")
    clickup_max_backoff_seconds: float = Field(60.0, alias="CLICKUP_MAX_BACKOFF_SECONDS")
    task_create_timeout_ms: int = Field(2000, alias="TASK_CREATE_TIMEOUT_MS")
    hierarchy_timeout_ms: int | None = Field(None, alias="HIERARCHY_TIMEOUT_MS")
    signature_tolerance_seconds: int = Field(300, alias="SIGNATURE_TOLERANCE_SECONDS")
    register_secret: str | None = Field(None, alias="REGISTER_SECRET")

    @field_validator("discord_public_key")
    @classmethod
    def _validate_public_key(cls, value: str) -> str:
        value = value.strip()
        try:
            bytes.fromhex(value)
        except ValueError as exc:
            raise ValueError("DISCORD_PUBLIC_KEY must be a hex-encoded key") from exc
        return value

    @field_validator("clickup_max_retries", "signature_tolerance_seconds")
    @classmethod
    def _ensure_not_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Value must not be negative")
        return value

    @field_validator("clickup_max_backoff_seconds", "task_create_timeout_ms")
    @classmethod
    def _ensure_positive(cls, value):
        if value <= 0:
            raise ValueError("Value must be greater than zero")
        return value

    @field_validator("hierarchy_timeout_ms", mode="before")
    @classmethod
    def _blank_as_unbounded(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("hierarchy_timeout_ms")
    @classmethod
    def _ensure_positive_timeout(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("HIERARCHY_TIMEOUT_MS must be greater than zero")
        return value

    @property
    def task_create_timeout(self) -> float:
        return self.task_create_timeout_ms / 1000

    @property
    def hierarchy_timeout(self) -> float | None:
        if self.hierarchy_timeout_ms is None:
            return None
        return self.hierarchy_timeout_ms / 1000


def _format_missing(fields: Iterable[str]) -> str:
    """Return a human-friendly comma-separated list of missing env vars."""

    unique: List[str] = []
    for field in fields:
        if field not in unique:
            unique.append(field)
    return ", ".join(unique)


@lru_cache()
def get_settings() -> AppSettings:
    """Fetch and cache settings from environment variables."""

    try:
        return AppSettings.model_validate(os.environ)
    except ValidationError as exc:
        missing = [str(error["loc"][0]) for error in exc.errors() if error["type"] == "missing"]
        if missing:
            message = (
                "Missing required environment variables: "
                f"{_format_missing(missing)}"
            )
        else:
            invalid = [str(error["loc"][0]) for error in exc.errors()]
            message = f"Invalid environment variables: {_format_missing(invalid)}"
        raise RuntimeError(message) from exc
