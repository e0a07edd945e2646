"""Pydantic models for the ClickUp objects the bridge reads."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fixed ordinal contract with ClickUp.
PRIORITY_NAMES = {
    1: "Urgent",
    2: "High",
    3: "Normal",
    4: "Low",
}


def priority_level(value: Any) -> Any:
    """Normalise a ClickUp priority into its integer level when possible.

    ClickUp answers with either a bare integer or an object such as
    ``{"id": "1", "priority": "urgent"}``. Values that are not recognisable
    are returned unchanged.
    """

    if isinstance(value, dict):
        value = value.get("id", value.get("priority"))
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def format_priority(value: Any) -> str:
    """Return the display name for a priority; out-of-range values pass through."""

    if value is None:
        return "None"
    level = priority_level(value)
    if isinstance(level, int) and not isinstance(level, bool) and level in PRIORITY_NAMES:
        return PRIORITY_NAMES[level]
    if isinstance(level, dict):
        return str(level.get("priority") or "None")
    return str(level)


def format_timestamp(value: Any) -> str | None:
    """Render a ClickUp epoch-millisecond value as a UTC string."""

    if value in (None, ""):
        return None
    try:
        millis = int(value)
    except (TypeError, ValueError):
        return str(value)
    try:
        moment = datetime.fromtimestamp(millis / 1000, tz=UTC)
    except (ValueError, OverflowError, OSError):
        return str(value)
    return moment.strftime("%Y-%m-%d %H:%M UTC")


class ClickUpModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


class ClickUpList(ClickUpModel):
    id: str
    name: str
    content: str | None = None
    status: Any = None

    @property
    def status_text(self) -> str | None:
        if isinstance(self.status, dict):
            return self.status.get("status")
        return self.status


class Folder(ClickUpModel):
    id: str
    name: str
    lists: List[ClickUpList] = Field(default_factory=list)


class Space(ClickUpModel):
    id: str
    name: str
    lists: List[ClickUpList] = Field(default_factory=list)
    folders: List[Folder] = Field(default_factory=list)


class Workspace(ClickUpModel):
    id: str
    name: str
    spaces: List[Space] = Field(default_factory=list)


class TaskStatus(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str | None = None
    color: str | None = None


class ListReference(ClickUpModel):
    id: str | None = None
    name: str | None = None


class Task(ClickUpModel):
    id: str
    name: str
    description: str | None = None
    status: TaskStatus | None = None
    priority: Any = None
    due_date: Any = None
    subtasks: List["Task"] = Field(default_factory=list)
    url: str | None = None
    list_ref: ListReference | None = Field(None, alias="list")

    @field_validator("subtasks", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return value or []

    @property
    def priority_name(self) -> str:
        return format_priority(self.priority)

    @property
    def due_date_text(self) -> str | None:
        return format_timestamp(self.due_date)


class Tag(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    tag_bg: str | None = None
    tag_fg: str | None = None
