"""Slash command schema and its registration with Discord."""

from __future__ import annotations

import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import structlog
from pydantic import BaseModel, Field, field_validator, model_validator

from clickup_discord_bridge.discord_client import DiscordClient

from .models import OptionType

COMMAND_SCHEMA_PATH = Path(__file__).resolve().parent / "commands.json"

_NAME_PATTERN = re.compile(r"^[-_a-z0-9]{1,32}$")


class CommandChoice(BaseModel):
    name: str
    value: str | int | float


class CommandOption(BaseModel):
    name: str
    description: str = Field(..., min_length=1, max_length=100)
    type: int
    required: bool | None = None
    choices: List[CommandChoice] | None = None
    options: List["CommandOption"] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not _NAME_PATTERN.match(value):
            raise ValueError(f"Invalid option name '{value}'")
        return value

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: int) -> int:
        if value not in {member.value for member in OptionType}:
            raise ValueError(f"Unsupported option type '{value}'")
        return value

    @model_validator(mode="after")
    def ensure_nesting(self):
        if self.options and self.type != OptionType.SUB_COMMAND:
            raise ValueError("only sub-commands may contain nested options")
        return self


class CommandDefinition(BaseModel):
    name: str
    description: str = Field(..., min_length=1, max_length=100)
    options: List[CommandOption] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not _NAME_PATTERN.match(value):
            raise ValueError(f"Invalid command name '{value}'")
        return value

    @property
    def subcommands(self) -> List[str]:
        return [option.name for option in self.options if option.type == OptionType.SUB_COMMAND]


@lru_cache()
def load_command_schema(file_path: Path = COMMAND_SCHEMA_PATH) -> Tuple[CommandDefinition, ...]:
    """Load the slash command definitions from a JSON file."""

    with file_path.open("r", encoding="utf-8") as fp:
        data = json.load(fp)
    return tuple(CommandDefinition.model_validate(item) for item in data)


def serialize_commands(commands: Sequence[CommandDefinition]) -> List[Dict[str, Any]]:
    return [command.model_dump(exclude_none=True) for command in commands]


def register_commands(
    client: DiscordClient,
    *,
    application_id: str,
    commands: Sequence[CommandDefinition],
) -> Any:
    """Overwrite the application's global commands with *commands*."""

    payload = serialize_commands(commands)
    log = structlog.get_logger().bind(application_id=application_id, command_count=len(payload))
    log.info("command_registration_requested")

    response = client.overwrite_global_commands(application_id=application_id, commands=payload)

    log.info("command_registration_succeeded")
    return response
