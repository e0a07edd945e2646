"""Builders for Discord interaction responses."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Mapping, Sequence

DEFAULT_EMBED_COLOR = 0x00AAFF

# Discord message limits.
MAX_CONTENT_LENGTH = 2000
MAX_TITLE_LENGTH = 256
MAX_DESCRIPTION_LENGTH = 4096
MAX_FIELD_NAME_LENGTH = 256
MAX_FIELD_VALUE_LENGTH = 1024
MAX_FIELDS = 25
MAX_EMBEDS = 10

_ELLIPSIS = "..."
_EMPTY_VALUE = "-"


class InteractionResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5
    DEFERRED_UPDATE_MESSAGE = 6
    UPDATE_MESSAGE = 7
    APPLICATION_COMMAND_AUTOCOMPLETE_RESULT = 8
    MODAL = 9


def truncate(text: Any, limit: int) -> str:
    value = "" if text is None else str(text)
    if len(value) <= limit:
        return value
    return value[: limit - len(_ELLIPSIS)] + _ELLIPSIS


def format_embed(
    title: str,
    description: str,
    fields: Iterable[Mapping[str, Any]] = (),
    *,
    color: int = DEFAULT_EMBED_COLOR,
    timestamp: datetime | None = None,
) -> Dict[str, Any]:
    """Build an embed, clipping every part to Discord's limits."""

    embed_fields: List[Dict[str, Any]] = []
    for field in list(fields)[:MAX_FIELDS]:
        embed_fields.append(
            {
                "name": truncate(field.get("name"), MAX_FIELD_NAME_LENGTH) or _EMPTY_VALUE,
                "value": truncate(field.get("value"), MAX_FIELD_VALUE_LENGTH) or _EMPTY_VALUE,
                "inline": bool(field.get("inline", False)),
            }
        )

    return {
        "title": truncate(title, MAX_TITLE_LENGTH),
        "description": truncate(description, MAX_DESCRIPTION_LENGTH),
        "color": color,
        "fields": embed_fields,
        "timestamp": (timestamp or datetime.now(UTC)).isoformat(),
    }


def build_response(response_type: InteractionResponseType, data: Mapping[str, Any] | None) -> Dict[str, Any]:
    return {"type": int(response_type), "data": dict(data) if data is not None else None}


def pong() -> Dict[str, Any]:
    return build_response(InteractionResponseType.PONG, None)


def message(
    content: str | None = None,
    embeds: Sequence[Mapping[str, Any]] | None = None,
) -> Dict[str, Any]:
    """Channel message reply carrying text and/or embeds."""

    data: Dict[str, Any] = {}
    if content is not None:
        data["content"] = truncate(content, MAX_CONTENT_LENGTH)
    if embeds:
        data["embeds"] = [dict(embed) for embed in embeds][:MAX_EMBEDS]
    return build_response(InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, data)


def embed_message(
    title: str,
    description: str,
    fields: Iterable[Mapping[str, Any]] = (),
    *,
    content: str | None = None,
    color: int = DEFAULT_EMBED_COLOR,
) -> Dict[str, Any]:
    return message(content=content, embeds=[format_embed(title, description, fields, color=color)])


def error_message(text: str) -> Dict[str, Any]:
    return message(content=text)
