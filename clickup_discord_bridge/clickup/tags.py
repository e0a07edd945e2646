"""Space tag operations against the ClickUp API."""

from __future__ import annotations

from typing import Any, Dict, List

from .client import ClickUpClient, segment
from .models import Tag
from .resolvers import resolve_space_id


def get_space_tags(
    client: ClickUpClient,
    *,
    space_id: str | None = None,
    space_name: str | None = None,
) -> List[Tag]:
    target_space = resolve_space_id(space_id=space_id, space_name=space_name)
    response = client.call(f"/space/{segment(target_space)}/tag")
    return [Tag.model_validate(item) for item in response.get("tags", [])]


def _tag_body(
    *,
    name: str | None,
    tag_bg: str | None,
    tag_fg: str | None,
    color_command: str | None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    if name:
        body["name"] = name
    if tag_bg:
        body["tag_bg"] = tag_bg
    if tag_fg:
        body["tag_fg"] = tag_fg
    if color_command:
        body["color_command"] = color_command
    return body


def create_space_tag(
    client: ClickUpClient,
    *,
    tag_name: str,
    space_id: str | None = None,
    space_name: str | None = None,
    tag_bg: str | None = None,
    tag_fg: str | None = None,
    color_command: str | None = None,
) -> Dict[str, Any]:
    target_space = resolve_space_id(space_id=space_id, space_name=space_name)
    body = _tag_body(name=tag_name, tag_bg=tag_bg, tag_fg=tag_fg, color_command=color_command)
    return client.call(f"/space/{segment(target_space)}/tag", "POST", body)


def update_space_tag(
    client: ClickUpClient,
    *,
    tag_name: str,
    space_id: str | None = None,
    space_name: str | None = None,
    new_tag_name: str | None = None,
    tag_bg: str | None = None,
    tag_fg: str | None = None,
    color_command: str | None = None,
) -> Dict[str, Any]:
    target_space = resolve_space_id(space_id=space_id, space_name=space_name)
    body = _tag_body(name=new_tag_name, tag_bg=tag_bg, tag_fg=tag_fg, color_command=color_command)
    return client.call(f"/space/{segment(target_space)}/tag/{segment(tag_name)}", "PUT", body)


def delete_space_tag(
    client: ClickUpClient,
    *,
    tag_name: str,
    space_id: str | None = None,
    space_name: str | None = None,
) -> Dict[str, Any]:
    target_space = resolve_space_id(space_id=space_id, space_name=space_name)
    return client.call(f"/space/{segment(target_space)}/tag/{segment(tag_name)}", "DELETE")
