"""List operations against the ClickUp API."""

from __future__ import annotations

from typing import Any, Dict

from clickup_discord_bridge.errors import ClickUpApiError, ParameterError

from .client import ClickUpClient, segment
from .models import ClickUpList
from .resolvers import find_list_by_name, resolve_folder_id, resolve_list_id, resolve_space_id


def get_list(
    client: ClickUpClient,
    *,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
) -> ClickUpList:
    if list_id:
        return ClickUpList.model_validate(client.call(f"/list/{segment(list_id)}"))

    if list_name:
        if not workspace_id:
            raise ParameterError("workspaceId is required when using listName")
        try:
            return find_list_by_name(client, workspace_id, list_name)
        except ClickUpApiError as exc:
            raise exc.while_resolving(f"list '{list_name}'") from exc

    raise ParameterError("Either listId or listName is required")


def create_list(
    client: ClickUpClient,
    *,
    name: str,
    space_id: str | None = None,
    space_name: str | None = None,
    content: str | None = None,
    due_date: int | None = None,
    priority: int | None = None,
    assignee: str | None = None,
    status: str | None = None,
) -> ClickUpList:
    target_space = resolve_space_id(space_id=space_id, space_name=space_name)

    body: Dict[str, Any] = {"name": name}
    if content:
        body["content"] = content
    if due_date:
        body["due_date"] = due_date
    if priority is not None:
        body["priority"] = priority
    if assignee:
        body["assignee"] = assignee
    if status:
        body["status"] = status

    return ClickUpList.model_validate(client.call(f"/space/{segment(target_space)}/list", "POST", body))


def create_list_in_folder(
    client: ClickUpClient,
    *,
    name: str,
    folder_id: str | None = None,
    folder_name: str | None = None,
    content: str | None = None,
    status: str | None = None,
) -> ClickUpList:
    target_folder = resolve_folder_id(folder_id=folder_id, folder_name=folder_name)

    body: Dict[str, Any] = {"name": name}
    if content:
        body["content"] = content
    if status:
        body["status"] = status

    return ClickUpList.model_validate(client.call(f"/folder/{segment(target_folder)}/list", "POST", body))


def update_list(
    client: ClickUpClient,
    *,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
    name: str | None = None,
    content: str | None = None,
    status: str | None = None,
) -> ClickUpList:
    target_list = resolve_list_id(
        client,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )

    body: Dict[str, Any] = {}
    if name:
        body["name"] = name
    if content:
        body["content"] = content
    if status:
        body["status"] = status

    return ClickUpList.model_validate(client.call(f"/list/{segment(target_list)}", "PUT", body))


def delete_list(
    client: ClickUpClient,
    *,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
) -> Dict[str, Any]:
    target_list = resolve_list_id(
        client,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )
    return client.call(f"/list/{segment(target_list)}", "DELETE")
