"""Translate human-supplied names into ClickUp identifiers.

Nothing is cached: each lookup walks the workspace again.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import structlog

from clickup_discord_bridge.errors import (
    ClickUpApiError,
    NameResolutionNotImplemented,
    ParameterError,
    ResolutionError,
)

from .client import ClickUpClient, segment
from .models import ClickUpList


def _match_by_name(items: Iterable[Mapping[str, Any]], name: str) -> Mapping[str, Any] | None:
    wanted = name.lower()
    for item in items:
        if str(item.get("name", "")).lower() == wanted:
            return item
    return None


def find_list_by_name(client: ClickUpClient, workspace_id: str, name: str) -> ClickUpList:
    """Return the first list called *name* (case-insensitive) in the workspace.

    Each space's own lists are checked before that space's folders, folders in
    the order ClickUp returns them. The first hit wins; duplicates further
    down the hierarchy are not reported.
    """

    log = structlog.get_logger().bind(workspace_id=workspace_id, list_name=name)
    spaces = client.call(f"/team/{segment(workspace_id)}/space").get("spaces", [])

    for space in spaces:
        space_lists = client.call(f"/space/{segment(space['id'])}/list").get("lists", [])
        match = _match_by_name(space_lists, name)
        if match is not None:
            log.info("list_resolved", list_id=match.get("id"), space_id=space["id"])
            return ClickUpList.model_validate(match)

        folders = client.call(f"/space/{segment(space['id'])}/folder").get("folders", [])
        for folder in folders:
            folder_lists = client.call(f"/folder/{segment(folder['id'])}/list").get("lists", [])
            match = _match_by_name(folder_lists, name)
            if match is not None:
                log.info(
                    "list_resolved",
                    list_id=match.get("id"),
                    space_id=space["id"],
                    folder_id=folder["id"],
                )
                return ClickUpList.model_validate(match)

    raise ResolutionError(f"List with name '{name}' not found", entity="list", name=name)


def resolve_list_id(
    client: ClickUpClient,
    *,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
) -> str:
    """Prefer *list_id*; otherwise resolve *list_name* inside *workspace_id*."""

    if list_id:
        return list_id

    if list_name:
        if not workspace_id:
            raise ParameterError("workspaceId is required when using listName")
        try:
            return find_list_by_name(client, workspace_id, list_name).id
        except ClickUpApiError as exc:
            raise exc.while_resolving(f"list '{list_name}'") from exc

    raise ParameterError("Either listId or listName is required")


def resolve_space_id(*, space_id: str | None = None, space_name: str | None = None) -> str:
    if space_id:
        return space_id
    if space_name:
        raise NameResolutionNotImplemented("space", space_name)
    raise ParameterError("Either spaceId or spaceName is required")


def resolve_folder_id(*, folder_id: str | None = None, folder_name: str | None = None) -> str:
    if folder_id:
        return folder_id
    if folder_name:
        raise NameResolutionNotImplemented("folder", folder_name)
    raise ParameterError("Either folderId or folderName is required")


def resolve_task_id(
    client: ClickUpClient,
    *,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
) -> str:
    """Prefer *task_id*; a task name is only looked up inside a given list."""

    if task_id:
        return task_id

    if not task_name:
        raise ParameterError("Either taskId or taskName is required")

    if not list_id and not list_name:
        raise NameResolutionNotImplemented("task", task_name)

    resolved_list = resolve_list_id(
        client,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )

    try:
        tasks = client.call(
            f"/list/{segment(resolved_list)}/task",
            params=[("include_closed", "true"), ("subtasks", "true")],
        ).get("tasks", [])
    except ClickUpApiError as exc:
        raise exc.while_resolving(f"task '{task_name}'") from exc

    match = _match_by_name(tasks, task_name)
    if match is None:
        raise ResolutionError(
            f"Task with name '{task_name}' not found in list '{list_name or list_id}'",
            entity="task",
            name=task_name,
        )
    return str(match["id"])
