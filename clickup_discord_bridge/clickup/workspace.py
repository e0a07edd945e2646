"""Workspace hierarchy retrieval."""

from __future__ import annotations

import structlog

from clickup_discord_bridge.errors import ClickUpApiError

from .client import ClickUpClient, segment
from .models import ClickUpList, Folder, Space, Workspace

DEFAULT_WORKSPACE_NAME = "ClickUp Workspace"


def _workspace_name(client: ClickUpClient, workspace_id: str) -> str:
    try:
        teams = client.call("/team").get("teams", [])
    except ClickUpApiError:
        structlog.get_logger().warning("workspace_name_unavailable", workspace_id=workspace_id)
        return DEFAULT_WORKSPACE_NAME

    for team in teams:
        if str(team.get("id")) == str(workspace_id):
            return team.get("name") or DEFAULT_WORKSPACE_NAME
    return DEFAULT_WORKSPACE_NAME


def get_workspace_hierarchy(client: ClickUpClient, workspace_id: str) -> Workspace:
    """Walk spaces, folders and lists of *workspace_id* into a ``Workspace``."""

    log = structlog.get_logger().bind(workspace_id=workspace_id)
    spaces_payload = client.call(f"/team/{segment(workspace_id)}/space").get("spaces", [])

    spaces = []
    for space in spaces_payload:
        space_lists = client.call(f"/space/{segment(space['id'])}/list").get("lists", [])

        folders = []
        for folder in client.call(f"/space/{segment(space['id'])}/folder").get("folders", []):
            folder_lists = client.call(f"/folder/{segment(folder['id'])}/list").get("lists", [])
            folders.append(
                Folder(
                    id=folder["id"],
                    name=folder["name"],
                    lists=[ClickUpList.model_validate(item) for item in folder_lists],
                )
            )

        spaces.append(
            Space(
                id=space["id"],
                name=space["name"],
                lists=[ClickUpList.model_validate(item) for item in space_lists],
                folders=folders,
            )
        )

    workspace = Workspace(
        id=workspace_id,
        name=_workspace_name(client, workspace_id),
        spaces=spaces,
    )
    log.info("workspace_hierarchy_fetched", space_count=len(spaces))
    return workspace
