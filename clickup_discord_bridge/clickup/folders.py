"""Folder operations against the ClickUp API."""

from __future__ import annotations

from typing import Any, Dict

from .client import ClickUpClient, segment
from .models import Folder
from .resolvers import resolve_folder_id, resolve_space_id


def create_folder(
    client: ClickUpClient,
    *,
    name: str,
    space_id: str | None = None,
    space_name: str | None = None,
    override_statuses: bool | None = None,
) -> Folder:
    target_space = resolve_space_id(space_id=space_id, space_name=space_name)

    body: Dict[str, Any] = {"name": name}
    if override_statuses is not None:
        body["override_statuses"] = override_statuses

    return Folder.model_validate(client.call(f"/space/{segment(target_space)}/folder", "POST", body))


def get_folder(
    client: ClickUpClient,
    *,
    folder_id: str | None = None,
    folder_name: str | None = None,
) -> Folder:
    target_folder = resolve_folder_id(folder_id=folder_id, folder_name=folder_name)
    return Folder.model_validate(client.call(f"/folder/{segment(target_folder)}"))


def update_folder(
    client: ClickUpClient,
    *,
    folder_id: str | None = None,
    folder_name: str | None = None,
    name: str | None = None,
    override_statuses: bool | None = None,
) -> Folder:
    target_folder = resolve_folder_id(folder_id=folder_id, folder_name=folder_name)

    body: Dict[str, Any] = {}
    if name:
        body["name"] = name
    if override_statuses is not None:
        body["override_statuses"] = override_statuses

    return Folder.model_validate(client.call(f"/folder/{segment(target_folder)}", "PUT", body))


def delete_folder(
    client: ClickUpClient,
    *,
    folder_id: str | None = None,
    folder_name: str | None = None,
) -> Dict[str, Any]:
    target_folder = resolve_folder_id(folder_id=folder_id, folder_name=folder_name)
    return client.call(f"/folder/{segment(target_folder)}", "DELETE")
