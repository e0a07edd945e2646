"""Task operations against the ClickUp API."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import structlog

from .client import ClickUpClient, segment
from .models import Task
from .resolvers import resolve_list_id, resolve_task_id


def _is_numeric(value: str) -> bool:
    try:
        number = float(value)
    except ValueError:
        return False
    return math.isfinite(number)


def apply_date(body: Dict[str, Any], field: str, value: Any) -> None:
    """Store a date under ``field`` or ``field_natural`` depending on its shape.

    Numbers and numeric strings are epoch milliseconds; any other string is
    passed through as a natural-language date for ClickUp to interpret.
    """

    if value is None or isinstance(value, bool):
        return

    if isinstance(value, (int, float)):
        body[field] = int(value)
        return

    text = str(value).strip()
    if not text:
        return

    if _is_numeric(text):
        body[field] = int(float(text))
    else:
        body[f"{field}_natural"] = text


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(
    scalars: Dict[str, Any],
    arrays: Dict[str, Iterable[Any] | None] | None = None,
) -> List[Tuple[str, str]]:
    """Flatten parameters into ``(key, value)`` pairs, repeating array keys."""

    params: List[Tuple[str, str]] = []
    for key, value in scalars.items():
        if value is None or value == "":
            continue
        params.append((key, _query_value(value)))

    for key, values in (arrays or {}).items():
        for item in values or ():
            params.append((f"{key}[]", _query_value(item)))

    return params


def create_task(
    client: ClickUpClient,
    *,
    name: str,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
    description: str | None = None,
    markdown_description: str | None = None,
    priority: int | None = None,
    due_date: str | int | None = None,
    start_date: str | int | None = None,
    parent: str | None = None,
    status: str | None = None,
) -> Task:
    target_list = resolve_list_id(
        client,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )

    body: Dict[str, Any] = {"name": name}
    if description:
        body["description"] = description
    if markdown_description:
        body["markdown_description"] = markdown_description
    if priority is not None:
        body["priority"] = priority
    if status:
        body["status"] = status
    if parent:
        body["parent"] = parent
    apply_date(body, "due_date", due_date)
    apply_date(body, "start_date", start_date)

    response = client.call(f"/list/{segment(target_list)}/task", "POST", body)
    structlog.get_logger().info("task_created", list_id=target_list, task_id=response.get("id"))
    return Task.model_validate(response)


def get_task(
    client: ClickUpClient,
    *,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
    include_subtasks: bool = False,
) -> Task:
    target = resolve_task_id(
        client,
        task_id=task_id,
        task_name=task_name,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )
    params = [("include_subtasks", "true")] if include_subtasks else None
    return Task.model_validate(client.call(f"/task/{segment(target)}", params=params))


def update_task(
    client: ClickUpClient,
    *,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
    name: str | None = None,
    description: str | None = None,
    markdown_description: str | None = None,
    status: str | None = None,
    priority: int | None = None,
    due_date: str | int | None = None,
    start_date: str | int | None = None,
) -> Task:
    target = resolve_task_id(
        client,
        task_id=task_id,
        task_name=task_name,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )

    body: Dict[str, Any] = {}
    if name:
        body["name"] = name
    if description:
        body["description"] = description
    if markdown_description:
        body["markdown_description"] = markdown_description
    if status:
        body["status"] = status
    if priority is not None:
        body["priority"] = priority
    apply_date(body, "due_date", due_date)
    apply_date(body, "start_date", start_date)

    return Task.model_validate(client.call(f"/task/{segment(target)}", "PUT", body))


def delete_task(
    client: ClickUpClient,
    *,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
) -> Dict[str, Any]:
    target = resolve_task_id(
        client,
        task_id=task_id,
        task_name=task_name,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )
    return client.call(f"/task/{segment(target)}", "DELETE")


def get_tasks_from_list(
    client: ClickUpClient,
    *,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
    archived: bool | None = None,
    page: int | None = None,
    order_by: str | None = None,
    reverse: bool | None = None,
    subtasks: bool | None = None,
    statuses: Sequence[str] | None = None,
    include_closed: bool | None = None,
    assignees: Sequence[str] | None = None,
    due_date_gt: int | None = None,
    due_date_lt: int | None = None,
) -> List[Task]:
    target_list = resolve_list_id(
        client,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )

    params = build_query(
        {
            "archived": archived,
            "page": page,
            "order_by": order_by,
            "reverse": reverse,
            "subtasks": subtasks,
            "include_closed": include_closed,
            "due_date_gt": due_date_gt,
            "due_date_lt": due_date_lt,
        },
        {"statuses": statuses, "assignees": assignees},
    )

    response = client.call(f"/list/{segment(target_list)}/task", params=params)
    return [Task.model_validate(item) for item in response.get("tasks", [])]


def add_tag_to_task(
    client: ClickUpClient,
    *,
    tag_name: str,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
) -> Dict[str, Any]:
    target = resolve_task_id(
        client,
        task_id=task_id,
        task_name=task_name,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )
    return client.call(f"/task/{segment(target)}/tag/{segment(tag_name)}", "POST")


def remove_tag_from_task(
    client: ClickUpClient,
    *,
    tag_name: str,
    task_id: str | None = None,
    task_name: str | None = None,
    list_id: str | None = None,
    list_name: str | None = None,
    workspace_id: str | None = None,
) -> Dict[str, Any]:
    target = resolve_task_id(
        client,
        task_id=task_id,
        task_name=task_name,
        list_id=list_id,
        list_name=list_name,
        workspace_id=workspace_id,
    )
    return client.call(f"/task/{segment(target)}/tag/{segment(tag_name)}", "DELETE")


def search_tasks_by_tags(
    client: ClickUpClient,
    workspace_id: str,
    *,
    tags: Sequence[str],
    include_closed: bool | None = None,
    page: int | None = None,
    order_by: str | None = None,
    reverse: bool | None = None,
) -> List[Task]:
    params = build_query(
        {
            "include_closed": include_closed,
            "page": page,
            "order_by": order_by,
            "reverse": reverse,
        },
        {"tags": tags},
    )
    response = client.call(f"/team/{segment(workspace_id)}/task", params=params)
    return [Task.model_validate(item) for item in response.get("tasks", [])]


def search_tasks_by_status(
    client: ClickUpClient,
    workspace_id: str,
    *,
    status: str,
    include_closed: bool | None = None,
    page: int | None = None,
    order_by: str | None = None,
    reverse: bool | None = None,
) -> List[Task]:
    params = build_query(
        {
            "include_closed": include_closed,
            "page": page,
            "order_by": order_by,
            "reverse": reverse,
        },
        {"statuses": [status]},
    )
    response = client.call(f"/team/{segment(workspace_id)}/task", params=params)
    return [Task.model_validate(item) for item in response.get("tasks", [])]
