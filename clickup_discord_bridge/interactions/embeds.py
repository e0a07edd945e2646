"""Discord replies describing ClickUp objects."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Dict, List, Mapping, Sequence

from clickup_discord_bridge.clickup.models import ClickUpList, Tag, Task, Workspace

from .responses import embed_message

CHECK_MARK = "\u2705"
FOLDER_ICON = "\U0001F4C1"
SPACE_ICON = "\U0001F310"

_NO_TASKS = "No tasks found"


def _field(name: str, value: Any, inline: bool = False) -> Dict[str, Any]:
    return {"name": name, "value": value, "inline": inline}


def _now_text() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC")


def _status_text(task: Task, default: str = "Unknown") -> str:
    if task.status is None or not task.status.status:
        return default
    return task.status.status


def _list_name(task: Task) -> str:
    if task.list_ref is not None and task.list_ref.name:
        return task.list_ref.name
    return "Unknown List"


def hierarchy_reply(workspace: Workspace) -> Dict[str, Any]:
    sections: List[str] = []
    for space in workspace.spaces:
        if space.lists:
            lists = "\n".join(f"- {item.name}" for item in space.lists)
        else:
            lists = "No lists"

        if space.folders:
            folder_lines = []
            for folder in space.folders:
                if folder.lists:
                    folder_lists = "\n".join(f"  - {item.name}" for item in folder.lists)
                else:
                    folder_lists = "  - No lists"
                folder_lines.append(f"- {FOLDER_ICON} {folder.name}\n{folder_lists}")
            folders = "\n".join(folder_lines)
        else:
            folders = "No folders"

        sections.append(
            f"## {SPACE_ICON} {space.name}\n\n### Lists:\n{lists}\n\n### Folders:\n{folders}"
        )

    description = "\n\n".join(sections) or "No spaces found in this workspace"
    return embed_message(f"{workspace.name or 'ClickUp'} Workspace Hierarchy", description)


def hierarchy_pending_reply(correlation_id: str) -> Dict[str, Any]:
    return embed_message(
        "Workspace Hierarchy",
        "The workspace hierarchy is still loading. Please run the command again in a moment.",
        [_field("Reference", correlation_id)],
    )


def task_created_reply(task: Task, *, list_label: str) -> Dict[str, Any]:
    return embed_message(
        f"{CHECK_MARK} Task Created",
        f'Successfully created task "{task.name}"',
        [
            _field("ID", task.id),
            _field("List", list_label),
            _field("URL", task.url or "N/A"),
            _field("Status", _status_text(task, default="New")),
            _field("Created At", _now_text()),
        ],
        content=f'{CHECK_MARK} Task "{task.name}" has been successfully created in ClickUp!',
    )


def task_pending_reply(name: str, *, list_label: str, correlation_id: str) -> Dict[str, Any]:
    return embed_message(
        f"{CHECK_MARK} Task Created",
        "Task is being created...",
        [
            _field("ID", "Processing..."),
            _field("List", list_label),
            _field("URL", "Available soon"),
            _field("Status", "Creating..."),
            _field("Created At", _now_text()),
            _field("Reference", correlation_id),
        ],
        content=f'{CHECK_MARK} Task "{name}" has been submitted to ClickUp!',
    )


def task_details_reply(task: Task) -> Dict[str, Any]:
    if task.subtasks:
        subtasks = "\n".join(f"- {subtask.name}" for subtask in task.subtasks)
    else:
        subtasks = "None"

    status = _status_text(task)
    if task.status is not None and task.status.color:
        status = f"{status} ({task.status.color})"

    return embed_message(
        task.name,
        task.description or "No description",
        [
            _field("ID", task.id),
            _field("Status", status),
            _field("Priority", task.priority_name),
            _field("Due Date", task.due_date_text or "None"),
            _field("Subtasks", subtasks),
            _field("URL", task.url or "N/A"),
        ],
    )


def task_updated_reply(task: Task) -> Dict[str, Any]:
    return embed_message(
        f"{CHECK_MARK} Task Updated",
        f'Successfully updated task "{task.name}"',
        [
            _field("ID", task.id),
            _field("Priority", task.priority_name),
            _field("URL", task.url or "N/A"),
        ],
    )


def task_deleted_reply(label: str) -> Dict[str, Any]:
    return embed_message(f"{CHECK_MARK} Task Deleted", f'Successfully deleted task "{label}"')


def list_details_reply(task_list: ClickUpList) -> Dict[str, Any]:
    return embed_message(
        task_list.name,
        task_list.content or "No description",
        [
            _field("ID", task_list.id),
            _field("Status", task_list.status_text or "None"),
        ],
    )


def list_tasks_reply(list_label: str, tasks: Sequence[Task]) -> Dict[str, Any]:
    if tasks:
        content = "\n".join(
            f"{index}. **{task.name}** ({_status_text(task)})"
            for index, task in enumerate(tasks, start=1)
        )
    else:
        content = _NO_TASKS

    return embed_message(f"Tasks in {list_label}", content, [_field("Total", str(len(tasks)))])


def list_created_reply(task_list: ClickUpList, *, space_label: str) -> Dict[str, Any]:
    return embed_message(
        f"{CHECK_MARK} List Created",
        f'Successfully created list "{task_list.name}"',
        [
            _field("ID", task_list.id),
            _field("Space", space_label),
        ],
    )


def tags_reply(space_label: str, tags: Sequence[Tag]) -> Dict[str, Any]:
    if tags:
        content = "\n".join(f"- **{tag.name}** ({tag.tag_bg or 'default'})" for tag in tags)
    else:
        content = "No tags found"

    return embed_message(f"Tags in {space_label}", content, [_field("Total", str(len(tags)))])


def tag_created_reply(name: str, *, space_label: str, response: Mapping[str, Any]) -> Dict[str, Any]:
    created_name = response.get("name") or name
    return embed_message(
        f"{CHECK_MARK} Tag Created",
        f'Successfully created tag "{created_name}"',
        [
            _field("Space", space_label),
            _field("Color", response.get("tag_bg") or "Default"),
        ],
    )


def tag_added_reply(tag: str, task_label: str) -> Dict[str, Any]:
    return embed_message(
        f"{CHECK_MARK} Tag Added",
        f'Successfully added tag "{tag}" to task "{task_label}"',
    )


def tag_removed_reply(tag: str, task_label: str) -> Dict[str, Any]:
    return embed_message(
        f"{CHECK_MARK} Tag Removed",
        f'Successfully removed tag "{tag}" from task "{task_label}"',
    )


def search_by_tags_reply(tags: Sequence[str], tasks: Sequence[Task]) -> Dict[str, Any]:
    if tasks:
        content = "\n".join(
            f"{index}. **{task.name}** ({_status_text(task)}) - {_list_name(task)}"
            for index, task in enumerate(tasks, start=1)
        )
    else:
        content = _NO_TASKS

    return embed_message(
        f"Tasks with tags: {', '.join(tags)}",
        content,
        [_field("Total", str(len(tasks)))],
    )


def search_by_status_reply(status: str, tasks: Sequence[Task]) -> Dict[str, Any]:
    if tasks:
        content = "\n".join(
            f"{index}. **{task.name}** - {_list_name(task)}"
            for index, task in enumerate(tasks, start=1)
        )
    else:
        content = _NO_TASKS

    return embed_message(
        f"Tasks with status: {status}",
        content,
        [_field("Total", str(len(tasks)))],
    )
