"""ClickUp API client, models, resolvers and operation handlers."""

from .client import ClickUpClient, segment
from .folders import create_folder, delete_folder, get_folder, update_folder
from .lists import create_list_in_folder, delete_list, update_list
from .models import ClickUpList, Folder, Space, Tag, Task, TaskStatus, Workspace, format_priority
from .resolvers import find_list_by_name
from .tags import delete_space_tag, update_space_tag
from .workspace import get_workspace_hierarchy

__all__ = [
    "ClickUpClient",
    "ClickUpList",
    "Folder",
    "Space",
    "Tag",
    "Task",
    "TaskStatus",
    "Workspace",
    "create_folder",
    "create_list_in_folder",
    "delete_folder",
    "delete_list",
    "delete_space_tag",
    "find_list_by_name",
    "format_priority",
    "get_folder",
    "get_workspace_hierarchy",
    "segment",
    "update_folder",
    "update_list",
    "update_space_tag",
]
