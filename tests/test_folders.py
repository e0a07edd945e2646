"""Tests for folder operations."""

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clickup_discord_bridge import clickup  # noqa: E402
from clickup_discord_bridge.clickup import folders, lists, tags  # noqa: E402
from clickup_discord_bridge.errors import NameResolutionNotImplemented  # noqa: E402


class DummyClickUp:
    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def call(self, path, method="GET", body=None, params=None):
        self.calls.append((method, path, body))
        return self.routes[(method, path)]


FOLDER_PAYLOAD = {"id": 7, "name": "Q3", "lists": [{"id": "5", "name": "Backlog"}]}


def test_create_folder_keeps_false_override_flag():
    client = DummyClickUp({("POST", "/space/9/folder"): FOLDER_PAYLOAD})

    folder = folders.create_folder(client, space_id="9", name="Q3", override_statuses=False)

    assert folder.id == "7"
    assert client.calls == [("POST", "/space/9/folder", {"name": "Q3", "override_statuses": False})]


def test_get_folder_includes_lists():
    client = DummyClickUp({("GET", "/folder/7"): FOLDER_PAYLOAD})

    folder = folders.get_folder(client, folder_id="7")

    assert [item.name for item in folder.lists] == ["Backlog"]


def test_update_and_delete_folder():
    client = DummyClickUp(
        {
            ("PUT", "/folder/7"): {**FOLDER_PAYLOAD, "name": "Q4"},
            ("DELETE", "/folder/7"): {},
        }
    )

    assert folders.update_folder(client, folder_id="7", name="Q4").name == "Q4"
    folders.delete_folder(client, folder_id="7")

    assert client.calls[-1] == ("DELETE", "/folder/7", None)


def test_folder_name_is_not_resolved():
    client = DummyClickUp({})

    with pytest.raises(NameResolutionNotImplemented) as err:
        folders.get_folder(client, folder_name="Q3")

    assert str(err.value) == "Finding folder by name is not implemented yet"
    assert client.calls == []


def test_management_operations_are_exported_from_the_package():
    assert clickup.create_folder is folders.create_folder
    assert clickup.get_folder is folders.get_folder
    assert clickup.update_folder is folders.update_folder
    assert clickup.delete_folder is folders.delete_folder
    assert clickup.create_list_in_folder is lists.create_list_in_folder
    assert clickup.update_list is lists.update_list
    assert clickup.delete_list is lists.delete_list
    assert clickup.update_space_tag is tags.update_space_tag
    assert clickup.delete_space_tag is tags.delete_space_tag
