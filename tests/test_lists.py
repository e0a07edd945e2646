"""Tests for list operations."""

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clickup_discord_bridge.clickup import lists  # noqa: E402
from clickup_discord_bridge.errors import (  # noqa: E402
    ClickUpApiError,
    NameResolutionNotImplemented,
    ParameterError,
)


class DummyClickUp:
    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def call(self, path, method="GET", body=None, params=None):
        self.calls.append((method, path, body))
        response = self.routes[(method, path)]
        if isinstance(response, Exception):
            raise response
        return response


LIST_PAYLOAD = {"id": "5", "name": "Backlog", "content": "Things to do", "status": {"status": "green"}}


def test_get_list_by_id():
    client = DummyClickUp({("GET", "/list/5"): LIST_PAYLOAD})

    task_list = lists.get_list(client, list_id="5")

    assert task_list.name == "Backlog"
    assert task_list.status_text == "green"


def test_get_list_by_name_walks_workspace():
    client = DummyClickUp(
        {
            ("GET", "/team/ws/space"): {"spaces": [{"id": "s1", "name": "Space"}]},
            ("GET", "/space/s1/list"): {"lists": [LIST_PAYLOAD]},
        }
    )

    task_list = lists.get_list(client, list_name="backlog", workspace_id="ws")

    assert task_list.id == "5"
    assert task_list.content == "Things to do"


def test_get_list_by_name_annotates_api_errors():
    client = DummyClickUp({("GET", "/team/ws/space"): ClickUpApiError(401, "UNAUTHORIZED")})

    with pytest.raises(ClickUpApiError) as err:
        lists.get_list(client, list_name="Backlog", workspace_id="ws")

    assert err.value.resolving == "list 'Backlog'"


def test_get_list_parameter_errors():
    with pytest.raises(ParameterError) as err:
        lists.get_list(DummyClickUp({}), list_name="Backlog")
    assert str(err.value) == "workspaceId is required when using listName"

    with pytest.raises(ParameterError) as err:
        lists.get_list(DummyClickUp({}))
    assert str(err.value) == "Either listId or listName is required"


def test_create_list_in_space():
    client = DummyClickUp({("POST", "/space/9/list"): LIST_PAYLOAD})

    task_list = lists.create_list(client, space_id="9", name="Backlog", content="Things to do")

    assert task_list.id == "5"
    assert client.calls == [("POST", "/space/9/list", {"name": "Backlog", "content": "Things to do"})]


def test_create_list_by_space_name_is_not_implemented():
    client = DummyClickUp({})

    with pytest.raises(NameResolutionNotImplemented):
        lists.create_list(client, space_name="Engineering", name="Backlog")

    assert client.calls == []


def test_create_list_in_folder():
    client = DummyClickUp({("POST", "/folder/7/list"): LIST_PAYLOAD})

    lists.create_list_in_folder(client, folder_id="7", name="Backlog", status="red")

    assert client.calls == [("POST", "/folder/7/list", {"name": "Backlog", "status": "red"})]


def test_update_and_delete_list():
    client = DummyClickUp(
        {
            ("PUT", "/list/5"): {**LIST_PAYLOAD, "name": "Icebox"},
            ("DELETE", "/list/5"): {},
        }
    )

    updated = lists.update_list(client, list_id="5", name="Icebox")
    lists.delete_list(client, list_id="5")

    assert updated.name == "Icebox"
    assert client.calls == [
        ("PUT", "/list/5", {"name": "Icebox"}),
        ("DELETE", "/list/5", None),
    ]
