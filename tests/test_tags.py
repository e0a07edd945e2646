"""Tests for space tag operations."""

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clickup_discord_bridge.clickup import tags  # noqa: E402
from clickup_discord_bridge.errors import NameResolutionNotImplemented  # noqa: E402


class DummyClickUp:
    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def call(self, path, method="GET", body=None, params=None):
        self.calls.append((method, path, body))
        return self.routes[(method, path)]


def test_get_space_tags():
    client = DummyClickUp(
        {("GET", "/space/9/tag"): {"tags": [{"name": "bug", "tag_bg": "#ff0000", "tag_fg": "#fff"}]}}
    )

    result = tags.get_space_tags(client, space_id="9")

    assert [tag.name for tag in result] == ["bug"]
    assert result[0].tag_bg == "#ff0000"


def test_create_space_tag_sends_colour_fields():
    client = DummyClickUp({("POST", "/space/9/tag"): {}})

    tags.create_space_tag(client, space_id="9", tag_name="bug", color_command="red")

    assert client.calls == [("POST", "/space/9/tag", {"name": "bug", "color_command": "red"})]


def test_update_space_tag_targets_existing_name():
    client = DummyClickUp({("PUT", "/space/9/tag/bug"): {}})

    tags.update_space_tag(client, space_id="9", tag_name="bug", new_tag_name="defect", tag_bg="#000")

    assert client.calls == [("PUT", "/space/9/tag/bug", {"name": "defect", "tag_bg": "#000"})]


def test_delete_space_tag():
    client = DummyClickUp({("DELETE", "/space/9/tag/bug"): {}})

    tags.delete_space_tag(client, space_id="9", tag_name="bug")

    assert client.calls == [("DELETE", "/space/9/tag/bug", None)]


def test_space_name_is_not_resolved():
    client = DummyClickUp({})

    with pytest.raises(NameResolutionNotImplemented):
        tags.get_space_tags(client, space_name="Engineering")

    assert client.calls == []
