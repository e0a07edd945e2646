"""Tests for the Flask routing layer."""

from pathlib import Path
import json
import sys
import time

import pytest
from nacl.encoding import HexEncoder
from nacl.signing import SigningKey

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:  # pragma: no cover - import-time guard
    sys.path.insert(0, str(ROOT))

import app as app_module  # noqa: E402  (import after path adjustment)
from clickup_discord_bridge import config  # noqa: E402
from clickup_discord_bridge.errors import DiscordApiError  # noqa: E402
from clickup_discord_bridge.security import (  # noqa: E402
    DISCORD_SIGNATURE_HEADER,
    DISCORD_TIMESTAMP_HEADER,
    REGISTER_SECRET_HEADER,
)

SIGNING_KEY = SigningKey.generate()


@pytest.fixture
def flask_app(monkeypatch):
    monkeypatch.setenv("DISCORD_PUBLIC_KEY", SIGNING_KEY.verify_key.encode(encoder=HexEncoder).decode())
    monkeypatch.setenv("DISCORD_TOKEN", "bot-token")
    monkeypatch.setenv("DISCORD_APPLICATION_ID", "app-1")
    monkeypatch.setenv("CLICKUP_API_TOKEN", "pk_123")
    monkeypatch.setenv("CLICKUP_WORKSPACE_ID", "ws")
    monkeypatch.delenv("SIGNATURE_TOLERANCE_SECONDS", raising=False)
    monkeypatch.setenv("REGISTER_SECRET", "register-secret")
    config.get_settings.cache_clear()

    flask_app = app_module.create_app()
    yield flask_app

    config.get_settings.cache_clear()


class RecordingDispatcher:
    def __init__(self, reply=None):
        self.reply = reply or {"type": 4, "data": {"content": "ok"}}
        self.calls = []

    def __call__(self, payload, **kwargs):
        self.calls.append((payload, kwargs))
        return self.reply


def _signed_headers(body: bytes, timestamp: str | None = None) -> dict:
    timestamp = timestamp or str(int(time.time()))
    signature = SIGNING_KEY.sign(timestamp.encode("utf-8") + body).signature.hex()
    return {
        DISCORD_SIGNATURE_HEADER: signature,
        DISCORD_TIMESTAMP_HEADER: timestamp,
        "Content-Type": "application/json",
    }


def test_missing_signature_headers_are_unauthorized(flask_app, monkeypatch):
    dispatcher = RecordingDispatcher()
    monkeypatch.setattr(app_module, "handle_interaction", dispatcher)

    with flask_app.test_client() as client:
        response = client.post("/interactions", data=b'{"type":1}')

    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}
    assert dispatcher.calls == []


def test_invalid_signature_is_rejected(flask_app, monkeypatch):
    dispatcher = RecordingDispatcher()
    monkeypatch.setattr(app_module, "handle_interaction", dispatcher)
    headers = _signed_headers(b'{"type":1}')

    with flask_app.test_client() as client:
        response = client.post("/interactions", data=b'{"type":2}', headers=headers)

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_signature"}
    assert dispatcher.calls == []


def test_signed_ping_is_answered_with_pong(flask_app):
    body = b'{"type":1}'

    with flask_app.test_client() as client:
        response = client.post("/interactions", data=body, headers=_signed_headers(body))

    assert response.status_code == 200
    assert response.get_json() == {"type": 1, "data": None}


def test_signed_command_is_dispatched_with_decoded_body(flask_app, monkeypatch):
    dispatcher = RecordingDispatcher()
    monkeypatch.setattr(app_module, "handle_interaction", dispatcher)
    payload = {"type": 2, "data": {"name": "task", "options": []}}
    body = json.dumps(payload).encode("utf-8")

    with flask_app.test_client() as client:
        response = client.post("/interactions", data=body, headers=_signed_headers(body))

    assert response.status_code == 200
    assert response.get_json() == {"type": 4, "data": {"content": "ok"}}
    decoded, kwargs = dispatcher.calls[0]
    assert decoded == payload
    assert kwargs["settings"].clickup_workspace_id == "ws"
    assert kwargs["trace_id"]


@pytest.mark.parametrize("body", [b"not json", b"[1, 2, 3]"])
def test_undecodable_payload_is_bad_request(flask_app, monkeypatch, body):
    dispatcher = RecordingDispatcher()
    monkeypatch.setattr(app_module, "handle_interaction", dispatcher)

    with flask_app.test_client() as client:
        response = client.post("/interactions", data=body, headers=_signed_headers(body))

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_payload"}
    assert dispatcher.calls == []


def test_register_returns_discord_answer(flask_app, monkeypatch):
    captured = {}

    def fake_register(client, *, application_id, commands):
        captured["application_id"] = application_id
        captured["names"] = [command.name for command in commands]
        return [{"id": "1", "name": "task"}]

    monkeypatch.setattr(app_module, "register_commands", fake_register)

    with flask_app.test_client() as client:
        response = client.post("/register", headers={REGISTER_SECRET_HEADER: "register-secret"})

    assert response.status_code == 200
    assert response.get_json() == [{"id": "1", "name": "task"}]
    assert captured["application_id"] == "app-1"
    assert "task" in captured["names"]


def test_register_failure_maps_to_bad_gateway(flask_app, monkeypatch):
    def failing_register(client, *, application_id, commands):
        raise DiscordApiError(401, "401: Unauthorized")

    monkeypatch.setattr(app_module, "register_commands", failing_register)

    with flask_app.test_client() as client:
        response = client.post("/register", headers={REGISTER_SECRET_HEADER: "register-secret"})

    assert response.status_code == 502
    data = response.get_json()
    assert data["error"] == "registration_failed"
    assert "401" in data["detail"]


def test_register_rejects_wrong_secret(flask_app, monkeypatch):
    calls = []
    monkeypatch.setattr(app_module, "register_commands", lambda *args, **kwargs: calls.append(kwargs))

    with flask_app.test_client() as client:
        missing = client.post("/register")
        wrong = client.post("/register", headers={REGISTER_SECRET_HEADER: "guess"})

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert wrong.get_json() == {"error": "unauthorized"}
    assert calls == []


def test_register_is_disabled_without_secret(flask_app, monkeypatch):
    monkeypatch.delenv("REGISTER_SECRET")
    config.get_settings.cache_clear()
    calls = []
    monkeypatch.setattr(app_module, "register_commands", lambda *args, **kwargs: calls.append(kwargs))
    disabled_app = app_module.create_app()

    with disabled_app.test_client() as client:
        response = client.post("/register", headers={REGISTER_SECRET_HEADER: ""})

    assert response.status_code == 403
    assert response.get_json() == {"error": "registration_disabled"}
    assert calls == []


def test_index_describes_service(flask_app):
    with flask_app.test_client() as client:
        response = client.get("/")

    data = response.get_json()
    assert response.status_code == 200
    assert data["service"] == "clickup-discord-bridge"
    assert data["endpoints"]["interactions"] == "POST /interactions"


def test_unknown_route_keeps_http_status(flask_app):
    with flask_app.test_client() as client:
        response = client.get("/interactions")

    assert response.status_code == 405
