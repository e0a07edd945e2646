"""Application entry point for the ClickUp Discord bridge."""

from __future__ import annotations

import json
from pathlib import Path
from uuid import uuid4

import httpx
import structlog
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from clickup_discord_bridge.config import get_settings
from clickup_discord_bridge.discord_client import DiscordClient
from clickup_discord_bridge.errors import DiscordApiError
from clickup_discord_bridge.interactions.commands import load_command_schema, register_commands
from clickup_discord_bridge.interactions.dispatcher import handle_interaction
from clickup_discord_bridge.logging_config import configure_logging
from clickup_discord_bridge.security import (
    REGISTER_SECRET_HEADER,
    MissingSignatureHeaders,
    check_request_headers,
    is_valid_discord_request,
    is_valid_register_secret,
)

SERVICE_NAME = "clickup-discord-bridge"

_LOGGING_CONFIGURED = False


def _register_error_handlers(flask_app: Flask) -> None:
    """Register a JSON error handler that attaches a trace identifier."""

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):  # type: ignore[override]
        if isinstance(error, HTTPException):
            return error

        trace_id = str(uuid4())
        flask_app.logger.exception(
            "Unhandled application error", extra={"trace_id": trace_id}, exc_info=error
        )
        response = jsonify({"error": "internal_server_error", "trace_id": trace_id})
        response.status_code = 500
        return response


def _load_version() -> str:
    version_file = Path(__file__).resolve().parent / "VERSION"
    if version_file.exists():
        return version_file.read_text(encoding="utf-8").strip()
    return "unknown"


def create_app() -> Flask:
    """Create and configure the Flask application."""

    global _LOGGING_CONFIGURED
    if not _LOGGING_CONFIGURED:
        configure_logging()
        _LOGGING_CONFIGURED = True

    settings = get_settings()
    logger = structlog.get_logger()

    flask_app = Flask(__name__)
    flask_app.config["APP_VERSION"] = _load_version()
    flask_app.logger.setLevel("INFO")

    _register_error_handlers(flask_app)

    @flask_app.route("/", methods=["GET"])
    def index():
        return jsonify(
            {
                "service": SERVICE_NAME,
                "version": flask_app.config.get("APP_VERSION", "unknown"),
                "endpoints": {
                    "interactions": "POST /interactions",
                    "register": "POST /register",
                    "health": "GET /healthz",
                },
            }
        )

    @flask_app.route("/interactions", methods=["POST"])
    def interactions():
        raw_body = request.get_data()

        try:
            signature, timestamp = check_request_headers(request.headers)
        except MissingSignatureHeaders:
            logger.warning("interaction_rejected", reason="missing_signature_headers")
            return jsonify({"error": "unauthorized"}), 401

        if not is_valid_discord_request(
            public_key=settings.discord_public_key,
            timestamp=timestamp,
            body=raw_body,
            signature=signature,
            tolerance=settings.signature_tolerance_seconds,
        ):
            logger.warning("interaction_rejected", reason="invalid_signature")
            return jsonify({"error": "invalid_signature"}), 401

        try:
            payload = json.loads(raw_body)
        except ValueError:
            logger.warning("interaction_rejected", reason="invalid_json")
            return jsonify({"error": "invalid_payload"}), 400

        if not isinstance(payload, dict):
            logger.warning("interaction_rejected", reason="payload_not_object")
            return jsonify({"error": "invalid_payload"}), 400

        reply = handle_interaction(payload, settings=settings, trace_id=str(uuid4()))
        return jsonify(reply)

    @flask_app.route("/register", methods=["POST"])
    def register():
        if not settings.register_secret:
            logger.warning("command_registration_rejected", reason="disabled")
            return jsonify({"error": "registration_disabled"}), 403

        if not is_valid_register_secret(
            settings.register_secret, request.headers.get(REGISTER_SECRET_HEADER)
        ):
            logger.warning("command_registration_rejected", reason="bad_secret")
            return jsonify({"error": "unauthorized"}), 401

        commands = load_command_schema()

        try:
            with httpx.Client(timeout=10.0) as http:
                discord = DiscordClient(token=settings.discord_token, client=http)
                result = register_commands(
                    discord,
                    application_id=settings.discord_application_id,
                    commands=commands,
                )
        except (DiscordApiError, httpx.HTTPError) as exc:
            logger.error("command_registration_failed", error=str(exc))
            return jsonify({"error": "registration_failed", "detail": str(exc)}), 502

        return jsonify(result)

    @flask_app.route("/healthz", methods=["GET"])
    def healthz():
        health: dict[str, object] = {"ok": True}
        health["version"] = flask_app.config.get("APP_VERSION", "unknown")

        try:
            get_settings()
            health["config"] = "valid"
        except Exception as exc:
            health["config"] = "invalid"
            health["config_error"] = str(exc)
            health["ok"] = False

        status = 200 if health["ok"] else 503
        return jsonify(health), status

    return flask_app


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    application = create_app()
    application.run(host="0.0.0.0", port=3000, debug=True)
