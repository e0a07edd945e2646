"""Thin wrapper utilities around the Discord REST API."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import httpx

from clickup_discord_bridge.errors import DiscordApiError

DISCORD_API_BASE_URL = "https://discord.com/api/v10"


class DiscordClient:
    """Encapsulate Discord REST interactions for easier testing."""

    def __init__(
        self,
        *,
        token: str | None = None,
        client: httpx.Client | None = None,
        base_url: str = DISCORD_API_BASE_URL,
    ) -> None:
        if client is None and token is None:
            raise ValueError("Either an instantiated client or a bot token must be provided.")

        self._token = token
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=10.0)

    @property
    def client(self) -> httpx.Client:
        """Expose the underlying HTTP client for advanced use cases."""

        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bot {self._token}"
        return headers

    def overwrite_global_commands(
        self,
        *,
        application_id: str,
        commands: Sequence[Mapping[str, Any]],
    ) -> Any:
        """Replace every global slash command of *application_id*."""

        response = self._client.put(
            f"{self._base_url}/applications/{application_id}/commands",
            headers=self._headers(),
            json=list(commands),
        )
        if not response.is_success:
            raise DiscordApiError(response.status_code, response.text)
        return response.json()
