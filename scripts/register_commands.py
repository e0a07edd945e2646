"""Push the slash command schema to Discord.

Usage:
    python scripts/register_commands.py

Environment:
    Ensure DISCORD_TOKEN, DISCORD_APPLICATION_ID (and other required
    settings) are available in the current shell before running this script.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clickup_discord_bridge.config import get_settings  # noqa: E402
from clickup_discord_bridge.discord_client import DiscordClient  # noqa: E402
from clickup_discord_bridge.interactions.commands import (  # noqa: E402
    load_command_schema,
    register_commands,
)
from clickup_discord_bridge.logging_config import configure_logging  # noqa: E402


def main() -> None:
    configure_logging()
    settings = get_settings()
    commands = load_command_schema()

    client = DiscordClient(token=settings.discord_token)
    try:
        registered = register_commands(
            client,
            application_id=settings.discord_application_id,
            commands=commands,
        )
    finally:
        client.client.close()

    print(f"Registered {len(registered)} commands.")


if __name__ == "__main__":
    main()
