"""ClickUp Discord bridge package initialisation."""

from .background import PENDING_TASKS, run_async  # noqa: F401
from .config import AppSettings, get_settings  # noqa: F401
from .logging_config import configure_logging  # noqa: F401
from .security import is_valid_discord_request  # noqa: F401

__all__ = [
    "AppSettings",
    "get_settings",
    "run_async",
    "PENDING_TASKS",
    "is_valid_discord_request",
    "configure_logging",
]
