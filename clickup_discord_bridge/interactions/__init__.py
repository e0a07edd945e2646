"""Discord interaction decoding, dispatch and reply builders."""

from .commands import load_command_schema, register_commands  # noqa: F401
from .dispatcher import handle_interaction  # noqa: F401
from .models import decode_options, parse_interaction  # noqa: F401
from .responses import InteractionResponseType, format_embed  # noqa: F401

__all__ = [
    "InteractionResponseType",
    "decode_options",
    "format_embed",
    "handle_interaction",
    "load_command_schema",
    "parse_interaction",
    "register_commands",
]
