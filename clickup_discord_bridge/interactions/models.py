"""Typed views of Discord interaction payloads and option decoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Mapping, Sequence, Tuple, Union


class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    APPLICATION_COMMAND_AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5


class OptionType(IntEnum):
    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5


SUBCOMMAND_KEY = "subcommand"


@dataclass(frozen=True)
class OptionLeaf:
    name: str
    value: Any


@dataclass(frozen=True)
class SubCommand:
    name: str
    children: Tuple["OptionNode", ...] = ()


OptionNode = Union[OptionLeaf, SubCommand]


@dataclass(frozen=True)
class Ping:
    pass


@dataclass(frozen=True)
class ApplicationCommand:
    name: str
    options: Tuple[OptionNode, ...] = ()


@dataclass(frozen=True)
class OtherInteraction:
    type: Any


Interaction = Union[Ping, ApplicationCommand, OtherInteraction]


def parse_options(raw_options: Sequence[Mapping[str, Any]] | None) -> Tuple[OptionNode, ...]:
    """Convert Discord's nested option list into ``OptionLeaf``/``SubCommand`` nodes."""

    if raw_options is None:
        return ()
    if not isinstance(raw_options, (list, tuple)):
        raise ValueError("Command options must be a list.")

    nodes = []
    for raw in raw_options:
        if not isinstance(raw, Mapping):
            raise ValueError("Command option must be an object.")

        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Command option is missing a name.")

        if raw.get("type") == OptionType.SUB_COMMAND:
            nodes.append(SubCommand(name=name, children=parse_options(raw.get("options"))))
        else:
            nodes.append(OptionLeaf(name=name, value=raw.get("value")))

    return tuple(nodes)


def flatten_options(nodes: Sequence[OptionNode]) -> Dict[str, Any]:
    """Flatten option nodes into ``{name: value}`` plus the ``subcommand`` key.

    The first sub-command encountered is recorded and its children are merged
    into the same mapping; later sub-command nodes are ignored.
    """

    result: Dict[str, Any] = {}
    _flatten_into(result, nodes)
    return result


def _flatten_into(result: Dict[str, Any], nodes: Sequence[OptionNode]) -> None:
    for node in nodes:
        if isinstance(node, SubCommand):
            if SUBCOMMAND_KEY in result:
                continue
            result[SUBCOMMAND_KEY] = node.name
            _flatten_into(result, node.children)
        else:
            result[node.name] = node.value


def decode_options(raw_options: Sequence[Mapping[str, Any]] | None) -> Dict[str, Any]:
    return flatten_options(parse_options(raw_options))


def parse_interaction(payload: Mapping[str, Any]) -> Interaction:
    """Classify a decoded interaction body; raises ValueError when malformed."""

    if not isinstance(payload, Mapping):
        raise ValueError("Interaction payload must be an object.")

    interaction_type = payload.get("type")

    if interaction_type == InteractionType.PING:
        return Ping()

    if interaction_type == InteractionType.APPLICATION_COMMAND:
        data = payload.get("data")
        if not isinstance(data, Mapping):
            raise ValueError("Command interaction is missing its data.")

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Command interaction is missing its name.")

        return ApplicationCommand(name=name, options=parse_options(data.get("options")))

    return OtherInteraction(type=interaction_type)
