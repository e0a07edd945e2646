"""Route Discord interactions to ClickUp operations and build the reply.

``handle_interaction`` always returns a well-formed ``{type, data}`` reply:
failures after the payload has been decoded are turned into a channel
message describing the error instead of propagating to the web layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping
from uuid import uuid4

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars

from clickup_discord_bridge.background import PENDING_TASKS, BackgroundTaskRegistry, race
from clickup_discord_bridge.clickup import lists as list_ops
from clickup_discord_bridge.clickup import tags as tag_ops
from clickup_discord_bridge.clickup import tasks as task_ops
from clickup_discord_bridge.clickup.client import ClickUpClient
from clickup_discord_bridge.clickup.workspace import get_workspace_hierarchy
from clickup_discord_bridge.config import AppSettings
from clickup_discord_bridge.errors import BridgeError, ParameterError, describe_error

from . import embeds
from .models import (
    SUBCOMMAND_KEY,
    ApplicationCommand,
    OtherInteraction,
    Ping,
    flatten_options,
    parse_interaction,
)
from .responses import error_message, pong

ClientFactory = Callable[[], ClickUpClient]


@dataclass(frozen=True)
class CommandContext:
    settings: AppSettings
    options: Dict[str, Any]
    client_factory: ClientFactory
    correlation_id: str
    registry: BackgroundTaskRegistry

    @property
    def workspace_id(self) -> str:
        return self.settings.clickup_workspace_id


SubcommandHandler = Callable[[CommandContext], Dict[str, Any]]


def build_client_factory(settings: AppSettings) -> ClientFactory:
    """Return a factory producing request-scoped ClickUp clients."""

    def factory() -> ClickUpClient:
        return ClickUpClient(
            token=settings.clickup_api_token,
            base_url=settings.clickup_api_base_url,
            max_retries=settings.clickup_max_retries,
            max_backoff=settings.clickup_max_backoff_seconds,
        )

    return factory


def _require(options: Mapping[str, Any], key: str) -> Any:
    value = options.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ParameterError(f"Missing required option '{key}'")
    return value.strip() if isinstance(value, str) else value


def _optional(options: Mapping[str, Any], key: str) -> Any:
    value = options.get(key)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _task_target(ctx: CommandContext) -> Dict[str, Any]:
    """Interpret the ``task`` option: an ID, or a name when ``list`` is given."""

    task = _require(ctx.options, "task")
    list_name = _optional(ctx.options, "list")
    if list_name:
        return {"task_name": task, "list_name": list_name, "workspace_id": ctx.workspace_id}
    return {"task_id": task}


def _space_target(value: str) -> Dict[str, Any]:
    if value.isdigit():
        return {"space_id": value}
    return {"space_name": value}


# workspace


def _workspace_hierarchy(ctx: CommandContext) -> Dict[str, Any]:
    def fetch():
        with ctx.client_factory() as client:
            return get_workspace_hierarchy(client, ctx.workspace_id)

    timeout = ctx.settings.hierarchy_timeout
    if timeout is None:
        return embeds.hierarchy_reply(fetch())

    finished, workspace = race(
        fetch,
        timeout=timeout,
        correlation_id=ctx.correlation_id,
        operation="workspace.hierarchy",
        registry=ctx.registry,
    )
    if not finished:
        structlog.get_logger().info("workspace_hierarchy_deferred", timeout=timeout)
        return embeds.hierarchy_pending_reply(ctx.correlation_id)
    return embeds.hierarchy_reply(workspace)


# task


def _task_create(ctx: CommandContext) -> Dict[str, Any]:
    name = _require(ctx.options, "name")
    list_label = _require(ctx.options, "list")
    log = structlog.get_logger().bind(list_name=list_label, task_name=name)

    def create():
        with ctx.client_factory() as client:
            return task_ops.create_task(
                client,
                name=name,
                list_name=list_label,
                workspace_id=ctx.workspace_id,
                description=_optional(ctx.options, "description"),
                priority=ctx.options.get("priority"),
                due_date=_optional(ctx.options, "due_date"),
            )

    finished, task = race(
        create,
        timeout=ctx.settings.task_create_timeout,
        correlation_id=ctx.correlation_id,
        operation="task.create",
        registry=ctx.registry,
    )

    if not finished:
        log.info("task_create_deferred", timeout=ctx.settings.task_create_timeout)
        return embeds.task_pending_reply(
            name,
            list_label=list_label,
            correlation_id=ctx.correlation_id,
        )

    return embeds.task_created_reply(task, list_label=list_label)


def _task_get(ctx: CommandContext) -> Dict[str, Any]:
    with ctx.client_factory() as client:
        task = task_ops.get_task(client, include_subtasks=True, **_task_target(ctx))
    return embeds.task_details_reply(task)


def _task_update(ctx: CommandContext) -> Dict[str, Any]:
    with ctx.client_factory() as client:
        task = task_ops.update_task(
            client,
            name=_optional(ctx.options, "name"),
            description=_optional(ctx.options, "description"),
            status=_optional(ctx.options, "status"),
            priority=ctx.options.get("priority"),
            due_date=_optional(ctx.options, "due_date"),
            **_task_target(ctx),
        )
    return embeds.task_updated_reply(task)


def _task_delete(ctx: CommandContext) -> Dict[str, Any]:
    target = _task_target(ctx)
    with ctx.client_factory() as client:
        task_ops.delete_task(client, **target)
    return embeds.task_deleted_reply(_require(ctx.options, "task"))


# list


def _list_get(ctx: CommandContext) -> Dict[str, Any]:
    list_name = _require(ctx.options, "list")
    with ctx.client_factory() as client:
        task_list = list_ops.get_list(client, list_name=list_name, workspace_id=ctx.workspace_id)
    return embeds.list_details_reply(task_list)


def _list_tasks(ctx: CommandContext) -> Dict[str, Any]:
    list_name = _require(ctx.options, "list")
    with ctx.client_factory() as client:
        tasks = task_ops.get_tasks_from_list(
            client,
            list_name=list_name,
            workspace_id=ctx.workspace_id,
            include_closed=bool(ctx.options.get("include_closed") or False),
        )
    return embeds.list_tasks_reply(list_name, tasks)


def _list_create(ctx: CommandContext) -> Dict[str, Any]:
    space = _require(ctx.options, "space")
    with ctx.client_factory() as client:
        task_list = list_ops.create_list(
            client,
            name=_require(ctx.options, "name"),
            content=_optional(ctx.options, "content"),
            **_space_target(space),
        )
    return embeds.list_created_reply(task_list, space_label=space)


# tag


def _tag_list(ctx: CommandContext) -> Dict[str, Any]:
    space = _require(ctx.options, "space")
    with ctx.client_factory() as client:
        tags = tag_ops.get_space_tags(client, **_space_target(space))
    return embeds.tags_reply(space, tags)


def _tag_create(ctx: CommandContext) -> Dict[str, Any]:
    space = _require(ctx.options, "space")
    name = _require(ctx.options, "name")
    with ctx.client_factory() as client:
        response = tag_ops.create_space_tag(
            client,
            tag_name=name,
            color_command=_optional(ctx.options, "color"),
            **_space_target(space),
        )
    return embeds.tag_created_reply(name, space_label=space, response=response or {})


def _tag_add(ctx: CommandContext) -> Dict[str, Any]:
    tag = _require(ctx.options, "tag")
    with ctx.client_factory() as client:
        task_ops.add_tag_to_task(client, tag_name=tag, **_task_target(ctx))
    return embeds.tag_added_reply(tag, _require(ctx.options, "task"))


def _tag_remove(ctx: CommandContext) -> Dict[str, Any]:
    tag = _require(ctx.options, "tag")
    with ctx.client_factory() as client:
        task_ops.remove_tag_from_task(client, tag_name=tag, **_task_target(ctx))
    return embeds.tag_removed_reply(tag, _require(ctx.options, "task"))


# search


def _search_tags(ctx: CommandContext) -> Dict[str, Any]:
    raw_tags = str(_require(ctx.options, "tags"))
    tags = [tag.strip() for tag in raw_tags.split(",") if tag.strip()]
    if not tags:
        raise ParameterError("Missing required option 'tags'")

    with ctx.client_factory() as client:
        tasks = task_ops.search_tasks_by_tags(
            client,
            ctx.workspace_id,
            tags=tags,
            include_closed=bool(ctx.options.get("include_closed") or False),
        )
    return embeds.search_by_tags_reply(tags, tasks)


def _search_status(ctx: CommandContext) -> Dict[str, Any]:
    status = _require(ctx.options, "status")
    with ctx.client_factory() as client:
        tasks = task_ops.search_tasks_by_status(client, ctx.workspace_id, status=status)
    return embeds.search_by_status_reply(status, tasks)


COMMAND_HANDLERS: Dict[str, Dict[str, SubcommandHandler]] = {
    "workspace": {
        "hierarchy": _workspace_hierarchy,
    },
    "task": {
        "create": _task_create,
        "get": _task_get,
        "update": _task_update,
        "delete": _task_delete,
    },
    "list": {
        "get": _list_get,
        "tasks": _list_tasks,
        "create": _list_create,
    },
    "tag": {
        "list": _tag_list,
        "create": _tag_create,
        "add": _tag_add,
        "remove": _tag_remove,
    },
    "search": {
        "tags": _search_tags,
        "status": _search_status,
    },
}


def _dispatch_command(command: ApplicationCommand, ctx: CommandContext) -> Dict[str, Any]:
    subcommands = COMMAND_HANDLERS.get(command.name)
    if subcommands is None:
        return error_message(f"Unknown command: {command.name}")

    subcommand = ctx.options.get(SUBCOMMAND_KEY)
    handler = subcommands.get(subcommand) if subcommand else None
    if handler is None:
        return error_message(f"Unknown {command.name} subcommand: {subcommand or '(none)'}")

    return handler(ctx)


def handle_interaction(
    payload: Mapping[str, Any],
    *,
    settings: AppSettings,
    client_factory: ClientFactory | None = None,
    registry: BackgroundTaskRegistry | None = None,
    trace_id: str | None = None,
) -> Dict[str, Any]:
    """Turn a verified interaction payload into a Discord reply."""

    trace_id = trace_id or str(uuid4())
    bind_contextvars(trace_id=trace_id)
    log = structlog.get_logger()

    try:
        try:
            interaction = parse_interaction(payload)
        except ValueError as exc:
            log.warning("interaction_invalid", error=str(exc))
            return error_message(f"Invalid interaction payload: {exc}")

        if isinstance(interaction, Ping):
            log.info("interaction_ping")
            return pong()

        if isinstance(interaction, OtherInteraction):
            log.info("interaction_unsupported", interaction_type=interaction.type)
            return error_message("Unsupported interaction type")

        options = flatten_options(interaction.options)
        log = log.bind(command=interaction.name, subcommand=options.get(SUBCOMMAND_KEY))
        log.info("interaction_received", option_names=sorted(options))

        ctx = CommandContext(
            settings=settings,
            options=options,
            client_factory=client_factory or build_client_factory(settings),
            correlation_id=trace_id,
            registry=registry if registry is not None else PENDING_TASKS,
        )

        reply = _dispatch_command(interaction, ctx)
        log.info("interaction_replied", response_type=reply.get("type"))
        return reply

    except BridgeError as exc:
        log.warning("interaction_failed", error=str(exc), error_type=type(exc).__name__)
        return error_message(f"Error executing command: {describe_error(exc)}")

    except Exception as exc:
        log.exception("interaction_crashed")
        return error_message(f"{describe_error(exc)} (reference: {trace_id})")

    finally:
        unbind_contextvars("trace_id")
