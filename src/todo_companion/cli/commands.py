# src/todo_companion/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.errors import NoDataAvailableError, TasksError, friendly_error_message
from ..core.state import AppState
from ..tasks.task_api import create_task, load_statistics, load_tasks, update_task
from ..tasks.task_models import Task, TasksFilterType

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID_LEN = 8


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task storage errors become user-facing messages; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return await h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return await h2(state, args)
        except TasksError as e:
            logger.info("Command /%s failed: %s", name, e)
            return friendly_error_message(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_title_description(args: list[str]) -> tuple[str, str]:
    """Split 'Buy milk | two liters' into ('Buy milk', 'two liters')."""
    text = " ".join(args)
    title, _, description = text.partition("|")
    return title.strip(), description.strip()


def _format_task_line(task: Task) -> str:
    mark = "x" if task.is_completed else " "
    return f"[{mark}] {task.id[:SHORT_ID_LEN]}  {task.title_for_list or ''}"


async def _resolve_task_id(state: AppState, raw: str) -> str | None:
    """
    Accept a full id or a unique id prefix.

    Returns None when the prefix matches more than one task.
    """
    try:
        tasks = await state.tasks.get_tasks()
    except NoDataAvailableError:
        return raw

    ids = [t.id for t in tasks]
    if raw in ids:
        return raw
    matches = [i for i in ids if i.startswith(raw)]
    if len(matches) > 1:
        return None
    return matches[0] if matches else raw


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    cached = state.tasks.cached_tasks
    cache = "cold" if cached is None else f"{len(cached)} task(s)"
    dirty = "yes" if state.tasks.cache_is_dirty else "no"
    return (
        "Status:\n"
        f"  App: {getattr(state.settings, 'app_name', 'todo')}\n"
        f"  Local store: {getattr(state.settings, 'tasks_db_path', '?')}\n"
        f"  Remote latency: {getattr(state.settings, 'remote_latency_seconds', 0.0):.2f}s\n"
        f"  Cache: {cache} (dirty: {dirty})\n"
        f"  Filter: {state.filtering.value}"
    )


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /list                   -> list with the current filter
    /list all|active|completed
    """
    if args:
        state.filtering = TasksFilterType.parse(args[0])

    # A network reload is forced on the first listing of the session.
    force_update = state.first_load
    state.first_load = False

    if emit:
        emit("Loading tasks...")
    tasks = await load_tasks(state.tasks, state.filtering, force_update=force_update)

    if not tasks:
        if state.filtering == TasksFilterType.ACTIVE:
            return "You have no active tasks."
        if state.filtering == TasksFilterType.COMPLETED:
            return "You have no completed tasks."
        return "You have no tasks. Use /add to create one."

    header = {
        TasksFilterType.ALL: "All tasks:",
        TasksFilterType.ACTIVE: "Active tasks:",
        TasksFilterType.COMPLETED: "Completed tasks:",
    }[state.filtering]
    return "\n".join([header, *(_format_task_line(t) for t in tasks)])


async def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Refreshing from remote...")
    tasks = await load_tasks(state.tasks, TasksFilterType.ALL, force_update=True)
    state.first_load = False
    return f"Refreshed: {len(tasks)} task(s)."


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> [| description]"""
    title, description = _split_title_description(args)
    task = await create_task(state.tasks, title, description)
    return f"Task saved: {task.id[:SHORT_ID_LEN]}  {task.title_for_list}"


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> <title> [| description]"""
    if not args:
        return "Usage: /edit <id> <title> [| description]"
    task_id = await _resolve_task_id(state, args[0])
    if task_id is None:
        return f"Ambiguous id prefix: {args[0]}"
    await state.tasks.get_task(task_id)
    title, description = _split_title_description(args[1:])
    task = await update_task(state.tasks, task_id, title, description)
    return f"Task updated: {task.id[:SHORT_ID_LEN]}  {task.title_for_list}"


async def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task_id = await _resolve_task_id(state, args[0])
    if task_id is None:
        return f"Ambiguous id prefix: {args[0]}"
    task = await state.tasks.get_task(task_id)
    status = "completed" if task.is_completed else "active"
    lines = [f"Task {task.id}", f"  Status: {status}"]
    if task.title:
        lines.append(f"  Title: {task.title}")
    if task.description:
        lines.append(f"  Description: {task.description}")
    return "\n".join(lines)


async def _set_status(state: AppState, args: list[str], *, completed: bool) -> str:
    verb = "done" if completed else "undo"
    if not args:
        return f"Usage: /{verb} <id>"
    task_id = await _resolve_task_id(state, args[0])
    if task_id is None:
        return f"Ambiguous id prefix: {args[0]}"
    task = await state.tasks.get_task(task_id)
    if completed:
        await state.tasks.complete_task(task)
        return f"Task marked complete: {task.title_for_list}"
    await state.tasks.activate_task(task)
    return f"Task marked active: {task.title_for_list}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    return await _set_status(state, args, completed=True)


async def cmd_undo(state: AppState, args: list[str]) -> str:
    return await _set_status(state, args, completed=False)


async def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    task_id = await _resolve_task_id(state, args[0])
    if task_id is None:
        return f"Ambiguous id prefix: {args[0]}"
    await state.tasks.delete_task(task_id)
    return "Task deleted."


async def cmd_clear(state: AppState, args: list[str]) -> str:
    await state.tasks.clear_completed_tasks()
    return "Completed tasks cleared."


async def cmd_wipe(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() != "yes":
        return "This deletes every task everywhere. Confirm with: /wipe yes"
    await state.tasks.delete_all_tasks()
    return "All tasks deleted."


async def cmd_stats(state: AppState, args: list[str]) -> str:
    stats = await load_statistics(state.tasks)
    if not stats.total:
        return "You have no tasks."
    return (
        "Statistics:\n"
        f"  Active tasks: {stats.active} ({stats.active_percent:.0f}%)\n"
        f"  Completed tasks: {stats.completed} ({stats.completed_percent:.0f}%)"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show settings and cache state.")
registry.register("list", cmd_list, help_text="List tasks: /list [all|active|completed].", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the remote service.")
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title> [| description].")
registry.register("show", cmd_show, help_text="Show task details: /show <id>.")
registry.register("done", cmd_done, help_text="Mark a task complete: /done <id>.")
registry.register("undo", cmd_undo, help_text="Mark a task active again: /undo <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Delete all completed tasks.")
registry.register("wipe", cmd_wipe, help_text="Delete all tasks: /wipe yes.")
registry.register("stats", cmd_stats, help_text="Show active/completed statistics.")
