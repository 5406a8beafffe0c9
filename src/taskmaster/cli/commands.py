# src/taskmaster/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..preferences.schema import find_preference
from ..tasks import task_api
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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

        logger.debug("Command /%s args=%s", name, args)
        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _pick(state: AppState, args: list[str]) -> Task | str:
    """Resolve a 1-based position in the visible list, or return an error message."""
    if not args:
        return "Missing task number. Use /list to see numbers."
    try:
        pos = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]}"
    tasks = task_api.visible_tasks(state)
    if pos < 1 or pos > len(tasks):
        return f"No task #{pos}. {task_api.count_string('task', len(tasks))} in the list."
    return tasks[pos - 1]


def render_list(state: AppState) -> str:
    tasks = task_api.visible_tasks(state)
    title = task_api.count_string("task", len(tasks), override_empty="No tasks yet.")
    if not tasks:
        return f"{title} Type some text to add one."
    lines = [f"{title}:"]
    for i, t in enumerate(tasks, start=1):
        indicator = task_api.indicator_text(state.preferences, t)
        date = task_api.format_task_date(state.preferences, t.created_at)
        lines.append(f"{i:>3}. {indicator} {t.body}  ({date})")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_list(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    task = task_api.add_task(state, " ".join(args))
    if task is None:
        return "Task text cannot be empty."
    return f"Added: {task.body}"


def cmd_done(state: AppState, args: list[str]) -> str:
    picked = _pick(state, args)
    if isinstance(picked, str):
        return picked
    body = picked.body
    updated = task_api.check_off(state, picked)
    if updated is None:
        return f"Completed and removed: {body}"
    return f"{'Completed' if updated.is_complete else 'Reopened'}: {body}"


def cmd_show(state: AppState, args: list[str]) -> str:
    picked = _pick(state, args)
    if isinstance(picked, str):
        return picked
    frame, mark = task_api.indicator_symbol_names(state.preferences, picked)
    return "\n".join(
        [
            f"{task_api.indicator_text(state.preferences, picked)} {picked.body}",
            f"  Status: {'Complete' if picked.is_complete else 'Open'}",
            f"  Created: {task_api.format_task_date(state.preferences, picked.created_at)}",
            f"  Updated: {task_api.format_task_date(state.preferences, picked.updated_at)}",
            f"  Indicator: {frame}" + (f" + {mark}" if mark else ""),
            f"  Id: {picked.id}",
        ]
    )


def cmd_edit(state: AppState, args: list[str]) -> str:
    picked = _pick(state, args)
    if isinstance(picked, str):
        return picked
    text = " ".join(args[1:])
    if not task_api.is_valid_body(text):
        return "Usage: /edit <n> <new text>"
    state.task_store.edit_body(picked, text)
    return f"Updated: {picked.body}"


def cmd_dup(state: AppState, args: list[str]) -> str:
    picked = _pick(state, args)
    if isinstance(picked, str):
        return picked
    dup = state.task_store.duplicate(picked)
    return f"Duplicated: {dup.body if dup else picked.body}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    picked = _pick(state, args)
    if isinstance(picked, str):
        return picked
    state.task_store.delete(picked)
    return f"Deleted: {picked.body}"


def cmd_clear(state: AppState, args: list[str]) -> str:
    """
    /clear      -> ask for confirmation
    /clear yes  -> delete every task
    """
    count = len(state.task_store)
    if count == 0:
        return "There are no tasks to clear!"
    label = task_api.count_string("task", count, capitalize=False)
    if not args or args[0].lower() not in ("yes", "y", "confirm"):
        return f"{label} will be cleared (cannot be undone). Run /clear yes to confirm."
    removed = state.task_store.clear_all()
    return f"Cleared {task_api.count_string('task', removed, capitalize=False)}."


def cmd_prefs(state: AppState, args: list[str]) -> str:
    lines = ["Preferences:"]
    for pref in state.preferences.preferences:
        value = state.preferences.get(pref)
        shown = str(value).lower() if isinstance(value, bool) else str(value)
        lines.append(f"  {pref.name} = {shown}  ({pref.help_text})")
    return "\n".join(lines)


def cmd_pref(state: AppState, args: list[str]) -> str:
    """
    /pref <name>          -> show value and choices
    /pref <name> <value>  -> set value
    """
    if not args:
        return "Usage: /pref <name> [value]. Use /prefs to list names."
    pref = find_preference(args[0])
    if pref is None:
        return f"Unknown preference: {args[0]}"
    if len(args) == 1:
        value = state.preferences.get(pref)
        return f"{pref.name} = {value} (choices: {', '.join(pref.choices())})"
    if not state.preferences.set(pref, args[1]):
        return f"Invalid value for {pref.name}: {args[1]} (choices: {', '.join(pref.choices())})"
    return f"{pref.name} set to {state.preferences.get(pref)}"


def cmd_refresh(state: AppState, args: list[str]) -> str:
    n = state.task_store.refresh()
    state.preferences.refresh()
    return f"Refreshed ({n} task changes)."


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    return (
        "Status:\n"
        f"  Tasks: {len(state.task_store)}\n"
        f"  Group container: {getattr(settings, 'group_container', '-')}\n"
        f"  Tasks DB: {getattr(settings, 'tasks_db_path', '-')}\n"
        f"  Preferences: {getattr(settings, 'preferences_path', '-')}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text> (plain text works too).")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["x"])
registry.register("show", cmd_show, help_text="Show task details: /show <n>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n> <text>.")
registry.register("dup", cmd_dup, help_text="Duplicate a task: /dup <n>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n>.", aliases=["del"])
registry.register("clear", cmd_clear, help_text="Delete all tasks: /clear yes.")
registry.register("prefs", cmd_prefs, help_text="Show all preferences.")
registry.register("pref", cmd_pref, help_text="Show/set a preference: /pref <name> [value].")
registry.register("refresh", cmd_refresh, help_text="Reload changes from the shared container.")
registry.register("status", cmd_status, help_text="Show storage locations.")
