# src/taskmaster/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.state import AppState
from ..preferences import schema
from ..preferences.options import IndicatorFrame, IndicatorSymbol
from ..preferences.store import PreferencesStore
from .task_models import Task

logger = logging.getLogger(__name__)

MIN_BODY_LENGTH = 1

_FRAME_CHARS = {
    IndicatorFrame.APP: ("[", "]"),
    IndicatorFrame.CIRCLE: ("(", ")"),
    IndicatorFrame.DIAMOND: ("<", ">"),
    IndicatorFrame.ROUNDSQUARE: ("[", "]"),
    IndicatorFrame.SQUARE: ("|", "|"),
}

_SYMBOL_CHARS = {
    IndicatorSymbol.ASTERISK: "*",
    IndicatorSymbol.CHECKMARK: "✓",
    IndicatorSymbol.SCRIBBLE: "~",
    IndicatorSymbol.XMARK: "x",
}


def is_valid_body(text: str) -> bool:
    return len(text.strip()) >= MIN_BODY_LENGTH


def add_task(state: AppState, text: str) -> Task | None:
    """
    Caller-side validation for new tasks (the store itself accepts anything).
    Returns None when the trimmed text is too short.
    """
    if not is_valid_body(text):
        return None
    return state.task_store.add(text)


def visible_tasks(state: AppState) -> list[Task]:
    """Tasks in display order: alphabetized by body if the user asked for it."""
    tasks = list(state.task_store.query_all())
    if state.preferences.get(schema.ALPHABETIZE_LIST):
        tasks.sort(key=lambda t: t.body.casefold())
    return tasks


def check_off(state: AppState, task: Task) -> Task | None:
    """
    Toggle completion. With auto-delete on, a task that becomes complete is removed
    right away and None is returned.
    """
    updated = state.task_store.toggle_complete(task)
    if updated is None:
        return None
    if updated.is_complete and state.preferences.get(schema.AUTO_DELETE_ON_CHECKOFF):
        state.task_store.delete(updated)
        logger.debug("Auto-deleted checked off task id=%s", updated.id)
        return None
    return updated


def count_string(
    noun: str,
    count: int,
    *,
    capitalize: bool = True,
    pluralize: bool = True,
    override_empty: str | None = None,
) -> str:
    """
    "0 Tasks", "1 Task", "2 Tasks", ...

    override_empty replaces the whole string when count is 0.
    """
    if count == 0 and override_empty is not None:
        return override_empty

    word = noun
    if capitalize and word:
        word = word[0].upper() + word[1:]
    if pluralize and count != 1:
        word += "s"
    return f"{count} {word}"


def indicator_text(prefs: PreferencesStore, task: Task) -> str:
    left, right = _FRAME_CHARS[prefs.get(schema.INDICATOR_FRAME)]
    if task.is_complete:
        mark = _SYMBOL_CHARS[prefs.get(schema.INDICATOR_SYMBOL)]
    else:
        mark = " "
    if prefs.get(schema.INDICATOR_FILL) and task.is_complete:
        left, right = left * 2, right * 2
    return f"{left}{mark}{right}"


def indicator_symbol_names(prefs: PreferencesStore, task: Task) -> tuple[str, str | None]:
    """
    (frame symbol, mark symbol) as named in the system symbol set.

    The frame gets ".fill" when filling is on and the task is complete; the mark is
    None for an open task.
    """
    frame = prefs.get(schema.INDICATOR_FRAME).symbol_name
    if not task.is_complete:
        return frame, None
    if prefs.get(schema.INDICATOR_FILL):
        frame += ".fill"
    return frame, prefs.get(schema.INDICATOR_SYMBOL).symbol_name


def format_task_date(prefs: PreferencesStore, ts: float) -> str:
    return prefs.get(schema.DATE_FORMAT).render(ts)
