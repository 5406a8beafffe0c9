# src/taskmaster/preferences/schema.py

"""
Preference table: name -> storage key -> type -> default.

Decoding is lenient and never raises: anything that does not parse into the
declared type resolves to the default. Encoding produces JSON-friendly primitives
(enum -> its string value, bool -> bool).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from .options import (
    DateFormat,
    IndicatorFrame,
    IndicatorSymbol,
    QuickAddButtonStyle,
    ThemeAccent,
    ThemeBackground,
)

T = TypeVar("T")

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}

MISSING: Any = object()


def _coerce_bool(raw: Any) -> Any:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        s = raw.strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
    return MISSING


def _coerce_enum(kind: type[Enum], raw: Any) -> Any:
    if isinstance(raw, kind):
        return raw
    if isinstance(raw, str):
        try:
            return kind(raw.strip().lower())
        except ValueError:
            return MISSING
    return MISSING


@dataclass(frozen=True, slots=True)
class Preference(Generic[T]):
    name: str
    key: str
    kind: type[T]
    default: T
    help_text: str = ""

    def coerce(self, raw: Any) -> Any:
        """Return the typed value, or MISSING when raw cannot be parsed."""
        if raw is None:
            return MISSING
        if self.kind is bool:
            return _coerce_bool(raw)
        if isinstance(self.kind, type) and issubclass(self.kind, Enum):
            return _coerce_enum(self.kind, raw)
        return MISSING

    def decode(self, raw: Any) -> T:
        value = self.coerce(raw)
        return self.default if value is MISSING else value

    def encode(self, value: T) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    def choices(self) -> list[str]:
        if self.kind is bool:
            return ["true", "false"]
        return [m.value for m in self.kind]  # type: ignore[attr-defined]


# ---- Appearance ----
THEME_BACKGROUND = Preference(
    "theme_background", "ThemeBackground", ThemeBackground, ThemeBackground.SYSTEM,
    "Light/dark theme, or follow the system.",
)
THEME_ACCENT = Preference(
    "theme_accent", "ThemeAccent", ThemeAccent, ThemeAccent.PURPLE, "Accent color."
)
INDICATOR_FRAME = Preference(
    "indicator_frame", "IndicatorFrame", IndicatorFrame, IndicatorFrame.ROUNDSQUARE,
    "Shape behind the completion indicator.",
)
INDICATOR_SYMBOL = Preference(
    "indicator_symbol", "IndicatorChecked", IndicatorSymbol, IndicatorSymbol.CHECKMARK,
    "Mark shown inside the frame when a task is complete.",
)
INDICATOR_FILL = Preference(
    "indicator_fill", "IndicatorFill", bool, False, "Fill the indicator frame when complete."
)
QUICK_ADD_BUTTON_STYLE = Preference(
    "quick_add_button_style", "QuickAddButtonStyle", QuickAddButtonStyle,
    QuickAddButtonStyle.SMALL, "Size/style of the quick add button.",
)
DATE_FORMAT = Preference(
    "date_format", "DateFormat", DateFormat, DateFormat.INTERNATIONAL,
    "How task dates are shown.",
)

# ---- App behavior ----
DEBUG_ENABLED = Preference("debug_enabled", "DebugEnabled", bool, False, "Show debug info.")
USE_HAPTICS = Preference("use_haptics", "UseHaptics", bool, True, "Play haptic feedback.")
OPEN_SETTINGS_ON_EDGE_SLIDE = Preference(
    "open_settings_on_edge_slide", "OpenSettingsOnLeftEdgeSlide", bool, True,
    "Left-edge swipe on the list opens settings.",
)
AUTO_FOCUS_TEXT_FIELDS = Preference(
    "auto_focus_text_fields", "AutoFocusTextFields", bool, True,
    "Focus text fields when add/edit views appear.",
)

# ---- List behavior ----
ALPHABETIZE_LIST = Preference(
    "alphabetize_list", "AlphabetizeList", bool, True, "Sort the task list by body."
)
AUTO_DELETE_ON_CHECKOFF = Preference(
    "auto_delete_on_checkoff", "AutoDeleteTaskOnCheckoff", bool, False,
    "Delete tasks as soon as they are checked off.",
)

ALL_PREFERENCES: tuple[Preference[Any], ...] = (
    THEME_BACKGROUND,
    THEME_ACCENT,
    INDICATOR_FRAME,
    INDICATOR_SYMBOL,
    INDICATOR_FILL,
    QUICK_ADD_BUTTON_STYLE,
    DATE_FORMAT,
    DEBUG_ENABLED,
    USE_HAPTICS,
    OPEN_SETTINGS_ON_EDGE_SLIDE,
    AUTO_FOCUS_TEXT_FIELDS,
    ALPHABETIZE_LIST,
    AUTO_DELETE_ON_CHECKOFF,
)


def find_preference(name: str) -> Preference[Any] | None:
    """Look up by name ("theme_background", "theme-background") or storage key."""
    needle = (name or "").strip()
    if not needle:
        return None
    slug = needle.lower().replace("-", "_")
    for pref in ALL_PREFERENCES:
        if pref.name == slug or pref.key == needle:
            return pref
    return None
