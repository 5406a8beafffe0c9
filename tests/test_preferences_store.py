# tests/test_preferences_store.py

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from taskmaster.preferences import schema
from taskmaster.preferences.kv_store import InMemoryKeyValueStore
from taskmaster.preferences.options import (
    DateFormat,
    IndicatorFrame,
    IndicatorSymbol,
    QuickAddButtonStyle,
    ThemeAccent,
    ThemeBackground,
)
from taskmaster.preferences.store import PreferencesStore

EXPECTED_DEFAULTS: list[tuple[schema.Preference[Any], Any]] = [
    (schema.THEME_BACKGROUND, ThemeBackground.SYSTEM),
    (schema.THEME_ACCENT, ThemeAccent.PURPLE),
    (schema.INDICATOR_FRAME, IndicatorFrame.ROUNDSQUARE),
    (schema.INDICATOR_SYMBOL, IndicatorSymbol.CHECKMARK),
    (schema.INDICATOR_FILL, False),
    (schema.QUICK_ADD_BUTTON_STYLE, QuickAddButtonStyle.SMALL),
    (schema.DATE_FORMAT, DateFormat.INTERNATIONAL),
    (schema.DEBUG_ENABLED, False),
    (schema.USE_HAPTICS, True),
    (schema.OPEN_SETTINGS_ON_EDGE_SLIDE, True),
    (schema.AUTO_FOCUS_TEXT_FIELDS, True),
    (schema.ALPHABETIZE_LIST, True),
    (schema.AUTO_DELETE_ON_CHECKOFF, False),
]

NON_DEFAULT_VALUES: list[tuple[schema.Preference[Any], Any]] = [
    (schema.THEME_BACKGROUND, ThemeBackground.DARK),
    (schema.THEME_ACCENT, ThemeAccent.BLUE),
    (schema.INDICATOR_FRAME, IndicatorFrame.DIAMOND),
    (schema.INDICATOR_SYMBOL, IndicatorSymbol.SCRIBBLE),
    (schema.INDICATOR_FILL, True),
    (schema.QUICK_ADD_BUTTON_STYLE, QuickAddButtonStyle.MATERIAL),
    (schema.DATE_FORMAT, DateFormat.AMERICAN),
    (schema.DEBUG_ENABLED, True),
    (schema.USE_HAPTICS, False),
    (schema.OPEN_SETTINGS_ON_EDGE_SLIDE, False),
    (schema.AUTO_FOCUS_TEXT_FIELDS, False),
    (schema.ALPHABETIZE_LIST, False),
    (schema.AUTO_DELETE_ON_CHECKOFF, True),
]


def test_table_covers_every_preference() -> None:
    assert {p.key for p, _ in EXPECTED_DEFAULTS} == {p.key for p in schema.ALL_PREFERENCES}


@pytest.mark.parametrize(("pref", "expected"), EXPECTED_DEFAULTS, ids=lambda x: getattr(x, "name", None))
def test_defaults_before_any_set(prefs: PreferencesStore, pref, expected) -> None:
    assert prefs.get(pref) == expected


@pytest.mark.parametrize(("pref", "value"), NON_DEFAULT_VALUES, ids=lambda x: getattr(x, "name", None))
def test_set_then_get(prefs: PreferencesStore, pref, value) -> None:
    assert prefs.set(pref, value) is True
    assert prefs.get(pref) == value


def test_listener_fires_on_set_and_can_unsubscribe(prefs: PreferencesStore) -> None:
    seen: list[str | None] = []
    unsubscribe = prefs.on_change(seen.append)

    prefs.set(schema.USE_HAPTICS, False)
    prefs.set(schema.THEME_ACCENT, ThemeAccent.BLUE)

    assert seen == ["UseHaptics", "ThemeAccent"]

    unsubscribe()
    prefs.set(schema.USE_HAPTICS, True)
    assert len(seen) == 2


def test_multiple_listeners_and_failing_listener(prefs: PreferencesStore) -> None:
    calls = {"a": 0, "b": 0}

    def a(_key: str | None) -> None:
        calls["a"] += 1
        raise RuntimeError("listener bug")

    def b(_key: str | None) -> None:
        calls["b"] += 1

    prefs.on_change(a)
    prefs.on_change(b)

    assert prefs.set(schema.DEBUG_ENABLED, True) is True
    assert calls == {"a": 1, "b": 1}
    assert prefs.get(schema.DEBUG_ENABLED) is True


def test_malformed_stored_values_fall_back_to_defaults() -> None:
    kv = InMemoryKeyValueStore(
        {
            "ThemeBackground": "neon",
            "UseHaptics": "perhaps",
            "IndicatorFill": 42,
            "DateFormat": ["american"],
            "AlphabetizeList": None,
        }
    )
    prefs = PreferencesStore(kv)

    assert prefs.get(schema.THEME_BACKGROUND) is ThemeBackground.SYSTEM
    assert prefs.get(schema.USE_HAPTICS) is True
    assert prefs.get(schema.INDICATOR_FILL) is False
    assert prefs.get(schema.DATE_FORMAT) is DateFormat.INTERNATIONAL
    assert prefs.get(schema.ALPHABETIZE_LIST) is True


def test_lenient_decoding_of_strings() -> None:
    kv = InMemoryKeyValueStore({"AlphabetizeList": "false", "ThemeAccent": "BLUE", "UseHaptics": 0})
    prefs = PreferencesStore(kv)

    assert prefs.get(schema.ALPHABETIZE_LIST) is False
    assert prefs.get(schema.THEME_ACCENT) is ThemeAccent.BLUE
    assert prefs.get(schema.USE_HAPTICS) is False


def test_defaults_registration_is_non_destructive() -> None:
    kv = InMemoryKeyValueStore({"UseHaptics": False})
    PreferencesStore(kv)

    assert kv.get("UseHaptics") is False
    assert kv.contains("ThemeAccent") is False
    assert kv.get("ThemeAccent") == "purple"


def test_invalid_set_is_ignored(prefs: PreferencesStore) -> None:
    seen: list[str | None] = []
    prefs.on_change(seen.append)

    assert prefs.set(schema.THEME_BACKGROUND, "chartreuse") is False
    assert prefs.set(schema.USE_HAPTICS, "sometimes") is False
    assert prefs.set(schema.THEME_BACKGROUND, ThemeAccent.BLUE) is False

    assert prefs.get(schema.THEME_BACKGROUND) is ThemeBackground.SYSTEM
    assert prefs.get(schema.USE_HAPTICS) is True
    assert seen == []


def test_set_accepts_raw_strings(prefs: PreferencesStore) -> None:
    assert prefs.set(schema.THEME_BACKGROUND, "dark") is True
    assert prefs.set(schema.ALPHABETIZE_LIST, "off") is True

    assert prefs.get(schema.THEME_BACKGROUND) is ThemeBackground.DARK
    assert prefs.get(schema.ALPHABETIZE_LIST) is False


def test_values_are_stored_as_primitives() -> None:
    kv = InMemoryKeyValueStore()
    prefs = PreferencesStore(kv)

    prefs.set(schema.INDICATOR_FRAME, IndicatorFrame.CIRCLE)
    prefs.set(schema.INDICATOR_FILL, True)

    assert kv.get("IndicatorFrame") == "circle"
    assert type(kv.get("IndicatorFrame")) is str
    assert kv.get("IndicatorFill") is True


def test_snapshot_lists_every_preference(prefs: PreferencesStore) -> None:
    prefs.set(schema.DATE_FORMAT, DateFormat.AMERICAN)
    snap = prefs.snapshot()

    assert set(snap) == {p.name for p in schema.ALL_PREFERENCES}
    assert snap["date_format"] is DateFormat.AMERICAN
    assert snap["use_haptics"] is True


def test_close_stops_backend_notifications() -> None:
    kv = InMemoryKeyValueStore()
    prefs = PreferencesStore(kv)
    seen: list[str | None] = []
    prefs.on_change(seen.append)

    prefs.close()
    kv.set("UseHaptics", False)

    assert seen == []


def test_find_preference_by_name_slug_or_key() -> None:
    assert schema.find_preference("theme_background") is schema.THEME_BACKGROUND
    assert schema.find_preference("theme-background") is schema.THEME_BACKGROUND
    assert schema.find_preference("IndicatorChecked") is schema.INDICATOR_SYMBOL
    assert schema.find_preference("nope") is None
    assert schema.find_preference("") is None


def test_option_helpers() -> None:
    assert IndicatorFrame.ROUNDSQUARE.symbol_name == "square"
    assert IndicatorFrame.SQUARE.symbol_name == "squareshape"
    assert IndicatorSymbol.SCRIBBLE.symbol_name == "scribble.variable"
    assert IndicatorSymbol.XMARK.symbol_name == "xmark"
    assert DateFormat.AMERICAN.pattern == "%m/%d/%Y"
    assert DateFormat.INTERNATIONAL.pattern == "%Y-%m-%d"

    ts = datetime(2023, 11, 9, 8, 30).timestamp()
    assert DateFormat.AMERICAN.render(ts) == "11/09/2023"
    assert DateFormat.INTERNATIONAL.render(ts) == "2023-11-09"
