# tests/test_kv_store.py

from __future__ import annotations

import json
import os
from pathlib import Path

from taskmaster.preferences import schema
from taskmaster.preferences.kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore
from taskmaster.preferences.options import ThemeAccent, ThemeBackground
from taskmaster.preferences.store import PreferencesStore


def _bump_mtime(path: Path) -> None:
    # Some filesystems have coarse timestamps; force a visible change.
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 2_000_000_000))


def test_in_memory_remove_falls_back_to_default() -> None:
    kv = InMemoryKeyValueStore()
    kv.register_defaults({"UseHaptics": True})
    seen: list[str | None] = []
    kv.subscribe(seen.append)

    kv.set("UseHaptics", False)
    assert kv.get("UseHaptics") is False

    kv.remove("UseHaptics")
    assert kv.get("UseHaptics") is True
    assert seen == ["UseHaptics", "UseHaptics"]


def test_json_store_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "container" / "preferences.json"

    first = PreferencesStore(JsonFileKeyValueStore(path))
    first.set(schema.THEME_BACKGROUND, ThemeBackground.LIGHT)
    first.set(schema.AUTO_DELETE_ON_CHECKOFF, True)

    on_disk = json.loads(path.read_text("utf-8"))
    assert on_disk == {"ThemeBackground": "light", "AutoDeleteTaskOnCheckoff": True}

    second = PreferencesStore(JsonFileKeyValueStore(path))
    assert second.get(schema.THEME_BACKGROUND) is ThemeBackground.LIGHT
    assert second.get(schema.AUTO_DELETE_ON_CHECKOFF) is True
    assert second.get(schema.USE_HAPTICS) is True


def test_malformed_file_reads_as_defaults(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text("{ not json", "utf-8")

    prefs = PreferencesStore(JsonFileKeyValueStore(path))

    assert prefs.get(schema.THEME_BACKGROUND) is ThemeBackground.SYSTEM
    assert prefs.set(schema.THEME_BACKGROUND, "dark") is True
    assert json.loads(path.read_text("utf-8")) == {"ThemeBackground": "dark"}


def test_non_object_file_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text("[1, 2, 3]", "utf-8")

    kv = JsonFileKeyValueStore(path)
    assert kv.get("ThemeBackground") is None


def test_write_failure_keeps_value_in_memory(tmp_path: Path) -> None:
    target = tmp_path / "prefs.json"
    target.mkdir()  # a directory where the file should be -> writes fail

    prefs = PreferencesStore(JsonFileKeyValueStore(target))

    assert prefs.set(schema.DEBUG_ENABLED, True) is True
    assert prefs.get(schema.DEBUG_ENABLED) is True


def test_refresh_notifies_about_external_changes(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    mine = JsonFileKeyValueStore(path)
    prefs = PreferencesStore(mine)
    prefs.set(schema.USE_HAPTICS, True)

    seen: list[str | None] = []
    prefs.on_change(seen.append)

    # Another process (e.g. the watch app) writes to the shared container.
    other = JsonFileKeyValueStore(path)
    other.set("UseHaptics", False)
    other.set("ThemeAccent", "blue")
    _bump_mtime(path)

    prefs.refresh()

    assert sorted(k for k in seen if k) == ["ThemeAccent", "UseHaptics"]
    assert prefs.get(schema.USE_HAPTICS) is False

    seen.clear()
    prefs.refresh()
    assert seen == []


def test_set_keeps_keys_written_by_another_process(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    phone = PreferencesStore(JsonFileKeyValueStore(path))
    watch = PreferencesStore(JsonFileKeyValueStore(path))

    phone.set(schema.USE_HAPTICS, True)
    watch.set(schema.USE_HAPTICS, False)
    phone.set(schema.THEME_ACCENT, "blue")

    assert phone.get(schema.USE_HAPTICS) is False
    on_disk = json.loads(path.read_text("utf-8"))
    assert on_disk == {"UseHaptics": False, "ThemeAccent": "blue"}

    fresh = PreferencesStore(JsonFileKeyValueStore(path))
    assert fresh.get(schema.USE_HAPTICS) is False
    assert fresh.get(schema.THEME_ACCENT) is ThemeAccent.BLUE


def test_remove_keeps_keys_written_by_another_process(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    mine = JsonFileKeyValueStore(path)
    other = JsonFileKeyValueStore(path)

    mine.set("DebugEnabled", True)
    other.set("AlphabetizeList", False)
    mine.remove("DebugEnabled")

    assert json.loads(path.read_text("utf-8")) == {"AlphabetizeList": False}
