"""Tests for the hotkey store and its persistence."""

from __future__ import annotations

import pytest

from eqbc.hotkeys import DEFAULT_HOTKEYS, HOTKEYS_KEY, HotkeyError, HotkeyStore
from eqbc.store import JsonFileStore, MemoryStore


def test_load_defaults_when_nothing_persisted():
    store = HotkeyStore(MemoryStore())
    assert store.load() == list(DEFAULT_HOTKEYS)
    assert store.load() == ["/bcaa //sit", "/bcaa //stand", "/bcaa //follow"]


def test_load_splits_persisted_string():
    backing = MemoryStore({HOTKEYS_KEY: "a|/bct bob hi|c|c"})
    store = HotkeyStore(backing)
    assert store.load() == ["a", "/bct bob hi", "c", "c"]


@pytest.mark.parametrize("index", [0, 1, 2])
def test_set_persist_load_round_trip(index):
    backing = MemoryStore()
    store = HotkeyStore(backing)
    store.load()
    store.set(index, "/bct bob //follow")
    store.persist()
    expected = list(DEFAULT_HOTKEYS)
    expected[index] = "/bct bob //follow"
    assert HotkeyStore(backing).load() == expected
    assert store.load() == expected


def test_round_trip_through_json_file(tmp_path):
    path = tmp_path / "state.json"
    store = HotkeyStore(JsonFileStore(path))
    store.load()
    store.set(1, "connect 10.0.0.5 2112 bob")
    store.persist()
    reloaded = HotkeyStore(JsonFileStore(path))
    assert reloaded.load()[1] == "connect 10.0.0.5 2112 bob"


@pytest.mark.parametrize("index", [-1, 3, 99])
def test_set_rejects_out_of_range(index):
    store = HotkeyStore(MemoryStore())
    store.load()
    with pytest.raises(IndexError):
        store.set(index, "x")


def test_delimiter_is_rejected():
    store = HotkeyStore(MemoryStore())
    store.load()
    with pytest.raises(HotkeyError):
        store.set(0, "a|b")
    with pytest.raises(HotkeyError):
        store.add("line\nbreak")
    assert store.hotkeys == list(DEFAULT_HOTKEYS)


def test_add_and_reset():
    backing = MemoryStore()
    store = HotkeyStore(backing)
    store.load()
    assert store.add("/bca //camp") == 3
    assert len(store) == 4
    store.persist()
    assert backing.get(HOTKEYS_KEY).endswith("|/bca //camp")
    assert store.reset() == list(DEFAULT_HOTKEYS)
    assert backing.get(HOTKEYS_KEY) == "|".join(DEFAULT_HOTKEYS)


def test_duplicates_allowed():
    store = HotkeyStore(MemoryStore())
    store.load()
    store.set(1, store.get(0))
    assert store.get(0) == store.get(1)
