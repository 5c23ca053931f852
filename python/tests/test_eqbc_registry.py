import json

from eqbc.framing import ConnectionTarget
from eqbc.registry import LAST_IP, LAST_NAME, LAST_PORT, ConnectionRegistry
from eqbc.store import JsonFileStore, MemoryStore


def test_registry_empty_returns_none():
    assert ConnectionRegistry(MemoryStore()).load_last_connection() is None


def test_registry_record_and_load():
    store = MemoryStore()
    registry = ConnectionRegistry(store)
    target = ConnectionTarget("10.0.0.5", 2112, "bob")
    registry.record_last_connection(target)
    assert store.snapshot() == {LAST_IP: "10.0.0.5", LAST_PORT: 2112, LAST_NAME: "bob"}
    assert registry.load_last_connection() == target


def test_registry_upserts():
    registry = ConnectionRegistry(MemoryStore())
    registry.record_last_connection(ConnectionTarget("a", 1, "x"))
    registry.record_last_connection(ConnectionTarget("b", 2, "y"))
    assert registry.load_last_connection() == ConnectionTarget("b", 2, "y")


def test_registry_partial_or_invalid_record_is_none():
    assert ConnectionRegistry(MemoryStore({LAST_IP: "a", LAST_NAME: "x"})).load_last_connection() is None
    bad_port = MemoryStore({LAST_IP: "a", LAST_PORT: "nope", LAST_NAME: "x"})
    assert ConnectionRegistry(bad_port).load_last_connection() is None


def test_registry_forget():
    registry = ConnectionRegistry(MemoryStore())
    registry.record_last_connection(ConnectionTarget("a", 1, "x"))
    registry.forget()
    assert registry.load_last_connection() is None


def test_json_store_persists_atomically(tmp_path):
    path = tmp_path / "nested" / "state.json"
    registry = ConnectionRegistry(JsonFileStore(path))
    registry.record_last_connection(ConnectionTarget("eq.local", 2112, "alice"))
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == {LAST_IP: "eq.local", LAST_PORT: 2112, LAST_NAME: "alice"}
    assert not path.with_suffix(".json.tmp").exists()
    again = ConnectionRegistry(JsonFileStore(path))
    assert again.load_last_connection() == ConnectionTarget("eq.local", 2112, "alice")


def test_json_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.get(LAST_IP) is None
    store.set(LAST_IP, "x")
    assert json.loads(path.read_text(encoding="utf-8")) == {LAST_IP: "x"}
