"""Tests for the persisted session record and legacy key migration."""

import json

import pytest

from conftest import stored_keys
from cloudlocker.core.errors import CorruptSessionRecord
from cloudlocker.core.models import Session, User
from cloudlocker.core.session_store import (
    LEGACY_TOKEN_KEY, LEGACY_USER_KEY, SESSION_KEY, SessionStore,
)
from cloudlocker.core.storage import JsonFileStorage, MemoryStorage

ALICE = User(id=7, username="alice", email="alice@example.com")


class TestSessionRecord:
    def test_save_then_load(self, storage):
        store = SessionStore(storage)
        store.save(Session(token="tok", user=ALICE))
        loaded = store.load()
        assert loaded.token == "tok"
        assert loaded.user == ALICE

    def test_token_and_user_written_as_one_record(self, storage):
        SessionStore(storage).save(Session(token="tok", user=ALICE))
        assert stored_keys(storage) == [SESSION_KEY]
        assert json.loads(storage.get(SESSION_KEY))["user"]["username"] == "alice"

    def test_clear_removes_everything(self, storage):
        store = SessionStore(storage)
        store.save(Session(token="tok", user=ALICE))
        storage.set(LEGACY_TOKEN_KEY, "old")
        store.clear()
        assert stored_keys(storage) == []
        assert store.load() is None

    def test_malformed_record_raises(self):
        store = SessionStore(MemoryStorage({SESSION_KEY: "{not json"}))
        with pytest.raises(CorruptSessionRecord):
            store.load()

    def test_record_without_token_is_corrupt(self):
        raw = json.dumps({"token": "", "user": ALICE.to_dict()})
        store = SessionStore(MemoryStorage({SESSION_KEY: raw}))
        with pytest.raises(CorruptSessionRecord):
            store.load()

    def test_token_read_fresh_each_call(self, storage):
        store = SessionStore(storage)
        assert store.token() is None
        store.save(Session(token="first", user=ALICE))
        assert store.token() == "first"
        store.clear()
        assert store.token() is None

    def test_token_none_when_corrupt(self):
        store = SessionStore(MemoryStorage({SESSION_KEY: "garbage"}))
        assert store.token() is None


class TestLegacyMigration:
    def test_valid_pair_is_migrated(self):
        storage = MemoryStorage({LEGACY_TOKEN_KEY: "legacy-tok", LEGACY_USER_KEY: json.dumps(ALICE.to_dict())})
        session = SessionStore(storage).migrate_legacy()
        assert session.token == "legacy-tok"
        assert session.user == ALICE
        assert stored_keys(storage) == [SESSION_KEY]

    def test_lone_token_is_cleared(self):
        storage = MemoryStorage({LEGACY_TOKEN_KEY: "legacy-tok"})
        assert SessionStore(storage).migrate_legacy() is None
        assert stored_keys(storage) == []

    def test_lone_user_is_cleared(self):
        storage = MemoryStorage({LEGACY_USER_KEY: json.dumps(ALICE.to_dict())})
        assert SessionStore(storage).migrate_legacy() is None
        assert stored_keys(storage) == []

    def test_unparseable_user_clears_both(self):
        storage = MemoryStorage({LEGACY_TOKEN_KEY: "legacy-tok", LEGACY_USER_KEY: "{oops"})
        assert SessionStore(storage).migrate_legacy() is None
        assert stored_keys(storage) == []

    def test_nothing_to_migrate(self, storage):
        assert SessionStore(storage).migrate_legacy() is None


class TestJsonFileStorage:
    def test_values_survive_a_new_instance(self, tmp_path):
        path = str(tmp_path / "state" / "storage.json")
        JsonFileStorage(path).set("theme", "dark")
        assert JsonFileStorage(path).get("theme") == "dark"

    def test_remove(self, tmp_path):
        s = JsonFileStorage(str(tmp_path / "storage.json"))
        s.set("a", "1")
        s.remove("a")
        s.remove("missing")
        assert s.get("a") is None

    def test_unreadable_document_starts_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{broken", encoding="utf-8")
        s = JsonFileStorage(str(path))
        assert s.get("anything") is None
        s.set("k", "v")
        assert s.get("k") == "v"
