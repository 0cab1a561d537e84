"""Tests for persisted advanced settings."""

import json
import time
from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from kpwgen import AdvancedParams, JsonFileStorage, MemoryStorage, PersistedSettingsStore
from kpwgen.config import MAX_LENGTH, STORAGE_KEY

PARAMS = AdvancedParams(version=2, length=24, prefix="Ab", suffix="9z", raw_mode=True)


class FakeClock:
    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, clock):
    return PersistedSettingsStore(storage, clock=clock)


# ── save / read ────────────────────────────────────────────────────────────


class TestSaveRead:
    def test_empty(self, store):
        assert store.read().status == "empty"

    def test_round_trip(self, store, clock):
        store.save(PARAMS, timedelta(hours=3))
        result = store.read()
        assert result.status == "ok"
        assert result.params == PARAMS
        assert result.record.saved_at == clock.now
        assert result.record.expires_at == clock.now + 3 * 60 * 60 * 1000

    def test_no_expiry(self, store, clock):
        store.save(PARAMS, None)
        clock.now += 10 ** 12
        result = store.read()
        assert result.status == "ok"
        assert result.record.expires_at is None

    def test_wire_format(self, store, storage, clock):
        store.save(PARAMS, timedelta(milliseconds=5))
        payload = json.loads(storage.get(STORAGE_KEY))
        assert payload == {
            "schemaVersion": 1,
            "savedAt": clock.now,
            "expiresAt": clock.now + 5,
            "data": {
                "version": 2, "length": 24, "prefix": "Ab", "suffix": "9z", "rawMode": True,
            },
        }

    def test_overwrites(self, store):
        store.save(PARAMS, None)
        store.save(AdvancedParams(), None)
        assert store.read().params == AdvancedParams()

    def test_read_does_not_mutate(self, store, storage):
        store.save(PARAMS, None)
        before = storage.get(STORAGE_KEY)
        store.read()
        assert storage.get(STORAGE_KEY) == before

    @pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-1), timedelta(microseconds=10)])
    def test_non_positive_ttl_rejected(self, store, ttl):
        with pytest.raises(ValueError, match="TTL"):
            store.save(PARAMS, ttl)


# ── expiry ─────────────────────────────────────────────────────────────────


class TestExpiry:
    def test_expired_then_empty(self, store, storage, clock):
        store.save(PARAMS, timedelta(milliseconds=1))
        clock.now += 2
        result = store.read()
        assert result.status == "expired"
        assert result.expired_at == clock.now - 1
        assert storage.get(STORAGE_KEY) is None
        assert store.read().status == "empty"

    def test_boundary_is_still_valid(self, store, clock):
        store.save(PARAMS, timedelta(milliseconds=10))
        clock.now += 10
        assert store.read().status == "ok"

    def test_real_clock(self, storage):
        store = PersistedSettingsStore(storage)
        store.save(PARAMS, timedelta(milliseconds=1))
        time.sleep(0.005)
        assert store.read().status == "expired"
        assert store.read().status == "empty"


# ── corruption ─────────────────────────────────────────────────────────────


class TestCorruption:
    @pytest.mark.parametrize("raw", [
        "not json{",
        "[]",
        '{"schemaVersion": 2, "savedAt": 1, "expiresAt": null, "data": {}}',
        '{"schemaVersion": 1, "savedAt": 1, "expiresAt": null}',
        '{"schemaVersion": 1, "savedAt": 1, "data": {"version": 0}}',
        '{"schemaVersion": 1, "savedAt": 1, "data": {"secret": "x"}}',
        '{"schemaVersion": 1, "savedAt": 1, "data": {"length": 200}}',
    ])
    def test_corrupt_deleted(self, store, storage, raw):
        storage.set(STORAGE_KEY, raw)
        assert store.read().status == "corrupt"
        assert storage.get(STORAGE_KEY) is None
        assert store.read().status == "empty"

    def test_clear(self, store, storage):
        store.save(PARAMS, None)
        store.clear()
        assert storage.get(STORAGE_KEY) is None
        store.clear()  # absent key is fine


# ── JsonFileStorage ────────────────────────────────────────────────────────


class TestJsonFileStorage:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "sub" / "storage.json"
        PersistedSettingsStore(JsonFileStorage(path)).save(PARAMS, None)
        result = PersistedSettingsStore(JsonFileStorage(path)).read()
        assert result.status == "ok"
        assert result.params == PARAMS

    def test_other_keys_untouched(self, tmp_path):
        path = tmp_path / "storage.json"
        storage = JsonFileStorage(path)
        storage.set("other", "value")
        store = PersistedSettingsStore(storage)
        store.save(PARAMS, None)
        store.clear()
        assert storage.get("other") == "value"
        assert storage.get(STORAGE_KEY) is None

    @pytest.mark.parametrize("content", [
        "garbage",
        "[1, 2, 3]",
        '{"kpwgen:advanced:v1": {"schemaVersion": 1}}',
        '{"kpwgen:advanced:v1": null}',
    ])
    def test_unparsable_file_record_is_corrupt_then_empty(self, tmp_path, content):
        path = tmp_path / "storage.json"
        path.write_text(content, encoding="utf-8")
        store = PersistedSettingsStore(JsonFileStorage(path))
        assert store.read().status == "corrupt"
        assert STORAGE_KEY not in json.loads(path.read_text(encoding="utf-8"))
        assert store.read().status == "empty"

    def test_non_string_value_returned_as_json(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text('{"k": {"a": 1}}', encoding="utf-8")
        assert json.loads(JsonFileStorage(path).get("k")) == {"a": 1}

    def test_save_over_unreadable_file(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("garbage", encoding="utf-8")
        store = PersistedSettingsStore(JsonFileStorage(path))
        store.save(PARAMS, None)
        assert store.read().params == PARAMS

    def test_default_path_follows_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("KPWGEN_HOME", str(tmp_path))
        assert JsonFileStorage().path == tmp_path / "storage.json"

    def test_missing_file(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "none.json")
        assert storage.get("k") is None
        storage.delete("k")
        assert not (tmp_path / "none.json").exists()


# ── AdvancedParams bounds ──────────────────────────────────────────────────


class TestAdvancedParamsBounds:
    def test_length_upper_bound(self):
        assert AdvancedParams(length=MAX_LENGTH).length == MAX_LENGTH
        with pytest.raises(PydanticValidationError):
            AdvancedParams(length=MAX_LENGTH + 1)

    def test_out_of_range_saved_length_is_corrupt_not_clamped(self, store, storage):
        storage.set(STORAGE_KEY, json.dumps({
            "schemaVersion": 1, "savedAt": 1, "expiresAt": None,
            "data": {"version": 1, "length": 200, "prefix": "", "suffix": "", "rawMode": False},
        }))
        assert store.read().status == "corrupt"
        assert storage.get(STORAGE_KEY) is None
