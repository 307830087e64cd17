from datetime import datetime, timezone

import pytest

from daily_prophet import store
from daily_prophet.config import Settings
from daily_prophet.models import EditionRecord
from daily_prophet.store import FileStore, MemoryStore, RedisStore, build_store


def _record() -> EditionRecord:
    return EditionRecord(
        created_at=datetime(2026, 10, 19, 7, 0, 5, 123456, tzinfo=timezone.utc),
        payload={
            "date": "2026-10-19",
            "overview": "Драконы вернулись",
            "news": [{"id": "1", "title": "T", "description": "D"}],
            "magic_tip": "",
            "score": 3.5,
            "extra": None,
        },
    )


def test_memory_store_get_put():
    kv = MemoryStore()
    assert kv.get("daily:2026-10-19") is None
    kv.put("daily:2026-10-19", "one")
    kv.put("daily:2026-10-19", "two")
    assert kv.get("daily:2026-10-19") == "two"
    assert len(kv) == 1


def test_file_store_returns_none_for_missing_key(tmp_path):
    assert FileStore(tmp_path).get("daily:2026-10-19") is None


def test_file_store_overwrites_whole_value(tmp_path):
    kv = FileStore(tmp_path / "editions")
    kv.put("daily:2026-10-19", '{"long": "' + "x" * 100 + '"}')
    kv.put("daily:2026-10-19", "{}")
    assert kv.get("daily:2026-10-19") == "{}"
    # Only the final file remains; temp files are renamed into place.
    assert [p.name for p in (tmp_path / "editions").iterdir()] == ["daily_2026-10-19.json"]


def test_file_store_sanitizes_keys(tmp_path):
    kv = FileStore(tmp_path)
    assert kv.path_for("daily:19 октября").name == "daily_19_октября.json"
    assert kv.path_for("../../etc/passwd").parent == tmp_path


def test_record_round_trips_through_stores(tmp_path):
    record = _record()
    for kv in (MemoryStore(), FileStore(tmp_path)):
        kv.put("daily:2026-10-19", record.to_json())
        restored = EditionRecord.from_json(kv.get("daily:2026-10-19"))
        assert restored == record
        assert restored.created_at == record.created_at
        assert restored.payload == record.payload


def test_redis_store_uses_get_and_set():
    class FakeRedis:
        def __init__(self):
            self.data = {}

        def get(self, key):
            return self.data.get(key)

        def set(self, key, value):
            self.data[key] = value

    fake = FakeRedis()
    kv = RedisStore(client=fake)
    kv.put("daily:2026-10-19", "value")
    assert fake.data == {"daily:2026-10-19": "value"}
    assert kv.get("daily:2026-10-19") == "value"
    assert kv.get("daily:2026-10-18") is None


def test_build_store_selects_backend(tmp_path, monkeypatch):
    settings = Settings(_env_file=None, store_backend="memory")
    assert isinstance(build_store(settings), MemoryStore)

    settings = Settings(_env_file=None, store_backend="file", store_dir=str(tmp_path))
    file_store = build_store(settings)
    assert isinstance(file_store, FileStore)
    assert file_store.root == tmp_path

    seen = {}

    def fake_from_url(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return object()

    monkeypatch.setattr(store.redis, "from_url", fake_from_url)
    settings = Settings(_env_file=None, store_backend="REDIS", REDIS_URL="redis://cache:6379/2")
    assert isinstance(build_store(settings), RedisStore)
    assert seen["url"] == "redis://cache:6379/2"
    assert seen["decode_responses"] is True


def test_build_store_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_store(Settings(_env_file=None, store_backend="cloud"))
