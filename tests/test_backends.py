"""Tests for cache persistence backends."""

import pytest

from huesync.cache import CacheBackend, JsonFileCacheBackend, MemoryCacheBackend
from huesync.models import CacheSnapshot, EntityKind, GroupRecord, LightRecord, XY


def make_snapshot(bridge_id: str = "office") -> CacheSnapshot:
    return CacheSnapshot(
        bridge_id=bridge_id,
        saved_at=1000.0,
        fetched_at={EntityKind.LIGHTS: 990.0},
        lights=[LightRecord(id="1", name="Lamp", on=True, brightness=40, xy=XY(x=0.3, y=0.3))],
        groups=[GroupRecord(id="1", name="Bedroom", light_ids=("1",))],
    )


@pytest.mark.unit
class TestMemoryCacheBackend:
    """Test the in-memory backend."""

    def test_empty_load(self):
        assert MemoryCacheBackend().load() is None

    def test_save_and_load(self):
        backend = MemoryCacheBackend()
        snapshot = make_snapshot()
        backend.save(snapshot)
        assert backend.load() == snapshot

    def test_close(self):
        backend = MemoryCacheBackend()
        backend.close()
        assert backend.closed

    def test_satisfies_protocol(self):
        assert isinstance(MemoryCacheBackend(), CacheBackend)


@pytest.mark.unit
class TestJsonFileCacheBackend:
    """Test the JSON file backend."""

    def test_missing_file(self, temp_dir):
        assert JsonFileCacheBackend(temp_dir / "office.json").load() is None

    def test_save_and_load(self, temp_dir):
        backend = JsonFileCacheBackend(temp_dir / "office.json")
        snapshot = make_snapshot()
        backend.save(snapshot)

        loaded = JsonFileCacheBackend(temp_dir / "office.json").load()
        assert loaded == snapshot
        assert loaded.fetched_at[EntityKind.LIGHTS] == 990.0
        assert loaded.lights[0].xy == XY(x=0.3, y=0.3)

    def test_save_creates_directory(self, temp_dir):
        backend = JsonFileCacheBackend(temp_dir / "cache" / "office.json")
        backend.save(make_snapshot())
        assert (temp_dir / "cache" / "office.json").exists()

    def test_no_backup_files(self, temp_dir):
        backend = JsonFileCacheBackend(temp_dir / "office.json")
        backend.save(make_snapshot())
        backend.save(make_snapshot())
        assert sorted(p.name for p in temp_dir.iterdir()) == ["office.json"]

    def test_corrupt_file_is_treated_as_absent(self, temp_dir):
        path = temp_dir / "office.json"
        path.write_text("{ not json", encoding="utf-8")
        backend = JsonFileCacheBackend(path)

        assert backend.load() is None

        # Next save replaces the corrupt file
        backend.save(make_snapshot())
        assert backend.load() == make_snapshot()

    def test_wrong_schema_is_treated_as_absent(self, temp_dir):
        path = temp_dir / "office.json"
        path.write_text('{"lights": "nope"}', encoding="utf-8")
        assert JsonFileCacheBackend(path).load() is None

    def test_for_bridge_sanitizes_id(self, temp_dir):
        backend = JsonFileCacheBackend.for_bridge(temp_dir, "../up stairs")
        assert backend.path.parent == temp_dir
        assert backend.path.name == "___up_stairs.json"

    def test_satisfies_protocol(self, temp_dir):
        assert isinstance(JsonFileCacheBackend(temp_dir / "x.json"), CacheBackend)
