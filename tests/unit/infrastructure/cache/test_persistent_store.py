import json

from cliniccache.domain.models.cache import CacheEntry
from cliniccache.infrastructure.cache.persistent_store import PersistentStore
from cliniccache.infrastructure.storage.disk_storage import InMemoryStorage


def _store(**kwargs):
    storage = InMemoryStorage(**kwargs)
    return PersistentStore(storage), storage


def test_write_uses_namespaced_key():
    store, storage = _store()
    assert store.write(CacheEntry(key="clinic_1", data={"a": 1}, timestamp=5, ttl=10)) is True
    assert json.loads(storage.get("cache_clinic_1"))["data"] == {"a": 1}


def test_read_round_trips_entry():
    store, _ = _store()
    entry = CacheEntry(key="k", data=[1, "two", None], timestamp=5, ttl=10)
    store.write(entry)
    assert store.read("k") == entry


def test_write_skipped_on_quota():
    store, storage = _store(quota=0)
    assert store.write(CacheEntry(key="k", data=1, timestamp=0, ttl=1)) is False
    assert len(storage) == 0


def test_write_skipped_on_unserializable_data():
    store, storage = _store()
    assert store.write(CacheEntry(key="k", data={1, 2}, timestamp=0, ttl=1)) is False
    assert len(storage) == 0


def test_non_string_payload_is_corrupted():
    store, storage = _store()
    storage.set("cache_k", json.dumps(["not", "an", "object"]))
    assert store.read("k") is None
    assert storage.get("cache_k") is None


def test_custom_prefix_only_clears_own_keys():
    storage = InMemoryStorage()
    store = PersistentStore(storage, prefix="clinic:")
    storage.set("cache_other", "{}")
    store.write(CacheEntry(key="a", data=1, timestamp=0, ttl=1))

    assert store.keys() == ["a"]
    assert store.clear() == 1
    assert storage.keys() == ["cache_other"]


def test_purge_counts_removed_entries():
    store, storage = _store()
    store.write(CacheEntry(key="old", data=1, timestamp=0, ttl=10))
    store.write(CacheEntry(key="fresh", data=1, timestamp=95, ttl=10))
    storage.set("cache_bad", "")

    assert store.purge(now=100) == 2
    assert store.keys() == ["fresh"]
