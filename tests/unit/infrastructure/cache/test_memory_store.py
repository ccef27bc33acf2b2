import pytest

from cliniccache.domain.models.cache import CacheEntry
from cliniccache.infrastructure.cache.memory_store import MemoryStore


def _entry(key: str, data=None) -> CacheEntry:
    return CacheEntry(key=key, data=data if data is not None else key, timestamp=0, ttl=1000)


def test_put_and_get():
    store = MemoryStore(max_size=2)
    entry = _entry("a")
    store.put(entry)
    assert store.get("a") is entry
    assert store.get("b") is None


def test_never_exceeds_max_size():
    store = MemoryStore(max_size=3)
    for i in range(10):
        store.put(_entry(f"k{i}"))
        assert len(store) <= 3
    assert store.keys() == ["k7", "k8", "k9"]


def test_replacing_existing_key_does_not_evict():
    store = MemoryStore(max_size=2)
    store.put(_entry("a"))
    store.put(_entry("b"))
    store.put(_entry("a", data="A2"))

    assert len(store) == 2
    assert store.get("a").data == "A2"
    # The replaced key is now the newest
    assert store.keys() == ["b", "a"]


def test_smaller_per_call_limit_evicts_down_to_fit():
    store = MemoryStore(max_size=5)
    for key in "abcd":
        store.put(_entry(key))
    store.put(_entry("e"), max_size=2)
    assert store.keys() == ["d", "e"]


def test_delete_and_clear():
    store = MemoryStore()
    store.put(_entry("a"))
    store.put(_entry("b"))
    assert store.delete("a") is True
    assert store.delete("a") is False
    assert store.clear() == 1
    assert len(store) == 0


def test_items_snapshot_allows_deletion_while_iterating():
    store = MemoryStore()
    for key in "abc":
        store.put(_entry(key))
    for key, _ in store.items():
        store.delete(key)
    assert len(store) == 0


@pytest.mark.parametrize("size", [0, -1])
def test_invalid_max_size(size):
    with pytest.raises(ValueError):
        MemoryStore(max_size=size)
