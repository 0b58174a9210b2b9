import pytest

from concretize.ontology.cache import BoundedCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = BoundedCache(max_size=4, ttl=10, clock=clock)
    cache.set("a", 1)
    clock.now = 9.9
    assert cache.get("a") == 1
    clock.now = 10.0
    assert cache.get("a") is None
    assert "a" not in cache


def test_least_recently_used_entry_is_evicted():
    cache = BoundedCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.get("a") == 1
    cache.set("c", 3)
    assert "a" in cache and "c" in cache
    assert "b" not in cache
    assert len(cache) == 2


def test_falsy_values_are_cached():
    cache = BoundedCache(max_size=2)
    cache.set("empty", [])
    assert "empty" in cache
    assert cache.get("empty", "missing") == []


def test_invalid_size_is_rejected():
    with pytest.raises(ValueError):
        BoundedCache(max_size=0)
