"""Tests for the TTL read cache"""
from cp_tracker.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_value_served_until_expiry():
    clock = FakeClock()
    cache = TTLCache(ttl=300, clock=clock)
    cache.set("stats", {"a": 1})

    clock.now += 299
    assert cache.get("stats") == {"a": 1}

    clock.now += 1
    assert cache.get("stats") is None


def test_get_or_load_loads_lazily_once_per_window():
    clock = FakeClock()
    cache = TTLCache(ttl=300, clock=clock)
    loads = []

    def loader():
        loads.append(clock.now)
        return len(loads)

    assert cache.get_or_load("heatmap", loader) == (1, False)
    assert cache.get_or_load("heatmap", loader) == (1, True)

    clock.now += 301
    assert cache.get_or_load("heatmap", loader) == (2, False)
    assert len(loads) == 2


def test_slots_are_independent():
    cache = TTLCache(ttl=60, clock=FakeClock())
    cache.set("stats", "s")

    assert cache.get("heatmap") is None
    assert cache.get("stats") == "s"

    cache.clear()
    assert cache.get("stats") is None
