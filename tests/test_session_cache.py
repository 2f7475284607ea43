"""Tests for the known-session key cache."""

from src.chat.cache import SessionKeyCache


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_put_and_get() -> None:
    cache = SessionKeyCache()
    cache.put("alice", "k1")
    assert cache.get("alice") == "k1"
    assert cache.get("bob") is None


def test_put_overwrites() -> None:
    cache = SessionKeyCache()
    cache.put("alice", "k1")
    cache.put("alice", "k2")
    assert cache.get("alice") == "k2"
    assert len(cache) == 1


def test_lru_eviction() -> None:
    cache = SessionKeyCache(max_size=2)
    cache.put("a", "1")
    cache.put("b", "2")
    cache.get("a")  # "b" is now least recently used
    cache.put("c", "3")

    assert cache.get("b") is None
    assert cache.get("a") == "1"
    assert cache.get("c") == "3"


def test_ttl_expiry() -> None:
    clock = _Clock()
    cache = SessionKeyCache(ttl_seconds=10, clock=clock)
    cache.put("alice", "k1")

    clock.now = 10
    assert cache.get("alice") == "k1"

    clock.now = 10.5
    assert cache.get("alice") is None
    assert len(cache) == 0


def test_zero_size_disables() -> None:
    cache = SessionKeyCache(max_size=0)
    cache.put("alice", "k1")
    assert cache.get("alice") is None


def test_discard_and_clear() -> None:
    cache = SessionKeyCache()
    cache.put("a", "1")
    cache.put("b", "2")

    cache.discard("a")
    cache.discard("missing")
    assert cache.get("a") is None

    assert cache.clear() == 1
    assert len(cache) == 0
