"""Unit tests for transaction labels and the name cache"""

from decimal import Decimal
from splitledger.domain.naming import CachedNameResolver, InMemoryNameCache, describe_transaction


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_describe_transaction_falls_back_to_raw_id():
    assert describe_transaction("0xb", "0xa", Decimal("3.5")) == "0xb pays 0xa 3.5"
    assert describe_transaction("0xb", "0xa", Decimal("3.5"), display_name=lambda p: None) == "0xb pays 0xa 3.5"


def test_describe_transaction_perspective_for_third_party():
    """A viewer who is neither side sees plain names"""
    text = describe_transaction("0xb", "0xa", Decimal("1"), perspective="0xc")
    assert text == "0xb pays 0xa 1"


def test_in_memory_cache_expiry():
    cache = InMemoryNameCache()
    cache.put("0xa", "alice.eth", expires_at=100.0)

    assert cache.get("0xa", now=99.0).name == "alice.eth"
    assert cache.get("0xa", now=100.0) is None
    assert len(cache) == 0


def test_cached_resolver_hits_cache_until_expiry():
    calls = []

    def resolve(participant):
        calls.append(participant)
        return "alice.eth"

    clock = FakeClock()
    resolver = CachedNameResolver(resolve, InMemoryNameCache(), ttl_seconds=300, clock=clock)

    assert resolver("0xa") == "alice.eth"
    clock.now += 299
    assert resolver("0xa") == "alice.eth"
    assert calls == ["0xa"]

    clock.now += 1
    assert resolver("0xa") == "alice.eth"
    assert calls == ["0xa", "0xa"]


def test_cached_resolver_caches_misses():
    calls = []

    def resolve(participant):
        calls.append(participant)
        return None

    resolver = CachedNameResolver(resolve, InMemoryNameCache(), clock=FakeClock())

    assert resolver("0xdead") is None
    assert resolver("0xdead") is None
    assert calls == ["0xdead"]
