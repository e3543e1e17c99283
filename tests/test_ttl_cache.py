from __future__ import annotations

from portfolio_api.shared.ttl_cache import TtlCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_fresh_entry_is_served_without_reload():
    clock = FakeClock()
    cache: TtlCache[int] = TtlCache(30, clock=clock)
    calls = []

    def loader() -> int:
        calls.append(1)
        return 42

    assert cache.get_or_load("k", loader) == (42, False)
    clock.now += 29.9
    assert cache.get_or_load("k", loader) == (42, True)
    assert len(calls) == 1


def test_expired_entry_triggers_refetch():
    clock = FakeClock()
    cache: TtlCache[int] = TtlCache(30, clock=clock)
    values = iter([1, 2])

    cache.get_or_load("k", lambda: next(values))
    clock.now += 30

    assert cache.get("k") is None
    assert len(cache) == 0
    assert cache.get_or_load("k", lambda: next(values)) == (2, False)


def test_non_positive_ttl_disables_cache():
    cache: TtlCache[str] = TtlCache(0)
    cache.set("k", "v")

    assert cache.get("k") is None
    assert len(cache) == 0


def test_loader_errors_are_not_cached():
    cache: TtlCache[int] = TtlCache(30)

    def boom() -> int:
        raise RuntimeError("upstream down")

    try:
        cache.get_or_load("k", boom)
    except RuntimeError:
        pass

    assert cache.get_or_load("k", lambda: 7) == (7, False)


def test_clear_with_match_only_drops_matching_keys():
    cache: TtlCache[int] = TtlCache(30)
    cache.set("wallet_eth_1", 1)
    cache.set("wallet_sol_2", 2)
    cache.set("rates", 3)

    assert cache.clear(lambda key: str(key).startswith("wallet")) == 2
    assert cache.get("rates") == 3
    assert cache.clear() == 1


def test_stats_and_prune_count_stale_entries():
    clock = FakeClock()
    cache: TtlCache[int] = TtlCache(10, clock=clock)
    cache.set("old", 1)
    clock.now += 11
    cache.set("new", 2)

    stats = cache.stats()
    assert (stats.size, stats.fresh, stats.stale) == (2, 1, 1)
    assert cache.prune() == 1
    assert cache.get("new") == 2
