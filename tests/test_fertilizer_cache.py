import pytest

from app.models.fertilizer import FertilizerResponse
from app.services.fertilizer_cache import FertilizerCache, RateLimiter, make_cache_key

DAY = 24 * 60 * 60


def response(title="Fertilizer Guidance for Wheat in Ranchi"):
    return FertilizerResponse(
        title=title,
        summary="",
        actions=[],
        pest_interactions="",
        suppliers=[],
        confidence_score=0.9,
        citations=[],
    )


def test_cache_key_normalizes_fields():
    assert make_cache_key(" Ranchi", "Wheat ", "Alluvial") == "ranchi-wheat-alluvial"
    assert make_cache_key("Ranchi", "Wheat", "Alluvial", include_yield=True) == (
        "ranchi-wheat-alluvial-unknown"
    )
    assert make_cache_key("Ranchi", "Wheat", "Alluvial", "40", include_yield=True) == (
        "ranchi-wheat-alluvial-40"
    )


def test_cache_hit_within_ttl(clock):
    cache = FertilizerCache(ttl_seconds=DAY, clock=clock)
    value = response()
    cache.put("k", value)
    clock.advance(DAY - 1)
    assert cache.get("k") is value


def test_cache_entry_expires_at_ttl(clock):
    cache = FertilizerCache(ttl_seconds=DAY, clock=clock)
    cache.put("k", response())
    clock.advance(DAY)
    assert cache.get("k") is None


def test_cache_miss_for_unknown_key(clock):
    assert FertilizerCache(clock=clock).get("nope") is None


def test_put_overwrites_and_refreshes_timestamp(clock):
    cache = FertilizerCache(ttl_seconds=100, clock=clock)
    cache.put("k", response("old"))
    clock.advance(90)
    cache.put("k", response("new"))
    clock.advance(50)
    assert cache.get("k").title == "new"


def test_cache_is_bounded(clock):
    cache = FertilizerCache(ttl_seconds=DAY, max_entries=3, clock=clock)
    for index in range(5):
        cache.put(f"k{index}", response())
        clock.advance(1)
    assert len(cache) == 3
    assert cache.get("k0") is None
    assert cache.get("k4") is not None


def test_stale_entries_are_swept_first(clock):
    cache = FertilizerCache(ttl_seconds=10, max_entries=2, clock=clock)
    cache.put("old", response())
    clock.advance(20)
    cache.put("a", response())
    cache.put("b", response())
    assert len(cache) == 2
    assert cache.get("a") is not None
    assert cache.get("b") is not None


def test_clear(clock):
    cache = FertilizerCache(clock=clock)
    cache.put("k", response())
    cache.clear()
    assert len(cache) == 0


def test_rate_limiter_rejects_eleventh_request(clock):
    limiter = RateLimiter(limit=10, window_seconds=3600, clock=clock)
    for _ in range(10):
        assert limiter.allow("1.2.3.4").allowed
        clock.advance(1)

    decision = limiter.allow("1.2.3.4")
    assert not decision.allowed
    assert decision.retry_after == 3600 - 10


def test_rate_limiter_is_per_client(clock):
    limiter = RateLimiter(limit=1, clock=clock)
    assert limiter.allow("a").allowed
    assert not limiter.allow("a").allowed
    assert limiter.allow("b").allowed


def test_rate_limiter_window_slides(clock):
    limiter = RateLimiter(limit=2, window_seconds=60, clock=clock)
    assert limiter.allow("a").allowed
    clock.advance(30)
    assert limiter.allow("a").allowed
    assert not limiter.allow("a").allowed
    clock.advance(30)
    assert limiter.allow("a").allowed


def test_retry_after_is_at_least_one_second(clock):
    limiter = RateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.allow("a")
    clock.advance(59.9)
    decision = limiter.allow("a")
    assert not decision.allowed
    assert decision.retry_after == 1


def test_rejected_requests_do_not_extend_the_window(clock):
    limiter = RateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.allow("a")
    clock.advance(30)
    assert not limiter.allow("a").allowed
    clock.advance(30)
    assert limiter.allow("a").allowed


def test_inactive_clients_are_swept(clock):
    limiter = RateLimiter(limit=5, window_seconds=60, max_keys=2, clock=clock)
    limiter.allow("a")
    limiter.allow("b")
    clock.advance(120)
    limiter.allow("c")
    assert set(limiter._requests) == {"c"}


@pytest.mark.parametrize("limit", [1, 3, 10])
def test_exactly_limit_requests_allowed(clock, limit):
    limiter = RateLimiter(limit=limit, clock=clock)
    results = [limiter.allow("x").allowed for _ in range(limit + 2)]
    assert results == [True] * limit + [False, False]
