from unittest.mock import MagicMock

import pytest

from app import rate_limiter
from app.rate_limiter import check_rate_limit


@pytest.fixture(autouse=True)
def clear_memory_cache(monkeypatch):
    monkeypatch.setattr(rate_limiter, "last_cleanup_time", 0)
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


def test_memory_only_window():
    assert check_rate_limit("ip:1", 2, 60)[0] is True
    assert check_rate_limit("ip:1", 2, 60)[0] is True

    allowed, count, ttl = check_rate_limit("ip:1", 2, 60)

    assert allowed is False
    assert count == 2
    assert 0 < ttl <= 60


def test_keys_are_independent():
    check_rate_limit("ip:1", 1, 60)

    assert check_rate_limit("ip:1", 1, 60)[0] is False
    assert check_rate_limit("ip:2", 1, 60)[0] is True


def test_window_resets(monkeypatch):
    now = [1_000]
    monkeypatch.setattr(rate_limiter.time, "time", lambda: now[0])

    check_rate_limit("ip:1", 1, 60)
    assert check_rate_limit("ip:1", 1, 60)[0] is False

    now[0] += 61
    assert check_rate_limit("ip:1", 1, 60)[0] is True


def test_seeds_from_redis_and_syncs_back():
    client = MagicMock()
    client.get.return_value = "4"
    client.ttl.return_value = 30

    allowed, count, ttl = check_rate_limit("ip:1", 5, 60, client)

    assert allowed is True
    assert count == 5
    assert ttl <= 30
    client.set.assert_called_once()
    assert check_rate_limit("ip:1", 5, 60, client)[0] is False


def test_redis_errors_fall_back_to_memory():
    client = MagicMock()
    client.get.side_effect = ConnectionError("redis down")
    client.set.side_effect = ConnectionError("redis down")

    assert check_rate_limit("ip:1", 1, 60, client)[0] is True
    assert check_rate_limit("ip:1", 1, 60, client)[0] is False


def test_not_configured_without_env(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("REDIS_HOST", raising=False)
    monkeypatch.setattr(rate_limiter, "redis_client", None)

    assert rate_limiter.redis_configured() is False
    assert rate_limiter.get_redis_client() is None


def test_expired_windows_are_swept(monkeypatch):
    now = [1_000]
    monkeypatch.setattr(rate_limiter.time, "time", lambda: now[0])

    for i in range(500):
        check_rate_limit(f"ip:{i}", 5, 60)
    assert len(rate_limiter.memory_cache) == 500

    now[0] += 10_000
    check_rate_limit("ip:new", 5, 60)

    assert list(rate_limiter.memory_cache) == ["ip:new"]


def test_sweep_keeps_live_windows(monkeypatch):
    now = [1_000]
    monkeypatch.setattr(rate_limiter.time, "time", lambda: now[0])
    check_rate_limit("ip:short", 5, 30)
    check_rate_limit("ip:long", 5, 600)

    now[0] += 120
    assert rate_limiter.cleanup_expired_cache() == 1

    assert set(rate_limiter.memory_cache) == {"ip:long"}


def test_sweep_runs_at_most_once_per_interval(monkeypatch):
    now = [1_000]
    monkeypatch.setattr(rate_limiter.time, "time", lambda: now[0])
    check_rate_limit("ip:1", 5, 1)

    now[0] += 5
    check_rate_limit("ip:2", 5, 60)

    assert "ip:1" in rate_limiter.memory_cache
